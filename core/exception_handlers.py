import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.responses import HTMLResponse, JSONResponse
from .response import error as resp_error

logger = logging.getLogger(__name__)

INTERNAL_ERROR_PAGE = (
    "<!DOCTYPE html><html lang=\"pt-BR\"><head><meta charset=\"UTF-8\">"
    "<title>Erro</title></head><body><h1>Erro interno</h1>"
    "<p>Não foi possível processar a requisição.</p>"
    "<p><a href=\"/\">Voltar</a></p></body></html>"
)


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content=resp_error(code=str(exc.status_code), message=str(exc.detail)))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", None)
        logger.exception("Unhandled exception (request_id=%s) on %s %s", request_id, request.method, request.url.path)
        return HTMLResponse(status_code=500, content=INTERNAL_ERROR_PAGE)
