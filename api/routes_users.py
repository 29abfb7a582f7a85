# api/routes_users.py
"""
The single user page: create, update, delete, load-for-edit and list.

Every request is decoded into one intent, the intent is executed, and then
the full user list is read again so the table always shows the state after
the mutation.
"""
import logging
import re
from typing import Any, Mapping, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.rendering import PageState, render_page
from core.audit import AuditLog
from core.db import get_db_session
from core.errors import ErrorKind, StorageError, classify_db_error, user_message
from models.intents import (
    CreateUser,
    DeleteUser,
    EditLookup,
    Intent,
    InvalidRequest,
    ListUsers,
    UpdateUser,
)
from models.user import UserForm
from services.form_validation import validate_user_form
from services.user_db_service import UserDBService

logger = logging.getLogger(__name__)

router = APIRouter()

TABLE = "users"

MSG_CREATED = "Usuário cadastrado com sucesso!"
MSG_UPDATED = "Usuário atualizado com sucesso!"
MSG_DELETED = "Usuário excluído com sucesso!"
MSG_INVALID_ID = "ID de usuário inválido."
MSG_VALIDATION = "Corrija os erros abaixo:"

PREFIX_CREATE = "Erro ao cadastrar usuário"
PREFIX_UPDATE = "Erro ao atualizar usuário"
PREFIX_DELETE = "Erro ao excluir usuário"
PREFIX_LOOKUP = "Erro ao buscar usuário"
PREFIX_LIST = "Erro ao buscar usuários"

_ID_RE = re.compile(r"[0-9]+")
MAX_ID = 2**31 - 1


def _parse_id(raw: Any) -> Optional[int]:
    """ASCII digits only, within the range of the INTEGER id column."""
    if not isinstance(raw, str):
        return None
    raw = raw.strip()
    if len(raw) > len(str(MAX_ID)) or not _ID_RE.fullmatch(raw):
        return None
    value = int(raw)
    if value > MAX_ID:
        return None
    return value


def decode_intent(method: str, query: Mapping[str, Any], form: Mapping[str, Any]) -> Intent:
    """Turn method + query string + form body into exactly one intent."""
    if method == "POST":
        action = form.get("acao")
        if action == "inserir":
            return CreateUser(UserForm.from_form(form))
        if action == "atualizar":
            user_id = _parse_id(form.get("id"))
            if user_id is None:
                return InvalidRequest(MSG_INVALID_ID)
            return UpdateUser(user_id, UserForm.from_form(form))

    action = query.get("acao")
    if action in ("excluir", "editar") and "id" in query:
        user_id = _parse_id(query.get("id"))
        if user_id is None:
            return InvalidRequest(MSG_INVALID_ID)
        return DeleteUser(user_id) if action == "excluir" else EditLookup(user_id)
    return ListUsers()


def _form_values(form: UserForm, user_id: Optional[int] = None) -> dict:
    values = form.model_dump()
    if user_id is not None:
        values["id"] = user_id
    return values


def _storage_failure(state: PageState, exc: Exception, prefix: str) -> PageState:
    kind = classify_db_error(exc)
    logger.error("%s (%s): %s", prefix, kind.value, exc, exc_info=not isinstance(exc, StorageError))
    return state.error(user_message(kind, prefix))


class UserPageHandler:
    def __init__(self, session: AsyncSession, audit: AuditLog, client_ip: Optional[str]):
        self.session = session
        self.db = UserDBService(session)
        self.audit = audit
        self.client_ip = client_ip

    async def handle(self, intent: Intent) -> PageState:
        state = PageState()
        if isinstance(intent, CreateUser):
            await self._create(intent, state)
        elif isinstance(intent, UpdateUser):
            await self._update(intent, state)
        elif isinstance(intent, DeleteUser):
            await self._delete(intent, state)
        elif isinstance(intent, EditLookup):
            await self._edit_lookup(intent, state)
        elif isinstance(intent, InvalidRequest):
            state.error(intent.message)
        elif isinstance(intent, ListUsers):
            pass
        else:
            raise TypeError(f"Unhandled intent: {intent!r}")

        await self._list(state)
        return state

    async def _create(self, intent: CreateUser, state: PageState) -> None:
        try:
            async with self.session.begin():
                errors = await validate_user_form(intent.form, self.db)
                if errors:
                    logger.info("Create rejected by validation: %s", errors)
                    state.error(MSG_VALIDATION, errors)
                    state.form = _form_values(intent.form)
                    return
                user_id = await self.db.insert_user(intent.form)
        except (StorageError, SQLAlchemyError) as e:
            _storage_failure(state, e, PREFIX_CREATE)
            state.form = _form_values(intent.form)
            return
        self.audit.record("INSERT", TABLE, user_id, self.client_ip, intent.form.email.strip())
        state.success(MSG_CREATED)

    async def _update(self, intent: UpdateUser, state: PageState) -> None:
        try:
            async with self.session.begin():
                errors = await validate_user_form(intent.form, self.db, exclude_id=intent.user_id)
                if errors:
                    logger.info("Update of user %s rejected by validation: %s", intent.user_id, errors)
                    state.error(MSG_VALIDATION, errors)
                    state.editing = True
                    state.form = _form_values(intent.form, intent.user_id)
                    return
                matched = await self.db.update_user(intent.user_id, intent.form)
        except (StorageError, SQLAlchemyError) as e:
            _storage_failure(state, e, PREFIX_UPDATE)
            state.editing = True
            state.form = _form_values(intent.form, intent.user_id)
            return
        if not matched:
            state.error(user_message(ErrorKind.NOT_FOUND))
            return
        self.audit.record("UPDATE", TABLE, intent.user_id, self.client_ip, intent.form.email.strip())
        state.success(MSG_UPDATED)

    async def _delete(self, intent: DeleteUser, state: PageState) -> None:
        # no existence check: deleting an unknown id still reports success
        try:
            async with self.session.begin():
                await self.db.delete_user(intent.user_id)
        except SQLAlchemyError as e:
            _storage_failure(state, e, PREFIX_DELETE)
            return
        self.audit.record("DELETE", TABLE, intent.user_id, self.client_ip)
        state.success(MSG_DELETED)

    async def _edit_lookup(self, intent: EditLookup, state: PageState) -> None:
        try:
            async with self.session.begin():
                user = await self.db.get_user(intent.user_id)
        except SQLAlchemyError as e:
            _storage_failure(state, e, PREFIX_LOOKUP)
            return
        if user is None:
            state.error(user_message(ErrorKind.NOT_FOUND))
            return
        state.editing = True
        state.form = user

    async def _list(self, state: PageState) -> None:
        try:
            async with self.session.begin():
                state.users = await self.db.list_users()
        except SQLAlchemyError as e:
            _storage_failure(state, e, PREFIX_LIST)
            state.users = []


@router.api_route("/", methods=["GET", "POST"], response_class=HTMLResponse)
async def user_page(request: Request, session: AsyncSession = Depends(get_db_session)):
    """Render the user page, applying the requested action first."""
    form = await request.form() if request.method == "POST" else {}
    intent = decode_intent(request.method, request.query_params, form)
    client_ip = request.client.host if request.client else None

    handler = UserPageHandler(session, request.app.state.audit, client_ip)
    state = await handler.handle(intent)
    return render_page(request, state)
