"""
HTML rendering of the user page.

The template is rendered with Jinja2 autoescaping on, so every value coming
from the database or the request is escaped before it reaches the page.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from services.validators import calculate_age, format_date, format_phone

ROOT_DIR = Path(__file__).resolve().parents[1]
TEMPLATES_DIR = ROOT_DIR / "templates"
STATIC_DIR = ROOT_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["phone"] = format_phone
templates.env.filters["br_date"] = format_date
templates.env.filters["age"] = calculate_age

SUCCESS = "sucesso"
ERROR = "erro"


@dataclass
class PageState:
    """Everything the page needs: banner, form contents and the user table."""
    message: str = ""
    message_kind: str = ""
    errors: List[str] = field(default_factory=list)
    editing: bool = False
    # values shown in the form; keys: id, name, email, phone, birthdate
    form: Dict[str, Any] = field(default_factory=dict)
    users: List[Dict[str, Any]] = field(default_factory=list)

    def success(self, message: str) -> "PageState":
        self.message, self.message_kind = message, SUCCESS
        return self

    def error(self, message: str, errors: Optional[List[str]] = None) -> "PageState":
        self.message, self.message_kind = message, ERROR
        self.errors = list(errors or [])
        return self


def render_page(request: Request, state: PageState):
    return templates.TemplateResponse(
        request,
        "index.html",
        {"state": state},
    )
