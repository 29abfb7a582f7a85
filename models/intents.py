"""
Request intents for the single user page.

The router decodes method + query/form parameters into exactly one of these
once, and every later step dispatches on the intent type instead of
re-inspecting the raw request.
"""
from dataclasses import dataclass
from typing import Union

from models.user import UserForm


@dataclass(frozen=True)
class CreateUser:
    form: UserForm


@dataclass(frozen=True)
class UpdateUser:
    user_id: int
    form: UserForm


@dataclass(frozen=True)
class DeleteUser:
    user_id: int


@dataclass(frozen=True)
class EditLookup:
    user_id: int


@dataclass(frozen=True)
class ListUsers:
    pass


@dataclass(frozen=True)
class InvalidRequest:
    """A recognised action whose id was missing or not an integer."""
    message: str


Intent = Union[CreateUser, UpdateUser, DeleteUser, EditLookup, ListUsers, InvalidRequest]
