"""
Storage error classification.

Driver messages never reach the page: every failure is mapped to an
ErrorKind, the detail is logged server-side, and the user sees the generic
message for that kind.
"""
from enum import Enum

from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
)


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


USER_MESSAGES = {
    ErrorKind.VALIDATION: "Verifique os dados informados.",
    ErrorKind.CONFLICT: "Este E-mail já está cadastrado no sistema.",
    ErrorKind.UNAVAILABLE: "Banco de dados indisponível no momento. Tente novamente mais tarde.",
    ErrorKind.NOT_FOUND: "Usuário não encontrado!",
    ErrorKind.UNKNOWN: "Não foi possível concluir a operação.",
}


class StorageError(Exception):
    def __init__(self, kind: ErrorKind, detail: str = ""):
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail


class UniquenessCheckUnavailable(StorageError):
    """The duplicate-email lookup itself failed; the write must not proceed."""

    def __init__(self, detail: str = ""):
        super().__init__(ErrorKind.UNAVAILABLE, detail)


def classify_db_error(exc: Exception) -> ErrorKind:
    if isinstance(exc, StorageError):
        return exc.kind
    if isinstance(exc, IntegrityError):
        return ErrorKind.CONFLICT
    if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError)):
        return ErrorKind.UNAVAILABLE
    # any other SQLAlchemyError or driver failure
    return ErrorKind.UNKNOWN


def user_message(kind: ErrorKind, prefix: str = "") -> str:
    message = USER_MESSAGES[kind]
    return f"{prefix}: {message}" if prefix else message
