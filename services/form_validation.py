"""
Server-side validation of the user form.

Rules run in a fixed order (name, email, phone, birthdate) and each field
reports at most its first failing rule, so the message list is stable.
"""
from typing import List, Optional

from models.db_models import NAME_MAX_LENGTH, PHONE_MAX_LENGTH
from models.user import UserForm
from services.user_db_service import UserDBService
from services import validators

NAME_MIN_LENGTH = 3

MSG_NAME_REQUIRED = "O campo Nome é obrigatório."
MSG_NAME_TOO_SHORT = f"O Nome deve ter no mínimo {NAME_MIN_LENGTH} caracteres."
MSG_NAME_TOO_LONG = f"O Nome deve ter no máximo {NAME_MAX_LENGTH} caracteres."
MSG_EMAIL_REQUIRED = "O campo E-mail é obrigatório."
MSG_EMAIL_INVALID = "O E-mail informado não é válido."
MSG_EMAIL_TAKEN = "Este E-mail já está cadastrado no sistema."
MSG_PHONE_INVALID = "O Telefone informado não é válido."
MSG_PHONE_TOO_LONG = f"O Telefone deve ter no máximo {PHONE_MAX_LENGTH} caracteres."
MSG_BIRTHDATE_INVALID = "A Data de Nascimento não é válida."
MSG_BIRTHDATE_FUTURE = "A Data de Nascimento não pode ser uma data futura."


async def validate_user_form(
    form: UserForm,
    db_service: UserDBService,
    exclude_id: Optional[int] = None,
) -> List[str]:
    """
    Return the list of error messages for ``form`` (empty when valid).

    The duplicate-email lookup only runs once the email is well formed. It may
    raise UniquenessCheckUnavailable, which the caller must treat as a failed
    write rather than a passed check.
    """
    errors: List[str] = []

    name = form.name.strip()
    if validators.is_blank(name):
        errors.append(MSG_NAME_REQUIRED)
    elif len(name) < NAME_MIN_LENGTH:
        errors.append(MSG_NAME_TOO_SHORT)
    elif len(name) > NAME_MAX_LENGTH:
        errors.append(MSG_NAME_TOO_LONG)

    email = form.email.strip()
    if validators.is_blank(email):
        errors.append(MSG_EMAIL_REQUIRED)
    elif not validators.is_valid_email(email):
        errors.append(MSG_EMAIL_INVALID)
    elif await db_service.email_exists(email, exclude_id):
        errors.append(MSG_EMAIL_TAKEN)

    phone = form.phone.strip()
    if not validators.is_blank(phone):
        if len(phone) > PHONE_MAX_LENGTH:
            errors.append(MSG_PHONE_TOO_LONG)
        elif not validators.is_valid_phone(phone):
            errors.append(MSG_PHONE_INVALID)

    birthdate = form.birthdate.strip()
    if not validators.is_blank(birthdate):
        if not validators.is_valid_date(birthdate):
            errors.append(MSG_BIRTHDATE_INVALID)
        elif not validators.is_not_future_date(birthdate):
            errors.append(MSG_BIRTHDATE_FUTURE)

    return errors
