# models/user.py
from datetime import date
from typing import Any, Mapping

from pydantic import BaseModel

# HTML form field name -> model field name
FORM_FIELDS = {
    "nome": "name",
    "email": "email",
    "telefone": "phone",
    "data_nascimento": "birthdate",
}


class UserForm(BaseModel):
    """Raw, unvalidated strings as submitted by the user form."""
    name: str = ""
    email: str = ""
    phone: str = ""
    birthdate: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "UserForm":
        values = {}
        for form_key, field in FORM_FIELDS.items():
            raw = form.get(form_key)
            values[field] = raw if isinstance(raw, str) else ""
        return cls(**values)

    def to_columns(self) -> dict:
        """
        Column values for INSERT/UPDATE. Only call after validation passed:
        birthdate must already be a well-formed YYYY-MM-DD string.
        """
        phone = self.phone.strip()
        birthdate = self.birthdate.strip()
        return {
            "name": self.name.strip(),
            "email": self.email.strip(),
            "phone": phone or None,
            "birthdate": date.fromisoformat(birthdate) if birthdate else None,
        }

