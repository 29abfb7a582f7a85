"""
Field validators and display formatters for the user form.

Every validator takes the raw string exactly as submitted and returns a bool;
none of them touch the database or raise.
"""
import re
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from email_validator import EmailNotValidError, validate_email

from config.settings import settings

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_NON_DIGITS = re.compile(r"\D")


def today() -> date:
    """Current date in the configured timezone."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def digits_only(value: Optional[str]) -> str:
    return _NON_DIGITS.sub("", value or "")


def is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def is_valid_email(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_phone(value: Optional[str]) -> bool:
    """10 digits (landline with area code) or 11 (mobile with area code)."""
    return len(digits_only(value)) in (10, 11)


def parse_date(value: str) -> Optional[date]:
    """Strict YYYY-MM-DD; None when malformed or not a real calendar date."""
    if not _DATE_RE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def is_valid_date(value: Optional[str]) -> bool:
    if not value:
        return True  # optional field
    return parse_date(value) is not None


def is_not_future_date(value: Optional[str], reference: Optional[date] = None) -> bool:
    if not value:
        return True  # optional field
    parsed = parse_date(value)
    if parsed is None:
        return False
    return parsed <= (reference or today())


# ---------------- Display helpers ---------------- #

def format_phone(value: Optional[str]) -> str:
    """(11) 98765-4321 for 11 digits, (11) 3456-7890 for 10, otherwise unchanged."""
    digits = digits_only(value)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return digits


def format_date(value) -> str:
    """YYYY-MM-DD (str or date) -> DD/MM/YYYY; empty string when missing or malformed."""
    if not value:
        return ""
    if isinstance(value, str):
        value = parse_date(value)
        if value is None:
            return ""
    return value.strftime("%d/%m/%Y")


def calculate_age(birthdate, reference: Optional[date] = None) -> int:
    if not birthdate:
        return 0
    if isinstance(birthdate, str):
        birthdate = parse_date(birthdate)
        if birthdate is None:
            return 0
    ref = reference or today()
    years = ref.year - birthdate.year
    if (ref.month, ref.day) < (birthdate.month, birthdate.day):
        years -= 1
    return years
