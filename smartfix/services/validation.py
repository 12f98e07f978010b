import re
from datetime import date as date_cls, datetime
from typing import Optional

from smartfix.models.results import ValidationResult

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")

MIN_PASSWORD_LENGTH = 6

# reason -> message shown to the user
BOOKING_MESSAGES = {
    "missing date": "Please enter a date",
    "missing time": "Please enter a time",
    "missing address": "Please enter an address",
    "bad date format": "Please enter date in YYYY-MM-DD format (e.g., 2024-12-25)",
    "bad time format": "Please enter time in HH:MM format (e.g., 14:30)",
    "date not in future": "Please select a future date",
}

CREDENTIAL_MESSAGES = {
    "missing email": "Please enter your email",
    "missing password": "Please enter your password",
    "password too short": f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
    "passwords do not match": "Passwords do not match",
}


def _reject(reason: str, messages: dict) -> ValidationResult:
    return ValidationResult(ok=False, reason=reason, message=messages[reason])


def parse_booking_date(value: str) -> Optional[date_cls]:
    """Returns the calendar date for a YYYY-MM-DD string, or None if it is not one."""
    if not DATE_RE.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def is_valid_time(value: str) -> bool:
    return bool(TIME_RE.fullmatch(value))


def validate_booking_form(date: str, time: str, address: str, today: Optional[date_cls] = None) -> ValidationResult:
    """
    Checks a booking form before anything is written.
    Rules run in a fixed order and the first failure wins.
    `today` defaults to the local calendar date.
    """
    date = date or ""
    time = time or ""
    address = address or ""

    if not date.strip():
        return _reject("missing date", BOOKING_MESSAGES)
    if not time.strip():
        return _reject("missing time", BOOKING_MESSAGES)
    if not address.strip():
        return _reject("missing address", BOOKING_MESSAGES)

    selected = parse_booking_date(date)
    if selected is None:
        return _reject("bad date format", BOOKING_MESSAGES)

    if not is_valid_time(time):
        return _reject("bad time format", BOOKING_MESSAGES)

    today = today or date_cls.today()
    if selected < today:
        return _reject("date not in future", BOOKING_MESSAGES)

    return ValidationResult(ok=True)


def validate_credentials(email: str, password: str, confirm_password: Optional[str] = None) -> ValidationResult:
    """Sign-in form when confirm_password is None, sign-up form otherwise."""
    email = email or ""
    password = password or ""

    if not email.strip():
        return _reject("missing email", CREDENTIAL_MESSAGES)
    if not password.strip():
        return _reject("missing password", CREDENTIAL_MESSAGES)
    if len(password) < MIN_PASSWORD_LENGTH:
        return _reject("password too short", CREDENTIAL_MESSAGES)
    if confirm_password is not None and password != confirm_password:
        return _reject("passwords do not match", CREDENTIAL_MESSAGES)

    return ValidationResult(ok=True)
