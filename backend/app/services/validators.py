"""
Input validators for GraphQL mutations.

Each validator collects every violated rule and raises a single
ValidationFailed (code BAD_USER_INPUT) listing all of them. Update validators
skip absent fields (None or UNSET) and apply the same rule to present ones.
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional

from strawberry import UNSET

from app.core.errors import ValidationFailed
from app.services import messages

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 200
MIN_DESCRIPTION_LENGTH = 10


def _given(value: Any) -> bool:
    return value is not None and value is not UNSET


def _raise_if_any(errors: list[str]) -> None:
    if errors:
        raise ValidationFailed(errors)


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def parse_event_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 date/time into an aware UTC datetime, or None."""
    if not value or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_id(value: Any) -> Optional[int]:
    """GraphQL IDs are integer primary keys; anything else references nothing."""
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def _check_username(value: Optional[str], errors: list[str]) -> None:
    if not value or len(value.strip()) < MIN_USERNAME_LENGTH:
        errors.append(messages.USERNAME_TOO_SHORT)


def _check_password(value: Optional[str], errors: list[str]) -> None:
    if not value or len(value.strip()) < MIN_PASSWORD_LENGTH:
        errors.append(messages.PASSWORD_TOO_SHORT)


def _check_email(value: Optional[str], errors: list[str]) -> None:
    if not is_valid_email(value):
        errors.append(messages.EMAIL_INVALID)


def _check_title(value: Optional[str], errors: list[str]) -> None:
    length = len(value.strip()) if value else 0
    if length < MIN_TITLE_LENGTH:
        errors.append(messages.TITLE_TOO_SHORT)
    if length > MAX_TITLE_LENGTH:
        errors.append(messages.TITLE_TOO_LONG)


def _check_description(value: Optional[str], errors: list[str]) -> None:
    if not value or len(value.strip()) < MIN_DESCRIPTION_LENGTH:
        errors.append(messages.DESCRIPTION_TOO_SHORT)


def _check_price(value: Optional[float], errors: list[str]) -> None:
    if value is None or value <= 0:
        errors.append(messages.PRICE_NOT_POSITIVE)


def _check_date(value: Optional[str], errors: list[str]) -> None:
    if parse_event_date(value) is None:
        errors.append(messages.DATE_INVALID)


def validate_user_input(user_input: Any) -> None:
    errors: list[str] = []
    _check_username(user_input.username, errors)
    _check_email(user_input.email, errors)
    _check_password(user_input.password, errors)
    _raise_if_any(errors)


def validate_update_user_input(update_input: Any) -> None:
    errors: list[str] = []
    if _given(update_input.username):
        _check_username(update_input.username, errors)
    if _given(update_input.password):
        _check_password(update_input.password, errors)
    _raise_if_any(errors)


def validate_login_input(email: Optional[str], password: Optional[str]) -> None:
    """Shape of the credentials only; authentication happens later."""
    errors: list[str] = []
    _check_email(email, errors)
    _check_password(password, errors)
    _raise_if_any(errors)


def validate_event_input(event_input: Any) -> None:
    errors: list[str] = []
    _check_title(event_input.title, errors)
    _check_description(event_input.description, errors)
    _check_price(event_input.price, errors)
    _check_date(event_input.date, errors)
    _raise_if_any(errors)


def validate_update_event_input(event_input: Any) -> None:
    errors: list[str] = []
    if _given(event_input.title):
        _check_title(event_input.title, errors)
    if _given(event_input.description):
        _check_description(event_input.description, errors)
    if _given(event_input.price):
        _check_price(event_input.price, errors)
    if _given(event_input.date):
        _check_date(event_input.date, errors)
    _raise_if_any(errors)
