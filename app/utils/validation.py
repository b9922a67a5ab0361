"""
Request body validation helpers.
"""
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .exceptions import InvalidRequestError, MissingFieldsError

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def missing_fields(data: dict, fields: Iterable[str]) -> List[str]:
    """Return the names in `fields` whose value is absent or empty, in order."""
    data = data or {}
    missing = []
    for field in fields:
        value = data.get(field)
        if value is None or value is False or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def require_fields(data: dict, fields: Iterable[str]) -> None:
    """
    Raise MissingFieldsError listing every required field that is absent.

    Args:
        data: Parsed JSON body
        fields: Required field names

    Raises:
        InvalidRequestError: If the body is not a JSON object
        MissingFieldsError: If any field is absent or empty
    """
    if not isinstance(data, dict):
        raise InvalidRequestError('Request body must be a JSON object')

    missing = missing_fields(data, fields)
    if missing:
        raise MissingFieldsError(missing)


def is_valid_email(email) -> bool:
    return isinstance(email, str) and bool(EMAIL_PATTERN.match(email))


def require_valid_email(email) -> None:
    if not is_valid_email(email):
        raise InvalidRequestError('Invalid email format')


def parse_bool(value, field: str) -> bool:
    """Accept JSON true/false only; strings like "false" are rejected."""
    if not isinstance(value, bool):
        raise InvalidRequestError(f'{field} must be true or false')
    return value


def parse_datetime(value, field: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime from a request body.

    Accepts a trailing 'Z' for UTC. Returns None for empty values.

    Raises:
        InvalidRequestError: If the value is not a valid date
    """
    if value in (None, ''):
        return None
    if not isinstance(value, str):
        raise InvalidRequestError(f'Invalid date format for {field}')

    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise InvalidRequestError(f'Invalid date format for {field}')

    # Stored naive, in UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
