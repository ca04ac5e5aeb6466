from pydantic import BaseModel
from datetime import datetime, date, timezone


DATE_FORMATS = [
    '%Y-%m-%d',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%d %H:%M:%S',
]


def parse_datetime(value):
    """Parse an ISO 8601 date or datetime (a trailing ``Z`` or a UTC offset is accepted)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        value = value.strip()
        if value.endswith('Z'):
            value = value[:-1]
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            parsed = None
        if parsed is not None:
            # stored naive, in UTC
            if parsed.tzinfo is not None:
                parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
            return parsed
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
    raise ValueError('Date must be in ISO 8601 format (YYYY-MM-DD)')


def parse_date(value):
    """Same as ``parse_datetime`` but truncated to the calendar day."""
    if value is None:
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_datetime(value).date()


def strip_text(value):
    if isinstance(value, str):
        return value.strip()
    return value


class MessageResponse(BaseModel):
    message: str
