"""
Voice Agent Demo Builder - Utilities
Clock helpers and safe parsing helpers for request parameters
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime (or pass through an already-serialized value)"""
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def parse_datetime(value) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as stored in JSON records.

    Accepts the trailing 'Z' form and naive timestamps (assumed UTC).
    Returns None for empty values.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def safe_int(value, default=0, min_val=None, max_val=None):
    """
    Safely parse an integer from a request parameter.

    Args:
        value: The value to parse (string or None)
        default: Default value if parsing fails
        min_val: Minimum allowed value (optional)
        max_val: Maximum allowed value (optional)

    Returns:
        int: Parsed integer or default
    """
    try:
        result = int(value) if value is not None else default
    except (ValueError, TypeError):
        result = default

    if result is None:
        return result

    if min_val is not None:
        result = max(result, min_val)
    if max_val is not None:
        result = min(result, max_val)

    return result


def safe_bool(value, default=False):
    """
    Safely parse a boolean from a request parameter.
    Accepts: true, false, 1, 0, yes, no (case insensitive)
    """
    if value is None:
        return default

    if isinstance(value, bool):
        return value

    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')

    return bool(value)


def get_pagination_params(request, default_limit=50, max_limit=200):
    """
    Get pagination parameters from request.

    Returns:
        tuple: (limit, offset, page)
    """
    limit = safe_int(request.args.get('limit'), default_limit, min_val=1, max_val=max_limit)
    offset = safe_int(request.args.get('offset'), 0, min_val=0)
    page = safe_int(request.args.get('page'), 1, min_val=1)

    # If page is provided but not offset, calculate offset
    if request.args.get('page') and not request.args.get('offset'):
        offset = (page - 1) * limit

    return limit, offset, page
