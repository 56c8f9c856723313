"""
Alkitu Site - Request Utilities
Safe parsing helpers for request parameters
"""
import re
import uuid


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


def get_pagination_params(request, default_limit=20, max_limit=100, limit_param='limit'):
    """
    Get page-based pagination parameters from request.

    Returns:
        tuple: (page, limit, offset)
    """
    page = safe_int(request.args.get('page'), 1, min_val=1)
    limit = safe_int(request.args.get(limit_param), default_limit, min_val=1, max_val=max_limit)
    return page, limit, (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit if limit else 0


def get_client_ip(request) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket address"""
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        first = forwarded.split(',')[0].strip()
        if first:
            return first
    real_ip = request.headers.get('X-Real-IP', '').strip()
    if real_ip:
        return real_ip
    return request.remote_addr or 'unknown'


def generate_slug(text: str) -> str:
    """'Web Design & UX' -> 'web-design-ux'"""
    slug = re.sub(r'[^a-z0-9]+', '-', (text or '').lower())
    return slug.strip('-')


def is_uuid(value) -> bool:
    try:
        uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return False
    return True
