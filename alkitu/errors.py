"""
Alkitu Site - API Errors
Exception hierarchy and the JSON response envelope shared by every route
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from flask import jsonify


class ApiError(Exception):
    """Base error rendered as {success: false, error: {...}}"""
    status_code = 500
    code = 'INTERNAL_ERROR'
    default_message = 'An unexpected error occurred'

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None,
                 details: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if code:
            self.code = code
        self.details = details
        self.headers = headers or {}


class BadRequestError(ApiError):
    status_code = 400
    code = 'BAD_REQUEST'
    default_message = 'Invalid request'


class ValidationFailed(BadRequestError):
    """Field-level validation failure; details is a list of {field, message, code}"""
    code = 'VALIDATION_ERROR'
    default_message = 'Validation failed'

    def __init__(self, details: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message, details=details)


class UnauthorizedError(ApiError):
    status_code = 401
    code = 'UNAUTHORIZED'
    default_message = 'Authentication required'


class ForbiddenError(ApiError):
    status_code = 403
    code = 'FORBIDDEN'
    default_message = 'Access denied'


class NotFoundError(ApiError):
    status_code = 404
    code = 'NOT_FOUND'
    default_message = 'The requested resource was not found'


class ConflictError(ApiError):
    status_code = 409
    code = 'CONFLICT'
    default_message = 'Resource already exists'


class RateLimitExceeded(ApiError):
    status_code = 429
    code = 'RATE_LIMIT_EXCEEDED'
    default_message = 'Too many requests'


class DatabaseError(ApiError):
    status_code = 500
    code = 'DATABASE_ERROR'
    default_message = 'A database error occurred'


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def api_success(data: Any = None, message: str = 'OK', status: int = 200,
                meta: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None):
    """Build a success envelope response"""
    body = {'success': True, 'message': message, 'data': data}
    if meta:
        body['meta'] = meta
    response = jsonify(body)
    response.status_code = status
    for key, value in (headers or {}).items():
        response.headers[key] = value
    return response


def api_error(code: str, message: str, status: int, details: Any = None,
              headers: Optional[Dict[str, str]] = None):
    """Build a failure envelope response"""
    error = {'code': code, 'message': message, 'timestamp': _timestamp()}
    if details is not None:
        error['details'] = details
    response = jsonify({'success': False, 'error': error})
    response.status_code = status
    for key, value in (headers or {}).items():
        response.headers[key] = value
    return response


def render_api_error(error: ApiError):
    return api_error(error.code, error.message, error.status_code, error.details, error.headers)
