"""
Alkitu Site - Request Schemas
pydantic models for request bodies and query strings
"""
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from alkitu.errors import ValidationFailed

T = TypeVar('T', bound=BaseModel)


def format_validation_errors(exc: ValidationError) -> List[Dict[str, str]]:
    """pydantic errors -> [{field, message, code}]"""
    details = []
    for err in exc.errors():
        field = '.'.join(str(part) for part in err.get('loc', ()) if part != '__root__')
        details.append({
            'field': field or 'body',
            'message': err.get('msg', 'Invalid value'),
            'code': err.get('type', 'invalid')
        })
    return details


def validate_payload(schema: Type[T], payload: Any, message: str = None) -> T:
    """Validate a dict against a schema, raising ValidationFailed with field details"""
    if payload is None:
        payload = {}
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailed(format_validation_errors(e), message=message)
