"""
Request validation decorators.

``validate_body`` and ``validate_query`` parse the request with a pydantic
schema and pass the result to the view as ``payload`` / ``query``.
Failures become a 400 ``ValidationError`` listing ``field: message`` pairs.
"""

import re
from functools import wraps

from flask import request
from pydantic import ValidationError as SchemaError

from ..errors import ValidationError
from ..schemas.common import UUID_PATTERN

_UUID_RE = re.compile(UUID_PATTERN)


def format_errors(error: SchemaError):
    details = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "body"
        details.append(f"{field}: {item['msg']}")
    return details


def parse(schema, data):
    try:
        return schema.model_validate(data)
    except SchemaError as e:
        raise ValidationError("Validation failed", details=format_errors(e))


def validate_body(schema):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            data = request.get_json(silent=True)
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ValidationError("Validation failed", details=["body: must be a JSON object"])
            kwargs["payload"] = parse(schema, data)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def validate_query(schema):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            kwargs["query"] = parse(schema, request.args.to_dict())
            return view(*args, **kwargs)

        return wrapper

    return decorator


def is_uuid(value) -> bool:
    return isinstance(value, str) and bool(_UUID_RE.match(value))


def validate_uuid(*params):
    """Reject the request unless every named path parameter is a UUID."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            for param in params:
                if not is_uuid(kwargs.get(param)):
                    raise ValidationError(f"Invalid {param}")
            return view(*args, **kwargs)

        return wrapper

    return decorator
