from flask import request

from campus_connect.utils.errors import ValidationError


def json_body():
    # A missing or unparsable body is treated as empty, so field checks report it
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def require_fields(data, fields, message="Please provide all required fields"):
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        raise ValidationError(message)


def positive_int(value, name):
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a positive integer") from None
    if number < 1:
        raise ValidationError(f"{name} must be a positive integer")
    return number
