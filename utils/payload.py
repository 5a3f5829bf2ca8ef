from flask import request

from services.errors import ValidationError

# Largest id an INTEGER primary key can hold on every backend we run on
MAX_ID = 2**31 - 1


def json_object() -> dict:
    """Parsed JSON body; missing or unparsable -> {}, any non-object -> 400."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")
    return data


def is_positive_int(value) -> bool:
    # bool is an int subclass; JSON true is not a number here
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= MAX_ID


def optional_text(data: dict, key: str, max_length: int = None):
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{key} must be at most {max_length} characters")
    return value or None
