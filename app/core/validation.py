from typing import Any, Dict, Iterable, List, Sequence, Union

# Human readable names for payload fields
FIELD_LABELS = {
    "recipe_name": "recipe name",
    "steps": "steps",
    "step_id": "step id",
    "step_number": "step number",
    "step_instructions": "step instructions",
    "ingredients": "ingredients",
    "ingredient_id": "ingredient id",
    "quantity": "quantity",
}

REQUIRED_MESSAGES = {
    "recipe_name": "recipe name is required",
    "steps": "at least one step is required",
}


def _split_location(loc: Sequence[Union[str, int]]):
    """
    Turns ('body', 'steps', 0, 'step_number') into ('steps[0]', 'step_number').
    """
    parts = list(loc)
    if parts and parts[0] == "body":
        parts = parts[1:]
    if not parts:
        return "", None

    field = parts[-1] if isinstance(parts[-1], str) else None
    container = parts[:-1] if field is not None else parts

    prefix = ""
    for part in container:
        if isinstance(part, int):
            prefix += f"[{part}]"
        else:
            prefix += f".{part}" if prefix else part
    return prefix, field


def _describe(error: Dict[str, Any]) -> str:
    prefix, field = _split_location(error.get("loc", ()))
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}

    if field is None and not prefix:
        if error_type == "json_invalid":
            return "request body is not valid JSON"
        if error_type == "missing":
            return "request body is required"
        return "request body must be a JSON object"

    label = FIELD_LABELS.get(field, field) if field else "item"

    if error_type == "missing":
        if not prefix and field in REQUIRED_MESSAGES:
            message = REQUIRED_MESSAGES[field]
        else:
            message = f"{label} is required"
    elif error_type == "string_too_short":
        message = f"{label} must be at least {ctx.get('min_length')} characters long"
    elif error_type == "string_too_long":
        message = f"{label} must be at most {ctx.get('max_length')} characters long"
    elif error_type == "string_type":
        message = f"{label} must be a string"
    elif error_type in ("int_parsing", "int_type", "int_from_float"):
        message = f"{label} must be an integer"
    elif error_type in ("float_parsing", "float_type", "decimal_parsing", "decimal_type"):
        message = f"{label} must be a number"
    elif error_type == "decimal_max_places":
        message = f"{label} must have at most {ctx.get('decimal_places')} decimal places"
    elif error_type == "decimal_max_digits":
        message = f"{label} must have at most {ctx.get('max_digits')} digits"
    elif error_type == "decimal_whole_digits":
        message = f"{label} must have at most {ctx.get('whole_digits')} digits before the decimal point"
    elif error_type == "greater_than":
        message = f"{label} must be a positive number" if ctx.get("gt") == 0 else f"{label} must be greater than {ctx.get('gt')}"
    elif error_type == "greater_than_equal":
        message = f"{label} must be greater than or equal to {ctx.get('ge')}"
    elif error_type == "list_type":
        if field == "steps" and not prefix:
            message = "steps must be an array of step objects"
        else:
            message = f"{label} must be an array"
    elif error_type == "value_error":
        message = str(ctx.get("error", error.get("msg", "")))
    elif error_type in ("model_type", "model_attributes_type", "dict_type"):
        message = f"{label} must be an object"
    else:
        message = f"{label}: {error.get('msg', 'is invalid')}"

    return f"{prefix}: {message}" if prefix else message


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> List[str]:
    """
    Convert pydantic error dicts into a flat list of messages.
    Every error is reported, not just the first one.
    """
    messages = []
    for error in errors:
        message = _describe(error)
        if message not in messages:
            messages.append(message)
    return messages
