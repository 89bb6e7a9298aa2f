"""
Input Validators

Validates tool arguments against the tool's declared inputSchema. The same
checks run for MCP tool calls and REST requests, so both surfaces accept and
reject exactly the same inputs.

Supported schema keywords: type (string, number, integer, boolean, object,
array), required, properties, items, enum. Unknown properties are ignored.
"""

from typing import Any, Optional

from mcp import types
from pydantic import BaseModel, ValidationError

from .errors import AnyDBError, ErrorKind

TRUE_VALUES = {"true", "1", "yes"}
FALSE_VALUES = {"false", "0", "no"}


def _error(code: str, path: str, message: str, **extra) -> dict:
    """Build a structured validation error."""
    err = {"code": code, "path": path, "message": message}
    err.update(extra)
    return err


def _type_matches(expected: str, value: Any) -> bool:
    if expected == "string":
        return isinstance(value, str)
    if expected == "boolean":
        return isinstance(value, bool)
    if expected == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if expected == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if expected == "object":
        return isinstance(value, dict)
    if expected == "array":
        return isinstance(value, list)
    return True


def _validate_value(schema: dict, value: Any, path: str, errors: list):
    expected = schema.get("type")
    if expected and not _type_matches(expected, value):
        errors.append(_error(
            "INVALID_TYPE", path,
            f"'{path}' must be of type {expected}, got {type(value).__name__}",
            expected=expected,
        ))
        return

    allowed = schema.get("enum")
    if allowed is not None and value not in allowed:
        errors.append(_error(
            "INVALID_VALUE", path,
            f"'{path}' must be one of: {', '.join(str(v) for v in allowed)}",
            validValues=list(allowed),
        ))
        return

    if expected == "object" and "properties" in schema:
        _validate_object(schema, value, path, errors)
    elif expected == "array" and "items" in schema:
        for index, item in enumerate(value):
            _validate_value(schema["items"], item, f"{path}[{index}]", errors)


def _validate_object(schema: dict, value: dict, path: str, errors: list):
    properties = schema.get("properties", {})
    prefix = f"{path}." if path else ""

    missing = []
    for name in schema.get("required", []):
        item = value.get(name)
        if item is None or (isinstance(item, str) and not item.strip()):
            missing.append(f"{prefix}{name}")
    if missing:
        errors.append(_error(
            "MISSING_REQUIRED", path or "$",
            f"{_join_names(missing)} {'is' if len(missing) == 1 else 'are'} required",
            missing=missing,
        ))

    for name, item in value.items():
        if item is None or name not in properties:
            continue
        if f"{prefix}{name}" in missing:
            continue
        _validate_value(properties[name], item, f"{prefix}{name}", errors)


def _join_names(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{', '.join(names[:-1])}, and {names[-1]}"


def validate_arguments(tool: types.Tool, arguments: Optional[dict[str, Any]]) -> None:
    """
    Validate arguments for a tool call.

    Raises:
        AnyDBError: kind VALIDATION, with every problem listed in details
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise AnyDBError(
            ErrorKind.VALIDATION,
            "Arguments must be a JSON object",
            operation=tool.name,
        )

    errors: list[dict] = []
    _validate_object(tool.inputSchema, arguments, "", errors)

    if errors:
        raise AnyDBError(
            ErrorKind.VALIDATION,
            "; ".join(err["message"] for err in errors),
            operation=tool.name,
            details=errors,
        )


def coerce_query_params(tool: types.Tool, params: dict[str, str]) -> dict[str, Any]:
    """
    Convert query-string values to the types declared by the tool schema.

    Booleans accept true/1/yes and false/0/no, numbers are parsed, strings are
    passed through untouched. Values that cannot be converted are left as
    strings so validate_arguments reports them.
    """
    properties = tool.inputSchema.get("properties", {})
    coerced: dict[str, Any] = {}

    for name, raw in params.items():
        expected = properties.get(name, {}).get("type")
        if expected == "boolean":
            lowered = raw.strip().lower()
            if lowered in TRUE_VALUES:
                coerced[name] = True
            elif lowered in FALSE_VALUES:
                coerced[name] = False
            else:
                coerced[name] = raw
        elif expected in ("number", "integer"):
            try:
                number = float(raw)
                coerced[name] = int(number) if number.is_integer() else number
            except ValueError:
                coerced[name] = raw
        else:
            coerced[name] = raw

    return coerced


def build_model(model_cls: type[BaseModel], data: dict[str, Any], operation: str) -> BaseModel:
    """
    Build a request model, reporting pydantic errors as VALIDATION errors.

    Schema validation normally catches bad input first; this covers values the
    schema allows but the model cannot represent.
    """
    try:
        return model_cls(**data)
    except ValidationError as e:
        errors = [
            _error(
                "INVALID_VALUE",
                ".".join(str(part) for part in err["loc"]),
                f"'{'.'.join(str(part) for part in err['loc'])}': {err['msg']}",
            )
            for err in e.errors()
        ]
        raise AnyDBError(
            ErrorKind.VALIDATION,
            "; ".join(err["message"] for err in errors),
            operation=operation,
            details=errors,
        ) from e
