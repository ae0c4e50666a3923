# =============================================================================
# core/validation.py  —  Argument Validator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Checks a tool's argument bag against the tool's input schema BEFORE any
#   call to n8n is made.  A malformed request therefore never causes a
#   partial remote mutation.
#
# RULES:
#   1. Every `required` field must be present and not None.
#   2. Every present (non-None) field must match its declared JSON type:
#      string / number / integer / boolean / array / object.
#   3. `enum`, `minimum` and `maximum` are honoured when declared.
#   4. Unknown fields are ignored (forward compatibility).
#
#   Validation is fail-fast: the first violation raises InvalidArguments.
# =============================================================================

from typing import Any

from core.errors import InvalidArguments


def _json_type(value: Any) -> str:
    """Name of the JSON type a Python value would serialize to."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _matches(expected: str, value: Any) -> bool:
    actual = _json_type(value)
    if expected == "number":
        # JSON has one numeric type; integers are numbers too
        return actual in ("number", "integer")
    if expected == "integer":
        # integral floats such as 2.0 are rejected, not coerced
        return actual == "integer"
    return actual == expected


def validate_arguments(schema: dict[str, Any], args: dict[str, Any]) -> None:
    """Raise InvalidArguments on the first violation of `schema` by `args`."""
    if not isinstance(args, dict):
        raise InvalidArguments(
            f"Arguments must be an object, got {_json_type(args)}"
        )

    for name in schema.get("required", []):
        if args.get(name) is None:
            raise InvalidArguments(f"Missing required parameter: {name}", field=name)

    for name, spec in schema.get("properties", {}).items():
        value = args.get(name)
        if value is None:
            continue

        expected = spec.get("type")
        if expected and not _matches(expected, value):
            raise InvalidArguments(
                f"Parameter '{name}' must be of type {expected}, "
                f"got {_json_type(value)}",
                field=name,
            )

        if "enum" in spec and value not in spec["enum"]:
            allowed = ", ".join(repr(v) for v in spec["enum"])
            raise InvalidArguments(
                f"Parameter '{name}' must be one of {allowed}, got {value!r}",
                field=name,
            )

        if expected in ("number", "integer"):
            if "minimum" in spec and value < spec["minimum"]:
                raise InvalidArguments(
                    f"Parameter '{name}' must be >= {spec['minimum']}, got {value}",
                    field=name,
                )
            if "maximum" in spec and value > spec["maximum"]:
                raise InvalidArguments(
                    f"Parameter '{name}' must be <= {spec['maximum']}, got {value}",
                    field=name,
                )
