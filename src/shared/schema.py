"""JSON Schema validation utilities for tool arguments.

String lengths are counted in UTF-16 code units, the unit JavaScript clients
measure in, rather than the code points Draft 7 counts. A character outside
the Basic Multilingual Plane (most emoji) therefore counts twice.
"""

from typing import Any, Iterator

from jsonschema import Draft7Validator, ValidationError, validators


class ArgumentValidationError(ValueError):
    """Raised when tool arguments violate the tool's input schema."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Validation failed: {'; '.join(errors)}")


def utf16_length(value: str) -> int:
    return len(value.encode("utf-16-le", "surrogatepass")) // 2


def _min_length(validator: Any, min_length: int, instance: Any, schema: dict[str, Any]) -> Iterator[ValidationError]:
    if validator.is_type(instance, "string") and utf16_length(instance) < min_length:
        yield ValidationError(f"{instance!r} is too short")


def _max_length(validator: Any, max_length: int, instance: Any, schema: dict[str, Any]) -> Iterator[ValidationError]:
    if validator.is_type(instance, "string") and utf16_length(instance) > max_length:
        yield ValidationError(f"{instance!r} is too long")


ArgumentValidator = validators.extend(
    Draft7Validator,
    {"minLength": _min_length, "maxLength": _max_length},
)


def validate_schema(data: Any, schema: dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate data against a JSON Schema.

    Args:
        data: The data to validate
        schema: JSON Schema to validate against

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    if not schema:
        return True, []

    validator = ArgumentValidator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])

    if not errors:
        return True, []

    error_messages = [
        f"{'.'.join(str(p) for p in e.path)}: {e.message}" if e.path else e.message
        for e in errors
    ]

    return False, error_messages


def apply_defaults(data: dict[str, Any], schema: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of data with declared defaults filled in for omitted fields."""
    result = dict(data)
    for name, prop in schema.get("properties", {}).items():
        if name not in result and "default" in prop:
            result[name] = prop["default"]
    return result


def validate_arguments(data: Any, schema: dict[str, Any]) -> dict[str, Any]:
    """
    Validate caller-supplied tool arguments and produce validated arguments.

    Defaults are applied before validation so a declared default is checked
    against the same bounds as a supplied value. Fields not declared in the
    schema are dropped.

    Args:
        data: Raw argument object from the caller
        schema: The tool's input schema

    Returns:
        Mapping of field name to validated value

    Raises:
        ArgumentValidationError: If any constraint is violated
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ArgumentValidationError(["arguments must be an object"])

    arguments = apply_defaults(data, schema)
    is_valid, errors = validate_schema(arguments, schema)
    if not is_valid:
        raise ArgumentValidationError(errors)

    properties = schema.get("properties", {})
    if not properties:
        return arguments

    validated: dict[str, Any] = {}
    for name, prop in properties.items():
        if name not in arguments:
            continue
        value = arguments[name]
        # Draft 7 accepts 30.0 as an integer
        if prop.get("type") == "integer" and isinstance(value, float):
            value = int(value)
        validated[name] = value
    return validated


def create_tool_schema(parameters: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Create a JSON Schema from a list of parameter definitions.

    Each parameter is a dict with ``name``, ``type`` and ``description`` and
    optionally ``min_length``, ``max_length``, ``length`` (fixed length),
    ``minimum``, ``maximum``, ``default`` and ``required``. A parameter with
    a default is optional unless ``required`` says otherwise.

    Args:
        parameters: List of parameter definitions

    Returns:
        JSON Schema dictionary
    """
    properties = {}

    type_mapping = {
        "string": "string",
        "str": "string",
        "integer": "integer",
        "int": "integer",
        "number": "number",
        "float": "number",
        "boolean": "boolean",
        "bool": "boolean",
    }

    for param in parameters:
        param_schema: dict[str, Any] = {
            "type": type_mapping.get(param.get("type", "string"), "string"),
            "description": param.get("description", ""),
        }

        if "length" in param:
            param_schema["minLength"] = param["length"]
            param_schema["maxLength"] = param["length"]
        if "min_length" in param:
            param_schema["minLength"] = param["min_length"]
        if "max_length" in param:
            param_schema["maxLength"] = param["max_length"]
        if "minimum" in param:
            param_schema["minimum"] = param["minimum"]
        if "maximum" in param:
            param_schema["maximum"] = param["maximum"]
        if "default" in param:
            param_schema["default"] = param["default"]

        properties[param["name"]] = param_schema

    return {
        "type": "object",
        "properties": properties,
        "required": [
            p["name"] for p in parameters
            if p.get("required", "default" not in p)
        ],
    }
