"""
Parameter validation against a plan's input parameter schema.
"""

from typing import Any, Dict, List, Mapping, Optional

from jsonschema import SchemaError
from jsonschema.validators import validator_for

from shared.errors import ParameterValidationError


def normalize_parameters(parameters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return a copy of ``parameters`` with every integer widened to float.

    Parameters are kept the way a JSON document decodes into generic numbers:
    ``42`` is held as ``42.0``. Booleans are left alone. Integers too large
    for a float raise ParameterValidationError.
    """
    if not parameters:
        return {}
    return {key: _normalize_value(value, f"$.{key}") for key, value in parameters.items()}


def _normalize_value(value: Any, path: str) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError as e:
            raise ParameterValidationError(
                "Parameter value is out of range",
                [{"message": str(e), "path": path, "validator": "type"}]
            ) from e
    if isinstance(value, Mapping):
        return {key: _normalize_value(item, f"{path}.{key}") for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_value(item, f"{path}[{index}]") for index, item in enumerate(value)]
    return value


def _describe(error) -> Dict[str, Any]:
    return {
        "message": error.message,
        "path": error.json_path,
        "validator": error.validator,
    }


def collect_violations(parameters: Mapping[str, Any], schema: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Return every schema violation of ``parameters``; empty when valid.

    The validator class follows the schema's ``$schema`` keyword and defaults
    to the latest draft.
    """
    validator_cls = validator_for(schema)
    validator_cls.check_schema(schema)
    validator = validator_cls(schema)

    errors = sorted(validator.iter_errors(dict(parameters)), key=lambda e: e.json_path)
    return [_describe(error) for error in errors]


def validate_parameters(parameters: Optional[Mapping[str, Any]], schema: Optional[Mapping[str, Any]]) -> None:
    """Check ``parameters`` against a plan's schema.

    A plan without a schema accepts no parameters. Otherwise standard JSON
    Schema rules apply and all violations are reported together in one
    ParameterValidationError.
    """
    parameters = parameters or {}

    if not schema:
        if parameters:
            raise ParameterValidationError(
                "No parameters were expected",
                [{"message": "unexpected parameters", "path": "$", "keys": sorted(parameters)}]
            )
        return

    try:
        violations = collect_violations(parameters, schema)
    except SchemaError as e:
        raise ParameterValidationError(
            "Plan parameter schema is invalid",
            [{"message": e.message, "path": "$schema", "validator": e.validator}]
        ) from e

    if violations:
        raise ParameterValidationError("The document is not valid", violations)
