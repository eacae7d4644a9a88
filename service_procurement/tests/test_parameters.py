"""
Unit tests for parameter validation.
"""

import pytest

from service_procurement.app.validation.parameters import (
    collect_violations, normalize_parameters, validate_parameters
)
from shared.errors import ParameterValidationError, ValidationError


SCHEMA = {
    "title": "SimpleParameterized Input Schema",
    "type": "object",
    "properties": {
        "parameter1": {"type": "string"},
        "parameter2": {"type": "integer", "minimum": 0}
    },
    "required": ["parameter2"]
}


class TestValidateParameters:
    """Test cases for validate_parameters."""

    @pytest.mark.parametrize("schema", [None, {}])
    def test_no_schema_no_parameters(self, schema):
        """Test that a plan without schema accepts an empty payload."""
        validate_parameters({}, schema)
        validate_parameters(None, schema)

    @pytest.mark.parametrize("schema", [None, {}])
    def test_no_schema_rejects_parameters(self, schema):
        """Test that a plan without schema rejects any parameter."""
        with pytest.raises(ParameterValidationError) as exc_info:
            validate_parameters({"foo": "bar"}, schema)

        assert exc_info.value.violations[0]["keys"] == ["foo"]

    def test_valid_parameters(self):
        """Test parameters satisfying the schema."""
        validate_parameters({"parameter1": "exists", "parameter2": 42}, SCHEMA)

    def test_required_parameter_missing(self):
        """Test that a missing required property is reported."""
        with pytest.raises(ParameterValidationError) as exc_info:
            validate_parameters({"parameter1": "exists"}, SCHEMA)

        violations = exc_info.value.violations
        assert len(violations) == 1
        assert violations[0]["validator"] == "required"
        assert "parameter2" in violations[0]["message"]

    def test_empty_parameters_with_schema(self):
        """Test that an empty payload fails when a property is required."""
        with pytest.raises(ParameterValidationError):
            validate_parameters({}, SCHEMA)

    def test_all_violations_are_collected(self):
        """Test that several violations collapse into one error."""
        with pytest.raises(ParameterValidationError) as exc_info:
            validate_parameters({"parameter1": 7, "parameter2": -1}, SCHEMA)

        error = exc_info.value
        assert isinstance(error, ValidationError)
        assert error.code == "VALIDATION_ERROR"
        assert sorted(v["validator"] for v in error.violations) == ["minimum", "type"]
        assert error.details["violations"] == error.violations

    @pytest.mark.parametrize("value", ["42", 4.5, True, None, [1]])
    def test_type_mismatch(self, value):
        """Test that non-integer values fail an integer property."""
        with pytest.raises(ParameterValidationError):
            validate_parameters({"parameter2": value}, SCHEMA)

    def test_integral_float_is_an_integer(self):
        """Test that widened integers still satisfy integer properties."""
        validate_parameters({"parameter2": 42.0}, SCHEMA)

    def test_invalid_schema(self):
        """Test that a broken schema is a validation failure, not a crash."""
        with pytest.raises(ParameterValidationError) as exc_info:
            validate_parameters({"parameter2": 1}, {"type": "not-a-type"})

        assert "schema is invalid" in exc_info.value.message

    def test_explicit_draft(self):
        """Test that $schema selects the validator draft."""
        schema = dict(SCHEMA, **{"$schema": "http://json-schema.org/draft-04/schema#"})

        assert collect_violations({"parameter2": 1}, schema) == []
        assert collect_violations({"parameter2": -1}, schema)[0]["validator"] == "minimum"


class TestNormalizeParameters:
    """Test cases for numeric normalisation."""

    def test_integers_become_floats(self):
        """Test that integers are held as floats."""
        normalized = normalize_parameters({"parameter2": 42})

        assert normalized == {"parameter2": 42.0}
        assert isinstance(normalized["parameter2"], float)

    def test_nested_values(self):
        """Test normalisation of nested maps and lists."""
        normalized = normalize_parameters({
            "limits": {"cpu": 2, "labels": ["a", 3]},
            "enabled": True,
            "name": "x",
            "ratio": 0.5,
            "missing": None
        })

        assert normalized == {
            "limits": {"cpu": 2.0, "labels": ["a", 3.0]},
            "enabled": True,
            "name": "x",
            "ratio": 0.5,
            "missing": None
        }
        assert isinstance(normalized["limits"]["cpu"], float)
        assert normalized["enabled"] is True

    def test_empty(self):
        """Test that missing parameters normalise to an empty map."""
        assert normalize_parameters(None) == {}
        assert normalize_parameters({}) == {}

    def test_input_is_not_modified(self):
        """Test that normalisation returns a copy."""
        parameters = {"nested": {"value": 1}}
        normalize_parameters(parameters)

        assert parameters == {"nested": {"value": 1}}
        assert isinstance(parameters["nested"]["value"], int)

    def test_integer_out_of_float_range(self):
        """Test that integers beyond float range are reported with their path."""
        with pytest.raises(ParameterValidationError) as exc_info:
            normalize_parameters({"limits": [1, 10 ** 400]})

        assert exc_info.value.violations[0]["path"] == "$.limits[1]"
