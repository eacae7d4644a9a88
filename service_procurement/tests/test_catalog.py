"""
Unit tests for the service/plan catalog.
"""

import json

import pytest

from service_procurement.app.catalog.loader import load_catalog, read_metadata_file
from service_procurement.app.catalog.models import Catalog, PlanDefinition, ServiceDefinition
from shared.errors import MetadataLoadError


METADATA = {
    "services": [
        {
            "serviceId": "Simple",
            "plans": [{"planId": "SimplePlan1"}]
        },
        {
            "serviceId": "Parameterized",
            "plans": [
                {
                    "planId": "ParameterizedPlan1",
                    "inputParameterSchema": {
                        "type": "object",
                        "properties": {"parameter2": {"type": "integer", "minimum": 0}},
                        "required": ["parameter2"]
                    }
                },
                {"planId": "ParameterizedPlan2", "inputParameterSchema": {}}
            ]
        }
    ]
}


class TestCatalog:
    """Test cases for Catalog lookups."""

    @pytest.fixture
    def catalog(self):
        """Create catalog from metadata."""
        return Catalog.from_dict(METADATA)

    def test_lookup_service(self, catalog):
        """Test looking up a known service."""
        service = catalog.lookup_service("Simple")

        assert isinstance(service, ServiceDefinition)
        assert service.service_id == "Simple"
        assert [plan.plan_id for plan in service.plans] == ["SimplePlan1"]

    def test_lookup_service_not_found(self, catalog):
        """Test looking up an unknown service."""
        assert catalog.lookup_service("WorldDominationService") is None

    def test_lookup_plan(self, catalog):
        """Test looking up a plan within a service."""
        service = catalog.lookup_service("Parameterized")
        plan = catalog.lookup_plan(service, "ParameterizedPlan1")

        assert isinstance(plan, PlanDefinition)
        assert plan.has_schema
        assert plan.parameter_schema["required"] == ["parameter2"]

    def test_lookup_plan_not_found(self, catalog):
        """Test that plans are only found inside their own service."""
        service = catalog.lookup_service("Simple")

        assert catalog.lookup_plan(service, "WorldDomination") is None
        assert catalog.lookup_plan(service, "ParameterizedPlan1") is None

    def test_plan_without_schema(self, catalog):
        """Test that missing and empty schemas both mean no schema."""
        simple = catalog.lookup_service("Simple").get_plan("SimplePlan1")
        empty = catalog.lookup_service("Parameterized").get_plan("ParameterizedPlan2")

        assert simple.parameter_schema is None
        assert not simple.has_schema
        assert empty.parameter_schema is None

    def test_order_is_preserved(self, catalog):
        """Test that services keep the order of the metadata document."""
        assert [s["serviceId"] for s in catalog.describe()] == ["Simple", "Parameterized"]
        assert len(catalog) == 2

    def test_catalog_is_immutable(self, catalog):
        """Test that catalog definitions cannot be reassigned."""
        with pytest.raises(AttributeError):
            catalog.services = ()
        with pytest.raises(AttributeError):
            catalog.lookup_service("Simple").service_id = "Other"

    def test_round_trip_to_dict(self, catalog):
        """Test that to_dict reproduces the metadata document."""
        assert Catalog.from_dict(catalog.to_dict()) == catalog

    def test_empty_catalog(self):
        """Test catalog with no services."""
        catalog = Catalog.from_dict({})

        assert len(catalog) == 0
        assert catalog.lookup_service("Simple") is None

    @pytest.mark.parametrize("document", [
        [],
        {"services": {}},
        {"services": [{"serviceId": "A", "plans": {}}]},
        {"services": [{"plans": []}]},
        {"services": [{"serviceId": "A", "plans": [{}]}]},
        {"services": [{"serviceId": "A", "plans": [{"planId": "P", "inputParameterSchema": []}]}]},
        {"services": [{"serviceId": "A"}, {"serviceId": "A"}]},
        {"services": [{"serviceId": "A", "plans": [{"planId": "P"}, {"planId": "P"}]}]},
    ])
    def test_malformed_metadata(self, document):
        """Test that malformed metadata documents are refused."""
        with pytest.raises(MetadataLoadError):
            Catalog.from_dict(document)


class TestCatalogLoader:
    """Test cases for reading metadata files."""

    def test_load_json(self, tmp_path):
        """Test loading a JSON metadata file."""
        path = tmp_path / "metadata.json"
        path.write_text(json.dumps(METADATA), encoding="utf-8")

        catalog = load_catalog(path)

        assert catalog.lookup_service("Parameterized") is not None

    def test_load_yaml(self, tmp_path):
        """Test loading a YAML metadata file."""
        path = tmp_path / "metadata.yaml"
        path.write_text(
            "services:\n"
            "  - serviceId: Simple\n"
            "    plans:\n"
            "      - planId: SimplePlan1\n",
            encoding="utf-8"
        )

        catalog = load_catalog(str(path))

        assert catalog.lookup_service("Simple").get_plan("SimplePlan1") is not None

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises MetadataLoadError."""
        with pytest.raises(MetadataLoadError) as exc_info:
            read_metadata_file(tmp_path / "missing.json")

        assert "Unable to read metadata file" in exc_info.value.message

    def test_unparsable_file(self, tmp_path):
        """Test that invalid JSON raises MetadataLoadError."""
        path = tmp_path / "metadata.json"
        path.write_text("{ not json", encoding="utf-8")

        with pytest.raises(MetadataLoadError) as exc_info:
            load_catalog(path)

        assert "Unable to parse metadata file" in exc_info.value.message
