"""
Runs the conformance scenarios against the in-memory procurement listener.
"""

import pytest
from fastapi.testclient import TestClient

from service_procurement.app.catalog.models import Catalog
from service_procurement.app.main import ProcurementService

from suite import METADATA, TESTS, ConformanceFailure, ExpectResponseCode, TestContext, begin_test_case


@pytest.fixture(scope="module")
def service():
    """One listener shared by all scenarios, reset between them."""
    return ProcurementService(catalog=Catalog.from_dict(METADATA))


@pytest.fixture(scope="module")
def client(service):
    return TestClient(service.app)


@pytest.fixture
def context(service, client):
    service.processor.reset()

    def post(path: str, payload: str) -> int:
        response = client.post(
            f"/{path}", content=payload.encode("utf-8"), headers={"Content-Type": "application/json"}
        )
        return response.status_code

    def get_entitlements():
        return client.get("/entitlements").json()["entitlements"]

    return TestContext(post=post, get_entitlements=get_entitlements)


@pytest.mark.parametrize("test", TESTS, ids=[test.name for test in TESTS])
def test_in_memory_service(test, context):
    test.execute(context)


def test_scenarios_are_isolated(context):
    """Test that a scenario starts from an empty store."""
    assert context.get_entitlements() == []


def test_failed_expectation_is_reported(context):
    """Test that a wrong expectation fails the scenario."""
    test = begin_test_case("wrongCode").post_entitlement_event("{}").expect_response_code(200).build()

    with pytest.raises(ConformanceFailure, match="actual='400', expected='200'"):
        test.execute(context)


def test_builder_requires_a_posted_event():
    with pytest.raises(ValueError):
        begin_test_case("broken").expect_response_code(200)

    assert isinstance(
        begin_test_case("ok").post_entitlement_event("{}").expect_response_code(400).build().actions[0],
        ExpectResponseCode
    )
