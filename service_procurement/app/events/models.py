"""
Entitlement event data models for the Procurement Listener.
"""

from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field
from enum import Enum
import json

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from shared.errors import ValidationError


class EntitlementEventType(str, Enum):
    """Entitlement lifecycle notifications sent by the marketplace."""
    CREATED = "ENTITLEMENT_CREATED"
    DELETED = "ENTITLEMENT_DELETED"
    UPDATED = "ENTITLEMENT_UPDATED"
    CANCELLED = "ENTITLEMENT_CANCELLED"
    REACTIVATED = "ENTITLEMENT_REACTIVATED"


class ResponseStatus(str, Enum):
    """Outcome of processing an entitlement event."""
    INVALID_REQUEST = "invalid_request"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ASYNC = "async"


class EntitlementEvent(BaseModel):
    """Entitlement notification received from the marketplace.

    The same event (same ``eventId``) may be delivered more than once. Fields
    that do not apply to the event type are simply left empty.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    event_id: str = Field("", alias="eventId", description="Unique id of this event")
    event_type: str = Field("", alias="eventType", description="Lifecycle event type")
    service_id: str = Field("", alias="serviceId", description="Service the entitlement is for")
    plan_id: str = Field("", alias="planId", description="Plan chosen by the purchaser")
    entitlement_id: str = Field("", alias="entitlementId", description="Entitlement identifier")
    account_id: str = Field("", alias="accountId", description="Account owning the entitlement")
    requestor_id: str = Field("", alias="requestorId", description="Intermediary acting for the owner")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Custom purchase parameters")

    @field_validator(
        "event_id", "event_type", "service_id", "plan_id",
        "entitlement_id", "account_id", "requestor_id",
        mode="before"
    )
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("parameters", mode="before")
    @classmethod
    def _null_parameters(cls, value):
        return {} if value is None else value

    @property
    def known_type(self) -> Optional[EntitlementEventType]:
        """The event type as an enum member, or None when unrecognised."""
        try:
            return EntitlementEventType(self.event_type)
        except ValueError:
            return None


class EntitlementEventResponse(BaseModel):
    """Body returned to the marketplace for an accepted event."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: str = Field("", alias="eventId")
    entitlement_dashboard_url: str = Field("", alias="entitlementDashboardUrl")
    labels: Dict[str, Any] = Field(default_factory=dict)


@dataclass
class Decision:
    """The processor's verdict for one event.

    ``reason`` and ``violations`` are diagnostics for logs; they are never
    sent back to the marketplace.
    """
    status: ResponseStatus
    event_id: str = ""
    entitlement_dashboard_url: str = ""
    labels: Dict[str, Any] = field(default_factory=dict)
    reason: Optional[str] = None
    violations: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.status == ResponseStatus.ACCEPTED

    @classmethod
    def accept(cls, event_id: str, reason: Optional[str] = None) -> "Decision":
        return cls(status=ResponseStatus.ACCEPTED, event_id=event_id, reason=reason)

    @classmethod
    def invalid(cls, reason: str, violations: Optional[List[Dict[str, Any]]] = None) -> "Decision":
        return cls(status=ResponseStatus.INVALID_REQUEST, reason=reason, violations=list(violations or []))

    def to_response(self) -> EntitlementEventResponse:
        return EntitlementEventResponse(
            event_id=self.event_id,
            entitlement_dashboard_url=self.entitlement_dashboard_url,
            labels=self.labels
        )


def parse_entitlement_event(body: bytes) -> EntitlementEvent:
    """Decode a request body into an EntitlementEvent."""
    try:
        payload = json.loads(body or b"")
    except ValueError as e:
        raise ValidationError("Unable to parse body", {"error": str(e)}) from e

    if not isinstance(payload, dict):
        raise ValidationError("Entitlement event must be a JSON object")

    try:
        return EntitlementEvent.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            "Entitlement event has invalid fields",
            {"errors": [
                {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
                for error in e.errors()
            ]}
        ) from e


def _require(event: EntitlementEvent, attribute: str, wire_name: str) -> None:
    value = getattr(event, attribute)
    if not value:
        raise ValidationError(
            f"Field '{wire_name}' does not have a valid value: '{value}'",
            {"field": wire_name}
        )


def validate_entitlement_event(event: EntitlementEvent) -> None:
    """Field-presence checks that apply before an event reaches the processor.

    ``eventId`` and ``entitlementId`` are always required and ``eventType``
    must be a known value. Creation events also need ``serviceId`` and
    ``planId``.
    """
    _require(event, "event_id", "eventId")
    _require(event, "entitlement_id", "entitlementId")

    event_type = event.known_type
    if event_type is None:
        raise ValidationError(
            f"Field 'eventType' doesn't have a valid value: '{event.event_type}'",
            {"field": "eventType"}
        )

    if event_type == EntitlementEventType.CREATED:
        _require(event, "service_id", "serviceId")
        _require(event, "plan_id", "planId")
