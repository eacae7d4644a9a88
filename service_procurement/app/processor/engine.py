"""
Entitlement event processor for the Procurement Listener.
"""

from contextlib import nullcontext
from typing import Optional

from shared.errors import ParameterValidationError, UnsupportedEventTypeError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from ..catalog.models import Catalog
from ..events.models import Decision, EntitlementEvent, EntitlementEventType
from ..store.memory import EntitlementRecord, EntitlementState, InMemoryEntitlementStore
from ..validation.parameters import normalize_parameters, validate_parameters


class EventProcessor:
    """Turns marketplace events into decisions against the catalog and store.

    Only creation events are handled. A creation event is accepted when its
    service, plan and parameters are valid and the entitlement is either new
    or already stored with exactly the same content; a creation event that
    would change an existing entitlement is refused and the stored record is
    left untouched.
    """

    def __init__(
        self,
        catalog: Catalog,
        store: Optional[InMemoryEntitlementStore] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.logger = get_logger("procurement.processor")
        self.catalog = catalog
        self.store = store if store is not None else InMemoryEntitlementStore()
        self.metrics = metrics

    def on_event(self, event: EntitlementEvent) -> Decision:
        """Process one event.

        Raises UnsupportedEventTypeError for event types without a handling
        path; every other outcome is expressed as a Decision.
        """
        event_type = event.known_type
        timer = (
            self.metrics.time_operation(
                "entitlement_event_duration_seconds", event_type=event.event_type or "unknown"
            )
            if self.metrics else nullcontext()
        )

        with timer:
            if event_type == EntitlementEventType.CREATED:
                decision = self._on_entitlement_created(event)
            else:
                self.logger.error(
                    "Unsupported entitlement event",
                    event_id=event.event_id,
                    event_type=event.event_type
                )
                self._count(event.event_type, "unsupported")
                raise UnsupportedEventTypeError(event.event_type, {"eventId": event.event_id})

        self._count(event.event_type, decision.status.value)
        return decision

    def _on_entitlement_created(self, event: EntitlementEvent) -> Decision:
        service = self.catalog.lookup_service(event.service_id)
        if service is None:
            self.logger.info("Service not found", service_id=event.service_id)
            return Decision.invalid(f"Service not found: '{event.service_id}'")

        plan = self.catalog.lookup_plan(service, event.plan_id)
        if plan is None:
            self.logger.info("Plan not found", service_id=event.service_id, plan_id=event.plan_id)
            return Decision.invalid(f"Plan not found: '{event.plan_id}'")

        try:
            validate_parameters(event.parameters, plan.parameter_schema)
            parameters = normalize_parameters(event.parameters)
        except ParameterValidationError as e:
            self.logger.info(
                "Parameters are not valid",
                plan_id=plan.plan_id,
                violations=e.violations
            )
            return Decision.invalid(e.message, e.violations)

        candidate = EntitlementRecord(
            id=event.entitlement_id,
            state=EntitlementState.ACTIVE,
            service_id=event.service_id,
            plan_id=event.plan_id,
            account_id=event.account_id,
            requestor_id=event.requestor_id,
            parameters=parameters,
        )

        with self.store.lock(candidate.id):
            existing = self.store.get(candidate.id)

            if existing is None:
                self.store.put(candidate)
                self.store.record_event(candidate.id, event.event_id)
                self.logger.info("Entitlement created", entitlement=candidate.to_dict())
                if self.metrics:
                    self.metrics.set_entitlements_stored(self.store.count())
                return Decision.accept(event.event_id, "created")

            if existing != candidate:
                self.logger.warning(
                    "Entitlement already exists with different content",
                    entitlement_id=candidate.id,
                    existing=existing.to_dict(),
                    received=candidate.to_dict()
                )
                return Decision.invalid(f"Entitlement already exists: '{candidate.id}'")

            self.store.record_event(candidate.id, event.event_id)

        self.logger.info("Entitlement already exists, nothing to do", entitlement_id=candidate.id)
        return Decision.accept(event.event_id, "unchanged")

    def _count(self, event_type: str, decision: str):
        if self.metrics:
            self.metrics.record_entitlement_event(event_type or "unknown", decision)

    def reset(self):
        """Forget all entitlements; the catalog is kept."""
        self.store.reset()
        if self.metrics:
            self.metrics.set_entitlements_stored(0)
