"""
Service and plan metadata models for the Procurement Listener.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from shared.errors import MetadataLoadError


@dataclass(frozen=True)
class PlanDefinition:
    """A purchasable plan of a service.

    An empty or missing ``parameter_schema`` means the plan accepts no
    parameters at all.
    """

    plan_id: str
    parameter_schema: Optional[Dict[str, Any]] = None

    @property
    def has_schema(self) -> bool:
        return bool(self.parameter_schema)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanDefinition":
        if not isinstance(data, dict):
            raise MetadataLoadError("Plan definition must be an object", {"plan": data})

        plan_id = data.get("planId")
        if not isinstance(plan_id, str) or not plan_id:
            raise MetadataLoadError("Plan definition is missing 'planId'", {"plan": data})

        schema = data.get("inputParameterSchema")
        if schema is not None and not isinstance(schema, dict):
            raise MetadataLoadError(
                "Field 'inputParameterSchema' must be an object",
                {"planId": plan_id}
            )

        return cls(plan_id=plan_id, parameter_schema=schema or None)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"planId": self.plan_id}
        if self.parameter_schema:
            data["inputParameterSchema"] = self.parameter_schema
        return data


@dataclass(frozen=True)
class ServiceDefinition:
    """A sellable service and its ordered plans."""

    service_id: str
    plans: Tuple[PlanDefinition, ...] = field(default_factory=tuple)

    def get_plan(self, plan_id: str) -> Optional[PlanDefinition]:
        """Return the plan with the given id, or None."""
        for plan in self.plans:
            if plan.plan_id == plan_id:
                return plan
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServiceDefinition":
        if not isinstance(data, dict):
            raise MetadataLoadError("Service definition must be an object", {"service": data})

        service_id = data.get("serviceId")
        if not isinstance(service_id, str) or not service_id:
            raise MetadataLoadError("Service definition is missing 'serviceId'", {"service": data})

        raw_plans = data.get("plans", [])
        if not isinstance(raw_plans, list):
            raise MetadataLoadError("Field 'plans' must be a list", {"serviceId": service_id})

        plans = tuple(PlanDefinition.from_dict(plan) for plan in raw_plans)

        seen = set()
        for plan in plans:
            if plan.plan_id in seen:
                raise MetadataLoadError(
                    "Duplicate plan id",
                    {"serviceId": service_id, "planId": plan.plan_id}
                )
            seen.add(plan.plan_id)

        return cls(service_id=service_id, plans=plans)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "serviceId": self.service_id,
            "plans": [plan.to_dict() for plan in self.plans],
        }


@dataclass(frozen=True)
class Catalog:
    """Read-only catalog of the services and plans this listener sells.

    Lookups are linear scans; catalogs are small and fixed at startup.
    """

    services: Tuple[ServiceDefinition, ...] = field(default_factory=tuple)

    def lookup_service(self, service_id: str) -> Optional[ServiceDefinition]:
        """Return the service with the given id, or None."""
        for service in self.services:
            if service.service_id == service_id:
                return service
        return None

    def lookup_plan(self, service: ServiceDefinition, plan_id: str) -> Optional[PlanDefinition]:
        """Return the plan with the given id inside ``service``, or None."""
        return service.get_plan(plan_id)

    def describe(self) -> List[Dict[str, Any]]:
        """Summary of service and plan ids, for logs and introspection."""
        return [
            {
                "serviceId": service.service_id,
                "plans": [plan.plan_id for plan in service.plans],
            }
            for service in self.services
        ]

    def __len__(self) -> int:
        return len(self.services)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Catalog":
        """Build a catalog from a metadata document.

        The document has the form::

            {"services": [{"serviceId": "...",
                           "plans": [{"planId": "...", "inputParameterSchema": {...}}]}]}
        """
        if not isinstance(data, dict):
            raise MetadataLoadError("Metadata document must be an object")

        raw_services = data.get("services", [])
        if not isinstance(raw_services, list):
            raise MetadataLoadError("Field 'services' must be a list")

        services = tuple(ServiceDefinition.from_dict(service) for service in raw_services)

        seen = set()
        for service in services:
            if service.service_id in seen:
                raise MetadataLoadError("Duplicate service id", {"serviceId": service.service_id})
            seen.add(service.service_id)

        return cls(services=services)

    def to_dict(self) -> Dict[str, Any]:
        return {"services": [service.to_dict() for service in self.services]}
