"""
Procurement listener service.

Receives entitlement events from the marketplace on ``POST /entitlementEvents``
and answers with the processor's decision.
"""

import argparse
import sys
from typing import Optional, Sequence

from fastapi import HTTPException, Request, Response
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import MetadataLoadError
from shared.logging import bind_event_context, get_logger

from .catalog.loader import load_catalog
from .catalog.models import Catalog
from .events.models import (
    Decision, ResponseStatus,
    parse_entitlement_event, validate_entitlement_event
)
from .processor.engine import EventProcessor
from .store.memory import InMemoryEntitlementStore


SERVICE_NAME = "procurement"


class ProcurementService(BaseService):
    """Procurement listener service implementation."""

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        config: Optional[ServiceConfig] = None,
        store: Optional[InMemoryEntitlementStore] = None,
    ):
        super().__init__(SERVICE_NAME, config=config)

        # Catalog is loaded once and shared read-only with the processor
        self.catalog = catalog if catalog is not None else load_catalog(self.config.metadata_file)
        self.store = store if store is not None else InMemoryEntitlementStore()
        self.processor = EventProcessor(self.catalog, self.store, metrics=self.metrics)

        self._setup_procurement_routes()

    def _setup_procurement_routes(self):
        """Set up procurement-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "Procurement Listener - Entitlement Events",
                "version": "1.0.0",
                "catalog": self.catalog.describe()
            }

        @self.app.post("/entitlementEvents")
        async def on_entitlement_event(request: Request):
            """Handle an entitlement event notification."""
            event = parse_entitlement_event(await request.body())
            bind_event_context(event.event_id, event.entitlement_id)
            validate_entitlement_event(event)

            decision = self.processor.on_event(event)
            return self._render_decision(decision)

        @self.app.get("/entitlements")
        async def list_entitlements():
            """List stored entitlements."""
            records = self.store.list()
            return {
                "entitlements": [self._render_record(record.id) for record in records],
                "total": len(records)
            }

        @self.app.get("/entitlements/{entitlement_id}")
        async def get_entitlement(entitlement_id: str):
            """Get a stored entitlement."""
            if entitlement_id not in self.store:
                raise HTTPException(status_code=404, detail="Entitlement not found")
            return self._render_record(entitlement_id)

    def _render_record(self, entitlement_id: str):
        record = self.store.get(entitlement_id)
        data = record.to_dict()
        data["events"] = self.store.events_for(entitlement_id)
        return data

    def _render_decision(self, decision: Decision) -> Response:
        """Map a decision onto the HTTP response expected by the marketplace."""
        if decision.status == ResponseStatus.ACCEPTED:
            return JSONResponse(
                status_code=200,
                content=decision.to_response().model_dump(by_alias=True)
            )

        if decision.status == ResponseStatus.INVALID_REQUEST:
            self.logger.info(
                "Entitlement event refused",
                reason=decision.reason,
                violations=decision.violations
            )
            return Response(status_code=400)

        if decision.status == ResponseStatus.ASYNC:
            return Response(status_code=202)

        # REJECTED
        return JSONResponse(
            status_code=400,
            content=decision.to_response().model_dump(by_alias=True)
        )

    async def _check_dependencies(self):
        """Report catalog and store state."""
        return {
            "catalog": "ok" if len(self.catalog) else "empty",
            "entitlements": str(self.store.count())
        }


def create_app(catalog: Optional[Catalog] = None, config: Optional[ServiceConfig] = None):
    """Create procurement listener application."""
    service = ProcurementService(catalog=catalog, config=config)
    return service.app


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="procurement-listener",
        description="Listen for marketplace entitlement events."
    )
    parser.add_argument(
        "--port", type=int, default=None,
        help="port for the service to listen on (default: 11000)"
    )
    parser.add_argument(
        "--metadata-file", "--metadataFile", dest="metadata_file", default=None,
        help="metadata file (JSON or YAML) that contains the service definitions"
    )
    parser.add_argument("--host", default=None, help="interface to bind")
    parser.add_argument("--log-level", dest="log_level", default=None, help="log level")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    config = get_config(
        SERVICE_NAME,
        args.port,
        metadata_file=args.metadata_file,
        host=args.host,
        log_level=args.log_level
    )

    try:
        service = ProcurementService(config=config)
    except MetadataLoadError as e:
        get_logger(f"{SERVICE_NAME}.main").error(
            "Unable to start service", error=e.message, details=e.details
        )
        return 1

    service.logger.info("Starting server", port=config.port, metadata_file=config.metadata_file)
    service.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
