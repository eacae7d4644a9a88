"""
Procurement listener service package.

This package receives entitlement lifecycle events from the marketplace and
reconciles them against the catalog of services and plans sold here. It
provides:

- app.main: API surface (event intake, entitlement inspection, health).
- app.catalog: Service/plan metadata and the metadata file loader.
- app.validation: Parameter checks against a plan's JSON schema.
- app.store: In-memory entitlement records with per-id locking.
- app.processor: Decision logic combining the pieces above.

Guidelines:
- The catalog is read-only once loaded.
- Redelivered events must be safe: identical creations are accepted without
  change, conflicting ones are refused without touching stored state.
"""
