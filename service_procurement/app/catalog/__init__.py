"""
Catalog package.

Holds the static metadata of the services and plans this listener sells:

- models: ServiceDefinition, PlanDefinition and the read-only Catalog with
  lookup by service id then plan id.
- loader: reads the JSON/YAML metadata file once at startup.

The catalog is the single source of truth for valid (service, plan, schema)
triples and is never modified while serving events.
"""
