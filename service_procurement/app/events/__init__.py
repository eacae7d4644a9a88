"""
Entitlement event package.

Wire models for the marketplace notifications (EntitlementEvent), the
response body (EntitlementEventResponse), the internal Decision type and the
stateless field checks applied before an event reaches the processor.
"""
