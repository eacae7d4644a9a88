"""
Entitlement store package.

Process-lifetime storage of entitlement records, one per entitlement id,
with per-id locking for read-decide-write sequences and a log of the event
ids accepted for each entitlement.
"""
