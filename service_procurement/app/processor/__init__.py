"""
Event processor package.

The EventProcessor combines catalog lookup, parameter validation and the
entitlement store into one accept/reject Decision per marketplace event.
Repeated delivery of the same creation event is accepted without changing
anything; a creation event that disagrees with a stored entitlement is
refused.
"""
