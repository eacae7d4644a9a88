"""
Parameter validation package.

Stateless checks of entitlement parameters against a plan's JSON schema,
plus the numeric normalisation applied to stored parameters.
"""
