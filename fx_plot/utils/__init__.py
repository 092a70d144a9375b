"""
Utility functions module.

Time Semantics:
- Feed timestamps (ns since Unix epoch) are ALWAYS authoritative
- Relative seconds are whole seconds since a provider's first quote
- Wall-clock readings are derived in UTC
"""
