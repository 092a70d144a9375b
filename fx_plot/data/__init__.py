"""
Quote parsing and per-provider series storage.

Turns raw feed messages into validated quotes and maintains the
provider time series read by the charting layer.
"""
