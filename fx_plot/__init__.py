"""
FX Plot - Streaming Market Data Normalization Engine

Ingests pipe-delimited liquidity provider quotes, maintains per-provider
time series anchored at each provider's first quote, and produces
wall-clock axis labels for live charting.
"""

__version__ = "0.1.0"
__author__ = "FX Plot Team"
