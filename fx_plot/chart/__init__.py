"""
Chart-facing helpers: time axis labels and the render model built from
series snapshots.
"""
