"""Fixed-interval weather time series built from per-location observations."""

__version__ = "0.3.0"
