"""Keep-alive service: periodically probes HTTP targets and keeps a rolling log."""

__version__ = "2.0.0"
