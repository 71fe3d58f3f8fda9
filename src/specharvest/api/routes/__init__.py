"""API route modules."""

from . import config, results, scoring

__all__ = ["config", "results", "scoring"]
