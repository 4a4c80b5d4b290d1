"""CLI helpers exposed for other modules."""

from .log_setup import configure_logging

__all__ = ["configure_logging"]
