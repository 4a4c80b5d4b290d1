"""CLI command modules for refdoc."""

from . import snippets

__all__ = ["snippets"]
