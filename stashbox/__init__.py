"""Stashbox: multi-tenant virtual file-system API."""

__version__ = "1.0.0"
