"""Declarative document-type synchronization for CMS hosts."""

__version__ = "0.3.0"
