"""Host store protocols and bundled implementations."""

from .interfaces import ContentTypeStore, TemplateStore
from .json_store import JsonHostStore
from .memory import InMemoryContentTypeStore, InMemoryTemplateStore

__all__ = [
    "ContentTypeStore",
    "InMemoryContentTypeStore",
    "InMemoryTemplateStore",
    "JsonHostStore",
    "TemplateStore",
]
