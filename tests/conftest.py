"""Shared pytest fixtures for doctype-sync tests."""

import pytest

from doctype_sync.discovery import StaticModelDiscovery
from doctype_sync.host import InMemoryContentTypeStore, InMemoryTemplateStore
from doctype_sync.sync.engine import ContentTypeSynchronizationService
from doctype_sync.sync.identity import InMemoryIdentityStore


@pytest.fixture
def template_store():
    """Template store holding Article and Home templates."""
    store = InMemoryTemplateStore()
    store.add("Article")
    store.add("Home")
    return store


@pytest.fixture
def content_type_store():
    return InMemoryContentTypeStore()


@pytest.fixture
def identity_store():
    return InMemoryIdentityStore()


@pytest.fixture
def make_service(content_type_store, template_store, identity_store):
    """Factory building a service over the shared in-memory stores."""

    def _make(models, **kwargs):
        return ContentTypeSynchronizationService(
            discovery=StaticModelDiscovery(models),
            content_type_store=content_type_store,
            template_store=template_store,
            identity_store=identity_store,
            **kwargs,
        )

    return _make
