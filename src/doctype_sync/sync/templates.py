"""Attach allowed and default templates to a content type."""

from __future__ import annotations

import logging

from doctype_sync.errors import InvalidArgumentError
from doctype_sync.host.interfaces import TemplateStore
from doctype_sync.models import DocumentTypeModel, LiveContentType

logger = logging.getLogger(__name__)


class TemplateResolver:
    """Resolve template names through the host template store.

    Names that do not resolve are dropped silently (logged at WARNING).
    """

    def __init__(self, template_store: TemplateStore) -> None:
        if template_store is None:
            raise InvalidArgumentError("template_store cannot be None")
        self._templates = template_store

    def attach_templates(
        self, content_type: LiveContentType, model: DocumentTypeModel
    ) -> None:
        """Replace allowed templates and set or clear the default template."""
        if content_type is None:
            raise InvalidArgumentError("content_type cannot be None")
        if model is None:
            raise InvalidArgumentError("model cannot be None")

        self.set_templates(content_type, model)
        self.set_default_template(content_type, model)

    def set_templates(
        self, content_type: LiveContentType, model: DocumentTypeModel
    ) -> None:
        templates = []
        if model.templates:
            templates = [
                t
                for t in self._templates.get_templates(model.templates)
                if t is not None
            ]
            if len(templates) < len(model.templates):
                found = {t.alias.casefold() for t in templates}
                missing = [
                    n for n in model.templates if n.casefold() not in found
                ]
                logger.warning(
                    "Templates not found for %s: %s",
                    model.alias,
                    ", ".join(missing),
                )
        content_type.allowed_templates = templates

    def set_default_template(
        self, content_type: LiveContentType, model: DocumentTypeModel
    ) -> None:
        template = None
        name = model.default_template
        if name is not None and name.strip():
            template = self._templates.get_template(name)
            if template is None:
                logger.warning(
                    "Default template %r not found for %s", name, model.alias
                )
        content_type.set_default_template(template)
