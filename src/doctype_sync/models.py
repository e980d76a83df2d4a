"""Pydantic models for declared document types and live host content types.

Declared models (``DocumentTypeModel``, ``PropertyModel``) come from code
or YAML and are frozen for the duration of a sync run.

Live models (``LiveContentType``, ``LivePropertyType``) mirror what the
host store persists.  They are mutable: the sync engine edits them in
place and hands them back to the store's ``save()``.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Declared models
# ---------------------------------------------------------------------------


class PropertyModel(BaseModel):
    """A property declared on a document type.

    Attributes:
        name: Display name.
        alias: Unique (case-insensitive) key within the owning type.
        id: Optional stable external ID.
        description: Editor help text.
        data_type: Host data-type name the property is edited with.
        mandatory: Whether a value is required.
        validation: Optional regular expression the value must match.
        group: Tab/group the property is shown under.
        sort_order: Position within the group.
    """

    name: str
    alias: str
    id: UUID | None = None
    description: str | None = None
    data_type: str = "Textstring"
    mandatory: bool = False
    validation: str | None = None
    group: str | None = None
    sort_order: int = 0

    model_config = {"frozen": True}


class DocumentTypeModel(BaseModel):
    """A document type declared in code.

    ``allowed_child_types`` holds aliases or external-ID strings of other
    document types.  ``None`` leaves the host's allowed children untouched;
    an empty list clears them.
    """

    name: str
    alias: str
    id: UUID | None = None
    description: str | None = None
    icon: str = "icon-document"
    allow_at_root: bool = False
    is_container: bool = False
    properties: list[PropertyModel] = Field(default_factory=list)
    templates: list[str] = Field(default_factory=list)
    default_template: str | None = None
    allowed_child_types: list[str] | None = None

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Live (host) models
# ---------------------------------------------------------------------------


class Template(BaseModel):
    """A presentation template known to the host."""

    id: int
    alias: str
    name: str

    model_config = {"frozen": True}


class LivePropertyType(BaseModel):
    """A property type as persisted by the host.

    ``id`` is ``None`` until the owning content type is saved.
    """

    id: int | None = None
    alias: str
    name: str
    description: str | None = None
    data_type: str = "Textstring"
    mandatory: bool = False
    validation: str | None = None
    group: str | None = None
    sort_order: int = 0


class LiveContentType(BaseModel):
    """A content type as persisted by the host."""

    id: int | None = None
    parent_id: int = -1
    alias: str = ""
    name: str = ""
    description: str | None = None
    icon: str = "icon-document"
    allow_at_root: bool = False
    is_container: bool = False
    property_types: list[LivePropertyType] = Field(default_factory=list)
    allowed_templates: list[Template] = Field(default_factory=list)
    default_template: Template | None = None
    allowed_content_type_ids: list[int] = Field(default_factory=list)

    def set_default_template(self, template: Template | None) -> None:
        """Set (or clear, with ``None``) the default template.

        A default template is always also an allowed template.
        """
        self.default_template = template
        if template is None:
            return
        if all(t.id != template.id for t in self.allowed_templates):
            self.allowed_templates = [*self.allowed_templates, template]

    def get_property_type(self, alias: str) -> LivePropertyType | None:
        """Return the property type with *alias* (case-insensitive)."""
        wanted = alias.casefold()
        for prop in self.property_types:
            if prop.alias.casefold() == wanted:
                return prop
        return None
