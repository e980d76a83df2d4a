"""Exception hierarchy for doctype_sync.

- ``InvalidArgumentError``: a required input was missing or malformed.
- ``IdentityConflictError``: declared models collide on ID or alias.
- ``HostOperationError``: the host store rejected an operation.

Host stores other than the bundled ones may raise their own exceptions;
the sync engine propagates those unchanged.
"""

from __future__ import annotations


class DoctypeSyncError(Exception):
    """Base class for all doctype_sync errors."""


class InvalidArgumentError(DoctypeSyncError, ValueError):
    """A required argument was absent or had the wrong shape."""


class IdentityConflictError(DoctypeSyncError):
    """Two declared models (or two properties of one model) collide.

    Attributes:
        kind: ``"id"`` or ``"alias"``.
        scope: ``"document type"`` or ``"property"``.
        names: Names of every colliding model or property.
        value: The shared ID or alias.
    """

    def __init__(
        self, kind: str, scope: str, names: list[str], value: str
    ) -> None:
        self.kind = kind
        self.scope = scope
        self.names = list(names)
        self.value = value
        label = "ID" if kind == "id" else "Alias"
        plural = "document types" if scope == "document type" else "properties"
        super().__init__(
            f"{label} conflict for {plural} {', '.join(self.names)}. "
            f"{label} {value} is already in use."
        )


class HostOperationError(DoctypeSyncError):
    """The host content-type store rejected a create, save, or lookup."""
