"""
Error types raised by vaultform.

Every lifecycle failure carries the operation, the resource kind and the
remote Id (when known) so callers can print a precise message. ``NotFound`` is
the only error a caller is expected to treat as "successful but absent": the
locally tracked record is stale and should be dropped.

Hierarchy:
    VaultformError
    ├── ConfigError
    ├── ValidationError
    ├── DecodeError
    ├── NotFound
    ├── TransportError
    └── OperationError
        ├── CreateError
        ├── UpdateError
        └── DeleteError
"""

from __future__ import annotations


class VaultformError(Exception):
    """Base class for all vaultform errors."""


class ConfigError(VaultformError):
    """Raised when the client configuration is missing or malformed."""


class ValidationError(VaultformError):
    """Raised for a malformed or contradictory desired model."""


class DecodeError(VaultformError):
    """Raised when a secret payload is not validly encoded."""


class NotFound(VaultformError):
    """The remote entity does not exist (or the service refused to return it)."""

    def __init__(self, kind: str, resource_id: str, detail: str = "") -> None:
        self.kind = kind
        self.resource_id = resource_id
        self.detail = detail
        message = f"{kind} {resource_id!r} not found"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class TransportError(VaultformError):
    """A remote call failed. Wraps the client error via ``__cause__``."""

    def __init__(
        self,
        operation: str,
        kind: str,
        resource_id: str | None,
        detail: str,
    ) -> None:
        self.operation = operation
        self.kind = kind
        self.resource_id = resource_id
        self.detail = detail
        target = f" {resource_id!r}" if resource_id else ""
        super().__init__(f"{operation} {kind}{target} failed: {detail}")


class OperationError(VaultformError):
    """User-facing wrap of a ``TransportError`` for one lifecycle operation."""

    verb = "process"

    def __init__(self, kind: str, resource_id: str | None, detail: str) -> None:
        self.kind = kind
        self.resource_id = resource_id
        self.detail = detail
        target = f" {resource_id!r}" if resource_id else ""
        super().__init__(f"Could not {self.verb} {kind}{target}, unexpected error: {detail}")


class CreateError(OperationError):
    verb = "create"


class UpdateError(OperationError):
    verb = "update"


class DeleteError(OperationError):
    verb = "delete"
