"""
Generic reconciliation contract shared by the vault, folder and password engines.

An engine is stateless: it holds only the injected client and its converter.
Each lifecycle call makes at most one write plus one confirmatory read, and
callers must serialize operations on the same Id.

    Planned ─create─▶ Live ─read/update─▶ Live ─delete─▶ Deleted

Writes whose response only carries the entity Id (``OperationResponse``) are
followed by a read so the returned model is never missing remote fields.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import StrEnum
from typing import Any, Generic, TypeVar

from vaultform.client.base import ClientError, RemoteClient, RemoteNotFound
from vaultform.client.schemas import Envelope, OperationResponse
from vaultform.errors import (
    CreateError,
    DecodeError,
    DeleteError,
    NotFound,
    TransportError,
    UpdateError,
    ValidationError,
)
from vaultform.models import detect_drift

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")
DataT = TypeVar("DataT")
CreateT = TypeVar("CreateT")
UpdateT = TypeVar("UpdateT")


class Operation(StrEnum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    IMPORT = "import"


def blank_to_none(value: str | None) -> str | None:
    """The service reports an unset text field as ""."""
    return value if value else None


def zero_to_none(value: int | None) -> int | None:
    """The service reports an unset integer tag as 0."""
    return value if value else None


def require_data(response: Envelope, kind: str) -> Any:
    data = getattr(response, "data", None)
    if data is None:
        raise DecodeError(f"{kind} response has no data (status {response.status!r})")
    return data


class Converter(ABC, Generic[ModelT, CreateT, UpdateT, DataT]):
    """Pure mapping between a canonical model and the wire shapes of one kind."""

    kind: str = ""

    @abstractmethod
    def to_create_request(self, model: ModelT) -> CreateT: ...

    @abstractmethod
    def to_update_request(self, model: ModelT) -> UpdateT: ...

    @abstractmethod
    def from_data(self, data: DataT) -> ModelT: ...

    def from_response(self, response: Envelope) -> ModelT:
        return self.from_data(require_data(response, self.kind))


class ResourceEngine(ABC, Generic[ModelT]):
    """Create/read/update/delete/import for one resource kind."""

    kind: str = ""
    # Fields that cannot change once the entity exists.
    immutable_fields: tuple[str, ...] = ()

    def __init__(self, client: RemoteClient, converter: Converter | None = None) -> None:
        self.client = client
        self.converter = converter or self.default_converter()

    @abstractmethod
    def default_converter(self) -> Converter: ...

    @abstractmethod
    def _remote_add(self, request: Any) -> Envelope: ...

    @abstractmethod
    def _remote_get(self, resource_id: str) -> Envelope: ...

    @abstractmethod
    def _remote_edit(self, resource_id: str, request: Any) -> Envelope: ...

    @abstractmethod
    def _remote_delete(self, resource_id: str) -> Envelope: ...

    def build_create_request(self, desired: ModelT) -> Any:
        return self.converter.to_create_request(desired)

    def build_update_request(self, desired: ModelT) -> Any:
        return self.converter.to_update_request(desired)

    # ─── Lifecycle ───────────────────────────────────────────────────────

    def create(self, desired: ModelT) -> ModelT:
        """Create the entity and return its live state (with the remote Id)."""
        request = self.build_create_request(desired)
        logger.info("Creating %s %r", self.kind, getattr(desired, "name", ""))
        try:
            response = self._call(Operation.CREATE, None, self._remote_add, request)
            live = self._settle(Operation.CREATE, None, response)
        except TransportError as e:
            raise CreateError(self.kind, e.resource_id, e.detail) from e
        logger.info("Created %s %s", self.kind, getattr(live, "id", None))
        return live

    def read(self, resource_id: str) -> ModelT:
        """Fetch and normalize the current remote state. Raises NotFound."""
        return self._read(Operation.READ, resource_id)

    def import_(self, resource_id: str) -> ModelT:
        """Adopt an existing remote entity; same as ``read``."""
        logger.info("Importing %s %s", self.kind, resource_id)
        return self._read(Operation.IMPORT, resource_id)

    def update(self, resource_id: str, desired: ModelT, current: ModelT | None = None) -> ModelT:
        """Apply the mutable subset of ``desired`` and return the refreshed state.

        When ``current`` (the recorded state) is given, a change to an
        immutable field is rejected before anything is sent.
        """
        if current is not None:
            self._check_immutable(resource_id, desired, current)
        request = self.build_update_request(desired)
        logger.info("Updating %s %s", self.kind, resource_id)
        try:
            response = self._call(Operation.UPDATE, resource_id, self._remote_edit, resource_id, request)
            live = self._settle(Operation.UPDATE, resource_id, response)
        except TransportError as e:
            raise UpdateError(self.kind, resource_id, e.detail) from e
        return live

    def delete(self, resource_id: str) -> None:
        """Delete the entity. Deleting an already absent entity succeeds."""
        logger.info("Deleting %s %s", self.kind, resource_id)
        try:
            self._delete(resource_id)
        except TransportError as e:
            raise DeleteError(self.kind, resource_id, e.detail) from e

    def drift(self, recorded: ModelT) -> dict[str, tuple[Any, Any]]:
        """Compare recorded state with the remote entity; raises NotFound if gone."""
        resource_id = getattr(recorded, "id", None)
        if not resource_id:
            raise ValidationError(f"recorded {self.kind} state has no id")
        live = self.read(resource_id)
        return detect_drift(recorded, live)

    # ─── Internals ───────────────────────────────────────────────────────

    def _read(self, operation: Operation, resource_id: str) -> ModelT:
        if not resource_id:
            raise ValidationError(f"{self.kind} id is required to {operation}")
        logger.debug("Reading %s %s", self.kind, resource_id)
        try:
            response = self._remote_get(resource_id)
        except RemoteNotFound as e:
            raise NotFound(self.kind, resource_id, str(e)) from e
        except ClientError as e:
            raise TransportError(operation, self.kind, resource_id, str(e)) from e

        if not response.ok or getattr(response, "data", None) is None:
            raise NotFound(self.kind, resource_id, _status_detail(response))
        return self.converter.from_response(response)

    def _delete(self, resource_id: str) -> None:
        try:
            response = self._remote_delete(resource_id)
        except RemoteNotFound:
            logger.info("%s %s already absent", self.kind, resource_id)
            return
        except ClientError as e:
            raise TransportError(Operation.DELETE, self.kind, resource_id, str(e)) from e

        if response.ok:
            return

        # A refused delete is only a success if the entity is really gone.
        detail = _status_detail(response)
        try:
            self._read(Operation.DELETE, resource_id)
        except NotFound:
            logger.info("%s %s already absent (%s)", self.kind, resource_id, detail)
            return
        except DecodeError as e:
            raise TransportError(Operation.DELETE, self.kind, resource_id, detail) from e
        raise TransportError(Operation.DELETE, self.kind, resource_id, detail)

    def _call(
        self,
        operation: Operation,
        resource_id: str | None,
        fn: Callable[..., Envelope],
        *args: Any,
    ) -> Envelope:
        try:
            response = fn(*args)
        except ClientError as e:
            raise TransportError(operation, self.kind, resource_id, str(e)) from e
        if not response.ok:
            raise TransportError(operation, self.kind, resource_id, _status_detail(response))
        return response

    def _settle(self, operation: Operation, resource_id: str | None, response: Envelope) -> ModelT:
        """Turn a write response into the authoritative live model."""
        if not isinstance(response, OperationResponse):
            return self.converter.from_response(response)

        new_id = str(response.data) if response.data else resource_id
        if not new_id:
            raise TransportError(operation, self.kind, None, "service returned no id")
        try:
            return self._read(operation, new_id)
        except NotFound as e:
            raise TransportError(
                operation, self.kind, new_id, f"entity missing on confirmatory read: {e}"
            ) from e

    def _check_immutable(self, resource_id: str, desired: ModelT, current: ModelT) -> None:
        for name in self.immutable_fields:
            before = getattr(current, name)
            after = getattr(desired, name)
            if before != after:
                raise ValidationError(
                    f"{self.kind} {resource_id!r}: {name} cannot change after creation "
                    f"({before!r} -> {after!r}); the resource must be replaced"
                )


def _status_detail(response: Envelope) -> str:
    detail = f"service returned status {response.status!r}"
    if response.code:
        detail += f" ({response.code})"
    return detail
