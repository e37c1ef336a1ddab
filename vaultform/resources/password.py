"""
Password entry converter, engine and lookup.

Every optional text field comes back from the service as "" when unset and
``color`` as 0; both are normalized to ``None``. Creates omit absent values;
edits send the empty sentinel instead, because the service keeps any field an
edit leaves out.

``PasswordLookup`` resolves an entry by Id or by exact name within a vault,
for read-only use of entries managed elsewhere.
"""

from __future__ import annotations

import logging

from vaultform import codec
from vaultform.client.base import ClientError, RemoteClient
from vaultform.client.schemas import (
    Envelope,
    PasswordData,
    PasswordRequest,
    PasswordSearchRequest,
)
from vaultform.errors import NotFound, TransportError, ValidationError
from vaultform.models import Password
from vaultform.resources.base import (
    Converter,
    Operation,
    ResourceEngine,
    blank_to_none,
    zero_to_none,
)

logger = logging.getLogger(__name__)


class PasswordConverter(Converter[Password, PasswordRequest, PasswordRequest, PasswordData]):
    kind = "password"

    def to_create_request(self, model: Password) -> PasswordRequest:
        crypted = None
        if model.password is not None:
            crypted = codec.encode(model.password)
        return PasswordRequest(
            name=model.name,
            vault_id=model.vault_id,
            folder_id=model.folder_id,
            login=model.login,
            crypted_password=crypted,
            description=model.description,
            url=model.url,
            color=model.color,
            tags=list(model.tags) if model.tags is not None else None,
        )

    def to_update_request(self, model: Password) -> PasswordRequest:
        """Like create, but an absent optional field is sent as its empty sentinel.

        The service keeps any field left out of an edit, so dropping ``login``
        or ``color`` from the desired model must clear it explicitly.
        ``folder_id`` and the secret stay omitted when absent.
        """
        request = self.to_create_request(model)
        return request.model_copy(
            update={
                "login": "" if model.login is None else model.login,
                "url": "" if model.url is None else model.url,
                "description": "" if model.description is None else model.description,
                "color": 0 if model.color is None else model.color,
                "tags": [] if model.tags is None else list(model.tags),
            }
        )

    def from_data(self, data: PasswordData) -> Password:
        crypted = blank_to_none(data.crypted_password)
        return Password(
            id=data.id,
            name=data.name,
            vault_id=data.vault_id,
            folder_id=blank_to_none(data.folder_id),
            login=blank_to_none(data.login),
            password=codec.decode(crypted) if crypted is not None else None,
            url=blank_to_none(data.url),
            description=blank_to_none(data.description),
            color=zero_to_none(data.color),
            tags=list(data.tags) if data.tags else None,
            access=blank_to_none(data.access),
            access_code=data.access_code,
        )


class PasswordEngine(ResourceEngine[Password]):
    kind = "password"
    immutable_fields = ("vault_id",)

    def default_converter(self) -> PasswordConverter:
        return PasswordConverter()

    def _remote_add(self, request: PasswordRequest) -> Envelope:
        return self.client.add_password(request)

    def _remote_get(self, resource_id: str) -> Envelope:
        return self.client.get_password(resource_id)

    def _remote_edit(self, resource_id: str, request: PasswordRequest) -> Envelope:
        return self.client.edit_password(resource_id, request)

    def _remote_delete(self, resource_id: str) -> Envelope:
        return self.client.delete_password(resource_id)


class PasswordLookup:
    """Read-only resolution of a password entry by Id or by name."""

    def __init__(self, client: RemoteClient) -> None:
        self.client = client
        self.engine = PasswordEngine(client)

    def lookup(
        self,
        vault_id: str,
        *,
        id: str | None = None,
        name: str | None = None,
    ) -> Password:
        """Return the entry, including its decoded password.

        Raises:
            ValidationError: neither ``id`` nor ``name`` given, or the name is ambiguous.
            NotFound: no entry with that Id or exact name exists in the vault.
        """
        if id:
            return self.engine.read(id)
        if not name:
            raise ValidationError("password lookup needs an id or a name")

        logger.debug("Searching vault %s for password %r", vault_id, name)
        try:
            response = self.client.search_passwords(
                PasswordSearchRequest(query=name, vault_id=vault_id or None)
            )
        except ClientError as e:
            raise TransportError(Operation.READ, "password", None, str(e)) from e
        if not response.ok:
            raise NotFound("password", name, f"search returned status {response.status!r}")

        matches = [item for item in response.data or [] if item.name == name]
        if not matches:
            raise NotFound("password", name, f"no entry with that name in vault {vault_id!r}")
        if len(matches) > 1:
            ids = ", ".join(item.id for item in matches)
            raise ValidationError(
                f"password name {name!r} is ambiguous in vault {vault_id!r} ({ids}); look it up by id"
            )

        # Search results omit the secret.
        return self.engine.read(matches[0].id)
