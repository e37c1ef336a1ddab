"""
Vault converter and engine.

A vault's master password is generated once, at creation, when the desired
model does not declare one. The engine (not the converter) generates it so the
plaintext ends up in the returned state; later updates only send the name and
therefore never touch it.

The add and edit endpoints return only the vault Id, so both are followed by a
read of the full entity.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from vaultform import codec
from vaultform.client.schemas import (
    Envelope,
    VaultAddRequest,
    VaultData,
    VaultEditRequest,
)
from vaultform.errors import DecodeError
from vaultform.models import Vault
from vaultform.resources.base import Converter, ResourceEngine, blank_to_none

logger = logging.getLogger(__name__)

MASTER_PASSWORD_LENGTH = 12
SALT_LENGTH = 12


class VaultConverter(Converter[Vault, VaultAddRequest, VaultEditRequest, VaultData]):
    kind = "vault"

    def to_create_request(self, model: Vault) -> VaultAddRequest:
        mp_crypted = None
        if model.master_password is not None:
            mp_crypted = codec.encode(model.master_password)
        return VaultAddRequest(
            name=model.name,
            is_private=True if model.is_private is None else model.is_private,
            mp_crypted=mp_crypted,
        )

    def to_update_request(self, model: Vault) -> VaultEditRequest:
        return VaultEditRequest(name=model.name)

    def from_data(self, data: VaultData) -> Vault:
        if data.vault_password_crypted is None:
            raise DecodeError(f"vault {data.id!r} response has no master password")
        return Vault(
            id=data.id,
            name=data.name,
            is_private=not data.visible,
            access=blank_to_none(data.access),
            scope=blank_to_none(data.scope),
            master_password=codec.decode(data.vault_password_crypted),
        )


class VaultEngine(ResourceEngine[Vault]):
    kind = "vault"

    def default_converter(self) -> VaultConverter:
        return VaultConverter()

    def build_create_request(self, desired: Vault) -> VaultAddRequest:
        if desired.master_password is None:
            logger.debug("Generating master password for vault %r", desired.name)
            desired = replace(desired, master_password=codec.generate_random(MASTER_PASSWORD_LENGTH))
        request = self.converter.to_create_request(desired)
        # Write-only key material; the service never returns it.
        return request.model_copy(
            update={
                "salt": codec.generate_random(SALT_LENGTH),
                "password_hash": codec.encode(codec.generate_random(SALT_LENGTH)),
            }
        )

    def _remote_add(self, request: VaultAddRequest) -> Envelope:
        return self.client.add_vault(request)

    def _remote_get(self, resource_id: str) -> Envelope:
        return self.client.get_vault(resource_id)

    def _remote_edit(self, resource_id: str, request: VaultEditRequest) -> Envelope:
        return self.client.edit_vault(resource_id, request)

    def _remote_delete(self, resource_id: str) -> Envelope:
        return self.client.delete_vault(resource_id)
