"""Folder converter and engine. Only the name of a folder can be edited."""

from __future__ import annotations

from vaultform.client.schemas import Envelope, FolderData, FolderRequest
from vaultform.models import Folder
from vaultform.resources.base import Converter, ResourceEngine, blank_to_none


class FolderConverter(Converter[Folder, FolderRequest, FolderRequest, FolderData]):
    kind = "folder"

    def to_create_request(self, model: Folder) -> FolderRequest:
        return FolderRequest(name=model.name, vault_id=model.vault_id, parent_id=model.parent_id)

    def to_update_request(self, model: Folder) -> FolderRequest:
        return FolderRequest(name=model.name)

    def from_data(self, data: FolderData) -> Folder:
        # "" is how the service says "top-level folder"
        return Folder(
            id=data.id,
            name=data.name,
            vault_id=data.vault_id,
            parent_id=blank_to_none(data.parent_id),
        )


class FolderEngine(ResourceEngine[Folder]):
    kind = "folder"
    immutable_fields = ("vault_id",)

    def default_converter(self) -> FolderConverter:
        return FolderConverter()

    def _remote_add(self, request: FolderRequest) -> Envelope:
        return self.client.add_folder(request)

    def _remote_get(self, resource_id: str) -> Envelope:
        return self.client.get_folder(resource_id)

    def _remote_edit(self, resource_id: str, request: FolderRequest) -> Envelope:
        return self.client.edit_folder(resource_id, request)

    def _remote_delete(self, resource_id: str) -> Envelope:
        return self.client.delete_folder(resource_id)
