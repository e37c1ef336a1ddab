"""
The remote client contract consumed by the reconciliation engines.

Any object with these methods can drive an engine; ``PassworkClient`` is the
httpx implementation, tests use an in-memory fake.
"""

from __future__ import annotations

from typing import Protocol

from vaultform.client.schemas import (
    FolderRequest,
    FolderResponse,
    OperationResponse,
    PasswordListResponse,
    PasswordRequest,
    PasswordResponse,
    PasswordSearchRequest,
    VaultAddRequest,
    VaultEditRequest,
    VaultResponse,
)


class ClientError(Exception):
    """Network or API failure reported by a remote client."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RemoteNotFound(ClientError):
    """The service answered 404 for the requested entity."""


class RemoteClient(Protocol):
    def add_vault(self, request: VaultAddRequest) -> OperationResponse: ...

    def get_vault(self, vault_id: str) -> VaultResponse: ...

    def edit_vault(self, vault_id: str, request: VaultEditRequest) -> OperationResponse: ...

    def delete_vault(self, vault_id: str) -> OperationResponse: ...

    def add_folder(self, request: FolderRequest) -> FolderResponse: ...

    def get_folder(self, folder_id: str) -> FolderResponse: ...

    def edit_folder(self, folder_id: str, request: FolderRequest) -> FolderResponse: ...

    def delete_folder(self, folder_id: str) -> OperationResponse: ...

    def add_password(self, request: PasswordRequest) -> PasswordResponse: ...

    def get_password(self, password_id: str) -> PasswordResponse: ...

    def edit_password(self, password_id: str, request: PasswordRequest) -> PasswordResponse: ...

    def delete_password(self, password_id: str) -> OperationResponse: ...

    def search_passwords(self, request: PasswordSearchRequest) -> PasswordListResponse: ...
