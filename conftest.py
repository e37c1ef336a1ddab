"""
Root-level shared test fixtures.

``service`` is an in-memory stand-in for the Passwork API that behaves like
the real one where it matters: it assigns Ids, echoes stored values back with
"" / 0 / [] sentinels for unset fields, answers unknown Ids with a non-success
status, and returns only the Id from vault add/edit.
"""

from __future__ import annotations

import itertools
from typing import Any

import pytest

from vaultform.client.schemas import (
    FolderData,
    FolderRequest,
    FolderResponse,
    OperationResponse,
    PasswordData,
    PasswordListResponse,
    PasswordRequest,
    PasswordResponse,
    PasswordSearchRequest,
    VaultAddRequest,
    VaultData,
    VaultEditRequest,
    VaultResponse,
)
from vaultform.config import reset_config

MISSING = "error"


class FakeService:
    """Echo implementation of the RemoteClient protocol."""

    def __init__(self) -> None:
        self.vaults: dict[str, VaultData] = {}
        self.folders: dict[str, FolderData] = {}
        self.passwords: dict[str, PasswordData] = {}
        self.calls: list[tuple[str, dict[str, Any] | str | None]] = []
        self.failures: dict[str, Exception] = {}
        self.refuse_delete = False
        self.logged_in = False
        self._ids = itertools.count(1)

    # ─── Test helpers ────────────────────────────────────────────────────

    def fail(self, method: str, error: Exception) -> None:
        """Make the next call to ``method`` raise ``error``."""
        self.failures[method] = error

    def calls_to(self, method: str) -> list[Any]:
        return [payload for name, payload in self.calls if name == method]

    def _record(self, method: str, payload: Any = None) -> None:
        self.calls.append((method, payload))
        if method in self.failures:
            raise self.failures.pop(method)

    def _new_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    # ─── Session ─────────────────────────────────────────────────────────

    def __enter__(self) -> FakeService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        pass

    def login(self) -> None:
        self._record("login")
        self.logged_in = True

    # ─── Vaults ──────────────────────────────────────────────────────────

    def add_vault(self, request: VaultAddRequest) -> OperationResponse:
        self._record("add_vault", request.to_wire())
        vault_id = self._new_id("vault")
        self.vaults[vault_id] = VaultData(
            id=vault_id,
            name=request.name,
            access="admin",
            scope="domain",
            visible=not request.is_private,
            vault_password_crypted=request.mp_crypted,
        )
        return OperationResponse(status="success", data=vault_id)

    def get_vault(self, vault_id: str) -> VaultResponse:
        self._record("get_vault", vault_id)
        if vault_id not in self.vaults:
            return VaultResponse(status=MISSING, code="vaultNotFound")
        return VaultResponse(status="success", data=self.vaults[vault_id].model_copy())

    def edit_vault(self, vault_id: str, request: VaultEditRequest) -> OperationResponse:
        self._record("edit_vault", request.to_wire())
        if vault_id not in self.vaults:
            return OperationResponse(status=MISSING, code="vaultNotFound")
        self.vaults[vault_id] = self.vaults[vault_id].model_copy(update={"name": request.name})
        return OperationResponse(status="success", data=vault_id)

    def delete_vault(self, vault_id: str) -> OperationResponse:
        return self._delete("delete_vault", self.vaults, vault_id)

    # ─── Folders ─────────────────────────────────────────────────────────

    def add_folder(self, request: FolderRequest) -> FolderResponse:
        self._record("add_folder", request.to_wire())
        folder_id = self._new_id("folder")
        self.folders[folder_id] = FolderData(
            id=folder_id,
            name=request.name,
            vault_id=request.vault_id or "",
            parent_id=request.parent_id or "",
        )
        return FolderResponse(status="success", data=self.folders[folder_id].model_copy())

    def get_folder(self, folder_id: str) -> FolderResponse:
        self._record("get_folder", folder_id)
        if folder_id not in self.folders:
            return FolderResponse(status=MISSING, code="folderNotFound")
        return FolderResponse(status="success", data=self.folders[folder_id].model_copy())

    def edit_folder(self, folder_id: str, request: FolderRequest) -> FolderResponse:
        self._record("edit_folder", request.to_wire())
        if folder_id not in self.folders:
            return FolderResponse(status=MISSING, code="folderNotFound")
        self.folders[folder_id] = self.folders[folder_id].model_copy(update={"name": request.name})
        return FolderResponse(status="success", data=self.folders[folder_id].model_copy())

    def delete_folder(self, folder_id: str) -> OperationResponse:
        return self._delete("delete_folder", self.folders, folder_id)

    # ─── Passwords ───────────────────────────────────────────────────────

    def _store_password(self, password_id: str, request: PasswordRequest) -> PasswordData:
        data = PasswordData(
            id=password_id,
            name=request.name,
            vault_id=request.vault_id,
            folder_id=request.folder_id or "",
            login=request.login or "",
            crypted_password=request.crypted_password or "",
            description=request.description or "",
            url=request.url or "",
            color=request.color or 0,
            tags=list(request.tags or []),
            access="write",
            access_code=2,
        )
        self.passwords[password_id] = data
        return data.model_copy()

    def add_password(self, request: PasswordRequest) -> PasswordResponse:
        self._record("add_password", request.to_wire())
        data = self._store_password(self._new_id("password"), request)
        return PasswordResponse(status="success", data=data)

    def get_password(self, password_id: str) -> PasswordResponse:
        self._record("get_password", password_id)
        if password_id not in self.passwords:
            return PasswordResponse(status=MISSING, code="passwordNotFound")
        return PasswordResponse(status="success", data=self.passwords[password_id].model_copy())

    def edit_password(self, password_id: str, request: PasswordRequest) -> PasswordResponse:
        self._record("edit_password", request.to_wire())
        if password_id not in self.passwords:
            return PasswordResponse(status=MISSING, code="passwordNotFound")
        # Fields left out of the edit keep their stored value.
        changes = {
            name: value
            for name, value in request.model_dump(exclude_none=True).items()
            if name in PasswordData.model_fields
        }
        self.passwords[password_id] = self.passwords[password_id].model_copy(update=changes)
        return PasswordResponse(status="success", data=self.passwords[password_id].model_copy())

    def delete_password(self, password_id: str) -> OperationResponse:
        return self._delete("delete_password", self.passwords, password_id)

    def search_passwords(self, request: PasswordSearchRequest) -> PasswordListResponse:
        self._record("search_passwords", request.to_wire())
        hits = [
            p.model_copy(update={"crypted_password": None})
            for p in self.passwords.values()
            if request.query.lower() in p.name.lower()
            and (request.vault_id is None or p.vault_id == request.vault_id)
        ]
        return PasswordListResponse(status="success", data=hits)

    def _delete(self, method: str, store: dict[str, Any], entity_id: str) -> OperationResponse:
        self._record(method, entity_id)
        if self.refuse_delete or entity_id not in store:
            return OperationResponse(status=MISSING, code="accessDenied")
        del store[entity_id]
        return OperationResponse(status="success")


@pytest.fixture
def service() -> FakeService:
    """Fresh in-memory Passwork service."""
    return FakeService()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove Passwork env vars and reset the cached config."""
    for key in ["PASSWORK_HOST", "PASSWORK_API_KEY", "PASSWORK_TIMEOUT"]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()
