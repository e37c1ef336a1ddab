"""
Wire payloads for the Passwork v4 REST API.

Field names are snake_case in Python and camelCase on the wire. Requests are
serialized with ``exclude_none=True``: a ``None`` field is omitted from the
JSON body, which the service treats differently from an explicit "" or 0.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

SUCCESS = "success"


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ─── Requests ────────────────────────────────────────────────────────────


class VaultAddRequest(WireModel):
    name: str
    is_private: bool = True
    salt: str | None = None
    password_hash: str | None = None
    mp_crypted: str | None = None


class VaultEditRequest(WireModel):
    name: str


class FolderRequest(WireModel):
    name: str
    vault_id: str | None = None
    parent_id: str | None = None


class PasswordRequest(WireModel):
    name: str
    vault_id: str
    folder_id: str | None = None
    login: str | None = None
    crypted_password: str | None = None
    description: str | None = None
    url: str | None = None
    color: int | None = None
    tags: list[str] | None = None


class PasswordSearchRequest(WireModel):
    query: str
    vault_id: str | None = None


# ─── Responses ───────────────────────────────────────────────────────────


class VaultData(WireModel):
    id: str
    name: str = ""
    access: str = ""
    scope: str = ""
    visible: bool = False
    vault_password_crypted: str | None = None


class FolderData(WireModel):
    id: str
    name: str = ""
    vault_id: str = ""
    parent_id: str | None = None


class PasswordData(WireModel):
    id: str
    name: str = ""
    vault_id: str = ""
    folder_id: str | None = None
    login: str | None = None
    crypted_password: str | None = None
    description: str | None = None
    url: str | None = None
    color: int | None = None
    tags: list[str] | None = None
    access: str | None = None
    access_code: int | None = None


class Envelope(WireModel):
    """Every response carries a status; ``data`` is absent on failure."""

    status: str = ""
    code: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS


class OperationResponse(Envelope):
    """Add/edit/delete responses that only return the entity Id (or nothing)."""

    data: Any = None


class VaultResponse(Envelope):
    data: VaultData | None = None


class FolderResponse(Envelope):
    data: FolderData | None = None


class PasswordResponse(Envelope):
    data: PasswordData | None = None


class PasswordListResponse(Envelope):
    data: list[PasswordData] | None = None
