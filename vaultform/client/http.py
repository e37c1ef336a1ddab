"""
Passwork v4 REST client over httpx.

Synchronous and blocking: every call is one HTTP request (two when the session
token expired and is refreshed once). Timeouts are enforced by httpx and
surface as ``ClientError`` like any other transport failure.

Usage:
    from vaultform.client import PassworkClient

    with PassworkClient("https://passwork.example.com/api/v4", api_key) as client:
        client.login()
        vault = client.get_vault("63f1...")
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from vaultform.client.base import ClientError, RemoteNotFound
from vaultform.client.schemas import (
    Envelope,
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
from vaultform.config import Config

logger = logging.getLogger(__name__)

AUTH_HEADER = "Passwork-Auth"

E = TypeVar("E", bound=Envelope)


class PassworkClient:
    """Client for the Passwork vault, folder and password endpoints."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._token: str | None = None
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_config(cls, config: Config, transport: httpx.BaseTransport | None = None) -> PassworkClient:
        config.require_valid()
        return cls(config.api_url, config.api_key, timeout=config.timeout, transport=transport)

    def __enter__(self) -> PassworkClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ─── Session ─────────────────────────────────────────────────────────

    def login(self) -> None:
        """Exchange the API key for a session token."""
        try:
            resp = self._client.post(f"/auth/login/{self._api_key}")
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            raise ClientError(
                "Passwork API login failed. Check the API key and host.",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ClientError(f"Passwork API login failed: {e}") from e

        token = None
        if isinstance(body, dict) and body.get("status") == "success":
            data = body.get("data")
            token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise ClientError("Passwork API login failed: no session token in response")
        self._token = token
        logger.debug("Logged in to Passwork at %s", self.base_url)

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        if self._token is None:
            self.login()

        resp = self._send(method, path, payload)
        if resp.status_code == 401:
            logger.debug("Session token rejected on %s %s, logging in again", method, path)
            self.login()
            resp = self._send(method, path, payload)

        if resp.status_code == 404:
            raise RemoteNotFound(f"{method} {path}: not found", status_code=404)

        body = _json_body(resp)
        # The API reports entity-level failures (e.g. access denied, unknown Id)
        # as a 4xx with a status envelope; hand those to the caller.
        if resp.is_success or (400 <= resp.status_code < 500 and "status" in body):
            return body
        raise ClientError(
            f"{method} {path}: HTTP {resp.status_code}: {resp.text[:200]}",
            status_code=resp.status_code,
        )

    def _send(self, method: str, path: str, payload: dict[str, Any] | None) -> httpx.Response:
        headers = {AUTH_HEADER: self._token or ""}
        try:
            return self._client.request(method, path, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ClientError(f"{method} {path}: {e}") from e

    def _call(
        self,
        response_type: type[E],
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> E:
        body = self._request(method, path, payload)
        try:
            return response_type.model_validate(body)
        except PydanticValidationError as e:
            raise ClientError(f"{method} {path}: unexpected response shape: {e}") from e

    # ─── Vaults ──────────────────────────────────────────────────────────

    def add_vault(self, request: VaultAddRequest) -> OperationResponse:
        return self._call(OperationResponse, "POST", "/vaults", request.to_wire())

    def get_vault(self, vault_id: str) -> VaultResponse:
        return self._call(VaultResponse, "GET", f"/vaults/{vault_id}")

    def edit_vault(self, vault_id: str, request: VaultEditRequest) -> OperationResponse:
        return self._call(OperationResponse, "PUT", f"/vaults/{vault_id}", request.to_wire())

    def delete_vault(self, vault_id: str) -> OperationResponse:
        return self._call(OperationResponse, "DELETE", f"/vaults/{vault_id}")

    # ─── Folders ─────────────────────────────────────────────────────────

    def add_folder(self, request: FolderRequest) -> FolderResponse:
        return self._call(FolderResponse, "POST", "/folders", request.to_wire())

    def get_folder(self, folder_id: str) -> FolderResponse:
        return self._call(FolderResponse, "GET", f"/folders/{folder_id}")

    def edit_folder(self, folder_id: str, request: FolderRequest) -> FolderResponse:
        return self._call(FolderResponse, "PUT", f"/folders/{folder_id}", request.to_wire())

    def delete_folder(self, folder_id: str) -> OperationResponse:
        return self._call(OperationResponse, "DELETE", f"/folders/{folder_id}")

    # ─── Passwords ───────────────────────────────────────────────────────

    def add_password(self, request: PasswordRequest) -> PasswordResponse:
        return self._call(PasswordResponse, "POST", "/passwords", request.to_wire())

    def get_password(self, password_id: str) -> PasswordResponse:
        return self._call(PasswordResponse, "GET", f"/passwords/{password_id}")

    def edit_password(self, password_id: str, request: PasswordRequest) -> PasswordResponse:
        return self._call(PasswordResponse, "PUT", f"/passwords/{password_id}", request.to_wire())

    def delete_password(self, password_id: str) -> OperationResponse:
        return self._call(OperationResponse, "DELETE", f"/passwords/{password_id}")

    def search_passwords(self, request: PasswordSearchRequest) -> PasswordListResponse:
        return self._call(PasswordListResponse, "POST", "/passwords/search", request.to_wire())


def _json_body(resp: httpx.Response) -> dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
