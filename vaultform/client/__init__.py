"""Remote client contract and the httpx Passwork client."""

from vaultform.client.base import ClientError, RemoteClient, RemoteNotFound
from vaultform.client.http import PassworkClient

__all__ = ["ClientError", "PassworkClient", "RemoteClient", "RemoteNotFound"]
