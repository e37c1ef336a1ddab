"""Reconciliation engines and model converters, one per resource kind."""

from vaultform.resources.base import Converter, Operation, ResourceEngine
from vaultform.resources.folder import FolderConverter, FolderEngine
from vaultform.resources.password import PasswordConverter, PasswordEngine, PasswordLookup
from vaultform.resources.vault import VaultConverter, VaultEngine

ENGINES: dict[str, type[ResourceEngine]] = {
    "vault": VaultEngine,
    "folder": FolderEngine,
    "password": PasswordEngine,
}

__all__ = [
    "ENGINES",
    "Converter",
    "FolderConverter",
    "FolderEngine",
    "Operation",
    "PasswordConverter",
    "PasswordEngine",
    "PasswordLookup",
    "ResourceEngine",
    "VaultConverter",
    "VaultEngine",
]
