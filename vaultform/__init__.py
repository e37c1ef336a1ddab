"""
vaultform — declarative reconciliation of Passwork vaults, folders and passwords.

Usage:
    from vaultform.client import PassworkClient
    from vaultform.config import get_config
    from vaultform.resources import FolderEngine
    from vaultform.models import Folder

    with PassworkClient.from_config(get_config()) as client:
        client.login()
        folder = FolderEngine(client).create(Folder(name="project-x", vault_id="v1"))
"""

__version__ = "0.3.0"
