"""
vaultform CLI — drive the reconciliation engines by hand.

Usage:
    vaultform check                          # Log in with the configured key
    vaultform create folder -f folder.yaml   # Create from a desired-state file
    vaultform read vault <id>                # Print normalized remote state
    vaultform update password <id> -f pw.yaml
    vaultform delete folder <id>
    vaultform import vault <id>              # Adopt an existing entity
    vaultform drift folder -f state.json     # Compare recorded state (exit 1 on drift)
    vaultform lookup-password --vault-id <v> --name <n>
    vaultform version

Connection settings come from PASSWORK_HOST / PASSWORK_API_KEY /
PASSWORK_TIMEOUT unless overridden with --host / --api-key / --timeout.
State is printed as JSON on stdout; secrets are masked unless --show-secrets.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from vaultform.errors import ConfigError, NotFound, VaultformError
from vaultform.models import MODEL_TYPES, model_from_mapping, model_to_dict

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_NOT_FOUND = 2
EXIT_CONFIG = 3


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="vaultform",
        description="vaultform — declarative management of Passwork vaults, folders and passwords.",
    )
    parser.add_argument("--host", help="Passwork instance URL (default: $PASSWORK_HOST)")
    parser.add_argument("--api-key", help="Passwork API key (default: $PASSWORK_API_KEY)")
    parser.add_argument("--timeout", type=int, help="Request timeout in seconds (default: 30)")
    parser.add_argument("--show-secrets", action="store_true", help="Print secrets in clear text")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")
    kinds = sorted(MODEL_TYPES)

    subparsers.add_parser("check", help="Verify host and API key by logging in")

    create_parser = subparsers.add_parser("create", help="Create a resource")
    create_parser.add_argument("kind", choices=kinds)
    create_parser.add_argument("-f", "--file", required=True, help="YAML or JSON desired state")

    for name, help_text in (
        ("read", "Read a resource"),
        ("import", "Import an existing resource"),
        ("delete", "Delete a resource"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("kind", choices=kinds)
        p.add_argument("id")

    update_parser = subparsers.add_parser("update", help="Update a resource")
    update_parser.add_argument("kind", choices=kinds)
    update_parser.add_argument("id")
    update_parser.add_argument("-f", "--file", required=True, help="YAML or JSON desired state")
    update_parser.add_argument(
        "--state", help="Recorded state (JSON); rejects changes to immutable attributes"
    )

    drift_parser = subparsers.add_parser("drift", help="Compare recorded state with remote")
    drift_parser.add_argument("kind", choices=kinds)
    drift_parser.add_argument("-f", "--file", required=True, help="Recorded state (JSON or YAML)")

    lookup_parser = subparsers.add_parser("lookup-password", help="Find a password entry")
    lookup_parser.add_argument("--vault-id", required=True)
    group = lookup_parser.add_mutually_exclusive_group()
    group.add_argument("--id")
    group.add_argument("--name")

    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if args.command == "version":
        from vaultform import __version__

        print(f"vaultform {__version__}")
        return 0
    if args.command is None:
        parser.print_help()
        return 0

    try:
        return _dispatch(args)
    except NotFound as e:
        print(f"Not found: {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except VaultformError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


def _dispatch(args: argparse.Namespace) -> int:
    from vaultform.client import ClientError, PassworkClient
    from vaultform.config import get_config

    cfg = get_config().with_overrides(host=args.host, api_key=args.api_key, timeout=args.timeout)
    with PassworkClient.from_config(cfg) as client:
        try:
            client.login()
        except ClientError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_CONFIG

        if args.command == "check":
            print(f"Logged in to {cfg.api_url}")
            return 0
        if args.command == "lookup-password":
            return _cmd_lookup(client, args)
        return _cmd_lifecycle(client, args)


def _cmd_lifecycle(client: Any, args: argparse.Namespace) -> int:
    from vaultform.resources import ENGINES

    engine = ENGINES[args.kind](client)

    if args.command == "create":
        desired = model_from_mapping(args.kind, _load_document(args.file))
        _print_model(engine.create(desired), args)
    elif args.command == "read":
        _print_model(engine.read(args.id), args)
    elif args.command == "import":
        _print_model(engine.import_(args.id), args)
    elif args.command == "update":
        desired = model_from_mapping(args.kind, _load_document(args.file))
        current = None
        if args.state:
            current = model_from_mapping(args.kind, _load_document(args.state), allow_computed=True)
        _print_model(engine.update(args.id, desired, current=current), args)
    elif args.command == "delete":
        engine.delete(args.id)
        print(f"Deleted {args.kind} {args.id}")
    elif args.command == "drift":
        recorded = model_from_mapping(args.kind, _load_document(args.file), allow_computed=True)
        changes = engine.drift(recorded)
        secret_fields = {"master_password", "password"}
        report = {
            name: {"recorded": before, "live": after}
            if args.show_secrets or name not in secret_fields
            else {"recorded": "***", "live": "***"}
            for name, (before, after) in changes.items()
        }
        print(json.dumps({"drift": report}, indent=2))
        return EXIT_ERROR if changes else 0
    return 0


def _cmd_lookup(client: Any, args: argparse.Namespace) -> int:
    from vaultform.resources import PasswordLookup

    found = PasswordLookup(client).lookup(args.vault_id, id=args.id, name=args.name)
    _print_model(found, args)
    return 0


def _load_document(path: str) -> dict[str, Any]:
    """Load a YAML (or JSON, which is YAML) mapping from disk."""
    file_path = Path(path)
    if not file_path.exists():
        raise ConfigError(f"File not found: {file_path}")
    try:
        data = yaml.safe_load(file_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {file_path}: {e}") from e
    return data if data is not None else {}


def _print_model(model: Any, args: argparse.Namespace) -> None:
    print(json.dumps(model_to_dict(model, redact=not args.show_secrets), indent=2))


if __name__ == "__main__":
    sys.exit(main())
