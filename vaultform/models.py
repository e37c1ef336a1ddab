"""
Canonical resource models.

All models are plain dataclasses. ``None`` means "absent": the field was not
declared, or the remote service reported its empty sentinel ("" or 0). An
explicit empty value is never stored for an optional field.

Usage:
    from vaultform.models import Folder, model_from_mapping, detect_drift

    desired = model_from_mapping("folder", {"name": "project-x", "vault_id": "v1"})
    drift = detect_drift(recorded_state, live_state)
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from vaultform.errors import ValidationError

REDACTED = "***"


@dataclass
class Vault:
    """Top-level container for folders and password entries."""

    name: str
    id: str | None = None
    is_private: bool | None = None
    master_password: str | None = None
    access: str | None = None  # computed
    scope: str | None = None  # computed


@dataclass
class Folder:
    """Folder inside a vault, optionally nested under a parent folder."""

    name: str
    vault_id: str
    id: str | None = None
    parent_id: str | None = None


@dataclass
class Password:
    """A password entry owned by a vault and optionally a folder."""

    name: str
    vault_id: str
    id: str | None = None
    folder_id: str | None = None
    login: str | None = None
    password: str | None = None
    url: str | None = None
    description: str | None = None
    color: int | None = None
    tags: list[str] | None = None
    access: str | None = None  # computed
    access_code: int | None = None  # computed


Model = Vault | Folder | Password

MODEL_TYPES: dict[str, type] = {
    "vault": Vault,
    "folder": Folder,
    "password": Password,
}

SECRET_FIELDS: dict[type, tuple[str, ...]] = {
    Vault: ("master_password",),
    Folder: (),
    Password: ("password",),
}

# Fields only the remote service sets; ignored in desired input.
COMPUTED_FIELDS: dict[type, tuple[str, ...]] = {
    Vault: ("access", "scope"),
    Folder: (),
    Password: ("access", "access_code"),
}


def _field_types() -> dict[type, dict[str, Any]]:
    return {cls: {f.name: f for f in fields(cls)} for cls in MODEL_TYPES.values()}


def model_type(kind: str) -> type:
    """Resolve a kind name ("vault", "folder", "password") to its model class."""
    try:
        return MODEL_TYPES[kind.lower()]
    except KeyError:
        available = ", ".join(MODEL_TYPES)
        raise ValidationError(f"Unknown resource kind: {kind!r}. Available: {available}") from None


def model_from_mapping(kind: str, data: dict[str, Any], *, allow_computed: bool = False) -> Model:
    """Build a canonical model from a mapping such as a parsed YAML document.

    Unknown keys and missing required fields raise ValidationError. Computed
    fields are rejected unless ``allow_computed`` is set (recorded state).
    """
    cls = model_type(kind)
    if not isinstance(data, dict):
        raise ValidationError(f"{kind} definition must be a mapping, got {type(data).__name__}")

    known = _field_types()[cls]
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValidationError(f"Unknown {kind} attribute(s): {', '.join(unknown)}")
    if not allow_computed:
        computed = sorted(set(data) & set(COMPUTED_FIELDS[cls]))
        if computed:
            raise ValidationError(
                f"{kind} attribute(s) {', '.join(computed)} are computed by the service"
            )

    required = ("name",) if cls is Vault else ("name", "vault_id")
    for key in required:
        value = data.get(key)
        if not isinstance(value, str) or not value:
            raise ValidationError(f"{kind} attribute {key!r} is required")

    _check_types(kind, cls, data)
    return cls(**data)


def _check_types(kind: str, cls: type, data: dict[str, Any]) -> None:
    for key, value in data.items():
        if value is None:
            continue
        if key in ("is_private",):
            ok = isinstance(value, bool)
        elif key in ("color", "access_code"):
            ok = isinstance(value, int) and not isinstance(value, bool)
        elif key == "tags":
            ok = isinstance(value, list) and all(isinstance(t, str) for t in value)
        else:
            ok = isinstance(value, str)
        if not ok:
            raise ValidationError(f"{kind} attribute {key!r} has invalid value {value!r}")


def model_to_dict(model: Model, *, redact: bool = True) -> dict[str, Any]:
    """Render a model as a plain dict, masking secrets unless ``redact`` is False."""
    secret = SECRET_FIELDS[type(model)]
    result: dict[str, Any] = {}
    for f in fields(model):
        value = getattr(model, f.name)
        if redact and f.name in secret and value is not None:
            value = REDACTED
        elif isinstance(value, list):
            value = list(value)
        result[f.name] = value
    return result


def detect_drift(recorded: Model, live: Model) -> dict[str, tuple[Any, Any]]:
    """Return ``{field: (recorded, live)}`` for every field that differs.

    A secret recorded as ``REDACTED`` (state saved from masked output) is
    unknown, not changed, and is skipped.
    """
    if type(recorded) is not type(live):
        raise ValidationError(
            f"Cannot compare {type(recorded).__name__} with {type(live).__name__}"
        )
    secret = SECRET_FIELDS[type(recorded)]
    drift: dict[str, tuple[Any, Any]] = {}
    for f in fields(recorded):
        before = getattr(recorded, f.name)
        after = getattr(live, f.name)
        if f.name in secret and before == REDACTED:
            continue
        if before != after:
            drift[f.name] = (before, after)
    return drift
