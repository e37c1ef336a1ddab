"""
Secret encoding for the Passwork wire format.

Secrets travel as standard base64 text. Decoding is strict: anything that is
not valid base64 of UTF-8 text raises ``DecodeError`` and the caller must abort
the current operation.

Usage:
    from vaultform.codec import encode, decode, generate_random

    wire = encode("hunter2")        # "aHVudGVyMg=="
    decode(wire)                    # "hunter2"
    generate_random(12)             # e.g. "q3ZbT0aLx9Vm"
"""

from __future__ import annotations

import base64
import binascii
import secrets
import string

from vaultform.errors import DecodeError

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits


def encode(plaintext: str) -> str:
    """Encode plaintext into its base64 wire representation."""
    return base64.b64encode(plaintext.encode("utf-8")).decode("ascii")


def decode(wire_value: str) -> str:
    """Decode a base64 wire value back to plaintext. Raises DecodeError."""
    try:
        raw = base64.b64decode(wire_value, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"secret payload is not valid base64 text: {e}") from e


def generate_random(length: int) -> str:
    """Return ``length`` characters drawn uniformly from [a-zA-Z0-9].

    Uses the OS CSPRNG; a failure to draw any character fails the whole call.
    """
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    return "".join(secrets.choice(ALPHABET) for _ in range(length))
