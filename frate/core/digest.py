"""SHA-256 helpers shared by the installer and the lockfile."""

from __future__ import annotations

import hashlib

__all__ = ["normalize_hash", "sha256_hex"]

_ALGORITHM_PREFIX = "sha256:"


def normalize_hash(value: str) -> str:
    """Strip the optional ``sha256:`` tag so hashes compare as plain hex."""
    value = value.strip()
    if value.lower().startswith(_ALGORITHM_PREFIX):
        value = value[len(_ALGORITHM_PREFIX) :]
    return value.lower()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
