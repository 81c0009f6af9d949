"""Helpers for the opaque identifiers used as user and task keys."""

from __future__ import annotations

from uuid import UUID, uuid4


def new_identifier() -> str:
    """Return a fresh identifier in canonical UUID text form."""

    return str(uuid4())


def is_valid_identifier(value: object) -> bool:
    """Return ``True`` when ``value`` is a UUID string in canonical lowercase form."""

    if not isinstance(value, str):
        return False
    try:
        return str(UUID(value)) == value
    except ValueError:
        return False


def normalize_identifier(value: object) -> str:
    """Return ``value`` as a canonical identifier or raise ``ValueError``."""

    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, str):
        try:
            return str(UUID(value.strip()))
        except ValueError:
            pass
    raise ValueError(f"Invalid identifier: {value!r}")


__all__ = ["new_identifier", "is_valid_identifier", "normalize_identifier"]
