"""Contract identifier generation."""

from __future__ import annotations

import base64
import secrets
from typing import Callable

__all__ = ["ID_BITS", "new_contract_id"]

ID_BITS = 64


def _system_random_bits(bits: int) -> int:
    return secrets.randbits(bits)


def new_contract_id(random_bits: Callable[[int], int] = _system_random_bits) -> str:
    """Return a URL-safe base64 rendering of a random 64-bit value.

    The 8 raw bytes are big-endian and the encoding keeps its padding, so every
    id is 12 characters long and ends with ``=``.

    With about a million contracts over the system's lifetime the birthday
    bound puts the chance of any collision near 2.7e-8. Collisions are
    therefore treated as a broken random source, not as something to retry.
    """

    value = random_bits(ID_BITS) & ((1 << ID_BITS) - 1)
    raw = value.to_bytes(ID_BITS // 8, "big")
    return base64.urlsafe_b64encode(raw).decode("ascii")
