# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Commitment construction for the fair-round commit–reveal.

Definition
----------
C = HMAC-SHA3-256( key, ascii(decimal(value)) )

- `key` is the round's 32-byte `SecretKey`, kept secret until reveal.
- `value` is the host's integer, encoded canonically as its base-10 string
  (``str(int)``): no padding, no ``+``, a leading ``-`` only for negatives.

The keyed construction means a commitment cannot be forged for another value
without the key, and publishing it does not expose the key.

This module provides `build_commitment(...)` returning a `Commitment`, and
`build_commitment_hex(...)` for the bare hex digest.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import Union

from fairdice.commit_reveal.keys import SecretKey
from fairdice.constants import COMMITMENT_BYTES, HASH_FN_COMMITMENT
from fairdice.utils.bytes import BytesLike, as_bytes, ensure_len, from_hex, to_hex

KeyLike = Union[SecretKey, BytesLike]


@dataclass(frozen=True, slots=True)
class Commitment:
    """A published 32-byte commitment digest."""

    digest: bytes

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "digest", ensure_len(as_bytes(self.digest), COMMITMENT_BYTES, name="commitment")
        )

    def hex(self) -> str:
        return to_hex(self.digest)

    @classmethod
    def from_hex(cls, s: str) -> "Commitment":
        return cls(from_hex(s))

    def __str__(self) -> str:
        return self.hex()


def canonical_value(value: int) -> bytes:
    """ASCII decimal encoding of an integer value."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError("committed value must be an int")
    return str(value).encode("ascii")


def _key_bytes(key: KeyLike) -> bytes:
    if isinstance(key, SecretKey):
        return key.material
    return SecretKey(as_bytes(key)).material


def build_commitment(key: KeyLike, value: int) -> Commitment:
    """
    Compute the commitment to `value` under `key`.

    Parameters
    ----------
    key : SecretKey | bytes
        The round secret (32 bytes).
    value : int
        The host value being committed to.

    Returns
    -------
    Commitment
        32-byte HMAC-SHA3-256 digest.
    """
    mac = hmac.new(_key_bytes(key), canonical_value(value), getattr(hashlib, HASH_FN_COMMITMENT))
    return Commitment(mac.digest())


def build_commitment_hex(key: KeyLike, value: int) -> str:
    """Hex-encoded convenience wrapper for `build_commitment`."""
    return build_commitment(key, value).hex()


__all__ = [
    "Commitment",
    "KeyLike",
    "canonical_value",
    "build_commitment",
    "build_commitment_hex",
]
