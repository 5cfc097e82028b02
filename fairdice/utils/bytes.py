# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Hex and byte helpers for keys, commitments and transcript lines.

Published lines carry bare lowercase hex; parsers also take a ``0x`` prefix.
"""

from __future__ import annotations

import hmac
import re
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

_HEX_BODY_RE = re.compile(r"(?:0[xX])?(?P<body>[0-9a-fA-F]*)")


def from_hex(s: str) -> bytes:
    """
    Strict hex decode: optional ``0x``, even number of digits, nothing else.

    Raises ValueError on anything else (including embedded whitespace).
    """
    if not isinstance(s, str):
        raise TypeError(f"hex input must be str, not {type(s).__name__}")
    m = _HEX_BODY_RE.fullmatch(s)
    if m is None:
        raise ValueError(f"not a hex string: {s!r}")
    body = m.group("body")
    if len(body) % 2:
        raise ValueError(f"odd number of hex digits ({len(body)})")
    return bytes.fromhex(body)


def to_hex(b: BytesLike, *, prefix: str = "") -> str:
    return prefix + as_bytes(b).hex()


def as_bytes(x: BytesLike) -> bytes:
    if isinstance(x, (bytearray, memoryview)):
        return bytes(x)
    if not isinstance(x, bytes):
        raise TypeError(f"bytes-like value required, got {type(x).__name__}")
    return x


def ensure_len(b: BytesLike, expected: int, *, name: str = "value") -> bytes:
    """Bytes of exactly `expected` length, else ValueError naming `name`."""
    out = as_bytes(b)
    if len(out) != expected:
        raise ValueError(f"{name} must be {expected} bytes, got {len(out)}")
    return out


def consteq(a: BytesLike, b: BytesLike) -> bool:
    """Constant-time comparison."""
    return hmac.compare_digest(as_bytes(a), as_bytes(b))


__all__ = [
    "BytesLike",
    "from_hex",
    "to_hex",
    "as_bytes",
    "ensure_len",
    "consteq",
]
