# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Verify that a revealed (key, value) pair matches a prior commitment.

Given a published commitment C and a reveal (key, value) we recompute

    C' = HMAC-SHA3-256(key, decimal(value))

and check C' == C with a constant-time comparison. Any party (the
counterpart, an auditor replaying a transcript) can run this.

This module exposes:
- `verify(key, value, commitment)` : plain boolean check.
- `verify_reveal(...)`             : raises BadReveal on mismatch by default.
- `normalize_commitment(...)`      : turn hex/bytes/Commitment into 32 bytes.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from fairdice.commit_reveal.commit import Commitment, KeyLike, build_commitment
from fairdice.constants import COMMITMENT_BYTES
from fairdice.errors import BadReveal
from fairdice.metrics import METRICS, Metrics
from fairdice.utils.bytes import BytesLike, as_bytes, consteq, from_hex, to_hex

logger = logging.getLogger(__name__)

CommitmentLike = Union[Commitment, BytesLike, str]


def normalize_commitment(commitment: CommitmentLike) -> bytes:
    """
    Normalize a commitment into 32 raw bytes.

    Accepts a `Commitment`, 32 raw bytes, or hex with/without ``0x``.
    """
    if isinstance(commitment, Commitment):
        return commitment.digest
    if isinstance(commitment, str):
        c = from_hex(commitment.strip())
    else:
        c = as_bytes(commitment)
    if len(c) != COMMITMENT_BYTES:
        raise ValueError(f"commitment must be exactly {COMMITMENT_BYTES} bytes")
    return c


def verify_reveal(
    commitment: CommitmentLike,
    *,
    key: KeyLike,
    value: int,
    raise_on_fail: bool = True,
    metrics: Optional[Metrics] = None,
) -> bool:
    """
    Verify a reveal against a prior commitment.

    Returns
    -------
    bool
        True on match; False only if ``raise_on_fail=False`` and mismatch.

    Raises
    ------
    BadReveal
        On mismatch when ``raise_on_fail=True``.
    TypeError / ValueError
        If inputs are malformed.
    """
    given = normalize_commitment(commitment)
    expected = build_commitment(key, value).digest
    ok = consteq(expected, given)
    (metrics or METRICS).record_verification(ok)
    if ok:
        return True

    logger.warning("reveal does not match commitment %s", to_hex(given))
    if raise_on_fail:
        raise BadReveal(expected_commitment_hex=to_hex(given), got_commitment_hex=to_hex(expected))
    return False


def verify(key: KeyLike, value: int, commitment: CommitmentLike) -> bool:
    """True iff `commitment` is the commitment to `value` under `key`."""
    return verify_reveal(commitment, key=key, value=value, raise_on_fail=False)


__all__ = [
    "CommitmentLike",
    "normalize_commitment",
    "verify_reveal",
    "verify",
]
