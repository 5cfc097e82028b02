# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
fairdice.commit_reveal
======================

Commit–reveal subpackage: the host commits to a secret value, the
counterpart contributes, then the host reveals key and value.

Submodules:
    - keys.py   : per-round 256-bit secret keys.
    - commit.py : HMAC commitments over a canonical integer encoding.
    - verify.py : audit helpers for revealed (key, value) pairs.
    - round.py  : the one-shot round state machine and its generator.

The common entry points are re-exported here for a stable import path.
"""

from __future__ import annotations

from fairdice.commit_reveal.commit import Commitment, build_commitment, build_commitment_hex
from fairdice.commit_reveal.keys import KeyGenerator, SecretKey
from fairdice.commit_reveal.round import (
    FairRound,
    FairValueGenerator,
    RoundResult,
    RoundState,
)
from fairdice.commit_reveal.verify import verify, verify_reveal

__all__ = [
    "Commitment",
    "build_commitment",
    "build_commitment_hex",
    "KeyGenerator",
    "SecretKey",
    "FairRound",
    "FairValueGenerator",
    "RoundResult",
    "RoundState",
    "verify",
    "verify_reveal",
]
