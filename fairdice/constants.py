"""
Fair dice constants.

This module centralizes:
- Die geometry and dice-set minimums
- Secret key size and the commitment hash
- Text protocol tokens and display defaults

Operational knobs (retry budget, timeouts, precision) live in
`fairdice.config.GameConfig`; code that needs stable compile-time defaults
imports them from here.
"""

from __future__ import annotations

# -----------------------------
# Dice
# -----------------------------
DIE_FACES: int = 6
MIN_DICE: int = 3

# -----------------------------
# Commit-reveal
# -----------------------------
# 256-bit per-round secret.
KEY_BYTES: int = 32
# HMAC digest used for commitments.
HASH_FN_COMMITMENT: str = "sha3_256"
COMMITMENT_BYTES: int = 32
# Number of recent key fingerprints a KeyGenerator remembers.
KEY_FINGERPRINT_WINDOW: int = 4096

# -----------------------------
# Text protocol
# -----------------------------
HELP_TOKENS: tuple[str, ...] = ("?", "h", "help")
EXIT_TOKENS: tuple[str, ...] = ("x", "exit", "quit")

DEFAULT_MAX_ATTEMPTS: int = 5
DEFAULT_PROBABILITY_PRECISION: int = 4
DIAGONAL_SENTINEL: str = "-"

USAGE_EXAMPLE: str = "fairdice play 2,2,4,4,9,9 1,1,6,6,8,8 3,3,5,5,7,7"

__all__ = [
    "DIE_FACES",
    "MIN_DICE",
    "KEY_BYTES",
    "HASH_FN_COMMITMENT",
    "COMMITMENT_BYTES",
    "KEY_FINGERPRINT_WINDOW",
    "HELP_TOKENS",
    "EXIT_TOKENS",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_PROBABILITY_PRECISION",
    "DIAGONAL_SENTINEL",
    "USAGE_EXAMPLE",
]
