# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Fair dice errors.

This module defines a small, typed hierarchy of exceptions raised by the
commit → contribute → reveal pipeline and by dice validation. Callers can
catch the base `FairDiceError` to handle everything raised by this package,
or catch the concrete subclasses for more granular control.

Severity by class:
  • MalformedDie / InsufficientDice: startup validation, fatal.
  • EntropyUnavailable:             secure source failed, fatal, never retried.
  • InvalidContribution:            recoverable, re-solicit the counterpart.
  • RoundAlreadyFinalized:          misuse of a one-shot round object.
  • RoundInProgress:                a second round opened on a busy generator.
  • BadReveal:                      an audited reveal does not match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class FairDiceError(Exception):
    """Base class for all fair dice errors."""
    pass


class DiceValidationError(FairDiceError):
    """Base class for startup dice validation failures."""
    pass


@dataclass(eq=False)
class MalformedDie(DiceValidationError):
    """
    Raised when a die specification is not exactly six integers.

    Attributes:
        text: The raw specification as supplied.
        reason: Short explanation ('face-count', 'not-an-integer', ...).
        index: 0-based position of the die in the supplied list, if known.
    """
    text: str
    reason: str
    index: Optional[int] = None

    def __str__(self) -> str:
        where = f"die #{self.index + 1}" if self.index is not None else "die"
        return f"MalformedDie: {where} {self.text!r} rejected ({self.reason}); expected 6 comma-separated integers"


@dataclass(eq=False)
class InsufficientDice(DiceValidationError):
    """Raised when fewer dice than the minimum are supplied."""
    count: int
    minimum: int

    def __str__(self) -> str:
        return f"InsufficientDice: got {self.count} dice, at least {self.minimum} are required"


@dataclass(eq=False)
class EntropyUnavailable(FairDiceError):
    """Raised when the secure entropy source cannot deliver bytes."""
    reason: str

    def __str__(self) -> str:
        return f"EntropyUnavailable: {self.reason}"


@dataclass(eq=False)
class InvalidContribution(FairDiceError):
    """
    Raised when a counterpart contribution is not an integer in [0, range_size).

    The round that rejected it is left untouched and keeps waiting.
    """
    value: Any
    range_size: int

    def __str__(self) -> str:
        return (
            f"InvalidContribution: {self.value!r} is not an integer "
            f"in 0..{self.range_size - 1}"
        )


@dataclass(eq=False)
class RoundAlreadyFinalized(FairDiceError):
    """Raised when a revealed or cancelled round is used again."""
    round_id: int
    state: str

    def __str__(self) -> str:
        return f"RoundAlreadyFinalized: round={self.round_id} is {self.state}"


@dataclass(eq=False)
class RoundInProgress(FairDiceError):
    """Raised when a generator is asked for a round while another one is pending."""
    round_id: int

    def __str__(self) -> str:
        return f"RoundInProgress: round={self.round_id} is still awaiting its contribution"


@dataclass(eq=False)
class BadReveal(FairDiceError):
    """
    Raised when a revealed (key, value) pair does not match its commitment.

    Attributes:
        expected_commitment_hex: Commitment that was published.
        got_commitment_hex: Commitment recomputed from the reveal.
    """
    expected_commitment_hex: str
    got_commitment_hex: str

    def __str__(self) -> str:
        return (
            f"BadReveal: expected={self.expected_commitment_hex} "
            f"got={self.got_commitment_hex}"
        )


__all__ = [
    "FairDiceError",
    "DiceValidationError",
    "MalformedDie",
    "InsufficientDice",
    "EntropyUnavailable",
    "InvalidContribution",
    "RoundAlreadyFinalized",
    "RoundInProgress",
    "BadReveal",
]
