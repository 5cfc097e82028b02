# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Line formats of the fair-round text exchange.

Outbound, one line each:

    commitment=<hex>; range=0..<range-1>; purpose=<label>
    key=<hex>; hostValue=<int>; result=<int>

Inbound lines are classified into signals:

    Continue(value)   an integer was entered
    Retry(reason)     unusable input; ask again
    HelpRequested()   one of HELP_TOKENS
    ExitRequested()   one of EXIT_TOKENS

Both outbound lines parse back into notices so an auditor holding a
transcript can recheck the round with `audit_transcript`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from fairdice.commit_reveal.commit import Commitment
from fairdice.commit_reveal.keys import SecretKey
from fairdice.commit_reveal.round import RoundResult
from fairdice.commit_reveal.verify import verify
from fairdice.constants import EXIT_TOKENS, HELP_TOKENS

_COMMIT_LINE_RE = re.compile(
    r"commitment=(?P<commitment>[0-9a-fA-F]+); range=0\.\.(?P<hi>[0-9]+); purpose=(?P<purpose>[^;\r\n]*)"
)
_REVEAL_LINE_RE = re.compile(
    r"key=(?P<key>[0-9a-fA-F]+); hostValue=(?P<host>-?[0-9]+); result=(?P<result>-?[0-9]+)"
)
_INT_RE = re.compile(r"[+-]?[0-9]+")

# Shown when the counterpart asks for help during any fair round.
ROUND_HELP = (
    "How it works: before every random step I publish a commitment to my secret number.",
    "You then add your own number; the result is (mine + yours) mod range.",
    "After your answer I reveal my number and the key so you can check the commitment.",
    "Enter ? for help, x to exit.",
)


# ---- Inbound signals ----------------------------------------------------------


@dataclass(frozen=True)
class Continue:
    value: int


@dataclass(frozen=True)
class Retry:
    reason: str


@dataclass(frozen=True)
class HelpRequested:
    pass


@dataclass(frozen=True)
class ExitRequested:
    pass


Signal = Union[Continue, Retry, HelpRequested, ExitRequested]


def classify_input(raw: str) -> Signal:
    """Turn one line typed by the counterpart into a signal."""
    text = raw.strip()
    token = text.lower()
    if token in HELP_TOKENS:
        return HelpRequested()
    if token in EXIT_TOKENS:
        return ExitRequested()
    if not text:
        return Retry("empty input")
    if not _INT_RE.fullmatch(text):
        return Retry(f"{text!r} is not a number")
    try:
        return Continue(int(text))
    except ValueError:
        # past the interpreter's int-string digit limit
        return Retry(f"number too long ({len(text)} characters)")


# ---- Outbound lines -----------------------------------------------------------


@dataclass(frozen=True)
class CommitmentNotice:
    commitment: Commitment
    range_size: int
    purpose: str


@dataclass(frozen=True)
class RevealNotice:
    key: SecretKey
    host_value: int
    result: int


def _check_label(purpose: str) -> str:
    if any(c in purpose for c in ";\r\n"):
        raise ValueError("purpose label must not contain ';' or line breaks")
    return purpose


def format_commitment_line(commitment: Commitment, range_size: int, purpose: str) -> str:
    return f"commitment={commitment.hex()}; range=0..{range_size - 1}; purpose={_check_label(purpose)}"


def format_reveal_line(result: RoundResult) -> str:
    return f"key={result.key.hex()}; hostValue={result.host_value}; result={result.combined}"


def parse_commitment_line(line: str) -> CommitmentNotice:
    m = _COMMIT_LINE_RE.fullmatch(line.strip())
    if not m:
        raise ValueError(f"not a commitment line: {line!r}")
    return CommitmentNotice(
        commitment=Commitment.from_hex(m.group("commitment")),
        range_size=int(m.group("hi")) + 1,
        purpose=m.group("purpose"),
    )


def parse_reveal_line(line: str) -> RevealNotice:
    m = _REVEAL_LINE_RE.fullmatch(line.strip())
    if not m:
        raise ValueError(f"not a reveal line: {line!r}")
    return RevealNotice(
        key=SecretKey.from_hex(m.group("key")),
        host_value=int(m.group("host")),
        result=int(m.group("result")),
    )


def audit_transcript(
    commitment_line: str,
    reveal_line: str,
    counterpart_value: Optional[int] = None,
) -> bool:
    """
    Recheck a round from its two published lines.

    The revealed key and host value must reproduce the commitment and the host
    value must lie in the announced range. When the counterpart's own
    contribution is supplied, the announced result is recomputed as well.
    """
    notice = parse_commitment_line(commitment_line)
    reveal = parse_reveal_line(reveal_line)
    if not 0 <= reveal.host_value < notice.range_size:
        return False
    if not verify(reveal.key, reveal.host_value, notice.commitment):
        return False
    if counterpart_value is not None:
        expected = (reveal.host_value + counterpart_value) % notice.range_size
        return reveal.result == expected
    return 0 <= reveal.result < notice.range_size


__all__ = [
    "ROUND_HELP",
    "Continue",
    "Retry",
    "HelpRequested",
    "ExitRequested",
    "Signal",
    "classify_input",
    "CommitmentNotice",
    "RevealNotice",
    "format_commitment_line",
    "format_reveal_line",
    "parse_commitment_line",
    "parse_reveal_line",
    "audit_transcript",
]
