"""
fairdice.protocol
-----------------

Text exchange around fair rounds: line formats and input signals
(`messages`), injected I/O ports (`ports`) and the bounded solicitation loop
(`exchange`).
"""

from __future__ import annotations

from fairdice.protocol.exchange import (
    Chosen,
    FairExchange,
    RoundAbandoned,
    RoundCompleted,
)
from fairdice.protocol.messages import (
    Continue,
    ExitRequested,
    HelpRequested,
    Retry,
    audit_transcript,
    classify_input,
    format_commitment_line,
    format_reveal_line,
    parse_commitment_line,
    parse_reveal_line,
)
from fairdice.protocol.ports import ConsolePort, IOPort, ScriptedPort

__all__ = [
    "Chosen",
    "FairExchange",
    "RoundAbandoned",
    "RoundCompleted",
    "Continue",
    "ExitRequested",
    "HelpRequested",
    "Retry",
    "audit_transcript",
    "classify_input",
    "format_commitment_line",
    "format_reveal_line",
    "parse_commitment_line",
    "parse_reveal_line",
    "ConsolePort",
    "IOPort",
    "ScriptedPort",
]
