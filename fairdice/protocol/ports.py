# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
I/O ports for the fair-round exchange.

The exchange never touches stdin/stdout directly; it talks to an injected
`IOPort`:

    send(line)        write one outbound line
    receive(prompt)   read one inbound line, None at end of input

Ports included
--------------
- ConsolePort  : text streams (the process stdin/stdout by default).
- ScriptedPort : canned inputs plus a record of everything sent; used for
                 headless runs and tests.
"""

from __future__ import annotations

import sys
from typing import Iterable, List, Optional, Protocol, TextIO

import typer


class IOPort(Protocol):
    """Line-oriented channel to the counterpart."""

    def send(self, line: str) -> None:  # pragma: no cover - protocol
        ...

    def receive(self, prompt: str) -> Optional[str]:  # pragma: no cover - protocol
        ...


class ConsolePort:
    """
    Port over text streams.

    Streams default to the *current* ``sys.stdin``/``sys.stdout`` at call
    time, so redirected or captured streams are honoured.
    """

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self._in = stdin
        self._out = stdout

    def send(self, line: str) -> None:
        typer.echo(line, file=self._out)

    def receive(self, prompt: str) -> Optional[str]:
        if prompt:
            typer.echo(prompt, file=self._out, nl=False)
        src = self._in if self._in is not None else sys.stdin
        raw = src.readline()
        if raw == "":
            return None
        return raw.rstrip("\r\n")


class ScriptedPort:
    """
    Port fed from a fixed list of inputs.

    Attributes:
        sent: Every line passed to `send`, in order.
        prompts: Every prompt passed to `receive`, in order.
    """

    def __init__(self, inputs: Iterable[str] = ()) -> None:
        self._inputs: List[str] = list(inputs)
        self.sent: List[str] = []
        self.prompts: List[str] = []

    def send(self, line: str) -> None:
        self.sent.append(line)

    def receive(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        if not self._inputs:
            return None
        return self._inputs.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._inputs)


__all__ = ["IOPort", "ConsolePort", "ScriptedPort"]
