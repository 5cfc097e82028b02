# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Dice and dice sets.

A `Die` is exactly six signed integer faces (duplicates allowed); a `DiceSet`
is an ordered, immutable collection of at least three dice whose 0-based
index is the die's identity for selection and for the probability table.

Specifications arrive as text, one die per string, faces separated by commas:

    parse_die("2,2,4,4,9,9")
    parse_dice_set(["2,2,4,4,9,9", "1,1,6,6,8,8", "3,3,5,5,7,7"])

Whitespace around a face is tolerated; anything else that is not a plain
base-10 integer (empty faces, ``1_000``, ``0x10``, ``4.0``) is rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from fairdice.constants import DIE_FACES, MIN_DICE
from fairdice.errors import InsufficientDice, MalformedDie

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True, slots=True)
class Die:
    faces: Tuple[int, ...]

    def __post_init__(self) -> None:
        faces = tuple(self.faces)
        if len(faces) != DIE_FACES:
            raise ValueError(f"a die has exactly {DIE_FACES} faces, got {len(faces)}")
        for f in faces:
            if not isinstance(f, int) or isinstance(f, bool):
                raise TypeError("die faces must be ints")
        object.__setattr__(self, "faces", faces)

    def __len__(self) -> int:
        return len(self.faces)

    def __getitem__(self, i: int) -> int:
        return self.faces[i]

    def __iter__(self) -> Iterator[int]:
        return iter(self.faces)

    def __str__(self) -> str:
        return ",".join(str(f) for f in self.faces)


@dataclass(frozen=True, slots=True)
class DiceSet:
    dice: Tuple[Die, ...]

    def __post_init__(self) -> None:
        dice = tuple(self.dice)
        if len(dice) < MIN_DICE:
            raise InsufficientDice(count=len(dice), minimum=MIN_DICE)
        object.__setattr__(self, "dice", dice)

    def __len__(self) -> int:
        return len(self.dice)

    def __getitem__(self, i: int) -> Die:
        return self.dice[i]

    def __iter__(self) -> Iterator[Die]:
        return iter(self.dice)

    def indices(self) -> range:
        return range(len(self.dice))


def parse_die(text: str, index: Optional[int] = None) -> Die:
    """
    Parse one die specification.

    Raises:
        MalformedDie: unless `text` holds exactly six comma-separated integers.
    """
    if not isinstance(text, str):
        raise MalformedDie(text=repr(text), reason="not-a-string", index=index)
    tokens = [t.strip() for t in text.split(",")]
    if len(tokens) != DIE_FACES:
        raise MalformedDie(text=text, reason=f"{len(tokens)} faces", index=index)
    faces = []
    for t in tokens:
        if not _INT_RE.fullmatch(t):
            raise MalformedDie(text=text, reason=f"face {t!r} is not an integer", index=index)
        try:
            faces.append(int(t))
        except ValueError:
            raise MalformedDie(
                text=_clip(text), reason=f"face of {len(t)} characters is too long", index=index
            ) from None
    return Die(tuple(faces))


def _clip(text: str, limit: int = 80) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def parse_dice_set(texts: Iterable[str]) -> DiceSet:
    """
    Parse a list of die specifications.

    The count is checked before any die is parsed, so a short list always
    reports `InsufficientDice`.
    """
    items: Sequence[str] = list(texts)
    if len(items) < MIN_DICE:
        raise InsufficientDice(count=len(items), minimum=MIN_DICE)
    return DiceSet(tuple(parse_die(t, index=i) for i, t in enumerate(items)))


__all__ = ["Die", "DiceSet", "parse_die", "parse_dice_set"]
