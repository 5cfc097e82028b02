"""
fairdice: provably fair non-transitive dice.

This package provides:
- a commit → contribute → reveal protocol in which a host and a counterpart
  jointly draw an unbiased integer in a bounded range,
- bias-free secure sampling and per-round secret keys,
- dice validation and pairwise win-probability tables,
- a line-oriented exchange layer and a small game driver / CLI on top.

Only light, stable exports are surfaced here to avoid import cycles.
"""

from __future__ import annotations

from .version import __version__

__all__ = ["__version__"]
