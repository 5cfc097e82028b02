"""
Fair dice configuration.

Typed configuration for the exchange layer and the CLI:
- Retry budget for invalid counterpart input
- Optional contribution timeout (a late answer cancels the round)
- Probability table precision
- Log level used by the CLI

Provides:
- A dataclass with validation
- Loading from environment variables (prefix configurable)
- Loading from a JSON or YAML file
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

import yaml

from fairdice.constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_PROBABILITY_PRECISION

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class GameConfig:
    """
    Exchange:
      - max_attempts: invalid inputs tolerated per prompt before the round is
        abandoned
      - contribution_timeout_s: seconds a round may wait for its contribution;
        None disables the deadline

    Display / CLI:
      - probability_precision: decimals shown in the probability table
      - log_level: root logging level configured by the CLI
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    contribution_timeout_s: Optional[float] = None
    probability_precision: int = DEFAULT_PROBABILITY_PRECISION
    log_level: str = "WARNING"

    def validate(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.contribution_timeout_s is not None and self.contribution_timeout_s <= 0:
            raise ValueError("contribution_timeout_s must be > 0 when set")
        if not 0 <= self.probability_precision <= 12:
            raise ValueError("probability_precision must be in [0, 12]")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        self.log_level = self.log_level.upper()

    @property
    def log_level_no(self) -> int:
        return getattr(logging, self.log_level.upper())

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_mapping(d: Mapping[str, Any]) -> "GameConfig":
        """
        Build from a plain mapping (e.g., loaded YAML/JSON).

        Unknown keys are rejected so typos do not silently fall back to defaults.
        """
        base = GameConfig()
        unknown = set(d) - set(base.to_dict())
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(sorted(unknown))}")

        timeout = d.get("contribution_timeout_s", base.contribution_timeout_s)
        try:
            cfg = GameConfig(
                max_attempts=int(d.get("max_attempts", base.max_attempts)),
                contribution_timeout_s=None if timeout is None else float(timeout),
                probability_precision=int(d.get("probability_precision", base.probability_precision)),
                log_level=str(d.get("log_level", base.log_level)),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid config value: {e}") from e
        cfg.validate()
        return cfg

    @staticmethod
    def from_env(prefix: str = "FAIRDICE_") -> "GameConfig":
        """
        Load configuration from environment variables. All variables are optional.

        Supported keys:
          - FAIRDICE_MAX_ATTEMPTS=5
          - FAIRDICE_CONTRIBUTION_TIMEOUT_S=120
          - FAIRDICE_PROBABILITY_PRECISION=4
          - FAIRDICE_LOG_LEVEL=INFO
        """

        def _get(name: str, cast: Any, default: Any) -> Any:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None or raw == "":
                return default
            try:
                return cast(raw)
            except Exception as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        cfg = GameConfig(
            max_attempts=_get("MAX_ATTEMPTS", int, DEFAULT_MAX_ATTEMPTS),
            contribution_timeout_s=_get("CONTRIBUTION_TIMEOUT_S", float, None),
            probability_precision=_get("PROBABILITY_PRECISION", int, DEFAULT_PROBABILITY_PRECISION),
            log_level=_get("LOG_LEVEL", str, "WARNING"),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def from_file(path: str) -> "GameConfig":
        """
        Load configuration from a JSON or YAML file whose keys mirror the
        dataclass fields. Example (YAML):

            max_attempts: 3
            contribution_timeout_s: 60
            probability_precision: 3
            log_level: info
        """
        text = _read_text(path)
        data = _parse_json_or_yaml(text, path)
        if not isinstance(data, dict):
            raise ValueError(f"{path!r} must contain a mapping at the top level")
        return GameConfig.from_mapping(data)


# -------------------------
# Utilities
# -------------------------


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _parse_json_or_yaml(text: str, path_hint: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {path_hint!r} as JSON or YAML: {e}") from e


__all__ = ["GameConfig"]
