"""Error kinds raised by the calculation core."""

from __future__ import annotations

from typing import Any


class GoalpathError(ValueError):
    """Base class for every failure the core signals to a caller."""


class NumericParseError(GoalpathError):
    def __init__(self, raw: Any):
        super().__init__(f"cannot parse {raw!r} as a number")
        self.raw = raw


class UnparseableConfigValue(GoalpathError):
    """A configuration key holds text that is not a finite number or date."""

    def __init__(self, key: str, raw: Any):
        super().__init__(f"unparseable configuration value for {key!r}: {raw!r}")
        self.key = key
        self.raw = raw


class UnknownViewMode(GoalpathError):
    def __init__(self, token: str):
        super().__init__(f"unknown view mode {token!r} (expected recorded, nextNyears or full)")
        self.token = token
