"""Date-window filtering for display. Values are never touched, only visibility."""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Sequence, Tuple, TypeVar

from goalpath.core.dates import add_years
from goalpath.core.errors import UnknownViewMode

DEFAULT_FORWARD_YEARS = 2

_FORWARD_TOKEN = re.compile(r"^next(\d+)years?$")

P = TypeVar("P")


class ViewMode(str, Enum):
    RECORDED = "recorded"
    FORWARD = "forward"
    FULL = "full"


def resolve_view_mode(token: str, default_years: int = DEFAULT_FORWARD_YEARS) -> Tuple[ViewMode, int]:
    """Map a UI token such as ``"next5years"`` to ``(ViewMode.FORWARD, 5)``."""
    normalized = token.strip().lower()
    match = _FORWARD_TOKEN.match(normalized)
    if match:
        return ViewMode.FORWARD, int(match.group(1))
    try:
        return ViewMode(normalized), default_years
    except ValueError:
        raise UnknownViewMode(token) from None


def _is_recorded(point: object) -> bool:
    value = getattr(point, "observed_value", None)
    return value is not None and value > 0


def filter_view_window(
    points: Sequence[P],
    mode: ViewMode,
    forward_years: int = DEFAULT_FORWARD_YEARS,
) -> List[P]:
    """
    Restrict ``points`` (anything with ``date`` and ``observed_value``):

      - recorded: only points with a positive observed value
      - forward: everything up to ``forward_years`` after the last recorded point
      - full: no filtering
    """
    if mode == ViewMode.RECORDED:
        return [point for point in points if _is_recorded(point)]

    if mode == ViewMode.FORWARD:
        recorded = [point for point in points if _is_recorded(point)]
        if not recorded:
            return list(points)
        last_recorded = max(point.date for point in recorded)
        cutoff = add_years(last_recorded, forward_years)
        return [point for point in points if point.date <= cutoff]

    return list(points)


__all__ = [
    "DEFAULT_FORWARD_YEARS",
    "ViewMode",
    "resolve_view_mode",
    "filter_view_window",
]
