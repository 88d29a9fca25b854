from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import accumulate
from typing import List, Optional, Sequence, Tuple

from goalpath.core.annuity import (
    annuity_factor,
    future_value_factor,
    required_monthly_contribution,
    required_payment,
)
from goalpath.core.dates import months_between
from goalpath.core.models import (
    SCENARIO_RATE_OFFSET,
    EnrichedPoint,
    Observation,
    ProjectionConfig,
)

logger = logging.getLogger(__name__)


# -----------------------------
# Forward-chained line state
# -----------------------------


@dataclass(frozen=True)
class LineRates:
    """Monthly rates of the lines chained forward from the pivot."""

    base: float
    minus_one: float
    plus_one: float
    trend: Optional[float] = None

    @classmethod
    def from_annual(cls, annual_rate: float, trend_annual_rate: Optional[float] = None) -> "LineRates":
        return cls(
            base=annual_rate / 12,
            minus_one=(annual_rate - SCENARIO_RATE_OFFSET) / 12,
            plus_one=(annual_rate + SCENARIO_RATE_OFFSET) / 12,
            trend=trend_annual_rate / 12 if trend_annual_rate is not None else None,
        )


@dataclass(frozen=True)
class LineState:
    """Previous value of every forward line; replaced, never mutated."""

    base: float
    minus_one: float
    plus_one: float
    trend: Optional[float] = None

    @classmethod
    def seeded(cls, value: float, rates: LineRates) -> "LineState":
        return cls(
            base=value,
            minus_one=value,
            plus_one=value,
            trend=value if rates.trend is not None else None,
        )

    def step(self, rates: LineRates, contribution: float) -> "LineState":
        return LineState(
            base=self.base * (1 + rates.base) + contribution,
            minus_one=self.minus_one * (1 + rates.minus_one) + contribution,
            plus_one=self.plus_one * (1 + rates.plus_one) + contribution,
            trend=(
                self.trend * (1 + rates.trend) + contribution
                if self.trend is not None and rates.trend is not None
                else None
            ),
        )


# -----------------------------
# Small helpers
# -----------------------------


def sort_by_date(observations: Sequence[Observation]) -> List[Observation]:
    return sorted(observations, key=lambda item: item.date)


def find_pivot(points: Sequence[object]) -> int:
    """Index of the last point carrying a positive recorded value, or -1."""
    for index in range(len(points) - 1, -1, -1):
        if getattr(points[index], "is_recorded", False):
            return index
    return -1


def effective_value(observation: Observation) -> Optional[float]:
    """Trend-adjusted value when a ratio is known, otherwise the raw value."""
    adjusted = observation.adjusted_value
    return adjusted if adjusted is not None else observation.observed_value


def total_periods(observations: Sequence[Observation]) -> int:
    """Months from the first to the last date of the series, both inclusive."""
    if not observations:
        return 0
    return months_between(observations[0].date, observations[-1].date) + 1


def baseline_contribution(first_value: float, config: ProjectionConfig, periods: int) -> float:
    """Fixed monthly payment that takes ``first_value`` to the goal over the series."""
    rate = config.monthly_growth_rate
    remaining = config.goal_amount - first_value * future_value_factor(rate, max(periods - 1, 0))
    return required_payment(remaining, rate, periods - 1)


def _floor(value: float) -> float:
    return max(0.0, value)


def _floor_optional(value: Optional[float]) -> Optional[float]:
    return None if value is None else max(0.0, value)


# -----------------------------
# Phase 1: historical recomputation (indices <= pivot)
# -----------------------------


def historical_contributions(
    observations: Sequence[Observation],
    pivot: int,
    config: ProjectionConfig,
    use_adjusted: bool = False,
) -> List[float]:
    """
    For every point up to the pivot: the constant monthly payment that would
    still reach the goal by the last date, starting from that month's value.
    Points without a recorded value count as an empty portfolio.
    """
    if pivot < 0:
        return []
    first_date = observations[0].date
    periods = total_periods(observations)

    out: List[float] = []
    for observation in observations[: pivot + 1]:
        value = effective_value(observation) if use_adjusted else observation.observed_value
        months_remaining = periods - months_between(first_date, observation.date) - 1
        required = required_monthly_contribution(
            value or 0.0,
            config.goal_amount,
            config.annual_growth_rate,
            months_remaining,
        )
        out.append(_floor(required))
    return out


# -----------------------------
# Phase 2: forward chaining (indices >= pivot)
# -----------------------------


def forward_lines(
    observations: Sequence[Observation],
    pivot: int,
    rates: LineRates,
    contribution: float,
) -> List[Optional[LineState]]:
    """
    Chain the scenario lines from the pivot to the end of the series.

    Seeded with the pivot's (trend-adjusted if known) value; any recorded
    value met on the way resets all lines to it.
    """
    if pivot < 0:
        return [None] * len(observations)

    def advance(state: LineState, observation: Observation) -> LineState:
        if observation.is_recorded:
            return LineState.seeded(effective_value(observation), rates)
        return state.step(rates, contribution)

    seed = LineState.seeded(effective_value(observations[pivot]), rates)
    chained = accumulate(observations[pivot + 1 :], advance, initial=seed)
    return [None] * pivot + list(chained)


# -----------------------------
# Planned contribution path
# -----------------------------


def planned_path(
    observations: Sequence[Observation],
    config: ProjectionConfig,
) -> List[Optional[Tuple[float, float]]]:
    """
    (value, minimum required contribution) along the planned trajectory.

    Starts at the first recorded month. While the date is on or before
    ``planned_contribution_until`` the planned monthly amount is paid; after
    that the path pays its own current minimum required contribution.
    """
    start = next((index for index, item in enumerate(observations) if item.is_recorded), -1)
    if start < 0:
        return [None] * len(observations)

    first_date = observations[0].date
    periods = total_periods(observations)
    rate = config.monthly_growth_rate
    until = config.planned_contribution_until

    def required_at(value: float, observation: Observation) -> float:
        months_remaining = periods - months_between(first_date, observation.date) - 1
        return _floor(
            required_monthly_contribution(
                value, config.goal_amount, config.annual_growth_rate, months_remaining
            )
        )

    def advance(state: Tuple[float, float], observation: Observation) -> Tuple[float, float]:
        value, required = state
        if until is not None and observation.date <= until:
            contribution = config.planned_monthly_contribution
        else:
            contribution = required
        value = value * (1 + rate) + contribution
        return value, required_at(value, observation)

    start_value = effective_value(observations[start])
    seed = (start_value, required_at(start_value, observations[start]))
    path = accumulate(observations[start + 1 :], advance, initial=seed)
    return [None] * start + list(path)


# -----------------------------
# Public entry point
# -----------------------------


def project_targets(
    observations: Sequence[Observation],
    config: ProjectionConfig,
    trend_growth_rate: Optional[float] = None,
) -> List[EnrichedPoint]:
    """
    Build the enriched projection series, one EnrichedPoint per observation.

    Steps:
      1) fixed-contribution target line from the first recorded value
      2) historical minimum required contribution up to the pivot, reused after it
      3) base / -1pp / +1pp / external-trend lines chained forward from the pivot
      4) trend-adjusted variant of step 2 when adjustment ratios are present
      5) planned-contribution path with hand-off to the minimum contribution

    Returns [] when no observation carries a positive value.
    """
    ordered = sort_by_date(observations)
    first_recorded = next((item for item in ordered if item.is_recorded), None)
    if first_recorded is None:
        logger.debug("no recorded value among %d observations; nothing to project", len(ordered))
        return []

    first_value = float(first_recorded.observed_value)
    first_date = ordered[0].date
    periods = total_periods(ordered)
    rate = config.monthly_growth_rate
    fixed_contribution = baseline_contribution(first_value, config, periods)

    pivot = find_pivot(ordered)
    history = historical_contributions(ordered, pivot, config)
    if any(item.trend_adjustment_ratio is not None for item in ordered):
        history_adjusted = historical_contributions(ordered, pivot, config, use_adjusted=True)
    else:
        history_adjusted = history

    # the lines pay the contribution that matches their seed value
    if ordered[pivot].adjusted_value is not None:
        line_contribution = history_adjusted[pivot]
    else:
        line_contribution = history[pivot]

    rates = LineRates.from_annual(config.annual_growth_rate, trend_growth_rate)
    lines = forward_lines(ordered, pivot, rates, line_contribution)
    planned = planned_path(ordered, config)

    points: List[EnrichedPoint] = []
    for index, observation in enumerate(ordered):
        months_from_start = months_between(first_date, observation.date)
        target = first_value * future_value_factor(rate, months_from_start) + (
            fixed_contribution * annuity_factor(rate, months_from_start)
        )
        historical_index = min(index, pivot)
        line = lines[index]
        plan = planned[index]

        points.append(
            EnrichedPoint(
                date=observation.date,
                observed_value=observation.observed_value,
                adjusted_value=_floor_optional(observation.adjusted_value),
                target_with_fixed_contribution=_floor(target),
                min_required_contribution=history[historical_index],
                min_required_contribution_adjusted=history_adjusted[historical_index],
                target_with_minimum_contribution=_floor(line.base) if line else None,
                line_minus_one_percent=_floor(line.minus_one) if line else None,
                line_plus_one_percent=_floor(line.plus_one) if line else None,
                line_trend_growth=_floor_optional(line.trend) if line else None,
                planned_value=_floor(plan[0]) if plan else None,
                planned_min_required_contribution=plan[1] if plan else None,
            )
        )

    logger.debug(
        "projected %d points (pivot=%d, fixed contribution=%.2f)",
        len(points),
        pivot,
        fixed_contribution,
    )
    return points


__all__ = [
    "LineRates",
    "LineState",
    "sort_by_date",
    "find_pivot",
    "effective_value",
    "total_periods",
    "baseline_contribution",
    "historical_contributions",
    "forward_lines",
    "planned_path",
    "project_targets",
]
