"""What-if contribution scenarios evaluated at the planned-until horizon."""

from __future__ import annotations

import datetime as dt
import logging
import math
from typing import List, Optional, Sequence, Tuple

from goalpath.core.annuity import required_monthly_contribution
from goalpath.core.dates import months_between, same_month
from goalpath.core.models import (
    EnrichedPoint,
    ProjectionConfig,
    ScenarioDefinition,
    ScenarioKind,
    ScenarioResult,
)
from goalpath.core.projection import find_pivot

logger = logging.getLogger(__name__)


def _delta(amount: int) -> ScenarioDefinition:
    sign = "+" if amount > 0 else ""
    if amount == 0:
        return ScenarioDefinition(
            id="monthly-planned",
            label="Planned monthly contribution",
            short_label="Plan",
            kind=ScenarioKind.MONTHLY_DELTA,
            delta=0,
        )
    direction = "plus" if amount > 0 else "minus"
    return ScenarioDefinition(
        id=f"monthly-{direction}-{abs(amount)}",
        label=f"{sign}{amount} €/month vs planned",
        short_label=f"{sign}{amount}",
        kind=ScenarioKind.MONTHLY_DELTA,
        delta=amount,
    )


def _lump(amount: int) -> ScenarioDefinition:
    return ScenarioDefinition(
        id=f"lump-{amount}",
        label=f"+{amount:,} € lump sum now".replace(",", " "),
        short_label=f"+{amount // 1000}k",
        kind=ScenarioKind.LUMP_SUM,
        amount=amount,
    )


def _loan(amount: int) -> ScenarioDefinition:
    return ScenarioDefinition(
        id=f"loan-{amount}",
        label=f"Loan {amount:,} € (invest next month, repay with planned)".replace(",", " "),
        short_label=f"Loan {amount // 1000}k",
        kind=ScenarioKind.LOAN_REPAY,
        amount=amount,
    )


def _pause(months: int) -> ScenarioDefinition:
    unit = "month" if months == 1 else "months"
    return ScenarioDefinition(
        id=f"pause-{months}",
        label=f"Pause contributions for {months} {unit}",
        short_label=f"Pause {months}m",
        kind=ScenarioKind.PAUSE,
        months=months,
    )


CONTRIBUTION_SCENARIOS: Tuple[ScenarioDefinition, ...] = (
    *(_delta(amount) for amount in (-500, -250, 0, 250, 500)),
    *(_lump(amount) for amount in (10000, 5000, 1000)),
    *(_loan(amount) for amount in (10000, 5000, 1000)),
    *(_pause(months) for months in (1, 3, 6)),
)


def _monthly_contribution(scenario: ScenarioDefinition, step: int, base: float) -> float:
    if scenario.kind == ScenarioKind.MONTHLY_DELTA:
        return max(base + scenario.delta, 0.0)
    if scenario.kind == ScenarioKind.PAUSE:
        return 0.0 if step <= scenario.months else base
    return base


def simulate_value_at_horizon(
    scenario: ScenarioDefinition,
    start_value: float,
    step_dates: Sequence[dt.date],
    config: ProjectionConfig,
) -> float:
    """
    Compound ``start_value`` month by month through ``step_dates`` with the
    scenario's cash flow.

    Loans: the proceeds are invested in month 1; from month 2 the planned
    contribution first pays down the outstanding debt.
    """
    horizon = config.planned_contribution_until
    rate = config.monthly_growth_rate
    value = start_value
    if scenario.kind == ScenarioKind.LUMP_SUM:
        value += scenario.amount
    debt_remaining = scenario.amount if scenario.kind == ScenarioKind.LOAN_REPAY else 0.0

    for step, step_date in enumerate(step_dates, start=1):
        applies_planned = horizon is not None and step_date <= horizon
        base = config.planned_monthly_contribution if applies_planned else 0.0

        if scenario.kind == ScenarioKind.LOAN_REPAY:
            contribution = base
            if step >= 2 and debt_remaining > 0:
                payment = min(base, debt_remaining)
                debt_remaining -= payment
                contribution = base - payment
            if step == 1:
                contribution += scenario.amount
        else:
            contribution = _monthly_contribution(scenario, step, base)

        value = value * (1 + rate) + contribution
    return value


def contribution_bounds(points: Sequence[EnrichedPoint]) -> Optional[Tuple[float, float]]:
    """[min, max] over every contribution figure in the series."""
    values = []
    for point in points:
        for value in (
            point.min_required_contribution,
            point.min_required_contribution_adjusted,
            point.planned_min_required_contribution,
        ):
            if value is not None and math.isfinite(value):
                values.append(value)
    if not values:
        return None
    return min(values), max(values)


def simulate_scenarios(
    points: Sequence[EnrichedPoint],
    config: ProjectionConfig,
    catalog: Sequence[ScenarioDefinition] = CONTRIBUTION_SCENARIOS,
    within_series_bounds: bool = True,
) -> List[ScenarioResult]:
    """
    Required monthly contribution at the planned-until date for each scenario.

    Nothing is returned when there is no horizon, the horizon month is missing
    from the series, or it lies before the last recorded month. With
    ``within_series_bounds`` results outside the series' contribution range
    are left out.
    """
    horizon = config.planned_contribution_until
    if horizon is None or not points:
        return []

    horizon_index = next(
        (index for index, point in enumerate(points) if same_month(point.date, horizon)), -1
    )
    pivot = find_pivot(points)
    if horizon_index < 0 or pivot < 0:
        logger.debug("no scenarios: horizon index %d, pivot %d", horizon_index, pivot)
        return []

    latest = points[pivot]
    if horizon < latest.date or horizon_index < pivot:
        logger.debug("no scenarios: horizon %s precedes last recorded month %s", horizon, latest.date)
        return []

    start_value = latest.adjusted_value if latest.adjusted_value is not None else latest.observed_value
    first_date = points[0].date
    periods = months_between(first_date, points[-1].date) + 1
    months_remaining = max(0, periods - months_between(first_date, horizon) - 1)
    step_dates = [point.date for point in points[pivot + 1 : horizon_index + 1]]
    bounds = contribution_bounds(points) if within_series_bounds else None

    results: List[ScenarioResult] = []
    for scenario in catalog:
        value = simulate_value_at_horizon(scenario, start_value, step_dates, config)
        required = required_monthly_contribution(
            value, config.goal_amount, config.annual_growth_rate, months_remaining
        )
        if not math.isfinite(required):
            continue
        if within_series_bounds and (bounds is None or not bounds[0] <= required <= bounds[1]):
            continue
        results.append(
            ScenarioResult(
                scenario_id=scenario.id,
                label=scenario.label,
                short_label=scenario.short_label,
                kind=scenario.kind,
                horizon_date=horizon,
                projected_value_at_horizon=value,
                required_monthly_contribution_at_horizon=required,
            )
        )
    return results


__all__ = [
    "CONTRIBUTION_SCENARIOS",
    "simulate_value_at_horizon",
    "contribution_bounds",
    "simulate_scenarios",
]
