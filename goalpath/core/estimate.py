from __future__ import annotations

import datetime as dt
import math
from typing import Optional, Sequence

from goalpath.core.annuity import required_monthly_contribution
from goalpath.core.dates import days_between, months_between
from goalpath.core.models import (
    ContributionProgress,
    CurrentEstimate,
    EnrichedPoint,
    MiniReward,
    ProjectionConfig,
)

DAYS_PER_YEAR = 365
# contributions are assumed to arrive spread evenly over a month of this length
DAYS_PER_MONTH = 30


def estimate_current_value(
    points: Sequence[EnrichedPoint],
    config: ProjectionConfig,
    as_of: dt.date,
) -> CurrentEstimate:
    """
    Estimate the portfolio value at ``as_of`` from the last recorded value.

    Growth compounds daily at the configured annual rate. The monthly
    contribution (planned amount, or the latest minimum required one when
    nothing is planned) is phased in linearly over the first 30 days.
    """
    recorded = [point for point in points if point.is_recorded]
    if not recorded:
        return CurrentEstimate()

    last = max(recorded, key=lambda point: point.date)
    daily_rate = config.annual_growth_rate / DAYS_PER_YEAR
    elapsed_days = days_between(last.date, as_of)

    value_from_growth = last.observed_value * (1 + daily_rate) ** elapsed_days
    contribution_scale = min(max(elapsed_days, 0.0) / DAYS_PER_MONTH, 1.0)

    latest_point = max(points, key=lambda point: point.date)
    minimum_contribution = latest_point.min_required_contribution
    if config.planned_monthly_contribution > 0:
        monthly_contribution = config.planned_monthly_contribution
    else:
        monthly_contribution = minimum_contribution

    growth_per_day = value_from_growth * daily_rate
    contribution_per_day = monthly_contribution / DAYS_PER_MONTH
    return CurrentEstimate(
        current_estimate=value_from_growth + monthly_contribution * contribution_scale,
        change_per_day=growth_per_day + contribution_per_day,
        growth_per_day=growth_per_day,
        contribution_per_day=contribution_per_day,
    )


def _next_percent(raw_percent: float) -> float:
    if raw_percent < 0:
        return 0.0
    if raw_percent >= 100:
        return 100.0
    return float(min(100, math.floor(raw_percent) + 1))


def _days_to_target(
    estimate: CurrentEstimate,
    config: ProjectionConfig,
    as_of: dt.date,
    last_date: dt.date,
    target_required: float,
) -> Optional[int]:
    max_days = max(0, math.ceil(days_between(as_of, last_date)))
    daily_rate = config.annual_growth_rate / DAYS_PER_YEAR
    value = estimate.current_estimate

    for day in range(1, max_days + 1):
        value = value * (1 + daily_rate) + estimate.contribution_per_day
        cursor = as_of + dt.timedelta(days=day)
        months_remaining = max(0, months_between(cursor, last_date))
        required = required_monthly_contribution(
            value, config.goal_amount, config.annual_growth_rate, months_remaining
        )
        if required <= target_required:
            return day
    return None


def contribution_progress(
    points: Sequence[EnrichedPoint],
    config: ProjectionConfig,
    as_of: dt.date,
    rewards: Sequence[MiniReward] = (),
) -> ContributionProgress:
    """
    How far the required monthly contribution has come down since the start.

    0 % means the requirement is what it was at the first month, 100 % means
    no further contributions are needed. Also reports the days until the next
    whole percent and how many mini rewards up to the current percent are
    still untaken.
    """
    if not points:
        return ContributionProgress(
            initial_required=0.0,
            current_required=0.0,
            current_percent=0.0,
            next_percent=0.0,
            days_to_next_percent=None,
        )

    last_date = max(point.date for point in points)
    initial_required = points[0].min_required_contribution_adjusted
    estimate = estimate_current_value(points, config, as_of)
    months_remaining = max(0, months_between(as_of, last_date))
    current_required = required_monthly_contribution(
        estimate.current_estimate, config.goal_amount, config.annual_growth_rate, months_remaining
    )

    raw_percent = 0.0
    if initial_required > 0:
        raw_percent = (1 - current_required / initial_required) * 100
    current_percent = min(100.0, max(0.0, raw_percent))
    next_percent = _next_percent(raw_percent)

    days_to_next: Optional[int] = None
    if initial_required > 0:
        target_required = initial_required * (1 - next_percent / 100)
        if current_required <= target_required:
            days_to_next = 0
        else:
            days_to_next = _days_to_target(estimate, config, as_of, last_date, target_required)

    untaken = sum(1 for reward in rewards if reward.percentage <= current_percent and not reward.taken)
    return ContributionProgress(
        initial_required=initial_required,
        current_required=current_required,
        current_percent=current_percent,
        next_percent=next_percent,
        days_to_next_percent=days_to_next,
        untaken_rewards=untaken,
    )


__all__ = ["estimate_current_value", "contribution_progress"]
