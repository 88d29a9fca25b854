"""Exponential trend model for an external market-index price series."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from goalpath.core.dates import days_between
from goalpath.core.models import (
    Observation,
    PricePoint,
    TrendSnapshot,
    TrendStatistics,
)

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class TrendFit:
    points: List[PricePoint]
    statistics: Optional[TrendStatistics] = None


def fit_exponential_trend(points: Sequence[PricePoint]) -> TrendFit:
    """
    Fit ``price = a * e^(b * x)`` (x in days since the first date) by ordinary
    least squares on ``ln(price)``.

    Every input point comes back annotated with the trend, a ±1σ band (lower
    side floored at zero), the trend/price multiplier and out-of-band flags.
    Fewer than two priced points leaves the input untouched and returns no
    statistics. With exactly two points the residual deviation is reported as
    zero since there are no degrees of freedom left.
    """
    points = list(points)
    if not points:
        return TrendFit(points=points)

    first_date = points[0].date
    priced = [point for point in points if point.price is not None and point.price > 0]
    n = len(priced)
    if n < 2:
        logger.debug("trend needs two priced points, got %d", n)
        return TrendFit(points=points)

    x = np.array([days_between(first_date, point.date) for point in priced])
    y = np.log(np.array([point.price for point in priced]))
    if np.ptp(x) == 0:
        logger.debug("all %d priced points share one date; no trend", n)
        return TrendFit(points=points)

    daily_rate, ln_scale = np.polyfit(x, y, 1)
    residuals = y - (ln_scale + daily_rate * x)
    deviation = float(np.sqrt(np.sum(residuals**2) / (n - 2))) if n > 2 else 0.0

    statistics = TrendStatistics(
        annual_growth_rate=float(daily_rate) * DAYS_PER_YEAR,
        residual_standard_deviation=deviation,
        scale=float(np.exp(ln_scale)),
        daily_rate=float(daily_rate),
        sample_size=n,
    )
    annotated = [_annotate(point, first_date, statistics) for point in points]
    return TrendFit(points=annotated, statistics=statistics)


def trend_value(statistics: TrendStatistics, days: float) -> float:
    return float(statistics.scale * np.exp(statistics.daily_rate * days))


def _annotate(point: PricePoint, first_date, statistics: TrendStatistics) -> PricePoint:
    trend = trend_value(statistics, days_between(first_date, point.date))
    band = statistics.residual_standard_deviation * trend
    upper = trend + band
    lower = max(0.0, trend - band)
    priced = point.price is not None
    return point.model_copy(
        update={
            "trend": trend,
            "trend_upper_bound": upper,
            "trend_lower_bound": lower,
            "multiplier": trend / point.price if priced and point.price > 0 else None,
            "is_above_upper_bound": priced and point.price > upper,
            "is_below_lower_bound": priced and point.price < lower,
        }
    )


def latest_trend_snapshot(points: Sequence[PricePoint]) -> Optional[TrendSnapshot]:
    """Distance of the most recent point from its trend, in percent and in σ."""
    if not points:
        return None
    latest = max(points, key=lambda point: point.date)
    price, trend, lower = latest.price, latest.trend, latest.trend_lower_bound

    diff_pct = None
    if price is not None and trend:
        diff_pct = (price - trend) / trend * 100

    sigmas = None
    if price is not None and trend is not None and lower is not None and trend != lower:
        sigmas = (price - trend) / (trend - lower)

    return TrendSnapshot(
        date=latest.date,
        price=price,
        trend=trend,
        diff_pct=diff_pct,
        sigmas_from_trend=sigmas,
        multiplier=latest.multiplier,
    )


def apply_trend_adjustment(
    observations: Sequence[Observation],
    trend_points: Sequence[PricePoint],
) -> List[Observation]:
    """
    Attach the multiplier of the nearest annotated price point to every
    observation that carries a value. Ties go to the earlier price point.
    """
    annotated = sorted(
        (point for point in trend_points if point.multiplier is not None),
        key=lambda point: point.date,
    )
    if not annotated:
        return list(observations)

    out: List[Observation] = []
    for observation in observations:
        if observation.observed_value is None:
            out.append(observation)
            continue
        nearest = min(annotated, key=lambda point: abs(days_between(point.date, observation.date)))
        out.append(observation.model_copy(update={"trend_adjustment_ratio": nearest.multiplier}))
    return out


__all__ = [
    "DAYS_PER_YEAR",
    "TrendFit",
    "fit_exponential_trend",
    "trend_value",
    "latest_trend_snapshot",
    "apply_trend_adjustment",
]
