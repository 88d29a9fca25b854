from __future__ import annotations

import datetime as dt
import math
from math import isclose

from goalpath.core.models import Observation, PricePoint
from goalpath.core.trend import (
    apply_trend_adjustment,
    fit_exponential_trend,
    latest_trend_snapshot,
)

START = dt.date(2020, 1, 1)


def price_series(prices, step_days=30):
    return [
        PricePoint(date=START + dt.timedelta(days=index * step_days), price=price)
        for index, price in enumerate(prices)
    ]


def test_recovers_exact_exponential():
    prices = [100 * math.exp(0.0005 * day) for day in range(0, 300, 30)]

    fit = fit_exponential_trend(price_series(prices))

    stats = fit.statistics
    assert stats.sample_size == 10
    assert isclose(stats.daily_rate, 0.0005, rel_tol=1e-9)
    assert isclose(stats.annual_growth_rate, 0.0005 * 365, rel_tol=1e-9)
    assert isclose(stats.scale, 100, rel_tol=1e-9)
    assert isclose(stats.residual_standard_deviation, 0.0, abs_tol=1e-9)
    for point in fit.points:
        assert isclose(point.trend, point.price, rel_tol=1e-9)
        assert isclose(point.multiplier, 1.0, rel_tol=1e-9)


def test_band_and_flags_are_consistent():
    noise = [1.0, 1.05, 0.97, 1.1, 0.9, 1.02, 0.95, 1.08, 0.99, 1.01]
    prices = [100 * math.exp(0.0003 * index * 30) * factor for index, factor in enumerate(noise)]

    fit = fit_exponential_trend(price_series(prices))

    assert fit.statistics.residual_standard_deviation > 0
    for point in fit.points:
        assert 0 <= point.trend_lower_bound <= point.trend <= point.trend_upper_bound
        assert point.is_above_upper_bound == (point.price > point.trend_upper_bound)
        assert point.is_below_lower_bound == (point.price < point.trend_lower_bound)
        assert not (point.is_above_upper_bound and point.is_below_lower_bound)
        assert isclose(point.multiplier, point.trend / point.price)


def test_too_few_points_gives_no_statistics():
    assert fit_exponential_trend([]).statistics is None

    single = price_series([100])
    fit = fit_exponential_trend(single)
    assert fit.statistics is None
    assert fit.points == single
    assert fit.points[0].trend is None


def test_points_on_one_date_give_no_statistics():
    points = [PricePoint(date=START, price=100), PricePoint(date=START, price=110)]

    assert fit_exponential_trend(points).statistics is None


def test_two_priced_points_have_zero_deviation():
    # the zero price is left out of the fit but still annotated
    points = price_series([0, 100, 200], step_days=100)

    fit = fit_exponential_trend(points)

    assert fit.statistics.sample_size == 2
    assert fit.statistics.residual_standard_deviation == 0.0
    assert isclose(fit.statistics.daily_rate, math.log(2) / 100)
    assert len(fit.points) == 3
    assert fit.points[0].multiplier is None
    assert fit.points[0].trend is not None


def test_latest_snapshot_measures_distance_from_trend():
    points = [
        PricePoint(date=START, price=80, trend=90, trend_lower_bound=85),
        PricePoint(date=START + dt.timedelta(days=1), price=110, trend=100, trend_lower_bound=90, multiplier=100 / 110),
    ]

    snapshot = latest_trend_snapshot(points)

    assert snapshot.date == START + dt.timedelta(days=1)
    assert isclose(snapshot.diff_pct, 10.0)
    assert isclose(snapshot.sigmas_from_trend, 1.0)
    assert isclose(snapshot.multiplier, 100 / 110)


def test_snapshot_without_trend():
    snapshot = latest_trend_snapshot([PricePoint(date=START, price=100)])

    assert snapshot.diff_pct is None
    assert snapshot.sigmas_from_trend is None
    assert latest_trend_snapshot([]) is None


def test_adjustment_uses_nearest_point_and_earlier_on_tie():
    trend_points = [
        PricePoint(date=dt.date(2024, 1, 3), price=100, multiplier=1.3),
        PricePoint(date=dt.date(2024, 1, 1), price=100, multiplier=1.1),
        PricePoint(date=dt.date(2024, 1, 2), price=100),
    ]
    observations = [
        Observation(date=dt.date(2024, 1, 2), observed_value=1000),
        Observation(date=dt.date(2024, 1, 4), observed_value=1000),
        Observation(date=dt.date(2024, 1, 5)),
    ]

    adjusted = apply_trend_adjustment(observations, trend_points)

    assert [item.trend_adjustment_ratio for item in adjusted] == [1.1, 1.3, None]
    assert isclose(adjusted[0].adjusted_value, 1100)


def test_adjustment_without_annotated_points_is_a_no_op():
    observations = [Observation(date=dt.date(2024, 1, 2), observed_value=1000)]

    assert apply_trend_adjustment(observations, [PricePoint(date=START, price=1)]) == observations
