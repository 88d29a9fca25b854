from __future__ import annotations

import datetime as dt

import pytest

from goalpath.core.dates import add_years
from goalpath.core.errors import UnknownViewMode
from goalpath.core.models import ProjectionConfig
from goalpath.core.projection import project_targets
from goalpath.core.view_window import ViewMode, filter_view_window, resolve_view_mode
from goalpath.tests.factories import monthly_observations

# recorded Jan-Jun 2024, series runs through Dec 2027
SERIES = monthly_observations(dt.date(2024, 1, 1), [100, 200, 300, 400, 500, 600] + [None] * 42)


def test_recorded_keeps_only_positive_values():
    points = monthly_observations(dt.date(2024, 1, 1), [100, 0, None, 50])

    visible = filter_view_window(points, ViewMode.RECORDED)

    assert [p.date.month for p in visible] == [1, 4]


def test_forward_window_ends_n_years_after_last_recorded():
    visible = filter_view_window(SERIES, ViewMode.FORWARD, forward_years=2)

    assert len(visible) == 30
    assert visible[-1].date == dt.date(2026, 6, 1)


def test_forward_without_recorded_values_keeps_everything():
    points = monthly_observations(dt.date(2024, 1, 1), [None, None, None])

    assert filter_view_window(points, ViewMode.FORWARD, forward_years=1) == points


def test_full_is_unfiltered():
    assert filter_view_window(SERIES, ViewMode.FULL) == SERIES


@pytest.mark.parametrize(
    "token, expected",
    [
        ("recorded", (ViewMode.RECORDED, 2)),
        ("full", (ViewMode.FULL, 2)),
        ("forward", (ViewMode.FORWARD, 2)),
        ("next5years", (ViewMode.FORWARD, 5)),
        (" Next1Year ", (ViewMode.FORWARD, 1)),
    ],
)
def test_resolve_view_mode(token, expected):
    assert resolve_view_mode(token) == expected


def test_unknown_view_mode():
    with pytest.raises(UnknownViewMode):
        resolve_view_mode("lastweek")


def test_recorded_filter_is_idempotent():
    config = ProjectionConfig(goal_amount=1600, annual_growth_rate=0.0)
    points = project_targets(monthly_observations(dt.date(2024, 1, 1), [1000, None, 1300, None]), config)

    once = filter_view_window(points, ViewMode.RECORDED)

    assert len(once) == 2
    assert filter_view_window(once, ViewMode.RECORDED) == once


def test_forward_filter_is_idempotent():
    once = filter_view_window(SERIES, ViewMode.FORWARD, forward_years=2)

    assert filter_view_window(once, ViewMode.FORWARD, forward_years=2) == once


def test_forward_window_from_leap_day_rolls_over_to_march():
    points = monthly_observations(dt.date(2024, 1, 1), [None] * 15)
    points[1] = points[1].model_copy(update={"date": dt.date(2024, 2, 29), "observed_value": 500.0})

    visible = filter_view_window(points, ViewMode.FORWARD, forward_years=1)

    assert add_years(dt.date(2024, 2, 29), 1) == dt.date(2025, 3, 1)
    assert visible[-1].date == dt.date(2025, 3, 1)
