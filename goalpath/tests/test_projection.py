from __future__ import annotations

import datetime as dt
import random
from math import isclose

from goalpath.core.models import ProjectionConfig
from goalpath.core.projection import find_pivot, project_targets
from goalpath.tests.factories import monthly_observations

JAN_2024 = dt.date(2024, 1, 1)


def assert_close_list(actual, expected, tol=0.01):
    assert len(actual) == len(expected)
    for got, want in zip(actual, expected):
        if want is None:
            assert got is None
        else:
            assert got is not None and isclose(got, want, abs_tol=tol), (actual, expected)


def test_single_recorded_value_reaches_goal_linearly():
    observations = monthly_observations(JAN_2024, [1000, None, None, None])
    config = ProjectionConfig(goal_amount=1300, annual_growth_rate=0.0)

    points = project_targets(observations, config)

    assert_close_list([p.target_with_fixed_contribution for p in points], [1000, 1100, 1200, 1300])
    assert_close_list([p.min_required_contribution for p in points], [100, 100, 100, 100])
    assert_close_list([p.target_with_minimum_contribution for p in points], [1000, 1100, 1200, 1300])
    assert_close_list([p.planned_min_required_contribution for p in points], [100, 100, 100, 0])


def test_history_is_recomputed_and_lines_start_at_the_last_recorded_month():
    observations = monthly_observations(JAN_2024, [1000, None, 1300, None])
    config = ProjectionConfig(goal_amount=1600, annual_growth_rate=0.0)

    points = project_targets(observations, config)

    # the empty February counts as a zero portfolio; April reuses March's figure
    assert_close_list([p.min_required_contribution for p in points], [200, 800, 300, 300])
    assert_close_list([p.target_with_minimum_contribution for p in points], [None, None, 1300, 1600])
    assert_close_list([p.line_minus_one_percent for p in points[:2]], [None, None])
    assert points[2].line_plus_one_percent == 1300
    assert points[3].line_trend_growth is None


def test_rate_offset_lines_bracket_the_base_line():
    observations = monthly_observations(JAN_2024, [1000] + [None] * 23)
    config = ProjectionConfig(goal_amount=50000, annual_growth_rate=0.05)

    points = project_targets(observations, config, trend_growth_rate=0.08)

    last = points[-1]
    assert last.line_minus_one_percent < last.target_with_minimum_contribution < last.line_plus_one_percent
    assert last.line_plus_one_percent < last.line_trend_growth
    assert isclose(last.target_with_minimum_contribution, 50000, rel_tol=1e-9)


def test_lines_start_from_latest_recorded_value():
    observations = monthly_observations(JAN_2024, [1000, None, 5000, None])
    config = ProjectionConfig(goal_amount=6000, annual_growth_rate=0.0)

    points = project_targets(observations, config)

    assert find_pivot(points) == 2
    assert points[2].target_with_minimum_contribution == 5000
    assert isclose(points[3].target_with_minimum_contribution, 6000)


def test_no_recorded_value_gives_empty_projection():
    config = ProjectionConfig(goal_amount=1000, annual_growth_rate=0.0)

    assert project_targets([], config) == []
    assert project_targets(monthly_observations(JAN_2024, [None, 0, None]), config) == []


def test_outputs_are_floored_at_zero():
    observations = monthly_observations(JAN_2024, [5000, None, None, None])
    config = ProjectionConfig(goal_amount=1000, annual_growth_rate=0.03)

    points = project_targets(observations, config)

    for point in points:
        assert point.min_required_contribution == 0.0
        assert point.min_required_contribution_adjusted == 0.0
        assert point.target_with_fixed_contribution >= 0.0
        assert point.planned_min_required_contribution >= 0.0


def test_adjusted_values_drive_the_lines_when_ratio_is_known():
    observations = monthly_observations(JAN_2024, [1000, None, None, None], ratios=[1.2, None, None, None])
    config = ProjectionConfig(goal_amount=1600, annual_growth_rate=0.0)

    points = project_targets(observations, config)

    assert points[0].adjusted_value == 1200
    assert_close_list([p.min_required_contribution for p in points], [200, 200, 200, 200])
    assert_close_list([p.min_required_contribution_adjusted for p in points], [133.33] * 4)
    assert isclose(points[-1].target_with_minimum_contribution, 1600)


def test_planned_path_hands_off_to_minimum_contribution():
    observations = monthly_observations(JAN_2024, [1000, None, None, None, None, None])
    config = ProjectionConfig(
        goal_amount=2000,
        annual_growth_rate=0.0,
        planned_monthly_contribution=300,
        planned_contribution_until=dt.date(2024, 3, 1),
    )

    points = project_targets(observations, config)

    assert_close_list(
        [p.planned_min_required_contribution for p in points],
        [200, 175, 133.33, 133.33, 133.33, 0],
    )
    assert_close_list([p.planned_value for p in points[:3]], [1000, 1300, 1600])
    assert isclose(points[-1].planned_value, 2000)


def test_fixed_contribution_target_ends_at_goal():
    observations = monthly_observations(JAN_2024, [25000] + [None] * 59)
    config = ProjectionConfig(goal_amount=100000, annual_growth_rate=0.07)

    points = project_targets(observations, config)

    assert points[0].target_with_fixed_contribution == 25000
    assert isclose(points[-1].target_with_fixed_contribution, 100000, rel_tol=1e-9)


def test_projection_is_deterministic_and_order_independent():
    observations = monthly_observations(JAN_2024, [1000, 1200, None, 1500, None, None, None, None])
    config = ProjectionConfig(goal_amount=5000, annual_growth_rate=0.06)
    shuffled = list(observations)
    random.Random(7).shuffle(shuffled)

    first = project_targets(observations, config)
    second = project_targets(shuffled, config)

    assert first == second
    assert [p.date for p in first] == sorted(p.date for p in first)


def test_single_point_collapses_to_the_known_value():
    config = ProjectionConfig(goal_amount=5000, annual_growth_rate=0.05, planned_monthly_contribution=100)

    points = project_targets(monthly_observations(JAN_2024, [1000]), config)

    assert len(points) == 1
    point = points[0]
    assert point.target_with_fixed_contribution == 1000
    assert point.min_required_contribution == 0.0
    assert point.planned_min_required_contribution == 0.0
    assert point.target_with_minimum_contribution == 1000
