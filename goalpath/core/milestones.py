from __future__ import annotations

from typing import List, Optional, Sequence

from goalpath.core.models import Condition, EnrichedPoint, MilestoneMarker, is_finite_number


def actual_value(point: EnrichedPoint) -> Optional[float]:
    """Trend-adjusted recorded value, or the raw one when no ratio was known."""
    if point.adjusted_value is not None:
        return point.adjusted_value
    if point.is_recorded:
        return point.observed_value
    return None


def _first_reaching(points, value_of, threshold: float):
    for point in points:
        value = value_of(point)
        if is_finite_number(value) and value >= threshold:
            return point, value
    return None, None


def evaluate_milestones(
    points: Sequence[EnrichedPoint],
    conditions: Sequence[Condition],
) -> List[MilestoneMarker]:
    """
    One marker per condition that is reached.

    A threshold already met by a recorded (trend-adjusted) value is reported
    as achieved; only otherwise is the minimum-contribution line searched for
    a projected date. Conditions reached by neither produce no marker.
    """
    markers: List[MilestoneMarker] = []
    if not points or not conditions:
        return markers

    for condition in conditions:
        threshold = condition.threshold_amount
        label = condition.short_label or "Unknown"

        point, value = _first_reaching(points, actual_value, threshold)
        achieved = point is not None
        if not achieved:
            point, value = _first_reaching(
                points, lambda item: item.target_with_minimum_contribution, threshold
            )
        if point is None:
            continue

        markers.append(
            MilestoneMarker(
                date=point.date,
                value=value,
                label=label,
                threshold_amount=threshold,
                achieved=achieved,
            )
        )

    return markers


__all__ = ["actual_value", "evaluate_milestones"]
