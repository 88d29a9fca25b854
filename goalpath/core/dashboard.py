"""Glue between the request schemas and the calculation core."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from goalpath.core.estimate import contribution_progress, estimate_current_value
from goalpath.core.milestones import evaluate_milestones
from goalpath.core.models import PricePoint, ProjectionConfig
from goalpath.core.projection import project_targets
from goalpath.core.scenarios import simulate_scenarios
from goalpath.core.trend import fit_exponential_trend, latest_trend_snapshot
from goalpath.core.view_window import DEFAULT_FORWARD_YEARS, filter_view_window, resolve_view_mode
from goalpath.schemas.estimate import EstimateRequest, EstimateResponse
from goalpath.schemas.projection import ProjectionRequest, ProjectionResponse
from goalpath.schemas.trend import TrendRequest, TrendResponse


def build_projection(
    request: ProjectionRequest,
    forward_years: int = DEFAULT_FORWARD_YEARS,
) -> ProjectionResponse:
    """Project, then evaluate milestones and scenarios on the full series.

    Only the returned points are restricted to the requested view window.
    """
    config = ProjectionConfig.from_mapping(request.config)
    mode, years = resolve_view_mode(request.view_mode, default_years=forward_years)

    points = project_targets(request.observations, config, request.trend_growth_rate)
    return ProjectionResponse(
        points=filter_view_window(points, mode, years),
        milestones=evaluate_milestones(points, request.conditions),
        scenarios=simulate_scenarios(points, config),
    )


def build_trend(request: TrendRequest) -> TrendResponse:
    prices = [PricePoint(date=item.date, price=item.price) for item in request.prices]
    # the feed is expected to drop empty prices already
    prices = [point for point in prices if point.price is not None]
    fit = fit_exponential_trend(prices)
    return TrendResponse(
        points=fit.points,
        statistics=fit.statistics,
        latest=latest_trend_snapshot(fit.points) if fit.statistics else None,
    )


def build_estimate(request: EstimateRequest, now: Optional[dt.datetime] = None) -> EstimateResponse:
    config = ProjectionConfig.from_mapping(request.config)
    as_of = request.as_of or now or dt.datetime.now(dt.timezone.utc)
    points = project_targets(request.observations, config)
    return EstimateResponse(
        estimate=estimate_current_value(points, config, as_of),
        progress=contribution_progress(points, config, as_of, request.rewards),
    )


__all__ = ["build_projection", "build_trend", "build_estimate"]
