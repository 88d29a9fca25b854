"""Pure calculation core: projections, scenarios, trend model and milestones."""

from goalpath.core.annuity import (
    annuity_factor,
    future_value_factor,
    required_monthly_contribution,
    required_payment,
)
from goalpath.core.errors import (
    GoalpathError,
    NumericParseError,
    UnknownViewMode,
    UnparseableConfigValue,
)
from goalpath.core.estimate import contribution_progress, estimate_current_value
from goalpath.core.milestones import evaluate_milestones
from goalpath.core.models import (
    Condition,
    EnrichedPoint,
    MilestoneMarker,
    MiniReward,
    Observation,
    PricePoint,
    ProjectionConfig,
    ScenarioDefinition,
    ScenarioKind,
    ScenarioResult,
    TrendStatistics,
)
from goalpath.core.numbers import parse_numeric, try_parse_numeric
from goalpath.core.projection import project_targets
from goalpath.core.scenarios import CONTRIBUTION_SCENARIOS, simulate_scenarios
from goalpath.core.trend import apply_trend_adjustment, fit_exponential_trend, latest_trend_snapshot
from goalpath.core.view_window import ViewMode, filter_view_window, resolve_view_mode
