from __future__ import annotations

import datetime as dt
import math
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from goalpath.core.errors import NumericParseError, UnparseableConfigValue
from goalpath.core.numbers import parse_numeric

DEFAULT_GOAL_AMOUNT = 1_000_000.0
DEFAULT_ANNUAL_GROWTH_RATE = 0.07
SCENARIO_RATE_OFFSET = 0.01


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        if not value.strip():
            return None
        return parse_numeric(value)
    return value


# -----------------------------
# Inputs
# -----------------------------


class Observation(BaseModel):
    """One imported spreadsheet row. Only the date and the numeric fields matter here."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    date: dt.date
    observed_value: Optional[float] = None
    trend_adjustment_ratio: Optional[float] = None

    # descriptive columns carried along for the caller
    event: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    duration: Optional[str] = None

    @field_validator("observed_value", "trend_adjustment_ratio", mode="before")
    @classmethod
    def _parse_numeric_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @property
    def is_recorded(self) -> bool:
        return self.observed_value is not None and self.observed_value > 0

    @property
    def adjusted_value(self) -> Optional[float]:
        if self.observed_value is None or self.trend_adjustment_ratio is None:
            return None
        return self.observed_value * self.trend_adjustment_ratio


# spreadsheet key -> field name
CONFIG_KEY_ALIASES: Mapping[str, Tuple[str, ...]] = {
    "goal_amount": ("goal_amount", "investment_goal"),
    "annual_growth_rate": ("annual_growth_rate",),
    "planned_monthly_contribution": ("planned_monthly_contribution",),
    "planned_contribution_until": (
        "planned_contribution_until",
        "planned_monthly_contributions_until",
    ),
}


class ProjectionConfig(BaseModel):
    """
    Typed calculation settings, validated once at the boundary.

      - goal_amount: value the portfolio should reach by the last date of the series
      - annual_growth_rate: expected yearly return as a decimal (0.07 == 7 %)
      - planned_monthly_contribution: what the owner intends to pay in each month
      - planned_contribution_until: last date the planned contribution applies
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    goal_amount: float = DEFAULT_GOAL_AMOUNT
    annual_growth_rate: float = DEFAULT_ANNUAL_GROWTH_RATE
    planned_monthly_contribution: float = 0.0
    planned_contribution_until: Optional[dt.date] = None

    @property
    def monthly_growth_rate(self) -> float:
        return self.annual_growth_rate / 12

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "ProjectionConfig":
        """Build a config from the loosely typed key/value section of the sheet.

        Missing or blank keys keep their defaults; anything else that cannot be
        read raises ``UnparseableConfigValue``.
        """
        raw = raw or {}
        values = {}
        for field, aliases in CONFIG_KEY_ALIASES.items():
            key, value = _first_present(raw, aliases)
            if key is None:
                continue
            if field == "planned_contribution_until":
                values[field] = _parse_config_date(key, value)
            else:
                try:
                    values[field] = parse_numeric(value)
                except NumericParseError:
                    raise UnparseableConfigValue(key, value) from None
        return cls(**values)


def _first_present(raw: Mapping[str, Any], aliases: Tuple[str, ...]):
    for key in aliases:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return key, value
    return None, None


def _parse_config_date(key: str, value: Any) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    try:
        return dt.date.fromisoformat(text[:10])
    except ValueError:
        raise UnparseableConfigValue(key, value) from None


class Condition(BaseModel):
    """A reward threshold evaluated against the projection."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    threshold_amount: float
    short_label: str = ""
    long_description: str = ""

    @field_validator("threshold_amount", mode="before")
    @classmethod
    def _parse_threshold(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_numeric(value)
        return value

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "Condition":
        threshold = row.get("condition", row.get("threshold_amount"))
        # an empty condition cell is a zero threshold
        if threshold is None or (isinstance(threshold, str) and not threshold.strip()):
            threshold = 0.0
        return cls(
            threshold_amount=threshold,
            short_label=row.get("explanation_short", row.get("short_label")) or "",
            long_description=row.get("explanation_long", row.get("long_description")) or "",
        )


class MiniReward(BaseModel):
    model_config = ConfigDict(frozen=True)

    percentage: float
    taken: bool = False


# -----------------------------
# Outputs
# -----------------------------


class EnrichedPoint(BaseModel):
    """One projection row per input date.

    Every ``line_*`` field and ``target_with_minimum_contribution`` is None
    before the pivot (last recorded month) and chained forward from it.
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date
    observed_value: Optional[float] = None
    adjusted_value: Optional[float] = None

    target_with_fixed_contribution: float
    min_required_contribution: float
    min_required_contribution_adjusted: float

    target_with_minimum_contribution: Optional[float] = None
    line_minus_one_percent: Optional[float] = None
    line_plus_one_percent: Optional[float] = None
    line_trend_growth: Optional[float] = None

    planned_value: Optional[float] = None
    planned_min_required_contribution: Optional[float] = None

    @property
    def is_recorded(self) -> bool:
        return self.observed_value is not None and self.observed_value > 0


class PricePoint(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    date: dt.date
    price: Optional[float] = None

    trend: Optional[float] = None
    trend_upper_bound: Optional[float] = None
    trend_lower_bound: Optional[float] = None
    multiplier: Optional[float] = None
    is_above_upper_bound: bool = False
    is_below_lower_bound: bool = False

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> Any:
        return _blank_to_none(value)


class TrendStatistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    annual_growth_rate: float
    residual_standard_deviation: float
    scale: float
    daily_rate: float
    sample_size: int


class TrendSnapshot(BaseModel):
    """Where the latest price sits relative to its trend."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    price: Optional[float]
    trend: Optional[float]
    diff_pct: Optional[float]
    sigmas_from_trend: Optional[float]
    multiplier: Optional[float]


class MilestoneMarker(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    value: float
    label: str
    threshold_amount: float
    achieved: bool


class ScenarioKind(str, Enum):
    MONTHLY_DELTA = "monthly-delta"
    LUMP_SUM = "lump-sum"
    PAUSE = "pause"
    LOAN_REPAY = "loan-repay"


class ScenarioDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    short_label: str
    kind: ScenarioKind
    delta: float = 0.0
    amount: float = 0.0
    months: int = 0


class ScenarioResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    scenario_id: str
    label: str
    short_label: str
    kind: ScenarioKind
    horizon_date: dt.date
    projected_value_at_horizon: float
    required_monthly_contribution_at_horizon: float


class CurrentEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_estimate: float = 0.0
    change_per_day: float = 0.0
    growth_per_day: float = 0.0
    contribution_per_day: float = 0.0


class ContributionProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    initial_required: float
    current_required: float
    current_percent: float
    next_percent: float
    days_to_next_percent: Optional[int]
    untaken_rewards: int = 0


def is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


__all__ = [
    "DEFAULT_GOAL_AMOUNT",
    "DEFAULT_ANNUAL_GROWTH_RATE",
    "SCENARIO_RATE_OFFSET",
    "CONFIG_KEY_ALIASES",
    "Observation",
    "ProjectionConfig",
    "Condition",
    "MiniReward",
    "EnrichedPoint",
    "PricePoint",
    "TrendStatistics",
    "TrendSnapshot",
    "MilestoneMarker",
    "ScenarioKind",
    "ScenarioDefinition",
    "ScenarioResult",
    "CurrentEstimate",
    "ContributionProgress",
    "is_finite_number",
]
