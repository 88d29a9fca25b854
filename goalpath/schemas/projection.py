"""Data contracts for the projection endpoint."""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from goalpath.core.models import (
    Condition,
    EnrichedPoint,
    MilestoneMarker,
    Observation,
    ScenarioResult,
)

RawConfig = Dict[str, Optional[Union[float, str]]]


class ProjectionRequest(BaseModel):
    """Parsed spreadsheet content plus display options."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    observations: List[Observation]
    config: RawConfig = Field(
        default_factory=dict,
        description="Key/value section of the sheet, e.g. {'investment_goal': '500 000'}.",
    )
    conditions: List[Condition] = Field(default_factory=list)
    trend_growth_rate: Optional[float] = Field(
        None,
        description="Annual growth rate of the index trend, adds a fourth scenario line.",
    )
    view_mode: str = Field("full", description="recorded, next2years, next5years or full.")


class ProjectionResponse(BaseModel):
    points: List[EnrichedPoint]
    milestones: List[MilestoneMarker]
    scenarios: List[ScenarioResult]
