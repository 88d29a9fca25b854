"""Data contracts for the current-value estimate endpoint."""

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from goalpath.core.models import ContributionProgress, CurrentEstimate, MiniReward, Observation
from goalpath.schemas.projection import RawConfig


class EstimateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    observations: List[Observation]
    config: RawConfig = Field(default_factory=dict)
    as_of: Optional[dt.datetime] = Field(None, description="Defaults to the current UTC time.")
    rewards: List[MiniReward] = Field(default_factory=list)


class EstimateResponse(BaseModel):
    estimate: CurrentEstimate
    progress: ContributionProgress
