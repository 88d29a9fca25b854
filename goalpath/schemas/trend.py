"""Data contracts for the index trend endpoint."""

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from goalpath.core.models import PricePoint, TrendSnapshot, TrendStatistics


class PriceIn(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    date: dt.date
    price: Optional[float] = None


class TrendRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    prices: List[PriceIn]


class TrendResponse(BaseModel):
    points: List[PricePoint]
    statistics: Optional[TrendStatistics] = None
    latest: Optional[TrendSnapshot] = None
