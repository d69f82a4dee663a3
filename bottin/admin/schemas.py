from typing import Any, Dict, List, Optional

from pydantic import Field

from bottin.auth.schemas import UserOut
from bottin.events.schemas import EventResponse
from bottin.schemas import CamelModel
from bottin.troc.schemas import TrocAdOut


class AnalyticsCounts(CamelModel):
    total_users: int
    approved_users: int
    pending_users: int
    events: int
    troc_ads: int


class AnalyticsDistribution(CamelModel):
    users_by_discipline: Dict[str, int]
    users_by_location: Dict[str, int]
    ads_by_category: Dict[str, int]


class AnalyticsRecent(CamelModel):
    users: List[UserOut]
    events: List[EventResponse]
    ads: List[TrocAdOut]


class Analytics(CamelModel):
    counts: AnalyticsCounts
    distribution: AnalyticsDistribution
    recent: AnalyticsRecent


class SqlQuery(CamelModel):
    query: str = Field(..., min_length=1)
    params: Optional[Dict[str, Any]] = None


class SqlResult(CamelModel):
    columns: List[str]
    rows: List[Dict[str, Any]]
    row_count: int


class SchemaDifference(CamelModel):
    operation: str
    detail: str


class SchemaStatus(CamelModel):
    current_revision: Optional[str] = None
    head_revision: Optional[str] = None
    up_to_date: bool
    differences: List[SchemaDifference] = []
