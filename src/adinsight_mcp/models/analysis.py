"""Analysis result models: parse diagnostics, dashboard statistics, summaries."""

from enum import Enum

from pydantic import Field

from adinsight_mcp.models.base import BaseADIModel
from adinsight_mcp.models.campaign import Campaign, Platform

UNRESOLVED_COLUMN = -1


class ColumnRole(str, Enum):
    """Semantic fields that are mapped to source columns."""

    NAME = "name"
    SPEND = "spend"
    RESULTS = "results"
    COST_PER_RESULT = "cost_per_result"
    REACH = "reach"
    IMPRESSIONS = "impressions"


class ColumnResolution(BaseADIModel):
    """How a report's header was interpreted.

    Unresolved roles silently degrade every record's field to zero, so this
    report is the only place such data loss becomes visible.
    """

    delimiter: str = Field(..., description="Field delimiter used for the file")
    header_row: int = Field(..., ge=0, description="Index of the header line")
    headers: list[str] = Field(default_factory=list)
    columns: dict[ColumnRole, int] = Field(default_factory=dict)

    def index_of(self, role: ColumnRole) -> int:
        return self.columns.get(role, UNRESOLVED_COLUMN)

    @property
    def unresolved_roles(self) -> list[ColumnRole]:
        return [role for role in ColumnRole if self.index_of(role) == UNRESOLVED_COLUMN]


class ParseResult(BaseADIModel):
    """Records from one text report plus the diagnostics of how they were read."""

    campaigns: list[Campaign] = Field(default_factory=list)
    resolution: ColumnResolution | None = Field(
        default=None, description="None when the input had no data rows"
    )
    skipped_rows: int = Field(
        default=0, ge=0, description="Data rows excluded as blank or totals"
    )


class DashboardStats(BaseADIModel):
    """Aggregate metrics over the loaded campaigns."""

    total_spend: float = 0.0
    total_results: float = 0.0
    avg_cost_per_result: float = 0.0
    star_campaign: Campaign | None = None
    underperforming_campaigns: list[Campaign] = Field(default_factory=list)
    platform: Platform = Platform.META


class ExecutiveSummary(BaseADIModel):
    """AI-generated narrative about a report."""

    overview: str
    strengths: list[str]
    weaknesses: list[str]
    recommendations: list[str]
