"""Campaign data models."""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from adinsight_mcp.models.base import BaseADIModel
from adinsight_mcp.utils.csv_parsing import normalize_number, strip_quotes

# Record id prefixes per ingestion path, so ids never collide across paths
TEXT_ID_PREFIX = "c-"
DOCUMENT_ID_PREFIX = "g-"

UNNAMED_CAMPAIGN = "Campaña sin nombre"


class Platform(str, Enum):
    """Ad platform a report was exported from."""

    META = "meta"
    GOOGLE = "google"

    @property
    def display_name(self) -> str:
        return "Google Ads" if self is Platform.GOOGLE else "Meta Ads"

    @property
    def results_label(self) -> str:
        """What the platform calls its result metric."""
        return "Conversiones" if self is Platform.GOOGLE else "Resultados"


class CampaignStatus(str, Enum):
    """Campaign status values."""

    ACTIVE = "Active"


def compute_cost_per_result(spend: float, results: float) -> float:
    """Cost per result, or 0 when there are no results."""
    return spend / results if results > 0 else 0.0


def make_campaign_id(prefix: str, position: int) -> str:
    """Build a record id from its ingestion path prefix and output position."""
    return f"{prefix}{position}"


class Campaign(BaseADIModel):
    """One normalized row of advertising performance data.

    Records are immutable and replaced wholesale on every upload.
    """

    model_config = {"frozen": True}

    id: str = Field(..., description="Unique within one parse result")
    name: str = Field(..., description="Campaign display name")
    spend: float = Field(default=0.0, description="Amount spent")
    results: float = Field(
        default=0.0, description="Valuable actions (conversions/interactions)"
    )
    cost_per_result: float = Field(default=0.0, description="Spend per result")
    reach: float = Field(default=0.0, description="Unique audience reached")
    impressions: float = Field(default=0.0, description="Total impressions")
    status: CampaignStatus = Field(default=CampaignStatus.ACTIVE)

    @model_validator(mode="before")
    @classmethod
    def derive_cost_per_result(cls, data: Any) -> Any:
        """Keep a supplied cost per result, or derive it from spend and results."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        supplied = data.pop("costPerResult", None)
        if "cost_per_result" in data:
            supplied = data.pop("cost_per_result")

        cost_per_result = normalize_number(supplied)
        if not cost_per_result:
            cost_per_result = compute_cost_per_result(
                normalize_number(data.get("spend")),
                normalize_number(data.get("results")),
            )

        data["cost_per_result"] = cost_per_result
        return data

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v: Any) -> str:
        """Trim the display name and fall back to a placeholder."""
        if v is None:
            return UNNAMED_CAMPAIGN
        cleaned = strip_quotes(str(v))
        return cleaned or UNNAMED_CAMPAIGN

    @field_validator(
        "spend", "results", "cost_per_result", "reach", "impressions", mode="before"
    )
    @classmethod
    def clean_metric_fields(cls, v: Any) -> float:
        """Clean and normalize numeric metric fields."""
        return normalize_number(v)
