"""Campaign performance analyzer for AdInsight MCP server.

This analyzer computes the dashboard statistics for one uploaded report:
totals, average cost per result, the star campaign and the campaigns whose
cost per result is well above average. It also provides the searchable,
sortable campaign table.
"""

import logging
from typing import Literal, Sequence

from adinsight_mcp.core.exceptions import ValidationError
from adinsight_mcp.models.analysis import DashboardStats
from adinsight_mcp.models.campaign import Campaign, Platform

logger = logging.getLogger(__name__)

UNDERPERFORMANCE_FACTOR = 1.2

SortDirection = Literal["asc", "desc"] | None

SORTABLE_FIELDS: tuple[str, ...] = (
    "name",
    "spend",
    "results",
    "cost_per_result",
    "reach",
    "impressions",
)
DEFAULT_SORT_KEY = "spend"
DEFAULT_SORT_DIRECTION: SortDirection = "desc"


def select_star_campaign(campaigns: Sequence[Campaign]) -> Campaign | None:
    """Campaign with the most results, ties going to the lower cost per result."""
    if not campaigns:
        return None
    return min(campaigns, key=lambda c: (-c.results, c.cost_per_result))


def calculate_dashboard_stats(
    campaigns: Sequence[Campaign],
    platform: Platform | str | None = None,
    underperformance_factor: float = UNDERPERFORMANCE_FACTOR,
) -> DashboardStats:
    """Aggregate the loaded campaigns into dashboard statistics.

    Args:
        campaigns: Records of the current report
        platform: Platform the report came from (defaults to Meta)
        underperformance_factor: Campaigns with a cost per result above
            ``average * factor`` are flagged as underperforming

    Returns:
        DashboardStats; all zeros with no star campaign for an empty report
    """
    resolved_platform = Platform(platform) if platform else Platform.META

    if not campaigns:
        return DashboardStats(platform=Platform.META)

    total_spend = sum(c.spend for c in campaigns)
    total_results = sum(c.results for c in campaigns)
    avg_cost_per_result = total_spend / total_results if total_results > 0 else 0.0

    threshold = avg_cost_per_result * underperformance_factor
    underperforming = [c for c in campaigns if c.cost_per_result > threshold]

    return DashboardStats(
        total_spend=total_spend,
        total_results=total_results,
        avg_cost_per_result=avg_cost_per_result,
        star_campaign=select_star_campaign(campaigns),
        underperforming_campaigns=underperforming,
        platform=resolved_platform,
    )


def filter_and_sort_campaigns(
    campaigns: Sequence[Campaign],
    search_term: str = "",
    sort_key: str | None = DEFAULT_SORT_KEY,
    direction: SortDirection = DEFAULT_SORT_DIRECTION,
) -> list[Campaign]:
    """Campaign table view: name search plus an optional single-column sort.

    Args:
        campaigns: Records of the current report
        search_term: Case-insensitive substring the name must contain
        sort_key: Record field to sort by, or None for upload order
        direction: "asc", "desc" or None for upload order

    Returns:
        New list; the input sequence is not modified

    Raises:
        ValidationError: If sort_key or direction is not supported
    """
    if sort_key is not None and sort_key not in SORTABLE_FIELDS:
        raise ValidationError(
            f"Cannot sort by '{sort_key}'. "
            f"Sortable fields: {', '.join(SORTABLE_FIELDS)}"
        )
    if direction not in ("asc", "desc", None):
        raise ValidationError(
            f"Invalid sort direction '{direction}'. Use 'asc', 'desc' or none"
        )

    needle = search_term.lower()
    result = [c for c in campaigns if needle in c.name.lower()]

    if sort_key and direction:
        reverse = direction == "desc"
        if sort_key == "name":
            result.sort(key=lambda c: c.name.casefold(), reverse=reverse)
        else:
            result.sort(key=lambda c: getattr(c, sort_key), reverse=reverse)

    return result


def next_sort_direction(
    current_key: str | None, current_direction: SortDirection, key: str
) -> SortDirection:
    """Direction after clicking a column header: desc, then asc, then unsorted."""
    if current_key == key and current_direction == "desc":
        return "asc"
    if current_key == key and current_direction == "asc":
        return None
    return "desc"


class PerformanceAnalyzer:
    """Dashboard statistics with configurable thresholds."""

    def __init__(self, underperformance_factor: float = UNDERPERFORMANCE_FACTOR):
        """Initialize the analyzer.

        Args:
            underperformance_factor: Multiple of the average cost per result
                above which a campaign is flagged
        """
        self.underperformance_factor = underperformance_factor

    def analyze(
        self, campaigns: Sequence[Campaign], platform: Platform | str | None = None
    ) -> DashboardStats:
        stats = calculate_dashboard_stats(
            campaigns, platform, underperformance_factor=self.underperformance_factor
        )
        logger.debug(
            f"Analyzed {len(campaigns)} campaigns: total_spend={stats.total_spend}, "
            f"avg_cost_per_result={stats.avg_cost_per_result:.2f}, "
            f"underperforming={len(stats.underperforming_campaigns)}"
        )
        return stats
