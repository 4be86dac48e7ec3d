"""Analyzers module for AdInsight MCP server.

Analyzers work on the records of the currently loaded report and return
aggregates ready for a dashboard.
"""

from adinsight_mcp.analyzers.performance import (
    PerformanceAnalyzer,
    calculate_dashboard_stats,
    filter_and_sort_campaigns,
)

__all__ = [
    "PerformanceAnalyzer",
    "calculate_dashboard_stats",
    "filter_and_sort_campaigns",
]
