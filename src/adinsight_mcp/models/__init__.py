"""Data models for AdInsight."""

from adinsight_mcp.models.analysis import (
    ColumnResolution,
    ColumnRole,
    DashboardStats,
    ExecutiveSummary,
    ParseResult,
)
from adinsight_mcp.models.campaign import Campaign, CampaignStatus, Platform

__all__ = [
    "Campaign",
    "CampaignStatus",
    "ColumnResolution",
    "ColumnRole",
    "DashboardStats",
    "ExecutiveSummary",
    "ParseResult",
    "Platform",
]
