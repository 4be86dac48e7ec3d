"""Services that hold report state between tool calls."""

from adinsight_mcp.services.report_session import ReportSession

__all__ = ["ReportSession"]
