"""Parsers for delimited ad platform report exports."""

from adinsight_mcp.parsers.report_parser import (
    parse_report,
    parse_report_with_diagnostics,
)

__all__ = ["parse_report", "parse_report_with_diagnostics"]
