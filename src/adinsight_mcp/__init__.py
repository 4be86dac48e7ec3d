"""AdInsight MCP Server.

A Model Context Protocol server that turns Meta Ads and Google Ads report
exports into campaign records, dashboard statistics and AI summaries.
"""

__version__ = "1.0.0"

from adinsight_mcp.server import create_mcp_server

__all__ = ["create_mcp_server"]
