"""Gemini integration for PDF report extraction and executive summaries."""

from adinsight_mcp.clients.gemini.client import GeminiClient

__all__ = ["GeminiClient"]
