"""FastMCP server for AdInsight ad report analysis."""

import base64
import binascii
import logging
import os
import re
from enum import Enum
from typing import Any, Literal

from fastmcp import FastMCP
from pydantic import BaseModel, Field

from adinsight_mcp import __version__
from adinsight_mcp.analyzers.performance import PerformanceAnalyzer
from adinsight_mcp.clients.gemini.client import GeminiClient
from adinsight_mcp.core.config import (
    Environment,
    Settings,
    get_settings,
    setup_logging,
)
from adinsight_mcp.core.exceptions import (
    ConfigurationError,
    DocumentExtractionError,
    OperationInProgressError,
    ValidationError,
)
from adinsight_mcp.models.campaign import Platform
from adinsight_mcp.services.report_session import ReportSession

logger = logging.getLogger(__name__)


# ============================================================================
# Error Codes
# ============================================================================


class ErrorCode(str, Enum):
    """Error codes for programmatic error handling."""

    INVALID_INPUT = "INVALID_INPUT"
    NO_REPORT_LOADED = "NO_REPORT_LOADED"
    OPERATION_IN_PROGRESS = "OPERATION_IN_PROGRESS"
    DOCUMENT_EXTRACTION_ERROR = "DOCUMENT_EXTRACTION_ERROR"
    SUMMARY_GENERATION_ERROR = "SUMMARY_GENERATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Initialize MCP server
mcp = FastMCP("AdInsight MCP Server")


# ============================================================================
# Helper Functions
# ============================================================================


def sanitize_error_message(msg: str) -> str:
    """Remove potential credentials from error messages.

    Args:
        msg: Original error message

    Returns:
        Sanitized error message with credentials redacted

    Examples:
        >>> sanitize_error_message("Key AIzaSyA1b2C3d4E5f6G7h8I9 rejected")
        "Key [REDACTED] rejected"
        >>> sanitize_error_message("user@example.com authentication failed")
        "[EMAIL_REDACTED] authentication failed"
    """
    # Remove anything that looks like a token (20+ alphanumeric/dash/underscore)
    msg = re.sub(r"[A-Za-z0-9_-]{20,}", "[REDACTED]", msg)

    # Remove anything that looks like an email address
    msg = re.sub(r"\b[\w.-]+@[\w.-]+\.\w+\b", "[EMAIL_REDACTED]", msg)

    # Remove anything that looks like an API key pattern
    msg = re.sub(
        r"(api[_-]?key|token|secret|password|credential)[\"']?\s*[:=]\s*[\"']?[^\s\"']+",
        r"\1=[REDACTED]",
        msg,
        flags=re.IGNORECASE,
    )

    return msg


def _error_response(
    code: ErrorCode, message: str, retry_allowed: bool, **details: Any
) -> dict[str, Any]:
    return {
        "status": "error",
        "error_code": code,
        "message": message,
        "details": {"retry_allowed": retry_allowed, **details},
        "data": [],
    }


# Global session instance shared across requests
_session_instance: ReportSession | None = None


def reset_session_for_testing():
    """Reset the singleton session instance (for testing only)."""
    global _session_instance
    _session_instance = None


def _get_session() -> ReportSession:
    """
    Get or create the report session (singleton pattern).

    The dashboard works on one report at a time, so every tool call sees the
    same session. The Gemini client is created with the session but only
    connects (and checks its API key) on first use.

    Returns:
        Shared ReportSession instance
    """
    global _session_instance

    if _session_instance is not None:
        return _session_instance

    settings = get_settings()
    _session_instance = ReportSession(
        gemini_client=GeminiClient(
            settings.gemini, summary_language=settings.analysis.summary_language
        ),
        analyzer=PerformanceAnalyzer(settings.analysis.underperformance_factor),
    )
    return _session_instance


def warn_if_debug_logging_in_production(settings: Settings) -> bool:
    """Warn when DEBUG logging is active in a production deployment.

    Must run after logging is configured, since it checks the effective level
    of the root logger.

    Returns:
        True if the warning was emitted
    """
    if settings.environment != Environment.PRODUCTION:
        return False
    if logging.getLogger().getEffectiveLevel() > logging.DEBUG:
        return False

    logger.warning(
        "DEBUG logging enabled in production environment. "
        "Uploaded report contents may end up in logs. "
        "Set ADI_LOGGING__LEVEL to INFO or higher."
    )
    return True


def decode_document(document_base64: str) -> bytes:
    """Decode a base64 document, accepting data URLs.

    Raises:
        ValidationError: If the payload is not valid base64 or is empty
    """
    payload = document_base64.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]

    try:
        document = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Document is not valid base64: {e}") from e

    if not document:
        raise ValidationError("Document is empty")
    return document


# ============================================================================
# Request Models
# ============================================================================


class ParseReportRequest(BaseModel):
    """Request model for parsing a delimited text report."""

    content: str = Field(..., description="Decoded text content of the CSV export")
    platform: Platform = Field(
        default=Platform.META, description="Platform the report was exported from"
    )


class ExtractDocumentRequest(BaseModel):
    """Request model for extracting campaigns from a PDF report."""

    document_base64: str = Field(
        ..., min_length=1, description="Base64-encoded PDF (data URLs accepted)"
    )
    platform: Platform = Field(
        default=Platform.GOOGLE, description="Platform the report was exported from"
    )


class ListCampaignsRequest(BaseModel):
    """Request model for the campaign table."""

    search_term: str = Field(default="", description="Case-insensitive name filter")
    sort_key: str | None = Field(
        default="spend",
        description="Field to sort by: name, spend, results, cost_per_result, "
        "reach or impressions",
    )
    direction: Literal["asc", "desc"] | None = Field(
        default="desc", description="Sort direction, or null for upload order"
    )
    toggle_column: str | None = Field(
        default=None,
        description="Column header clicked; cycles its sort desc, asc, unsorted "
        "and overrides sort_key and direction",
    )


# ============================================================================
# Tools
# ============================================================================


@mcp.tool()
async def parse_report(request: ParseReportRequest) -> dict[str, Any]:
    """
    Parse a CSV/semicolon-separated ad report and load it as the current report.

    Delimiter, header row and columns are detected automatically. Numbers in
    either "1.234,56" or "1,234.56" style are normalized. Totals and summary
    rows are skipped. Columns that could not be identified are listed in
    metadata.unresolved_columns; their values default to 0.
    """
    try:
        result = _get_session().load_text_report(request.content, request.platform)
        resolution = result.resolution

        metadata: dict[str, Any] = {
            "platform": request.platform.value,
            "record_count": len(result.campaigns),
            "skipped_rows": result.skipped_rows,
        }
        if resolution is not None:
            metadata.update(
                {
                    "delimiter": resolution.delimiter,
                    "header_row": resolution.header_row,
                    "headers": resolution.headers,
                    "columns": resolution.model_dump(mode="json")["columns"],
                    "unresolved_columns": [
                        role.value for role in resolution.unresolved_roles
                    ],
                }
            )

        return {
            "status": "success",
            "message": f"Parsed {len(result.campaigns)} campaigns",
            "metadata": metadata,
            "data": [campaign.to_wire() for campaign in result.campaigns],
        }

    except OperationInProgressError as e:
        return _error_response(ErrorCode.OPERATION_IN_PROGRESS, str(e), True)
    except Exception as e:
        logger.error(
            f"Unexpected error parsing report: {sanitize_error_message(str(e))}",
            exc_info=True,
        )
        return _error_response(
            ErrorCode.INTERNAL_ERROR,
            f"Failed to parse report: {str(e)}",
            False,
            error_type=type(e).__name__,
        )


@mcp.tool()
async def extract_document_report(request: ExtractDocumentRequest) -> dict[str, Any]:
    """
    Extract campaigns from a Google Ads PDF report and load them as the current report.

    Extraction is delegated to Gemini. Either every campaign is returned or the
    call fails; the previously loaded report is kept on failure.
    """
    try:
        document = decode_document(request.document_base64)
        campaigns = await _get_session().load_document_report(
            document, request.platform
        )

        if campaigns is None:
            return {
                "status": "success",
                "message": "Report was reset during extraction; result discarded",
                "metadata": {"platform": request.platform.value, "record_count": 0},
                "data": [],
            }

        return {
            "status": "success",
            "message": f"Extracted {len(campaigns)} campaigns",
            "metadata": {
                "platform": request.platform.value,
                "record_count": len(campaigns),
                "document_bytes": len(document),
            },
            "data": [campaign.to_wire() for campaign in campaigns],
        }

    except ValidationError as e:
        return _error_response(ErrorCode.INVALID_INPUT, f"Invalid input: {e}", False)
    except OperationInProgressError as e:
        return _error_response(ErrorCode.OPERATION_IN_PROGRESS, str(e), True)
    except ConfigurationError as e:
        logger.error(f"Gemini is not configured: {e}")
        return _error_response(ErrorCode.CONFIGURATION_ERROR, str(e), False)
    except DocumentExtractionError as e:
        logger.error(f"Document extraction failed: {sanitize_error_message(str(e))}")
        return _error_response(
            ErrorCode.DOCUMENT_EXTRACTION_ERROR,
            f"{e}. Make sure the file is a valid report.",
            True,
            document_bytes=e.document_size,
        )
    except Exception as e:
        logger.error(
            f"Unexpected error extracting report: {sanitize_error_message(str(e))}",
            exc_info=True,
        )
        return _error_response(
            ErrorCode.INTERNAL_ERROR,
            f"Failed to extract report: {str(e)}",
            False,
            error_type=type(e).__name__,
        )


@mcp.tool()
async def get_dashboard_stats() -> dict[str, Any]:
    """
    Get the dashboard statistics of the current report.

    Includes total spend, total results, average cost per result, the star
    campaign (most results, cheapest on ties) and campaigns whose cost per
    result is well above average.
    """
    session = _get_session()
    stats = session.stats
    return {
        "status": "success",
        "message": f"Statistics for {len(session.campaigns)} campaigns",
        "metadata": {
            "record_count": len(session.campaigns),
            "platform": stats.platform,
            "loaded_at": session.loaded_at.isoformat() if session.loaded_at else None,
        },
        "data": stats.to_wire(),
    }


@mcp.tool()
async def list_campaigns(request: ListCampaignsRequest) -> dict[str, Any]:
    """
    List the campaigns of the current report, filtered by name and sorted.
    """
    session = _get_session()
    sort_key, direction = request.sort_key, request.direction
    try:
        if request.toggle_column:
            direction = session.toggle_sort(request.toggle_column)
            sort_key = session.sort_key
            campaigns = session.sorted_table(request.search_term)
        else:
            campaigns = session.campaign_table(
                request.search_term, sort_key, direction
            )
    except ValidationError as e:
        return _error_response(ErrorCode.INVALID_INPUT, f"Invalid input: {e}", False)

    return {
        "status": "success",
        "message": f"Found {len(campaigns)} campaigns",
        "metadata": {
            "search_term": request.search_term,
            "sort_key": sort_key,
            "direction": direction,
            "record_count": len(campaigns),
        },
        "data": [campaign.to_wire() for campaign in campaigns],
    }


@mcp.tool()
async def generate_executive_summary() -> dict[str, Any]:
    """
    Generate an AI executive summary (overview, strengths, weaknesses,
    recommendations) for the current report.
    """
    session = _get_session()
    try:
        summary = await session.request_summary()
    except ValidationError as e:
        return _error_response(ErrorCode.NO_REPORT_LOADED, str(e), False)
    except OperationInProgressError as e:
        return _error_response(ErrorCode.OPERATION_IN_PROGRESS, str(e), True)

    if summary is None:
        return _error_response(
            ErrorCode.SUMMARY_GENERATION_ERROR,
            "The summary could not be generated. Please try again later.",
            True,
        )

    return {
        "status": "success",
        "message": "Executive summary generated",
        "metadata": {
            "platform": session.platform.value if session.platform else None,
            "record_count": len(session.campaigns),
        },
        "data": summary.to_wire(),
    }


@mcp.tool()
async def reset_report() -> dict[str, Any]:
    """
    Discard the current report, its summary and any extraction still running.
    """
    _get_session().reset()
    return {
        "status": "success",
        "message": "Report cleared",
        "metadata": {},
        "data": [],
    }


# ============================================================================
# Resources
# ============================================================================


@mcp.resource("resource://health")
def health_check() -> dict[str, Any]:
    """
    Provides server health status and configuration information.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "server": "AdInsight MCP Server",
        "gemini_configured": bool(
            os.getenv("ADI_GEMINI__API_KEY")
            or os.getenv("GEMINI_API_KEY")
            or os.getenv("GOOGLE_API_KEY")
        ),
        "tools_available": [
            "parse_report",
            "extract_document_report",
            "get_dashboard_stats",
            "list_campaigns",
            "generate_executive_summary",
            "reset_report",
        ],
    }


@mcp.resource("resource://config")
def get_config() -> dict[str, Any]:
    """
    Provides the server's configuration status (without exposing secrets).
    """
    try:
        settings = get_settings()
    except ValueError as e:
        return {
            "server_version": __version__,
            "status": "error",
            "error": sanitize_error_message(str(e)),
        }

    return {"server_version": __version__, **settings.to_public_dict()}


# ============================================================================
# Server Factory
# ============================================================================


def create_mcp_server() -> FastMCP:
    """
    Create and return the configured MCP server instance.

    Returns:
        FastMCP: The configured server instance ready to run.
    """
    return mcp


def main() -> None:
    """Configure logging and run the MCP server."""
    settings = get_settings()
    setup_logging(settings)
    warn_if_debug_logging_in_production(settings)
    mcp.run()


# ============================================================================
# Entry Point
# ============================================================================

if __name__ == "__main__":
    main()
