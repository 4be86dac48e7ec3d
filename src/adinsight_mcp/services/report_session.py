"""Report session: the campaign data currently loaded in a dashboard.

A session holds exactly one report at a time. Every successful upload
replaces the previous records wholesale (never merges), and a failed upload
or summary leaves the previous state untouched. Only one upload or summary
may run at a time.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Sequence

from adinsight_mcp.analyzers.performance import (
    DEFAULT_SORT_DIRECTION,
    DEFAULT_SORT_KEY,
    SORTABLE_FIELDS,
    PerformanceAnalyzer,
    SortDirection,
    filter_and_sort_campaigns,
    next_sort_direction,
)
from adinsight_mcp.clients.gemini.client import GeminiClient
from adinsight_mcp.core.exceptions import OperationInProgressError, ValidationError
from adinsight_mcp.models.analysis import DashboardStats, ExecutiveSummary, ParseResult
from adinsight_mcp.models.base import utc_now
from adinsight_mcp.models.campaign import Campaign, Platform
from adinsight_mcp.parsers.report_parser import parse_report_with_diagnostics

logger = logging.getLogger(__name__)


class ReportSession:
    """State of one uploaded report and the operations on it."""

    def __init__(
        self,
        gemini_client: GeminiClient | None = None,
        analyzer: PerformanceAnalyzer | None = None,
    ):
        """Initialize an empty session.

        Args:
            gemini_client: Collaborator for PDF extraction and summaries
            analyzer: Dashboard statistics analyzer
        """
        self.gemini_client = gemini_client
        self.analyzer = analyzer or PerformanceAnalyzer()

        self.campaigns: list[Campaign] = []
        self.platform: Platform | None = None
        self.summary: ExecutiveSummary | None = None
        self.loaded_at: datetime | None = None
        self.sort_key: str = DEFAULT_SORT_KEY
        self.sort_direction: SortDirection = DEFAULT_SORT_DIRECTION

        self._operation: str | None = None
        # Bumped on reset so in-flight document results can be abandoned
        self._generation = 0

    @property
    def busy(self) -> bool:
        return self._operation is not None

    @property
    def has_report(self) -> bool:
        return bool(self.campaigns)

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        if self._operation is not None:
            raise OperationInProgressError(self._operation)
        self._operation = operation
        try:
            yield
        finally:
            self._operation = None

    def _replace(self, campaigns: Sequence[Campaign], platform: Platform) -> None:
        self.campaigns = list(campaigns)
        self.platform = platform
        self.summary = None
        self.loaded_at = utc_now()

    def _require_gemini(self) -> GeminiClient:
        if self.gemini_client is None:
            raise ValidationError("No Gemini client is configured for this session")
        return self.gemini_client

    def load_text_report(
        self, text: str, platform: Platform | str = Platform.META
    ) -> ParseResult:
        """Parse a delimited text report and make it the current report."""
        platform = Platform(platform)
        with self._guard("text upload"):
            result = parse_report_with_diagnostics(text, platform)
            self._replace(result.campaigns, platform)

        logger.info(
            f"Loaded {len(result.campaigns)} campaigns "
            f"from {platform.value} text report"
        )
        return result

    async def load_document_report(
        self, document: bytes, platform: Platform | str = Platform.GOOGLE
    ) -> list[Campaign] | None:
        """Extract records from a PDF report and make them the current report.

        Returns:
            The extracted records, or None when the session was reset while
            the extraction was running (the result is abandoned)

        Raises:
            DocumentExtractionError: If extraction fails; state is unchanged
        """
        platform = Platform(platform)
        client = self._require_gemini()

        with self._guard("document upload"):
            generation = self._generation
            campaigns = await client.extract_campaigns_from_pdf(document)

            if generation != self._generation:
                logger.info("Session was reset during extraction; discarding result")
                return None

            self._replace(campaigns, platform)

        logger.info(
            f"Loaded {len(campaigns)} campaigns from {platform.value} document report"
        )
        return campaigns

    @property
    def stats(self) -> DashboardStats:
        return self.analyzer.analyze(self.campaigns, self.platform)

    def campaign_table(
        self,
        search_term: str = "",
        sort_key: str | None = DEFAULT_SORT_KEY,
        direction: SortDirection = DEFAULT_SORT_DIRECTION,
    ) -> list[Campaign]:
        return filter_and_sort_campaigns(
            self.campaigns, search_term, sort_key, direction
        )

    def toggle_sort(self, key: str) -> SortDirection:
        """Advance the column-header sort cycle: desc, then asc, then unsorted.

        Raises:
            ValidationError: If the column is not sortable
        """
        if key not in SORTABLE_FIELDS:
            raise ValidationError(
                f"Cannot sort by '{key}'. "
                f"Sortable fields: {', '.join(SORTABLE_FIELDS)}"
            )
        self.sort_direction = next_sort_direction(
            self.sort_key, self.sort_direction, key
        )
        self.sort_key = key
        return self.sort_direction

    def sorted_table(self, search_term: str = "") -> list[Campaign]:
        """Campaign table using the sort chosen through ``toggle_sort``."""
        return self.campaign_table(search_term, self.sort_key, self.sort_direction)

    async def request_summary(self) -> ExecutiveSummary | None:
        """Generate an executive summary for the current report.

        Returns:
            The new summary, or None when generation failed (a previous
            summary, if any, is kept)

        Raises:
            ValidationError: If no report is loaded
        """
        if not self.campaigns:
            raise ValidationError("Load a report before requesting a summary")

        client = self._require_gemini()

        with self._guard("summary"):
            generation = self._generation
            summary = await client.generate_executive_summary(
                self.stats, self.campaigns
            )

            if summary is None or generation != self._generation:
                return None

            self.summary = summary
        return summary

    def reset(self) -> None:
        """Discard the current report and any in-flight results."""
        self._generation += 1
        self.campaigns = []
        self.platform = None
        self.summary = None
        self.loaded_at = None
        self.sort_key = DEFAULT_SORT_KEY
        self.sort_direction = DEFAULT_SORT_DIRECTION
        logger.info("Report session reset")
