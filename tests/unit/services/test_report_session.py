"""Tests for the report session state machine."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from adinsight_mcp.clients.gemini.client import GeminiClient
from adinsight_mcp.core.exceptions import (
    DocumentExtractionError,
    OperationInProgressError,
    ValidationError,
)
from adinsight_mcp.models.analysis import ExecutiveSummary
from adinsight_mcp.models.campaign import Campaign, Platform
from adinsight_mcp.services.report_session import ReportSession

SUMMARY = ExecutiveSummary(
    overview="ok", strengths=["a"], weaknesses=["b"], recommendations=["c"]
)


@pytest.fixture
def mock_gemini():
    client = MagicMock(spec=GeminiClient)
    client.extract_campaigns_from_pdf = AsyncMock(
        return_value=[Campaign(id="g-0", name="Brand", spend=10, results=2)]
    )
    client.generate_executive_summary = AsyncMock(return_value=SUMMARY)
    return client


@pytest.fixture
def session(mock_gemini):
    return ReportSession(gemini_client=mock_gemini)


class TestTextReports:
    """Test loading delimited text reports."""

    def test_load_replaces_state(self, session, meta_report, google_report):
        session.load_text_report(meta_report, Platform.META)
        assert len(session.campaigns) == 2
        assert session.platform == Platform.META
        assert session.loaded_at is not None

        session.load_text_report(google_report, "google")
        assert [c.name for c in session.campaigns] == ["Search - Brand", "Display"]
        assert session.platform == Platform.GOOGLE

    def test_load_clears_summary(self, session, meta_report):
        session.summary = SUMMARY
        session.load_text_report(meta_report)
        assert session.summary is None

    def test_empty_upload_clears_report(self, session, meta_report):
        session.load_text_report(meta_report)
        result = session.load_text_report("")
        assert result.campaigns == []
        assert session.has_report is False

    def test_rejected_while_busy(self, session, meta_report):
        session._operation = "document upload"
        with pytest.raises(OperationInProgressError, match="document upload"):
            session.load_text_report(meta_report)
        assert session.campaigns == []

    def test_guard_is_released(self, session, meta_report):
        session.load_text_report(meta_report)
        assert session.busy is False


class TestDocumentReports:
    """Test loading PDF reports through the extraction collaborator."""

    @pytest.mark.asyncio
    async def test_load_document(self, session, mock_gemini):
        campaigns = await session.load_document_report(b"%PDF")

        assert [c.id for c in campaigns] == ["g-0"]
        assert session.campaigns == campaigns
        assert session.platform == Platform.GOOGLE
        mock_gemini.extract_campaigns_from_pdf.assert_awaited_once_with(b"%PDF")

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_state(
        self, session, mock_gemini, meta_report
    ):
        session.load_text_report(meta_report)
        session.summary = SUMMARY
        previous = list(session.campaigns)
        mock_gemini.extract_campaigns_from_pdf.side_effect = DocumentExtractionError(
            "bad pdf", 4
        )

        with pytest.raises(DocumentExtractionError):
            await session.load_document_report(b"%PDF")

        assert session.campaigns == previous
        assert session.summary is SUMMARY
        assert session.busy is False

    @pytest.mark.asyncio
    async def test_reset_during_extraction_discards_result(self, session, mock_gemini):
        async def extract_then_reset(document):
            session.reset()
            return [Campaign(id="g-0", name="Late")]

        mock_gemini.extract_campaigns_from_pdf.side_effect = extract_then_reset

        assert await session.load_document_report(b"%PDF") is None
        assert session.campaigns == []
        assert session.busy is False

    @pytest.mark.asyncio
    async def test_no_gemini_client(self):
        with pytest.raises(ValidationError):
            await ReportSession().load_document_report(b"%PDF")


class TestSummaries:
    """Test executive summary requests."""

    @pytest.mark.asyncio
    async def test_requires_report(self, session):
        with pytest.raises(ValidationError, match="Load a report"):
            await session.request_summary()

    @pytest.mark.asyncio
    async def test_summary_is_stored(self, session, mock_gemini, meta_report):
        session.load_text_report(meta_report)

        summary = await session.request_summary()

        assert summary is SUMMARY
        assert session.summary is SUMMARY
        stats, campaigns = mock_gemini.generate_executive_summary.call_args.args
        assert stats.total_results == 150
        assert campaigns == session.campaigns

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_summary(
        self, session, mock_gemini, meta_report
    ):
        session.load_text_report(meta_report)
        await session.request_summary()
        mock_gemini.generate_executive_summary.return_value = None

        assert await session.request_summary() is None
        assert session.summary is SUMMARY

    @pytest.mark.asyncio
    async def test_reset_during_summary_discards_result(
        self, session, mock_gemini, meta_report
    ):
        session.load_text_report(meta_report)

        async def summarize_then_reset(stats, campaigns):
            session.reset()
            return SUMMARY

        mock_gemini.generate_executive_summary.side_effect = summarize_then_reset

        assert await session.request_summary() is None
        assert session.summary is None


class TestSessionViews:
    def test_stats_of_empty_session(self, session):
        stats = session.stats
        assert stats.total_spend == 0
        assert stats.star_campaign is None

    def test_stats_use_loaded_platform(self, session, google_report):
        session.load_text_report(google_report, Platform.GOOGLE)
        assert session.stats.platform == "google"

    def test_campaign_table(self, session, meta_report):
        session.load_text_report(meta_report)
        table = session.campaign_table("invierno", "spend", "desc")
        assert [c.name for c in table] == ["Campaña Invierno"]

    def test_reset(self, session, meta_report):
        session.load_text_report(meta_report)
        session.summary = SUMMARY

        session.reset()

        assert session.campaigns == []
        assert session.platform is None
        assert session.summary is None
        assert session.loaded_at is None


class TestSortToggle:
    """Test the column-header sort cycle kept by the session."""

    def test_default_sort(self, session):
        assert session.sort_key == "spend"
        assert session.sort_direction == "desc"

    def test_same_column_cycles(self, session, meta_report):
        session.load_text_report(meta_report)

        assert session.toggle_sort("spend") == "asc"
        assert [c.name for c in session.sorted_table()] == [
            "Campaña Invierno",
            "Campaña Verano",
        ]
        assert session.toggle_sort("spend") is None
        assert session.sort_key == "spend"
        assert session.toggle_sort("spend") == "desc"

    def test_new_column_starts_descending(self, session):
        session.toggle_sort("spend")
        assert session.toggle_sort("reach") == "desc"
        assert session.sort_key == "reach"

    def test_unknown_column(self, session):
        with pytest.raises(ValidationError, match="Cannot sort by 'status'"):
            session.toggle_sort("status")
        assert session.sort_key == "spend"

    def test_reset_restores_default_sort(self, session):
        session.toggle_sort("name")
        session.reset()
        assert session.sort_key == "spend"
        assert session.sort_direction == "desc"
