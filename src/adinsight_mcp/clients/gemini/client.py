"""Gemini client for document extraction and executive summaries."""

import logging
from typing import Any, Sequence

from google import genai
from google.genai import types
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from adinsight_mcp.clients.gemini.prompts import EXTRACTION_PROMPT, build_summary_prompt
from adinsight_mcp.core.config import GeminiConfig
from adinsight_mcp.core.exceptions import (
    ConfigurationError,
    DocumentExtractionError,
    SummaryGenerationError,
)
from adinsight_mcp.models.analysis import DashboardStats, ExecutiveSummary
from adinsight_mcp.models.base import BaseADIModel
from adinsight_mcp.models.campaign import (
    DOCUMENT_ID_PREFIX,
    Campaign,
    CampaignStatus,
    make_campaign_id,
)

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
JSON_MIME_TYPE = "application/json"


class ExtractedCampaign(BaseADIModel):
    """Campaign row as returned by the extraction model."""

    name: str
    spend: float
    results: float
    cost_per_result: float | None = None
    reach: float
    impressions: float | None = None


_EXTRACTED_CAMPAIGNS = TypeAdapter(list[ExtractedCampaign])


def campaigns_from_extraction(items: Sequence[ExtractedCampaign]) -> list[Campaign]:
    """Turn extracted rows into records with the same contract as parsed text.

    A supplied cost per result is kept; a missing or zero one is derived from
    spend and results. Impressions fall back to the reach column, which holds
    impressions in the source report.
    """
    return [
        Campaign(
            id=make_campaign_id(DOCUMENT_ID_PREFIX, index),
            name=item.name,
            spend=item.spend,
            results=item.results,
            cost_per_result=item.cost_per_result,
            reach=item.reach,
            impressions=(
                item.impressions if item.impressions is not None else item.reach
            ),
            status=CampaignStatus.ACTIVE,
        )
        for index, item in enumerate(items)
    ]


class GeminiClient:
    """Client for the two Gemini-backed operations.

    Examples:
        >>> client = GeminiClient(GeminiConfig(api_key="..."))
        >>> campaigns = await client.extract_campaigns_from_pdf(pdf_bytes)
        >>> summary = await client.generate_executive_summary(stats, campaigns)
    """

    def __init__(
        self,
        config: GeminiConfig,
        summary_language: str = "es",
        sdk_client: Any | None = None,
    ):
        """Initialize the Gemini client.

        Args:
            config: Gemini settings (API key, model, timeout)
            summary_language: Language code for executive summaries
            sdk_client: Pre-built ``genai.Client``; created lazily when omitted
        """
        self.config = config
        self.summary_language = summary_language
        self._client = sdk_client

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client

        if not self.config.is_configured:
            raise ConfigurationError(
                "Gemini API key is not configured. "
                "Set ADI_GEMINI__API_KEY or GEMINI_API_KEY."
            )

        self._client = genai.Client(
            api_key=self.config.api_key.get_secret_value(),
            http_options=types.HttpOptions(timeout=self.config.timeout_seconds * 1000),
        )
        logger.info(f"Gemini client initialized with model={self.config.model}")
        return self._client

    async def _generate_json(self, contents: Any, response_schema: Any) -> str:
        response = await self._get_client().aio.models.generate_content(
            model=self.config.model,
            contents=contents,
            config=types.GenerateContentConfig(
                response_mime_type=JSON_MIME_TYPE,
                response_schema=response_schema,
            ),
        )
        text = getattr(response, "text", None)
        if not text:
            raise ValueError("Model returned an empty response")
        return text

    async def extract_campaigns_from_pdf(self, document: bytes) -> list[Campaign]:
        """Extract campaign records from a PDF report.

        Args:
            document: Raw PDF bytes

        Returns:
            Records with ``g-`` ids, in the order the model returned them

        Raises:
            DocumentExtractionError: If the call fails or its output does not
                match the record schema. No partial results are returned.
        """
        if not document:
            raise DocumentExtractionError("The uploaded document is empty", 0)

        try:
            text = await self._generate_json(
                contents=[
                    types.Part.from_bytes(data=document, mime_type=PDF_MIME_TYPE),
                    EXTRACTION_PROMPT,
                ],
                response_schema=list[ExtractedCampaign],
            )
            items = _EXTRACTED_CAMPAIGNS.validate_json(text)
        except ConfigurationError:
            raise
        except PydanticValidationError as e:
            logger.error(f"Extracted data does not match the campaign schema: {e}")
            raise DocumentExtractionError(
                "Could not process the Google Ads PDF correctly: "
                "the extracted data is not a valid campaign table",
                len(document),
            ) from e
        except Exception as e:
            logger.error(
                f"Error extracting campaigns from PDF: {type(e).__name__}",
                exc_info=True,
            )
            raise DocumentExtractionError(
                "Could not process the Google Ads PDF correctly", len(document)
            ) from e

        campaigns = campaigns_from_extraction(items)
        logger.info(f"Extracted {len(campaigns)} campaigns from PDF report")
        return campaigns

    async def _request_summary(
        self, stats: DashboardStats, campaigns: Sequence[Campaign]
    ) -> ExecutiveSummary:
        prompt = build_summary_prompt(stats, campaigns, self.summary_language)
        try:
            text = await self._generate_json(
                contents=prompt, response_schema=ExecutiveSummary
            )
            return ExecutiveSummary.model_validate_json(text)
        except ConfigurationError:
            raise
        except Exception as e:
            raise SummaryGenerationError(f"Summary generation failed: {e}") from e

    async def generate_executive_summary(
        self, stats: DashboardStats, campaigns: Sequence[Campaign]
    ) -> ExecutiveSummary | None:
        """Ask the model for a narrative summary of the report.

        Returns:
            ExecutiveSummary, or None when generation fails for any reason
        """
        try:
            summary = await self._request_summary(stats, campaigns)
        except Exception as e:
            logger.error(f"Error generating summary: {type(e).__name__}: {e}")
            return None

        logger.info(
            f"Generated executive summary with {len(summary.recommendations)} "
            "recommendations"
        )
        return summary
