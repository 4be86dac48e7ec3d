"""Prompt text for the Gemini document extraction and summary calls."""

from typing import Sequence

from adinsight_mcp.models.analysis import DashboardStats
from adinsight_mcp.models.campaign import Campaign, Platform

LANGUAGE_NAMES = {
    "es": "Spanish",
    "en": "English",
    "pt": "Portuguese",
}

EXTRACTION_PROMPT = """\
Analyze this Google Ads PDF report and extract the EXACT values from its tables.

CRITICAL INSTRUCTIONS:
1. DO NOT ROUND ANY VALUE. If the cost is 77625.43, extract 77625.43.
2. Identify every individual campaign.
3. For each campaign extract:
   - "name": the exact campaign name.
   - "spend": the value of the "Costo" / "Cost" column.
   - "results": the value of the "Conversiones" / "Conversions" column
     (when there is none, use "Interacciones" / "Interactions").
   - "costPerResult": the value of "Costo/conv." / "Cost / conv.".
   - "reach": the value of "Impresiones" / "Impr.".
4. IGNORE rows labelled "Total", "Cuenta", "Account" or any summary row.
   Only individual campaign rows are wanted.
5. Return numbers as plain JSON numbers, without currency symbols or
   thousands separators.
"""


def build_summary_prompt(
    stats: DashboardStats,
    campaigns: Sequence[Campaign],
    language: str = "es",
) -> str:
    """Prompt asking for an executive summary of one report.

    Args:
        stats: Dashboard statistics of the report
        campaigns: Records of the report
        language: Language code for the narrative

    Returns:
        Prompt text
    """
    platform = Platform(stats.platform)
    star_name = stats.star_campaign.name if stats.star_campaign else "N/A"
    underperformers = (
        ", ".join(c.name for c in stats.underperforming_campaigns) or "None"
    )
    language_name = LANGUAGE_NAMES.get(language, language)

    return f"""\
As an expert digital marketing analyst specialised in {platform.display_name},
write a professional, actionable executive summary based on this REAL
performance data.

PERIOD STATISTICS:
- Total spend: {stats.total_spend}
- Total {platform.results_label}: {stats.total_results}
- Average cost per conversion: {stats.avg_cost_per_result}
- Campaigns analyzed: {len(campaigns)}

LEADING CAMPAIGN: {star_name}
CRITICAL CAMPAIGNS: {underperformers}

Answer in {language_name}, as JSON for a professional dashboard with an
"overview" paragraph and "strengths", "weaknesses" and "recommendations" lists.
"""
