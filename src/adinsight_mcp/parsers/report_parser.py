"""Tolerant parser for delimited ad platform report exports.

The pipeline is a pure function of (raw text, platform):

1. split the text into non-empty lines
2. pick the delimiter from the first line and locate the header row
3. resolve semantic columns from the header tokens
4. normalize every data row into a Campaign record

Malformed numbers, missing columns and short rows never raise; they degrade
to zeros so an upload is never blocked. The resolution report returned by
``parse_report_with_diagnostics`` makes those silent defaults observable.
"""

import logging
import re

from adinsight_mcp.models.analysis import ColumnResolution, ColumnRole, ParseResult
from adinsight_mcp.models.campaign import (
    TEXT_ID_PREFIX,
    Campaign,
    CampaignStatus,
    Platform,
    compute_cost_per_result,
    make_campaign_id,
)
from adinsight_mcp.parsers.column_rules import HEADER_KEYWORDS, resolve_columns
from adinsight_mcp.utils.csv_parsing import (
    get_field,
    normalize_number,
    split_fields,
    strip_quotes,
)

logger = logging.getLogger(__name__)

# Header detection only looks at the top of the file
HEADER_SCAN_LIMIT = 25

# Rows whose name contains any of these are totals/summaries, not campaigns.
# Substring match: "The Totally New Campaign" is excluded as well.
EXCLUDED_NAME_KEYWORDS: tuple[str, ...] = ("total", "resumen")

_LINE_BREAK = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    """Split raw text into lines, dropping empty and whitespace-only ones."""
    return [line for line in _LINE_BREAK.split(text) if line.strip() != ""]


def detect_delimiter(first_line: str) -> str:
    """Semicolon if the first line contains one, comma otherwise."""
    return ";" if ";" in first_line else ","


def locate_header_row(lines: list[str], scan_limit: int = HEADER_SCAN_LIMIT) -> int:
    """Index of the first line mentioning a campaign keyword, else 0."""
    for index, line in enumerate(lines[:scan_limit]):
        lower_line = line.lower()
        if any(keyword in lower_line for keyword in HEADER_KEYWORDS):
            return index
    return 0


def tokenize_header(header_line: str, delimiter: str) -> list[str]:
    """Header tokens, unquoted, trimmed and lower-cased."""
    return [
        strip_quotes(token).lower() for token in split_fields(header_line, delimiter)
    ]


def is_campaign_row(name: str) -> bool:
    """Whether a row with this name cell holds an individual campaign."""
    lower_name = name.lower()
    if lower_name.strip() == "":
        return False
    return not any(keyword in lower_name for keyword in EXCLUDED_NAME_KEYWORDS)


def build_resolution(lines: list[str]) -> ColumnResolution:
    """Run delimiter detection, header location and column resolution."""
    delimiter = detect_delimiter(lines[0])
    header_row = locate_header_row(lines)
    headers = tokenize_header(lines[header_row], delimiter)

    resolution = ColumnResolution(
        delimiter=delimiter,
        header_row=header_row,
        headers=headers,
        columns=resolve_columns(headers),
    )

    logger.debug(
        f"Report layout: delimiter='{delimiter}', header_row={header_row}, "
        f"columns={resolution.model_dump(mode='json')['columns']}"
    )
    for role in resolution.unresolved_roles:
        if role == ColumnRole.COST_PER_RESULT:
            continue
        logger.warning(
            f"No column found for '{role.value}'; every record will default it "
            f"(headers: {headers})"
        )

    return resolution


def normalize_row(
    values: list[str], resolution: ColumnResolution, position: int
) -> Campaign:
    """Build the Campaign record for one tokenized data row."""
    spend = normalize_number(get_field(values, resolution.index_of(ColumnRole.SPEND)))
    results = normalize_number(
        get_field(values, resolution.index_of(ColumnRole.RESULTS))
    )

    return Campaign(
        id=make_campaign_id(TEXT_ID_PREFIX, position),
        name=get_field(values, resolution.index_of(ColumnRole.NAME)),
        spend=spend,
        results=results,
        cost_per_result=compute_cost_per_result(spend, results),
        reach=normalize_number(
            get_field(values, resolution.index_of(ColumnRole.REACH))
        ),
        impressions=normalize_number(
            get_field(values, resolution.index_of(ColumnRole.IMPRESSIONS))
        ),
        status=CampaignStatus.ACTIVE,
    )


def parse_report_with_diagnostics(
    text: str, platform: Platform | str = Platform.META
) -> ParseResult:
    """Parse a delimited report and report how its columns were resolved.

    Args:
        text: Decoded text content of the uploaded file
        platform: Platform the file came from. Accepted for future
            platform-specific rules; parsing is currently identical for all.

    Returns:
        ParseResult with the records in row order, the column resolution
        (None for input with fewer than two lines) and the number of
        excluded rows
    """
    platform = Platform(platform)
    lines = split_lines(text)

    if len(lines) < 2:
        logger.info(f"Report has {len(lines)} non-empty line(s); nothing to parse")
        return ParseResult()

    resolution = build_resolution(lines)
    name_index = resolution.index_of(ColumnRole.NAME)

    campaigns: list[Campaign] = []
    skipped_rows = 0

    for line in lines[resolution.header_row + 1 :]:
        values = split_fields(line, resolution.delimiter)
        if not is_campaign_row(get_field(values, name_index)):
            skipped_rows += 1
            continue
        campaigns.append(normalize_row(values, resolution, len(campaigns)))

    logger.info(
        f"Parsed {len(campaigns)} campaigns from {platform.value} report "
        f"({skipped_rows} rows skipped)"
    )
    return ParseResult(
        campaigns=campaigns, resolution=resolution, skipped_rows=skipped_rows
    )


def parse_report(text: str, platform: Platform | str = Platform.META) -> list[Campaign]:
    """Parse a delimited report into campaign records.

    Fewer than two non-empty lines yields an empty list.
    """
    return parse_report_with_diagnostics(text, platform).campaigns
