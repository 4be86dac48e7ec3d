"""Column resolution rules for ad platform report headers.

Exports differ by platform, language and locale, so columns are matched by
keyword rather than by a fixed schema. Each rule lists keywords a lower-cased
header must contain (any of) and keywords it must not contain (none of).
Rules for the same role are tried in table order and the first rule that
resolves a column wins, so the order below decides which column is used when
several headers match partially.
"""

from typing import NamedTuple, Sequence

from adinsight_mcp.models.analysis import UNRESOLVED_COLUMN, ColumnRole


class ColumnRule(NamedTuple):
    """One keyword rule for a semantic role."""

    role: ColumnRole
    include: tuple[str, ...]
    exclude: tuple[str, ...] = ()


# Keywords that identify the header line (and campaign name column family)
HEADER_KEYWORDS: tuple[str, ...] = ("campaign", "campaña", "campana", "nombre de la")

COLUMN_RULES: tuple[ColumnRule, ...] = (
    ColumnRule(
        ColumnRole.NAME,
        include=("campaign name", "nombre de la", "campaña", "campana"),
    ),
    # "Cost per result" columns must never be taken for total spend
    ColumnRule(
        ColumnRole.SPEND,
        include=("gastad", "spent", "invers", "amount"),
        exclude=("por", "per", "costo por", "cost per"),
    ),
    ColumnRule(ColumnRole.SPEND, include=("(clp)",)),
    ColumnRule(
        ColumnRole.SPEND,
        include=("costo", "cost", "coste"),
        exclude=("por", "per", "conv"),
    ),
    ColumnRule(
        ColumnRole.RESULTS,
        include=("results", "resultados", "conversiones", "acciones"),
        exclude=("por", "per", "costo", "cost"),
    ),
    ColumnRule(ColumnRole.REACH, include=("reach", "alcance")),
    ColumnRule(ColumnRole.IMPRESSIONS, include=("impressions", "impresiones", "impr.")),
)


def find_column(
    headers: Sequence[str],
    include: Sequence[str],
    exclude: Sequence[str] = (),
) -> int:
    """Index of the first header matching any include and no exclude keyword.

    Args:
        headers: Lower-cased header tokens
        include: Keywords of which at least one must appear in the header
        exclude: Keywords of which none may appear in the header

    Returns:
        Zero-based column index, or -1 when no header matches
    """
    for index, header in enumerate(headers):
        matches = any(keyword in header for keyword in include)
        excluded = any(keyword in header for keyword in exclude)
        if matches and not excluded:
            return index
    return UNRESOLVED_COLUMN


def resolve_columns(
    headers: Sequence[str],
    rules: Sequence[ColumnRule] = COLUMN_RULES,
) -> dict[ColumnRole, int]:
    """Map every semantic role to a column index (-1 when unresolved).

    Roles without any rule (currently cost per result, which is always
    derived) resolve to -1.
    """
    columns: dict[ColumnRole, int] = {role: UNRESOLVED_COLUMN for role in ColumnRole}

    for rule in rules:
        if columns[rule.role] != UNRESOLVED_COLUMN:
            continue
        columns[rule.role] = find_column(headers, rule.include, rule.exclude)

    return columns
