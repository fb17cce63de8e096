"""
Trust-list parser adapter — HTML table extraction via BeautifulSoup.

Adapter layer — implements the TrustListParser port.

Pipeline:
  HTML text
    → <div id="trusted"> section           (STRUCTURAL_PARSE_ERROR if absent)
    → table rows, first row = <th> labels   (STRUCTURAL_PARSE_ERROR if a label is missing)
    → each later row's <td> cells           (ROW_SHAPE_ERROR if too few cells)
    → TrustListEntry(name, fingerprint), document order

Columns are located by label, not position: the vendor does not guarantee
column order. Short rows are fatal rather than skipped. Once the anchor and
header are validated the per-row structure is treated as authoritative, and
skipping a row would silently change the generated trust store.
"""

from __future__ import annotations

import structlog
from bs4 import BeautifulSoup, Tag
from railway import ErrorCode
from railway.result import Result

from roots_gen.domain.models import TrustListEntry

log = structlog.get_logger()

TRUSTED_SECTION_ID = "trusted"
NAME_COLUMN = "Certificate name"
FINGERPRINT_COLUMN = "Fingerprint (SHA-256)"

_NBSP = "\xa0"


def _cell_text(cell: Tag) -> str:
    """Cell text with all whitespace runs (including non-breaking spaces) collapsed."""
    return " ".join(cell.get_text().split())


def normalize_fingerprint(raw: str) -> str:
    """Drop line breaks, non-breaking spaces and whitespace, then lower-case."""
    return "".join(raw.replace(_NBSP, "").split()).lower()


def normalize_name(raw: str) -> str:
    return raw.replace(_NBSP, "").strip()


# ─────────────────────── Structural Steps ───────────────────────


def _locate_section(document: str) -> Result[Tag]:
    soup = BeautifulSoup(document, "html.parser")
    section = soup.find("div", id=TRUSTED_SECTION_ID)
    if not isinstance(section, Tag):
        return Result.failure(
            ErrorCode.STRUCTURAL_PARSE_ERROR,
            f'Expected section not found: <div id="{TRUSTED_SECTION_ID}">',
        )
    return Result.success(section)


def _table_rows(section: Tag) -> Result[list[Tag]]:
    return Result.success(section.find_all("tr")).ensure(
        lambda rows: len(rows) > 0,
        ErrorCode.STRUCTURAL_PARSE_ERROR,
        f'No table rows found in <div id="{TRUSTED_SECTION_ID}">',
    )


def column_positions(header_row: Tag) -> Result[dict[str, int]]:
    """
    Map header labels to their ordinal position.

    Both NAME_COLUMN and FINGERPRINT_COLUMN must be present.
    """
    positions = {_cell_text(th): i for i, th in enumerate(header_row.find_all("th"))}
    missing = [label for label in (NAME_COLUMN, FINGERPRINT_COLUMN) if label not in positions]
    if missing:
        return Result.failure(
            ErrorCode.STRUCTURAL_PARSE_ERROR,
            f"Expected column(s) not found in trust list header: {', '.join(missing)}"
            f" (found: {', '.join(positions) or 'none'})",
        )
    return Result.success(positions)


def _entry_from_row(row: Tag, row_number: int, positions: dict[str, int]) -> Result[TrustListEntry]:
    cells = row.find_all("td")
    name_at = positions[NAME_COLUMN]
    fingerprint_at = positions[FINGERPRINT_COLUMN]
    required = max(name_at, fingerprint_at) + 1
    if len(cells) < required:
        return Result.failure(
            ErrorCode.ROW_SHAPE_ERROR,
            f"Trust list row {row_number} has {len(cells)} cell(s), expected at least {required}",
        )
    return Result.success(
        TrustListEntry(
            name=normalize_name(cells[name_at].get_text()),
            fingerprint=normalize_fingerprint(cells[fingerprint_at].get_text()),
        )
    )


def _extract_entries(rows: list[Tag]) -> Result[list[TrustListEntry]]:
    header, *data_rows = rows
    return column_positions(header).flat_map(
        lambda positions: Result.all_of(
            [
                _entry_from_row(row, row_number, positions)
                for row_number, row in enumerate(data_rows, start=1)
            ]
        )
    )


# ─────────────────────── Public Parser Class ───────────────────────


class HtmlTrustListParser:
    """
    Parse the vendor's trusted-roots page into TrustListEntry values.

    Implements the TrustListParser port.
    """

    def parse(self, document: str) -> Result[list[TrustListEntry]]:
        """
        Extract (name, fingerprint) pairs from the trusted-roots table.

        Returns Result[list[TrustListEntry]] in document order.
        Returns Result.failure(STRUCTURAL_PARSE_ERROR, ...) when the section or
        a required column is missing, and Result.failure(ROW_SHAPE_ERROR, ...)
        when a data row is too short.
        """
        return (
            _locate_section(document)
            .flat_map(_table_rows)
            .flat_map(_extract_entries)
            .peek(lambda entries: log.info("trust_list.parsed", entries=len(entries)))
        )
