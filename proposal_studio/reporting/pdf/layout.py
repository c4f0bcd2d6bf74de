"""
PDF Layout Module.

Pagination and table layout for proposal sections.
No section semantics - the builder decides what goes where, this module
decides whether it fits and how tables are laid out.
"""
import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .document import Document
from .richtext import strip_emphasis
from .styles import (
    COLORS,
    FONT_FAMILY,
    FONT_FAMILY_BOLD,
    FONT_SIZE_BODY,
    FONT_SIZE_TABLE,
    FONT_SIZE_TABLE_HEADER,
)


logger = logging.getLogger("ProposalStudio.PDFLayout")


# ============================================================================
# PAGE-FIT CHECKS
# ============================================================================

HEADING_MIN_SPACE = 200
ORPHAN_HEADING_MIN_SPACE = 100

TABLE_ROW_ESTIMATE = 25
TABLE_MIN_RESERVE = 120
TABLE_MAX_RESERVE = 300


def remaining_height(doc: Document) -> float:
    """Space left on the current page below the cursor."""
    return doc.remaining_height


def would_fit(doc: Document, required_height: float, is_heading: bool = False) -> bool:
    needed = HEADING_MIN_SPACE if is_heading else required_height
    return remaining_height(doc) >= needed


def check_page_break(doc: Document, required_height: float = 0, is_heading: bool = False) -> bool:
    """Start a new page when the content would not fit.

    Headings need HEADING_MIN_SPACE so at least some content follows them;
    other content needs its own height.

    Returns:
        True if a page break occurred.
    """
    if would_fit(doc, required_height, is_heading):
        return False
    logger.debug(
        "Page break: remaining %.1f < required %.1f",
        remaining_height(doc), HEADING_MIN_SPACE if is_heading else required_height,
    )
    doc.add_page()
    return True


def min_table_height(row_count: int) -> float:
    """Space to reserve before a table heading, from its candidate row count."""
    return max(TABLE_MIN_RESERVE, min(row_count * TABLE_ROW_ESTIMATE, TABLE_MAX_RESERVE))


# ============================================================================
# TABLE PARSING
# ============================================================================

SEPARATOR_LINE = re.compile(r"^[\s\-|]+$")
BR_TAG = re.compile(r"<br\s*/?>", re.IGNORECASE)

BUDGET_RATIOS = (0.26, 0.24, 0.16, 0.12, 0.22)
BUDGET_ALIGNS = ("left", "left", "center", "center", "right")

NBSP = "\u00a0"


@dataclass(frozen=True)
class Table:
    """Pipe table parsed from section content."""
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]

    @property
    def column_count(self) -> int:
        return len(self.headers)


@dataclass(frozen=True)
class ColumnLayout:
    widths: Tuple[float, ...]
    aligns: Tuple[str, ...]
    is_budget: bool = False


def table_lines(content: str) -> List[str]:
    """Lines that look like table rows (no separators, no blanks)."""
    rows = []
    for line in content.split("\n"):
        trimmed = line.strip()
        if trimmed and "|" in trimmed and not SEPARATOR_LINE.match(trimmed):
            rows.append(trimmed)
    return rows


def parse_row(row: str) -> List[str]:
    """Split a row on pipes, keeping empty middle cells.

    A leading or trailing empty cell produced by an edge pipe is dropped.
    """
    cells = [cell.strip() for cell in row.split("|")]
    if cells and cells[0] == "":
        cells.pop(0)
    if cells and cells[-1] == "":
        cells.pop()
    return cells


def normalize_row(row: Sequence[str], header_count: int) -> Tuple[str, ...]:
    """Fit a row to exactly header_count cells.

    Overflow cells are merged (space-joined, empties dropped) into the last
    column; short rows are padded with empty strings.
    """
    cells = list(row)
    if len(cells) > header_count:
        head = cells[:header_count - 1]
        tail = [cell for cell in cells[header_count - 1:] if cell != ""]
        return tuple(head + [" ".join(tail)])
    cells.extend([""] * (header_count - len(cells)))
    return tuple(cells)


def parse_table(content: str) -> Optional[Table]:
    """Parse pipe-table content.

    Returns:
        Table, or None when fewer than two usable rows exist.
    """
    lines = table_lines(content)
    if len(lines) < 2:
        return None

    parsed = [parse_row(line) for line in lines]
    headers = tuple(parsed[0])
    if not headers:
        return None

    rows = tuple(normalize_row(row, len(headers)) for row in parsed[1:])
    return Table(headers=headers, rows=rows)


def is_budget_table(headers: Sequence[str]) -> bool:
    """Detect the 5-column Phase / Role / Rate / Hours / Cost table."""
    if len(headers) != 5:
        return False
    lower = [str(h).lower() for h in headers]

    def has(term: str) -> bool:
        return any(term in h for h in lower)

    return (
        has("phase")
        and has("role")
        and (has("hourly") or has("rate"))
        and has("hour")
        and has("cost")
    )


def column_layout(headers: Sequence[str], available_width: float) -> ColumnLayout:
    """Column widths and alignments for a table."""
    count = len(headers)
    if is_budget_table(headers):
        return ColumnLayout(
            widths=tuple(ratio * available_width for ratio in BUDGET_RATIOS),
            aligns=BUDGET_ALIGNS,
            is_budget=True,
        )
    return ColumnLayout(
        widths=tuple(available_width / count for _ in range(count)),
        aligns=("left",) * count,
    )


def cell_text(cell: str) -> str:
    """Display text for a cell; empty cells keep their box via NBSP."""
    text = BR_TAG.sub("\n", strip_emphasis(cell))
    return text if text != "" else NBSP


def is_summary_row(row: Sequence[str]) -> bool:
    label = str(row[0] if row else "").lower()
    return "subtotal" in label or "total" in label


# ============================================================================
# TABLE RENDERING
# ============================================================================

CELL_PADDING = 8
HEADER_HEIGHT = 30
MIN_ROW_HEIGHT = 30
ROW_VERTICAL_PADDING = 16
ROW_BREAK_SLACK = 20
TABLE_GAP_AFTER = 20

HEADER_FILL = COLORS["background"]
BORDER_COLOR = COLORS["border"]
TABLE_TEXT_COLOR = COLORS["table_text"]
ROW_FILLS = (COLORS["white"], COLORS["background"])


def draw_table_header(doc: Document, headers: Sequence[str], layout: ColumnLayout, y: float) -> float:
    """Draw the header row at y. Returns the y below it."""
    x = doc.margins.left
    for header, width in zip(headers, layout.widths):
        doc.draw_rect(x, y, width, HEADER_HEIGHT, fill=HEADER_FILL, stroke=BORDER_COLOR, tag="table-header")
        doc.draw_text_at(
            BR_TAG.sub("\n", header),
            x + CELL_PADDING,
            y + CELL_PADDING,
            width - 2 * CELL_PADDING,
            font_name=FONT_FAMILY_BOLD,
            font_size=FONT_SIZE_TABLE_HEADER,
            color=TABLE_TEXT_COLOR,
            align="left",
            tag="table-header",
        )
        x += width
    return y + HEADER_HEIGHT


def row_face(row: Sequence[str]) -> str:
    """Summary rows are drawn bold, everything else regular."""
    return FONT_FAMILY_BOLD if is_summary_row(row) else FONT_FAMILY


def row_height(doc: Document, row: Sequence[str], layout: ColumnLayout,
               font_name: Optional[str] = None) -> float:
    """Row is as tall as its tallest wrapped cell (plus padding), at least 30.

    Cells are measured in the face they are drawn with, which defaults to
    row_face(row).
    """
    face = font_name or row_face(row)
    height = MIN_ROW_HEIGHT
    for cell, width in zip(row, layout.widths):
        text_height = doc.measure_text(
            cell_text(cell), width - 2 * CELL_PADDING,
            font_name=face, font_size=FONT_SIZE_TABLE,
        )
        height = max(height, text_height + ROW_VERTICAL_PADDING)
    return height


def render_table(doc: Document, content: str) -> bool:
    """Render pipe-table content at the cursor.

    Rows that do not fit start a new page and the header row is drawn
    again first. Content with fewer than two table rows is drawn as plain
    text instead.

    Returns:
        True if a table was drawn, False if the plain-text fallback was used.
    """
    table = parse_table(content)
    if table is None:
        logger.debug("Not enough table rows, rendering as text")
        doc.draw_text(content, font_name=FONT_FAMILY, font_size=FONT_SIZE_BODY)
        return False

    layout = column_layout(table.headers, doc.content_width)

    # Page-break decisions for the heading happen at section level
    y = draw_table_header(doc, table.headers, layout, doc.cursor.y)

    for row_index, row in enumerate(table.rows):
        height = row_height(doc, row, layout)

        doc.cursor.y = y
        if remaining_height(doc) < height + ROW_BREAK_SLACK:
            doc.add_page()
            y = draw_table_header(doc, table.headers, layout, doc.cursor.y)

        fill = ROW_FILLS[row_index % 2]
        face = row_face(row)

        x = doc.margins.left
        for cell, width, align in zip(row, layout.widths, layout.aligns):
            doc.draw_rect(x, y, width, height, fill=fill, stroke=BORDER_COLOR, tag="table-cell")
            doc.draw_text_at(
                cell_text(cell),
                x + CELL_PADDING,
                y + CELL_PADDING,
                width - 2 * CELL_PADDING,
                font_name=face,
                font_size=FONT_SIZE_TABLE,
                color=TABLE_TEXT_COLOR,
                align=align,
                tag="table-cell",
            )
            x += width
        y += height

    doc.cursor.y = y + TABLE_GAP_AFTER
    doc.reset_x()
    return True
