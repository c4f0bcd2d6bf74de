"""
Rich-Text Renderer.

Draws the proposal markup dialect onto a Document:

    # / ## / ###     headings (always left-aligned)
    - / -- / ---     bullets, one indent level per extra dash
    ●, •, ○, ◦       normalized to "-" first
    **bold**         bold run
    *italic*         italic run

Bold and italic do not nest. Every line is drawn as a sequence of
StyleRuns where all runs except the last carry the continued flag.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from .document import Document, StyleRun
from .styles import COLORS, FONT_FAMILY, FONT_SIZE_BODY, font_for


BODY_COLOR = COLORS["body"]
HEADING_COLOR = COLORS["heading"]

BULLET_GLYPHS = re.compile(r"[●•○◦]")
PARAGRAPH_BREAK = re.compile(r"\n\n+")
HEADING_LINE = re.compile(r"^(#{1,3})\s+(.*)$")
BULLET_LINE = re.compile(r"^(-+)\s+(.*)$")
BOLD_SPAN = re.compile(r"(\*\*.*?\*\*)")
ITALIC_SPAN = re.compile(r"(\*.+?\*)")

HEADING_SIZE_OFFSET = {1: 4, 2: 3, 3: 2}
BULLET_INDENT = 20
BULLET_LEVEL_INDENT = 15
BULLET_SYMBOL = "• "

PARAGRAPH_SPACING = 0.8
BLANK_LINE_SPACING = 0.3
HEADING_SPACING = 0.2

FALLBACK_TEXT = "No content available"


class LineKind(str, Enum):
    HEADING = "heading"
    BULLET = "bullet"
    PLAIN = "plain"
    BLANK = "blank"


@dataclass(frozen=True)
class MarkupLine:
    """A classified source line; level is the heading level or bullet depth."""
    kind: LineKind
    text: str
    level: int = 0


def normalize_bullets(text: str) -> str:
    return BULLET_GLYPHS.sub("-", text)


def classify_line(line: str) -> MarkupLine:
    """Classify one line as heading, bullet, plain text or blank."""
    trimmed = line.strip()
    if not trimmed:
        return MarkupLine(LineKind.BLANK, "")

    heading = HEADING_LINE.match(trimmed)
    if heading:
        return MarkupLine(LineKind.HEADING, heading.group(2), len(heading.group(1)))

    bullet = BULLET_LINE.match(trimmed)
    if bullet:
        return MarkupLine(LineKind.BULLET, bullet.group(2), len(bullet.group(1)) - 1)

    return MarkupLine(LineKind.PLAIN, trimmed)


def heading_font_size(level: int, base_font_size: float = FONT_SIZE_BODY) -> float:
    return base_font_size + HEADING_SIZE_OFFSET.get(level, 2)


def bullet_indent(level: int) -> float:
    return BULLET_INDENT + max(0, level) * BULLET_LEVEL_INDENT


def strip_emphasis(text: str) -> str:
    """Remove bold/italic markers, keeping the marked text."""
    text = re.sub(r"\*\*(.*?)\*\*", r"\1", text)
    return re.sub(r"\*(.+?)\*", r"\1", text)


def parse_inline(text: str, base_font_size: float = FONT_SIZE_BODY,
                 color: str = BODY_COLOR) -> List[StyleRun]:
    """Split a line into bold / italic / regular runs.

    Example:
        >>> [r.bold for r in parse_inline("plain **bold** plain")]
        [False, True, False]
    """
    pieces = []
    for part in BOLD_SPAN.split(str(text)):
        if not part:
            continue
        if part.startswith("**") and part.endswith("**") and len(part) >= 4:
            if part[2:-2]:
                pieces.append((part[2:-2], True, False))
            continue
        for sub in ITALIC_SPAN.split(part):
            if not sub:
                continue
            if len(sub) > 2 and sub.startswith("*") and sub.endswith("*"):
                pieces.append((sub[1:-1], False, True))
            else:
                pieces.append((sub, False, False))

    last = len(pieces) - 1
    return [
        StyleRun(
            text=piece, bold=bold, italic=italic, font_size=base_font_size,
            color=color, continued=idx < last,
        )
        for idx, (piece, bold, italic) in enumerate(pieces)
    ]


def render_runs(doc: Document, runs: Sequence[StyleRun], align: str = "left",
                line_gap: float = 0, indent: float = 0,
                base_font_size: float = FONT_SIZE_BODY, tag: str = "") -> None:
    """Emit runs as one visual line, then close it with an empty run."""
    for run in runs:
        doc.emit_run(run, font_for, align=align, line_gap=line_gap, indent=indent, tag=tag)
    doc.emit_run(StyleRun("", font_size=base_font_size), font_for,
                 align=align, line_gap=line_gap, indent=indent, tag=tag)


def render_inline(doc: Document, text: str, base_font_size: float = FONT_SIZE_BODY,
                  align: str = "left", line_gap: float = 0, indent: float = 0,
                  tag: str = "") -> None:
    """Draw a line with inline bold/italic support."""
    render_runs(doc, parse_inline(text, base_font_size), align=align, line_gap=line_gap,
                indent=indent, base_font_size=base_font_size, tag=tag)


def render_markup(doc: Document, text: str, base_font_size: float = FONT_SIZE_BODY,
                  align: str = "left", line_gap: float = 6) -> None:
    """Render a block of markup text at the cursor.

    Args:
        doc: Target document (cursor is advanced)
        text: Markup source
        base_font_size: Body size; headings scale from it
        align: Alignment for plain lines (headings stay left)
        line_gap: Extra space between wrapped lines
    """
    if not text:
        doc.draw_text(FALLBACK_TEXT, font_name=FONT_FAMILY, font_size=base_font_size, color=BODY_COLOR)
        return

    # Never inherit the x position of a previous drawing (e.g. a table cell)
    doc.reset_x()

    paragraphs = PARAGRAPH_BREAK.split(normalize_bullets(str(text)))
    for p_idx, paragraph in enumerate(paragraphs):
        if not paragraph.strip():
            continue

        for raw_line in paragraph.split("\n"):
            line = classify_line(raw_line)

            if line.kind is LineKind.BLANK:
                doc.move_down(BLANK_LINE_SPACING)

            elif line.kind is LineKind.HEADING:
                doc.draw_text(
                    strip_emphasis(line.text),
                    font_name=font_for(bold=True),
                    font_size=heading_font_size(line.level, base_font_size),
                    color=HEADING_COLOR,
                    align="left",
                    line_gap=line_gap,
                    tag=f"h{line.level}",
                )
                doc.move_down(HEADING_SPACING)

            elif line.kind is LineKind.BULLET:
                indent = bullet_indent(line.level)
                doc.emit_run(
                    StyleRun(BULLET_SYMBOL, font_size=base_font_size, color=BODY_COLOR, continued=True),
                    font_for, align="left", line_gap=line_gap, indent=indent,
                )
                render_inline(doc, line.text, base_font_size, align="left",
                              line_gap=line_gap, indent=indent, tag="bullet")

            else:
                render_inline(doc, line.text, base_font_size, align=align, line_gap=line_gap)

        if p_idx < len(paragraphs) - 1:
            doc.move_down(PARAGRAPH_SPACING)
