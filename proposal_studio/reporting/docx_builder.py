"""
DOCX Builder Module.

Generates editable Word documents for proposals.
Structure follows the PDF: title page, then each section on its own page.

Key Features:
- Same section model and markup parser as the PDF (single source of truth)
- Pipe tables become grid tables with the PDF's column proportions
- Pages-friendly styles (built-in list styles, no floating elements)
"""
import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Optional, Union

from docx import Document
from docx.shared import Inches, Pt, RGBColor
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn
from docx.oxml import OxmlElement

from models.proposal import (
    Company,
    ContactFields,
    MarkupText,
    Proposal,
    coerce_company,
    coerce_proposal,
)
from proposal_studio.config import Config

from .pdf.branding import BrandingRegistry
from .pdf.layout import column_layout, is_summary_row, parse_table, BR_TAG
from .pdf.richtext import (
    FALLBACK_TEXT,
    LineKind,
    PARAGRAPH_BREAK,
    classify_line,
    normalize_bullets,
    parse_inline,
    strip_emphasis,
)

logger = logging.getLogger("ProposalStudio.DOCXBuilder")

FONT_FACE = "Calibri"
HEADING_COLOR = RGBColor(0x07, 0x37, 0x63)
HEADER_SHADING = "F8F9FA"
BODY_SIZE = 12
TABLE_SIZE = 11
PAGE_MARGIN = Inches(1)
USABLE_WIDTH = Inches(6.5)

ALIGN = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _style_run(run, size: float = BODY_SIZE, bold: bool = False, italic: bool = False,
               color: Optional[RGBColor] = None):
    run.font.name = FONT_FACE
    run.font.size = Pt(size)
    run.bold = bold
    run.italic = italic
    if color is not None:
        run.font.color.rgb = color
    return run


def _add_centered(doc, text: str, size: float, bold: bool = False,
                  color: Optional[RGBColor] = None):
    p = doc.add_paragraph()
    p.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _style_run(p.add_run(text), size=size, bold=bold, color=color)
    return p


def _add_inline(paragraph, text: str, size: float = BODY_SIZE):
    """Add bold/italic runs parsed from a markup line."""
    for style_run in parse_inline(text, size):
        _style_run(paragraph.add_run(style_run.text), size=size,
                   bold=style_run.bold, italic=style_run.italic)


def _shade_cell(cell, fill: str):
    tc_pr = cell._tc.get_or_add_tcPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    tc_pr.append(shd)


def _set_cell_text(cell, text: str, align: str = "left", bold: bool = False):
    cell.text = ""
    p = cell.paragraphs[0]
    p.alignment = ALIGN.get(align, WD_ALIGN_PARAGRAPH.LEFT)
    lines = BR_TAG.sub("\n", strip_emphasis(text)).split("\n")
    for idx, line in enumerate(lines):
        run = _style_run(p.add_run(line), size=TABLE_SIZE, bold=bold)
        if idx < len(lines) - 1:
            run.add_break()


def _add_header_logo(doc, company: Company, branding: BrandingRegistry) -> bool:
    """Place the company logo in the page header (best-effort)."""
    try:
        path = branding.logo_path_for(company)
        if path is None or branding.logo_for(company) is None:
            return False
        header = doc.sections[0].header
        p = header.paragraphs[0] if header.paragraphs else header.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.RIGHT
        p.add_run().add_picture(str(path), width=Inches(1.1))
        return True
    except Exception as e:
        logger.warning("Could not add header logo: %s", e)
        return False


# =============================================================================
# CONTENT BUILDERS (mirror pdf/builder.py dispatch)
# =============================================================================

def _add_table(doc, content: str) -> bool:
    """Add a pipe table. Falls back to plain text like the PDF does."""
    table_data = parse_table(content)
    if table_data is None:
        p = doc.add_paragraph()
        _style_run(p.add_run(content), size=BODY_SIZE)
        return False

    layout = column_layout(table_data.headers, USABLE_WIDTH)
    table = doc.add_table(rows=len(table_data.rows) + 1, cols=table_data.column_count)
    table.style = "Table Grid"

    for j, header in enumerate(table_data.headers):
        cell = table.rows[0].cells[j]
        cell.width = int(layout.widths[j])
        _set_cell_text(cell, header, bold=True)
        _shade_cell(cell, HEADER_SHADING)

    for i, row in enumerate(table_data.rows, start=1):
        bold = is_summary_row(row)
        for j, value in enumerate(row):
            cell = table.rows[i].cells[j]
            cell.width = int(layout.widths[j])
            _set_cell_text(cell, value, align=layout.aligns[j], bold=bold)

    doc.add_paragraph()  # Spacing after table
    return True


def _add_markup(doc, text: str, align: str = "justify"):
    """Add markup text: headings, bullets and paragraphs with inline styling."""
    if not text:
        p = doc.add_paragraph()
        _style_run(p.add_run(FALLBACK_TEXT), size=BODY_SIZE)
        return

    for paragraph in PARAGRAPH_BREAK.split(normalize_bullets(text)):
        if not paragraph.strip():
            continue
        for raw_line in paragraph.split("\n"):
            line = classify_line(raw_line)
            if line.kind is LineKind.BLANK:
                continue
            if line.kind is LineKind.HEADING:
                p = doc.add_paragraph()
                _style_run(p.add_run(strip_emphasis(line.text)),
                           size=BODY_SIZE + 5 - line.level, bold=True)
            elif line.kind is LineKind.BULLET:
                style = "List Bullet" if line.level == 0 else f"List Bullet {min(line.level + 1, 3)}"
                p = doc.add_paragraph(style=style)
                _add_inline(p, line.text)
            else:
                p = doc.add_paragraph()
                p.alignment = ALIGN.get(align, WD_ALIGN_PARAGRAPH.LEFT)
                _add_inline(p, line.text)


def _build_title_page(doc, proposal: Proposal, company: Company, default_contact_name: str):
    for _ in range(3):
        doc.add_paragraph()

    _add_centered(doc, proposal.display_title or "Proposal Title", 23)
    for _ in range(3):
        doc.add_paragraph()

    contact = proposal.contact_fields
    submitted_by = contact.submitted_by or company.name
    if submitted_by:
        _add_centered(doc, f"Submitted by: {submitted_by}", 13)
        doc.add_paragraph()

    contact_name = contact.name or default_contact_name
    if not contact.name:
        logger.warning("No contact name in Title section; using fallback '%s'", contact_name)
    _add_centered(doc, f"Contact: {contact_name}", 14)

    email = contact.email or company.email
    if email:
        doc.add_paragraph()
        _add_centered(doc, f"Email: {email}", 14)

    phone = contact.number or company.phone
    if phone:
        doc.add_paragraph()
        _add_centered(doc, f"Phone: {phone}", 14)

    doc.add_page_break()


def _build_sections(doc, proposal: Proposal):
    sections = proposal.body_sections
    for index, section in enumerate(sections):
        _add_centered(doc, section.title, 13, bold=True, color=HEADING_COLOR)

        content = section.content
        if isinstance(content, ContactFields):
            lines = content.labelled_lines() or ["No contact information available"]
            for line in lines:
                _add_centered(doc, line, BODY_SIZE)
        elif isinstance(content, MarkupText) and content.is_table:
            _add_table(doc, content.text)
        else:
            _add_markup(doc, content.text if isinstance(content, MarkupText) else "")

        # Each section on its own page
        if index < len(sections) - 1:
            doc.add_page_break()


def build_proposal_docx(
    proposal: Union[Proposal, Dict[str, Any]],
    company: Union[Company, Dict[str, Any], None] = None,
    output_path: Optional[str] = None,
    branding: Optional[BrandingRegistry] = None,
    default_contact_name: str = Config.DEFAULT_CONTACT_NAME,
) -> bytes:
    """Build complete proposal DOCX.

    Args:
        proposal: Proposal or its dict payload
        company: Company or its dict payload
        output_path: Where to save the DOCX file (optional)
        branding: Logo registry for the page header
        default_contact_name: Title page contact when none was extracted

    Returns:
        DOCX bytes
    """
    proposal = coerce_proposal(proposal)
    company = coerce_company(company)
    branding = branding if branding is not None else BrandingRegistry()

    doc = Document()
    for section in doc.sections:
        section.top_margin = section.bottom_margin = PAGE_MARGIN
        section.left_margin = section.right_margin = PAGE_MARGIN
    doc.core_properties.title = proposal.display_title
    doc.core_properties.author = Config.DOC_AUTHOR

    _add_header_logo(doc, company, branding)
    _build_title_page(doc, proposal, company, default_contact_name)
    _build_sections(doc, proposal)

    buffer = BytesIO()
    doc.save(buffer)
    docx_bytes = buffer.getvalue()

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as f:
            f.write(docx_bytes)
        logger.info("DOCX saved to: %s", output_path)

    return docx_bytes
