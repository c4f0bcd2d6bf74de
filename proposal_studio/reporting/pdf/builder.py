"""
PDF Builder Module.

Orchestrates the construction of complete proposal PDFs:

1. Title page (title, submitter, contact block)
2. Page break
3. Every section except "Title", in input order

Page-break policy between sections lives here; fitting and table layout
are delegated to layout.py, text to richtext.py.
"""
from dataclasses import replace
import logging
from typing import Any, Dict, Optional, Union

from models.proposal import (
    Company,
    ContactFields,
    MarkupText,
    Proposal,
    Section,
    coerce_company,
    coerce_proposal,
)

from .branding import BrandingRegistry, add_header_logos
from .document import Document
from .layout import (
    ORPHAN_HEADING_MIN_SPACE,
    check_page_break,
    min_table_height,
    remaining_height,
    render_table,
    table_lines,
)
from .richtext import render_inline, render_markup
from .styles import (
    COLORS,
    PDFConfig,
    FONT_FAMILY,
    FONT_FAMILY_BOLD,
    FONT_SIZE_BODY,
    FONT_SIZE_CONTACT,
    FONT_SIZE_CONTACT_DETAIL,
    FONT_SIZE_SECTION,
    FONT_SIZE_TITLE,
)


# Setup logger
logger = logging.getLogger("ProposalStudio.PDFBuilder")

BRAND_BLUE = COLORS["brand"]
TITLE_COLOR = COLORS["heading"]
CONTACT_DETAIL_COLOR = COLORS["contact"]
BODY_COLOR = COLORS["body"]

SECTION_SPACING = 2.5
SECTION_TRAILING_SPACING = 1.5
HEADING_SPACING = 0.5

NO_CONTACT_TEXT = "No contact information available"


class DocumentBuilder:
    """Builds a finalized proposal Document.

    Usage:
        builder = DocumentBuilder()
        doc = builder.generate(proposal, company)
        pdf_bytes = doc.pdf_bytes
    """

    def __init__(self, config: Optional[PDFConfig] = None,
                 branding: Optional[BrandingRegistry] = None):
        self.config = config or PDFConfig()
        self.branding = branding if branding is not None else BrandingRegistry()

    def generate(self, proposal: Union[Proposal, Dict[str, Any]],
                 company: Union[Company, Dict[str, Any], None] = None) -> Document:
        """Render the proposal and return the finalized document."""
        proposal = coerce_proposal(proposal)
        company = coerce_company(company)

        doc = Document(replace(self.config, title=proposal.display_title or self.config.title))
        doc.on_page_added(lambda d: add_header_logos(d, company, self.branding))
        doc.run_page_hooks()

        self.render_title_page(doc, proposal, company)

        doc.add_page()

        for index, section in enumerate(proposal.body_sections):
            # Spacing between sections (except the first one)
            if index > 0:
                doc.move_down(SECTION_SPACING)
            self.render_section(doc, section)

        doc.finalize()
        logger.info(
            "Proposal PDF generated: '%s' (%d sections, %d pages)",
            proposal.display_title, len(proposal.body_sections), len(doc.pages),
        )
        return doc

    # ------------------------------------------------------------------
    # Title page
    # ------------------------------------------------------------------

    def render_title_page(self, doc: Document, proposal: Proposal, company: Company) -> None:
        title = proposal.display_title
        if title:
            doc.draw_text(title, font_name=FONT_FAMILY, font_size=FONT_SIZE_TITLE,
                          color=TITLE_COLOR, align="center", tag="title")
            doc.move_down(4)

        contact = proposal.contact_fields

        submitted_by = contact.submitted_by or company.name
        if submitted_by:
            doc.draw_text(f"Submitted by: {submitted_by}", font_name=FONT_FAMILY,
                          font_size=FONT_SIZE_CONTACT, color=TITLE_COLOR, align="center",
                          tag="submitted-by")
            doc.move_down(3)

        contact_name = contact.name
        if not contact_name:
            contact_name = self.config.default_contact_name
            notice = f"No contact name in Title section; using fallback '{contact_name}'"
            doc.notices.append(notice)
            logger.warning(notice)

        if contact_name:
            doc.draw_text(contact_name, font_name=FONT_FAMILY, font_size=FONT_SIZE_CONTACT,
                          color=TITLE_COLOR, align="center", tag="contact-name")
            doc.move_down(2)

        for value, tag in (
            (contact.email or company.email, "contact-email"),
            (contact.number or company.phone, "contact-phone"),
        ):
            if value:
                doc.draw_text(str(value), font_name=FONT_FAMILY, font_size=FONT_SIZE_CONTACT_DETAIL,
                              color=CONTACT_DETAIL_COLOR, align="center", tag=tag)
                doc.move_down(1.5)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _draw_section_heading(self, doc: Document, title: str) -> None:
        doc.draw_text(title, font_name=FONT_FAMILY_BOLD, font_size=FONT_SIZE_SECTION,
                      color=BRAND_BLUE, align="center", tag="section-heading")
        doc.move_down(HEADING_SPACING)

    def render_section(self, doc: Document, section: Section) -> None:
        """Render heading and content of one section, keeping them together."""
        content = section.content
        is_table = isinstance(content, MarkupText) and content.is_table

        if is_table:
            # Reserve room for the heading plus the first rows of the table
            reserve = min_table_height(len(table_lines(content.text)))
            if remaining_height(doc) < reserve:
                doc.add_page()
        else:
            check_page_break(doc, 0, is_heading=True)

        mark = doc.mark()
        self._draw_section_heading(doc, section.title)

        # Tables already reserved their space above
        if not is_table and remaining_height(doc) < ORPHAN_HEADING_MIN_SPACE:
            logger.debug("Orphaned heading '%s' moved to next page", section.title)
            doc.discard_since(mark)
            doc.add_page()
            self._draw_section_heading(doc, section.title)

        self.render_section_content(doc, section)

        doc.move_down(SECTION_TRAILING_SPACING)

    def render_section_content(self, doc: Document, section: Section) -> None:
        content = section.content

        if isinstance(content, ContactFields):
            lines = content.labelled_lines()
            doc.draw_text("\n".join(lines) if lines else NO_CONTACT_TEXT,
                          font_name=FONT_FAMILY, font_size=FONT_SIZE_BODY, color=BODY_COLOR,
                          align="center", line_gap=6, tag="contact")

        elif isinstance(content, MarkupText) and section.is_title:
            for line in content.text.split("\n"):
                if not line.strip():
                    doc.move_down(0.5)
                    continue
                render_inline(doc, line.strip(), FONT_SIZE_BODY, align="center",
                              line_gap=4, tag="title-line")

        elif isinstance(content, MarkupText) and content.is_table:
            render_table(doc, content.text)

        else:
            text = content.text if isinstance(content, MarkupText) else ""
            render_markup(doc, text, base_font_size=FONT_SIZE_BODY, align="justify", line_gap=6)


def build_proposal_pdf(
    proposal: Union[Proposal, Dict[str, Any]],
    company: Union[Company, Dict[str, Any], None] = None,
    output_path: Optional[str] = None,
    config: Optional[PDFConfig] = None,
    branding: Optional[BrandingRegistry] = None,
) -> bytes:
    """Build a complete proposal PDF.

    Args:
        proposal: Proposal or its dict payload (title, sections)
        company: Company or its dict payload (name, email, phone)
        output_path: Optional file path to save PDF
        config: PDF configuration
        branding: Logo registry (loaded from Config.LOGO_DIR by default)

    Returns:
        PDF bytes
    """
    doc = DocumentBuilder(config=config, branding=branding).generate(proposal, company)

    if output_path:
        path = doc.save(output_path)
        logger.info("PDF saved to: %s", path)

    return doc.pdf_bytes
