"""
PDF Generator Module for Proposal Exports.

Generates paginated, branded proposal PDFs from section markup.
Uses ReportLab library. No web framework dependency.

Module Structure:
- styles.py: Typography, colors, reusable styles
- document.py: Pages, cursor and draw operations
- richtext.py: Markup dialect (headings, bullets, bold/italic runs)
- layout.py: Page-fit checks and table layout
- branding.py: Logo registry and page header
- builder.py: Document orchestration and assembly

Usage:
    from proposal_studio.reporting.pdf import build_proposal_pdf, PDFConfig

    pdf_bytes = build_proposal_pdf(proposal, company, output_path)
"""
from .styles import PDFConfig, COLORS, PAGE_SIZE, MARGIN
from .document import Document, DrawOp, Page, PageCursor, StyleRun
from .branding import BrandingRegistry, add_header_logos
from .layout import (
    Table,
    check_page_break,
    column_layout,
    min_table_height,
    parse_table,
    render_table,
)
from .richtext import parse_inline, render_markup
from .builder import DocumentBuilder, build_proposal_pdf


__all__ = [
    # Main API
    "DocumentBuilder",
    "build_proposal_pdf",
    # Configuration
    "PDFConfig",
    "BrandingRegistry",
    # Document model
    "Document",
    "DrawOp",
    "Page",
    "PageCursor",
    "StyleRun",
    # Layout / text (for advanced usage)
    "Table",
    "add_header_logos",
    "check_page_break",
    "column_layout",
    "min_table_height",
    "parse_table",
    "render_table",
    "parse_inline",
    "render_markup",
    # Styles
    "COLORS",
    "PAGE_SIZE",
    "MARGIN",
]
