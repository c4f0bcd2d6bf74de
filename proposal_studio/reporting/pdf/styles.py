"""
PDF Styles Module.

Defines typography, colors, and reusable paragraph styles for proposal PDFs.
Uses ReportLab library. No layout decisions.
"""
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_LEFT, TA_CENTER, TA_RIGHT, TA_JUSTIFY
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple
import logging
import os

from proposal_studio.config import Config


logger = logging.getLogger("ProposalStudio.PDFStyles")


# ============================================================================
# PAGE CONFIGURATION
# ============================================================================

PAGE_SIZES = {
    "letter": LETTER,
    "a4": A4,
}

PAGE_SIZE = PAGE_SIZES.get(Config.PAGE_SIZE.lower(), LETTER)
MARGIN = Config.PAGE_MARGIN


# ============================================================================
# COLOR PALETTE
# ============================================================================

# Hex strings; HexColor conversion happens when styles are built and on replay
COLORS = {
    "brand": "#1E4E9E",
    "heading": "#1a202c",
    "contact": "#2d3748",
    "body": "#000000",
    "table_text": "#212529",
    "background": "#f8f9fa",
    "border": "#dee2e6",
    "white": "#ffffff",
}


# ============================================================================
# TYPOGRAPHY
# ============================================================================

# NOTE: Standard PDF fonts only cover WinAnsi. DejaVuSans TrueType fonts
# (shipped with matplotlib) are used when UNICODE_FONTS is enabled.

def register_fonts(use_unicode: bool = Config.UNICODE_FONTS):
    """Register TrueType fonts for PDF generation."""
    if not use_unicode:
        return "Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"
    try:
        import matplotlib
        font_dir = os.path.join(matplotlib.get_data_path(), "fonts", "ttf")

        pdfmetrics.registerFont(TTFont("DejaVuSans", os.path.join(font_dir, "DejaVuSans.ttf")))
        pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", os.path.join(font_dir, "DejaVuSans-Bold.ttf")))
        pdfmetrics.registerFont(TTFont("DejaVuSans-Italic", os.path.join(font_dir, "DejaVuSans-Oblique.ttf")))
        pdfmetrics.registerFont(TTFont("DejaVuSans-BoldItalic", os.path.join(font_dir, "DejaVuSans-BoldOblique.ttf")))

        return "DejaVuSans", "DejaVuSans-Bold", "DejaVuSans-Italic", "DejaVuSans-BoldItalic"
    except Exception as e:
        logger.warning("Unicode font registration failed, using Helvetica: %s", e)
        return "Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"

FONT_FAMILY, FONT_FAMILY_BOLD, FONT_FAMILY_ITALIC, FONT_FAMILY_BOLD_ITALIC = register_fonts()

FONT_SIZE_BODY = 11
FONT_SIZE_TABLE = 10
FONT_SIZE_TABLE_HEADER = 11
FONT_SIZE_SECTION = 16
FONT_SIZE_CONTACT = 14
FONT_SIZE_CONTACT_DETAIL = 12
FONT_SIZE_TITLE = 24

# Line height as a multiple of the font size (Helvetica ascender - descender + gap)
LINE_HEIGHT_FACTOR = 1.15

ALIGNMENTS = {
    "left": TA_LEFT,
    "center": TA_CENTER,
    "right": TA_RIGHT,
    "justify": TA_JUSTIFY,
}


@dataclass
class PDFConfig:
    """Configuration for PDF generation."""
    page_size: Tuple[float, float] = PAGE_SIZE
    margin: float = MARGIN
    title: str = "Proposal"
    author: str = Config.DOC_AUTHOR
    default_contact_name: str = Config.DEFAULT_CONTACT_NAME
    margins: Optional[Tuple[float, float, float, float]] = None  # top, right, bottom, left

    def __post_init__(self):
        if self.margins is None:
            self.margins = (self.margin,) * 4


def line_height(font_size: float, line_gap: float = 0) -> float:
    """Height of one text line at the given size."""
    return font_size * LINE_HEIGHT_FACTOR + line_gap


def font_for(bold: bool = False, italic: bool = False) -> str:
    """Pick the registered face for a bold/italic combination."""
    if bold and italic:
        return FONT_FAMILY_BOLD_ITALIC
    if bold:
        return FONT_FAMILY_BOLD
    if italic:
        return FONT_FAMILY_ITALIC
    return FONT_FAMILY


@lru_cache(maxsize=256)
def paragraph_style(
    font_name: str,
    font_size: float,
    color: str = COLORS["body"],
    align: str = "left",
    line_gap: float = 0,
    indent: float = 0,
) -> ParagraphStyle:
    """Create (cached) paragraph style for a run of text.

    Args:
        font_name: Registered font face
        font_size: Size in points
        color: Hex text color
        align: left | center | right | justify
        line_gap: Extra space added to each line
        indent: Left indent in points

    Returns:
        ParagraphStyle usable with Paragraph flowables.
    """
    return ParagraphStyle(
        f"{font_name}-{font_size}-{color}-{align}-{line_gap}-{indent}",
        fontName=font_name,
        fontSize=font_size,
        leading=line_height(font_size, line_gap),
        textColor=HexColor(color),
        alignment=ALIGNMENTS.get(align, TA_LEFT),
        leftIndent=indent,
        spaceBefore=0,
        spaceAfter=0,
    )
