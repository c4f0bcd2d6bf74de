"""
Export Service

High-level orchestration of proposal exports.
Coordinates input normalization, document generation and artifact saving
for the PDF and DOCX formats.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from models.proposal import Company, Proposal, coerce_company, coerce_proposal
from proposal_studio.config import Config
from proposal_studio.reporting.docx_builder import build_proposal_docx
from proposal_studio.reporting.pdf import BrandingRegistry, DocumentBuilder, PDFConfig
from proposal_studio.reporting.report_io import (
    docx_filename,
    load_export_request,
    pdf_filename,
    save_bytes,
)

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SUPPORTED_FORMATS = ("pdf", "docx")


@dataclass
class ExportArtifact:
    """One rendered export, ready to be served or saved."""

    filename: str
    media_type: str
    content: bytes
    notices: List[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.content)


def export_proposal(
    proposal: Union[Proposal, Dict[str, Any]],
    company: Union[Company, Dict[str, Any], None] = None,
    fmt: str = "pdf",
    pdf_config: Optional[PDFConfig] = None,
    branding: Optional[BrandingRegistry] = None,
) -> ExportArtifact:
    """Render a proposal in the requested format.

    Args:
        proposal: Proposal or its dict payload
        company: Submitting company or its dict payload
        fmt: "pdf" or "docx"
        pdf_config: PDF configuration override
        branding: Logo registry shared between exports

    Returns:
        ExportArtifact with filename, media type and bytes

    Raises:
        ValueError: for unsupported formats or malformed input
    """
    fmt = (fmt or "").lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}' (expected one of {SUPPORTED_FORMATS})")

    proposal = coerce_proposal(proposal)
    company = coerce_company(company)
    branding = branding if branding is not None else BrandingRegistry()

    logger.info("Exporting '%s' as %s", proposal.display_title, fmt.upper())

    if fmt == "pdf":
        doc = DocumentBuilder(config=pdf_config, branding=branding).generate(proposal, company)
        for notice in doc.notices:
            logger.info("Export notice: %s", notice)
        return ExportArtifact(
            filename=pdf_filename(proposal.title),
            media_type=PDF_MEDIA_TYPE,
            content=doc.pdf_bytes,
            notices=list(doc.notices),
        )

    contact_name = (pdf_config or PDFConfig()).default_contact_name
    notices = []
    if not proposal.contact_fields.name:
        notices.append(f"No contact name in Title section; using fallback '{contact_name}'")
    content = build_proposal_docx(proposal, company, branding=branding,
                                  default_contact_name=contact_name)
    return ExportArtifact(
        filename=docx_filename(proposal.title),
        media_type=DOCX_MEDIA_TYPE,
        content=content,
        notices=notices,
    )


def export_all(
    proposal: Union[Proposal, Dict[str, Any]],
    company: Union[Company, Dict[str, Any], None] = None,
    formats=SUPPORTED_FORMATS,
    output_dir: Union[str, Path, None] = None,
) -> List[Path]:
    """Render every requested format and save each artifact.

    Returns:
        Paths of the written files, in format order.
    """
    output_dir = Path(output_dir) if output_dir is not None else Config.EXPORT_DIR
    branding = BrandingRegistry()
    paths = []
    for fmt in formats:
        artifact = export_proposal(proposal, company, fmt, branding=branding)
        paths.append(save_artifact(artifact, output_dir))
    return paths


def save_artifact(artifact: ExportArtifact, directory: Union[str, Path]) -> Path:
    return save_bytes(artifact.content, directory, artifact.filename)


def load_proposal_file(file_path: Union[str, Path]) -> Tuple[Proposal, Company]:
    """Read a JSON export request into model objects."""
    proposal_data, company_data = load_export_request(file_path)
    return coerce_proposal(proposal_data), coerce_company(company_data)
