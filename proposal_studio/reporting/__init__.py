"""
Reporting Module - proposal document generation.

Sub-modules:
- pdf: paginated, branded PDF generation (ReportLab)
- docx_builder: editable Word export (python-docx)
- report_io: export request loading and file naming
"""
from .pdf import DocumentBuilder, PDFConfig, build_proposal_pdf
from .docx_builder import build_proposal_docx
from .report_io import docx_filename, load_export_request, pdf_filename, save_bytes

__all__ = [
    "DocumentBuilder",
    "PDFConfig",
    "build_proposal_pdf",
    "build_proposal_docx",
    "docx_filename",
    "load_export_request",
    "pdf_filename",
    "save_bytes",
]
