# Tests configuration for Proposal Studio
import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.proposal import Company, Proposal
from proposal_studio.config import Config
from proposal_studio.reporting.pdf.branding import (
    BrandingRegistry,
    DEFAULT_ASSET,
    POLARIS_ASSET,
)
from proposal_studio.reporting.pdf.document import Document
from proposal_studio.reporting.pdf.styles import PDFConfig


BUDGET_TABLE = """| Phase | Role | Hourly Rate | Hours | Total Cost |
|-------|------|-------------|-------|------------|
| Discovery | Analyst | $120 | 40 | $4,800 |
| Build | Engineer | $150 | 200 | $30,000 |
| **Total** | | | 240 | **$34,800** |"""


@pytest.fixture
def pdf_config():
    """Letter page, 50pt margins."""
    return PDFConfig(title="Test Proposal")


@pytest.fixture
def document(pdf_config):
    """Empty document without page hooks."""
    return Document(pdf_config)


@pytest.fixture
def budget_table():
    return BUDGET_TABLE


@pytest.fixture
def long_table():
    """Two-column table long enough to span several pages."""
    lines = ["| Task | Owner |", "|---|---|"]
    lines += [f"| Task {i} | Owner {i} |" for i in range(1, 61)]
    return "\n".join(lines)


@pytest.fixture
def proposal_dict(budget_table):
    """Export payload as the web client sends it."""
    return {
        "title": "Proposal for Proposal for City Website Redesign",
        "sections": {
            "Title": {
                "content": {
                    "submittedBy": "Acme Digital",
                    "name": "Jane Roe",
                    "email": "jane@acme.example",
                    "number": "555-0100",
                }
            },
            "Executive Summary": {
                "content": "# Overview\n\nWe will **rebuild** the site.\n\n- Discovery\n- Build\n-- QA",
            },
            "Budget": {"content": budget_table},
            "Notes": {"content": ""},
        },
    }


@pytest.fixture
def proposal(proposal_dict):
    return Proposal.from_dict(proposal_dict)


@pytest.fixture
def company():
    return Company(name="Acme Digital", email="info@acme.example", phone="555-0199")


@pytest.fixture
def branding():
    """Registry backed by the logos shipped with the package."""
    return BrandingRegistry({
        DEFAULT_ASSET: Config.LOGO_DIR / Config.DEFAULT_LOGO_FILE,
        POLARIS_ASSET: Config.LOGO_DIR / Config.POLARIS_LOGO_FILE,
    })


@pytest.fixture
def broken_branding(tmp_path):
    """Registry whose only logo is not an image."""
    bad = tmp_path / "broken.png"
    bad.write_bytes(b"not a png")
    return BrandingRegistry({DEFAULT_ASSET: bad})
