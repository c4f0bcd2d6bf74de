"""Tests for proposal_studio/reporting/docx_builder.py - editable Word export."""

from io import BytesIO

from docx import Document as WordDocument

from models.proposal import Company
from proposal_studio.reporting.docx_builder import build_proposal_docx


def _read(docx_bytes):
    return WordDocument(BytesIO(docx_bytes))


class TestDocxExport:
    def test_title_page(self, proposal, company, branding):
        doc = _read(build_proposal_docx(proposal, company, branding=branding))
        texts = [p.text for p in doc.paragraphs]
        assert "Proposal for City Website Redesign" in texts
        assert "Submitted by: Acme Digital" in texts
        assert "Contact: Jane Roe" in texts
        assert "Email: jane@acme.example" in texts
        assert doc.core_properties.title == "Proposal for City Website Redesign"

    def test_contact_fallback(self, branding):
        proposal = {"title": "Bid", "sections": {"Scope": {"content": "Work"}}}
        doc = _read(build_proposal_docx(proposal, Company(), branding=branding))
        assert "Contact: Not specified" in [p.text for p in doc.paragraphs]

    def test_sections_and_markup(self, proposal, company, branding):
        doc = _read(build_proposal_docx(proposal, company, branding=branding))
        texts = [p.text for p in doc.paragraphs]
        assert "Title" not in texts
        assert "Executive Summary" in texts
        assert "Overview" in texts
        assert "We will rebuild the site." in texts
        bullets = [p.text for p in doc.paragraphs if p.style.name.startswith("List Bullet")]
        assert bullets == ["Discovery", "Build", "QA"]
        assert "No content available" in texts

    def test_inline_bold_run(self, proposal, company, branding):
        doc = _read(build_proposal_docx(proposal, company, branding=branding))
        para = next(p for p in doc.paragraphs if p.text == "We will rebuild the site.")
        assert [run.bold for run in para.runs] == [False, True, False]

    def test_budget_table(self, proposal, company, branding):
        doc = _read(build_proposal_docx(proposal, company, branding=branding))
        assert len(doc.tables) == 1
        table = doc.tables[0]
        assert [cell.text for cell in table.rows[0].cells] == [
            "Phase", "Role", "Hourly Rate", "Hours", "Total Cost",
        ]
        assert table.rows[3].cells[0].text == "Total"
        assert table.rows[3].cells[4].paragraphs[0].runs[0].bold

    def test_broken_logo_still_builds(self, proposal, company, broken_branding):
        doc = _read(build_proposal_docx(proposal, company, branding=broken_branding))
        assert doc.tables

    def test_writes_file(self, proposal, company, branding, tmp_path):
        out = tmp_path / "nested" / "proposal.docx"
        content = build_proposal_docx(proposal, company, output_path=str(out), branding=branding)
        assert out.read_bytes() == content
