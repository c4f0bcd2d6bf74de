"""Tests for proposal_studio/reporting/pdf/builder.py - full proposal assembly."""

import pytest

from models.proposal import Company, MarkupText, Section
from proposal_studio.reporting.pdf.branding import (
    BrandingRegistry,
    DEFAULT_ASSET,
    POLARIS_ASSET,
    add_header_logos,
)
from proposal_studio.reporting.pdf.builder import DocumentBuilder, build_proposal_pdf
from proposal_studio.reporting.pdf.layout import ORPHAN_HEADING_MIN_SPACE
from proposal_studio.reporting.pdf.styles import COLORS


# =========================================================================
# Title page
# =========================================================================

class TestTitlePage:
    def test_title_page_contents(self, proposal, company, branding):
        doc = DocumentBuilder(branding=branding).generate(proposal, company)
        first = doc.pages[0]
        assert first.texts("title") == ["Proposal for City Website Redesign"]
        assert first.texts("submitted-by") == ["Submitted by: Acme Digital"]
        assert first.texts("contact-name") == ["Jane Roe"]
        assert first.texts("contact-email") == ["jane@acme.example"]
        assert first.texts("contact-phone") == ["555-0100"]
        assert first.texts("section-heading") == []
        assert doc.notices == []

    def test_company_fills_missing_contact_fields(self, company, branding):
        proposal = {"title": "Bid", "sections": {"Scope": {"content": "Work."}}}
        doc = DocumentBuilder(branding=branding).generate(proposal, company)
        first = doc.pages[0]
        assert first.texts("submitted-by") == ["Submitted by: Acme Digital"]
        assert first.texts("contact-email") == ["info@acme.example"]
        assert first.texts("contact-phone") == ["555-0199"]

    def test_missing_contact_name_uses_fallback(self, branding):
        proposal = {"title": "Bid", "sections": {"Title": {"content": {"email": "a@b.c"}}}}
        doc = DocumentBuilder(branding=branding).generate(proposal, Company())
        assert doc.pages[0].texts("contact-name") == ["Not specified"]
        assert len(doc.notices) == 1
        assert "Not specified" in doc.notices[0]

    def test_sections_start_on_second_page(self, proposal, company, branding):
        doc = DocumentBuilder(branding=branding).generate(proposal, company)
        assert doc.pages[1].texts("section-heading")[0] == "Executive Summary"


# =========================================================================
# Sections
# =========================================================================

class TestSections:
    def test_title_section_not_rendered_as_body(self, proposal, company, branding):
        doc = DocumentBuilder(branding=branding).generate(proposal, company)
        headings = [t for page in doc.pages for t in page.texts("section-heading")]
        assert headings == ["Executive Summary", "Budget", "Notes"]

    def test_empty_section_placeholder(self, proposal, company, branding):
        doc = DocumentBuilder(branding=branding).generate(proposal, company)
        texts = [t for page in doc.pages for t in page.texts()]
        assert "No content available" in texts

    def test_section_record_without_content(self, branding):
        proposal = {"title": "T", "sections": {"Scope": {"type": "text"}}}
        doc = DocumentBuilder(branding=branding).generate(proposal)
        texts = doc.pages[1].texts()
        assert texts == ["Scope", "No content available"]
        assert doc.pages[1].texts("contact") == []

    def test_contact_section_labels(self, branding):
        proposal = {
            "title": "Bid",
            "sections": {
                "Title": {"content": {"name": "Jane"}},
                "Contacts": {"content": {"name": "Sam", "phone": "123", "submittedBy": "Org"}},
            },
        }
        doc = DocumentBuilder(branding=branding).generate(proposal)
        assert doc.pages[1].texts("contact") == ["Submitted by: Org\nName: Sam\nNumber: 123"]

    def test_budget_table_rendered(self, proposal, company, branding):
        doc = DocumentBuilder(branding=branding).generate(proposal, company)
        headers = [t for page in doc.pages for t in page.texts("table-header")]
        assert headers[:5] == ["Phase", "Role", "Hourly Rate", "Hours", "Total Cost"]

    def test_pdf_bytes_and_metadata(self, proposal, company, branding):
        doc = DocumentBuilder(branding=branding).generate(proposal, company)
        assert doc.finalized
        assert doc.pdf_bytes.startswith(b"%PDF")
        assert doc.config.title == "Proposal for City Website Redesign"

    def test_table_heading_moves_with_table(self, document, budget_table):
        builder = DocumentBuilder(branding=BrandingRegistry({}))
        document.cursor.y = document.bottom_limit - 100
        builder.render_section(document, Section("Budget", MarkupText(budget_table)))
        assert document.pages[0].ops == []
        assert document.pages[1].texts("section-heading") == ["Budget"]


class TestOrphanHeadings:
    def test_heading_without_room_moves_to_next_page(self, document):
        builder = DocumentBuilder(branding=BrandingRegistry({}))
        long_heading = " ".join(["Word"] * 90)
        # Enough room to pass the 200pt heading check, not enough for content
        document.cursor.y = document.bottom_limit - 210
        builder.render_section(document, Section(long_heading, MarkupText("Body text.")))

        assert len(document.pages) == 2
        assert document.pages[0].ops == []
        assert document.pages[1].texts("section-heading") == [long_heading]
        assert document.pages[1].texts()[-1] == "Body text."

    def test_heading_never_last_on_page(self, company, branding):
        sections = {f"Section {i}": {"content": "Paragraph text. " * 40} for i in range(12)}
        doc = DocumentBuilder(branding=branding).generate({"title": "Long", "sections": sections}, company)
        assert len(doc.pages) > 2
        for page in doc.pages:
            for idx, op in enumerate(page.ops):
                if op.tag == "section-heading":
                    assert idx < len(page.ops) - 1
                    assert page.height - page.margins.bottom - (op.y + op.height) >= ORPHAN_HEADING_MIN_SPACE - 10

    def test_heading_kept_when_room(self, document):
        builder = DocumentBuilder(branding=BrandingRegistry({}))
        builder.render_section(document, Section("Scope", MarkupText("Body.")))
        assert len(document.pages) == 1
        assert document.page.texts() == ["Scope", "Body."]


# =========================================================================
# Branding
# =========================================================================

class TestBranding:
    def test_default_logo_on_every_page(self, proposal, company, branding):
        doc = DocumentBuilder(branding=branding).generate(proposal, company)
        for page in doc.pages:
            logos = page.ops_of("image", "logo")
            assert len(logos) == 1
            assert logos[0].text == DEFAULT_ASSET
            assert logos[0].x == pytest.approx(page.width - 100)
            assert logos[0].y == 20

    def test_content_starts_below_logo(self, proposal, company, branding):
        doc = DocumentBuilder(branding=branding).generate(proposal, company)
        assert doc.pages[1].ops_of("text")[0].y == 110

    def test_polaris_name_rule(self, branding):
        assert branding.resolve_asset_id(Company(name="Polaris Consulting")) == POLARIS_ASSET
        assert branding.resolve_asset_id(Company(name="Acme")) == DEFAULT_ASSET
        assert branding.resolve_asset_id({"name": "NORTH POLARIS"}) == POLARIS_ASSET

    def test_branding_key_wins(self, branding):
        company = Company(name="Polaris Consulting", branding_key=DEFAULT_ASSET)
        assert branding.resolve_asset_id(company) == DEFAULT_ASSET

    def test_unknown_branding_key_falls_back(self, branding):
        assert branding.resolve_asset_id(Company(name="Polaris", branding_key="nope")) == POLARIS_ASSET

    def test_configured_company_names(self):
        registry = BrandingRegistry({DEFAULT_ASSET: "missing.png", "north": "missing.png"},
                                    company_assets={"North Star LLC": "north"})
        assert registry.resolve_asset_id(Company(name="north star llc")) == "north"

    def test_broken_logo_is_skipped(self, proposal, company, broken_branding):
        doc = DocumentBuilder(branding=broken_branding).generate(proposal, company)
        assert doc.pdf_bytes.startswith(b"%PDF")
        assert all(page.ops_of("image") == [] for page in doc.pages)
        assert doc.pages[1].ops_of("text")[0].y == doc.margins.top

    def test_add_header_logos_swallows_errors(self, document):
        class Exploding:
            def logo_for(self, company):
                raise OSError("disk gone")

        assert add_header_logos(document, Company(), Exploding()) is False
        assert document.page.ops == []


class TestBuildProposalPdf:
    def test_writes_file(self, proposal_dict, company, branding, tmp_path):
        out = tmp_path / "proposal.pdf"
        pdf = build_proposal_pdf(proposal_dict, company, str(out), branding=branding)
        assert out.read_bytes() == pdf

    def test_palette_colors_used(self, proposal, company, branding):
        doc = DocumentBuilder(branding=branding).generate(proposal, company)
        heading = doc.pages[1].ops_of("text", "section-heading")[0]
        assert heading.color == COLORS["brand"]
        assert doc.pages[0].ops_of("text", "title")[0].color == COLORS["heading"]
        rects = [op for page in doc.pages for op in page.ops_of("rect")]
        assert rects and {op.stroke for op in rects} == {COLORS["border"]}

    def test_invalid_sections_raise(self):
        with pytest.raises(ValueError):
            build_proposal_pdf({"title": "Bad", "sections": ["not", "a", "mapping"]})
