"""Tests for models/proposal.py - export payload normalization."""

import pytest

from models.proposal import (
    Company,
    ContactFields,
    EmptyContent,
    MarkupText,
    Proposal,
    Section,
    coerce_company,
    coerce_proposal,
    resolve_content,
)


class TestResolveContent:
    def test_mapping_becomes_contact_fields(self):
        content = resolve_content({"submittedBy": "Org", "name": "Sam", "phone": "123"})
        assert content == ContactFields(submitted_by="Org", name="Sam", number="123")

    def test_string_becomes_markup(self):
        assert resolve_content("text") == MarkupText("text")

    def test_empty_values(self):
        assert resolve_content(None) == EmptyContent()
        assert resolve_content("") == EmptyContent()

    def test_other_values_stringified(self):
        assert resolve_content(42) == MarkupText("42")

    def test_table_detection(self):
        assert MarkupText("| a | b |").is_table
        assert not MarkupText("no pipes").is_table


class TestContactFields:
    def test_labelled_lines_order(self):
        fields = ContactFields(email="e@x", name="N", submitted_by="S", number="1")
        assert fields.labelled_lines() == ["Submitted by: S", "Name: N", "Email: e@x", "Number: 1"]

    def test_blank_values_ignored(self):
        fields = ContactFields.from_mapping({"name": "  ", "email": ""})
        assert fields.is_empty


class TestSection:
    def test_wrapped_content(self):
        section = Section.from_raw("Scope", {"content": "Work"})
        assert section.content == MarkupText("Work")

    def test_bare_content(self):
        assert Section.from_raw("Scope", "Work").content == MarkupText("Work")

    def test_title_section(self):
        assert Section.from_raw("Title", {"content": {"name": "X"}}).is_title
        assert not Section.from_raw("title", "x").is_title

    def test_record_without_content_is_empty(self):
        assert Section.from_raw("Scope", {"type": "text"}).content == EmptyContent()
        assert Section.from_raw("Scope", {"content": None}).content == EmptyContent()

    def test_bare_contact_mapping_only_for_title(self):
        assert Section.from_raw("Title", {"name": "X"}).content == ContactFields(name="X")
        assert Section.from_raw("Contacts", {"name": "X"}).content == EmptyContent()
        assert Section.from_raw("Contacts", {"content": {"name": "X"}}).content == ContactFields(name="X")


class TestProposal:
    def test_sections_keep_input_order(self, proposal):
        assert [s.title for s in proposal.sections] == ["Title", "Executive Summary", "Budget", "Notes"]
        assert [s.title for s in proposal.body_sections] == ["Executive Summary", "Budget", "Notes"]

    def test_duplicate_prefix_collapsed(self, proposal):
        assert proposal.display_title == "Proposal for City Website Redesign"
        assert Proposal(title="Proposal for X").display_title == "Proposal for X"

    def test_contact_fields_from_title_section(self, proposal):
        assert proposal.contact_fields.name == "Jane Roe"
        assert Proposal().contact_fields == ContactFields()

    def test_lookup_by_title(self, proposal):
        assert proposal.section("Budget").content.is_table
        assert proposal.section("Missing") is None

    def test_missing_sections(self):
        assert Proposal.from_dict({"title": "T"}).sections == ()

    @pytest.mark.parametrize("payload", [
        ["not", "a", "mapping"],
        {"title": 5},
        {"title": "T", "sections": "text"},
    ])
    def test_invalid_payloads(self, payload):
        with pytest.raises(ValueError):
            Proposal.from_dict(payload)


class TestCompany:
    def test_from_dict(self):
        company = Company.from_dict({"name": "Acme", "email": "a@x", "brandingKey": "polaris"})
        assert company.branding_key == "polaris"
        assert company.phone is None

    def test_empty(self):
        assert Company.from_dict(None) == Company()

    def test_invalid(self):
        with pytest.raises(ValueError):
            Company.from_dict(["Acme"])

    def test_coerce_passthrough(self, proposal, company):
        assert coerce_proposal(proposal) is proposal
        assert coerce_company(company) is company
