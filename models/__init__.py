"""
Models Module - Proposal Data Models

Plain dataclasses describing proposal input.
NO RENDERING DEPENDENCIES ALLOWED.

Sub-modules:
- proposal: Proposal, Section, Company and section content variants
"""

from .proposal import (
    TITLE_SECTION,
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

__all__ = [
    "TITLE_SECTION",
    "Company",
    "ContactFields",
    "EmptyContent",
    "MarkupText",
    "Proposal",
    "Section",
    "coerce_company",
    "coerce_proposal",
    "resolve_content",
]
