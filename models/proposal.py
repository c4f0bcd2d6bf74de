"""
Proposal Export Objects.

Input model for document export: a proposal with ordered, named sections
and the company submitting it. Section content is resolved once, at
construction, into one of three shapes:

- ContactFields: key/value contact data (the "Title" section)
- MarkupText: markdown-like text, possibly a pipe table
- EmptyContent: nothing to show; renderers print a placeholder

NO RENDERING LOGIC. Structure and input normalization only.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


TITLE_SECTION = "Title"

_DUPLICATE_PREFIX = re.compile(r"^Proposal for\s+Proposal for\s+", re.IGNORECASE)


# ============================================================
# SECTION CONTENT
# ============================================================

@dataclass(frozen=True)
class ContactFields:
    """Contact block extracted for the title page."""
    submitted_by: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    number: Optional[str] = None

    LABELS = (
        ("submitted_by", "Submitted by"),
        ("name", "Name"),
        ("email", "Email"),
        ("number", "Number"),
    )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ContactFields":
        def pick(*keys):
            for key in keys:
                value = data.get(key)
                if value not in (None, ""):
                    return str(value).strip() or None
            return None

        return cls(
            submitted_by=pick("submittedBy", "submitted_by"),
            name=pick("name"),
            email=pick("email"),
            number=pick("number", "phone"),
        )

    def labelled_lines(self) -> List[str]:
        """Present fields as 'Label: value' lines, in fixed order."""
        return [
            f"{label}: {getattr(self, attr)}"
            for attr, label in self.LABELS
            if getattr(self, attr)
        ]

    @property
    def is_empty(self) -> bool:
        return not self.labelled_lines()


@dataclass(frozen=True)
class MarkupText:
    text: str

    @property
    def is_table(self) -> bool:
        return "|" in self.text


@dataclass(frozen=True)
class EmptyContent:
    pass


SectionContent = Union[ContactFields, MarkupText, EmptyContent]


def resolve_content(raw: Any) -> SectionContent:
    """Resolve raw section content into its tagged shape."""
    if raw is None:
        return EmptyContent()
    if isinstance(raw, Mapping):
        return ContactFields.from_mapping(raw)
    if isinstance(raw, str):
        return MarkupText(raw) if raw else EmptyContent()
    text = str(raw)
    return MarkupText(text) if text else EmptyContent()


@dataclass(frozen=True)
class Section:
    title: str
    content: SectionContent = field(default_factory=EmptyContent)

    @classmethod
    def from_raw(cls, title: str, data: Any) -> "Section":
        """Build from a section record ({'content': ..., ...}) or bare content.

        A mapping is a section record unless it carries no 'content' key
        and belongs to the Title section, whose bare mapping is the
        contact block. A record without 'content' has no content.
        """
        title = str(title)
        if isinstance(data, Mapping) and ("content" in data or title != TITLE_SECTION):
            data = data.get("content")
        return cls(title=title, content=resolve_content(data))

    @property
    def is_title(self) -> bool:
        return self.title == TITLE_SECTION


# ============================================================
# PROPOSAL & COMPANY
# ============================================================

@dataclass(frozen=True)
class Company:
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    branding_key: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Company":
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError(f"Company must be a mapping, got {type(data).__name__}")
        return cls(
            name=str(data.get("name") or ""),
            email=data.get("email") or None,
            phone=data.get("phone") or None,
            branding_key=data.get("branding_key") or data.get("brandingKey") or None,
        )


@dataclass(frozen=True)
class Proposal:
    title: str = ""
    sections: Tuple[Section, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Proposal":
        """Build from an export request payload.

        Raises:
            ValueError: if the payload or its sections are not mappings.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Proposal must be a mapping, got {type(data).__name__}")

        title = data.get("title") or ""
        if not isinstance(title, str):
            raise ValueError("Proposal title must be a string")

        raw_sections = data.get("sections") or {}
        if not isinstance(raw_sections, Mapping):
            raise ValueError("Proposal sections must be a mapping of name to section")

        sections = tuple(Section.from_raw(name, section) for name, section in raw_sections.items())
        return cls(title=title, sections=sections)

    @property
    def display_title(self) -> str:
        """Title with a duplicated 'Proposal for' prefix collapsed."""
        return _DUPLICATE_PREFIX.sub("Proposal for ", self.title)

    @property
    def title_section(self) -> Optional[Section]:
        for section in self.sections:
            if section.is_title:
                return section
        return None

    @property
    def contact_fields(self) -> ContactFields:
        section = self.title_section
        if section is not None and isinstance(section.content, ContactFields):
            return section.content
        return ContactFields()

    @property
    def body_sections(self) -> Tuple[Section, ...]:
        return tuple(section for section in self.sections if not section.is_title)

    def section(self, title: str) -> Optional[Section]:
        for section in self.sections:
            if section.title == title:
                return section
        return None


def coerce_proposal(proposal: Union[Proposal, Dict[str, Any]]) -> Proposal:
    return proposal if isinstance(proposal, Proposal) else Proposal.from_dict(proposal)


def coerce_company(company: Union[Company, Dict[str, Any], None]) -> Company:
    return company if isinstance(company, Company) else Company.from_dict(company)
