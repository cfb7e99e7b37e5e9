from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator


_HEADLINE_AT_RE = re.compile(r"(?:\bat\b|@)\s*([^\W_][\w\s&.'-]*?)(?:\s+-\s|\s*[|·,]|$)", re.IGNORECASE)
_HEADLINE_SEGMENT_SPLIT = re.compile(r"\s*[|·,]\s*")
_HEADLINE_DASH_RE = re.compile(r"\s-\s([^\W_][\w\s&.']*?)$")
_ACADEMIC_RE = re.compile(r"^the\s+(?:university|college|institute|school)\b", re.IGNORECASE)
_HEADLINE_TITLE_RE = re.compile(r"^(.+?)\s+(?:at\b|@)", re.IGNORECASE)
_JOB_WORDS = ("engineer", "developer", "manager", "analyst", "scientist", "seeking", "open to")


def _clean_company(text: str) -> str:
    return " ".join(text.split()).strip(" .,|·-")


def _looks_like_company(text: str | None) -> bool:
    if not text or not 2 <= len(text) <= 80 or not text[0].isalpha():
        return False
    lowered = text.lower()
    return not any(word in lowered for word in _JOB_WORDS)


class HintBundle(BaseModel):
    """Known facts about one person; the immutable seed of a discovery run."""

    external_id: str = Field(alias="externalId")
    profile_url: str | None = Field(default=None, alias="profileUrl")
    name_hint: str | None = Field(default=None, alias="nameHint")
    headline_hint: str | None = Field(default=None, alias="headlineHint")
    location_hint: str | None = Field(default=None, alias="locationHint")
    company_hint: str | None = Field(default=None, alias="companyHint")
    role_type: str | None = Field(default=None, alias="roleType")

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @field_validator("external_id")
    @classmethod
    def _external_id_present(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("externalId is required")
        return value

    @field_validator("name_hint", "headline_hint", "location_hint", "company_hint", "profile_url", "role_type")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = " ".join(str(value).split())
        return value or None

    def effective_company(self) -> str | None:
        """Company hint, or a company inferred from the headline.

        ``at``/``@`` phrases win over comma, pipe or dot segments, which win over a
        trailing `` - Company``; "Engineer, Backend at Acme" gives "Acme".
        """
        if self.company_hint:
            return self.company_hint
        if not self.headline_hint:
            return None
        headline = self.headline_hint

        m = _HEADLINE_AT_RE.search(headline)
        if m:
            company = _clean_company(m.group(1))
            if company and not _ACADEMIC_RE.match(company):
                return company

        segments = [s for s in _HEADLINE_SEGMENT_SPLIT.split(headline) if s.strip()]
        # First segment is the title
        for segment in reversed(segments[1:]):
            company = _clean_company(segment)
            if _looks_like_company(company):
                return company

        m = _HEADLINE_DASH_RE.search(headline)
        if m and _looks_like_company(_clean_company(m.group(1))):
            return _clean_company(m.group(1))
        return None

    def headline_title(self) -> str | None:
        if not self.headline_hint:
            return None
        m = _HEADLINE_TITLE_RE.match(self.headline_hint)
        if m:
            return m.group(1).strip() or None
        return None
