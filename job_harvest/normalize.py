"""Normalization & heuristics.

This module contains the deterministic parsing logic every source shares:
- salary extraction from free text
- job type and experience level inference
- category classification by keyword scoring
- location restriction rules
- "Company: Title" splitting for RSS titles

All of it is plain substring/regex matching. Keeping these heuristics in one
place makes the sources thin and the behaviour easy to test.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Category, ExperienceLevel, JobType, LocationRestriction, SalaryInfo


_SALARY_NUMBER_RE = re.compile(r"\d+k?", re.IGNORECASE)
_CURRENCY_RE = re.compile(r"USD|EUR|GBP|\$", re.IGNORECASE)
_PERIOD_RE = re.compile(r"hour|day|month|year", re.IGNORECASE)


def parse_salary(text: Optional[str]) -> SalaryInfo:
    """Pull a salary range out of free text.

    Every `\\d+k?` token counts as an amount, so "$100,000" reads as two
    numbers (100 and 0). Only `$` is mapped to a currency code; `€`/`£`
    fall back to the USD default.
    """
    if not text:
        return SalaryInfo()

    tokens = _SALARY_NUMBER_RE.findall(text)
    if not tokens:
        return SalaryInfo()

    amounts: List[float] = []
    for tok in tokens:
        num = float(tok.rstrip("kK"))
        amounts.append(num * 1000 if tok.lower().endswith("k") else num)

    currency_match = _CURRENCY_RE.search(text)
    currency = currency_match.group(0) if currency_match else "USD"
    period_match = _PERIOD_RE.search(text)
    period = period_match.group(0).lower() if period_match else "year"

    return SalaryInfo(
        min=min(amounts),
        max=max(amounts) if len(amounts) > 1 else None,
        currency=currency.replace("$", "USD"),
        period=period,
    )


JOB_TYPE_PATTERNS: List[Tuple[Tuple[str, ...], JobType]] = [
    (("full", "fulltime", "full-time"), "Full-time"),
    (("part", "parttime", "part-time"), "Part-time"),
    (("contract",), "Contract"),
    (("freelance", "consultant"), "Freelance"),
]


def normalize_job_type(text: Optional[str]) -> JobType:
    """Map a free-text job type onto the four canonical values (default Full-time)."""
    t = (text or "").lower()
    for keywords, label in JOB_TYPE_PATTERNS:
        if any(kw in t for kw in keywords):
            return label
    return "Full-time"


# Order matters: first match wins. "lead" sits in both the Senior and the Lead
# bucket, so it always resolves to Senior.
EXPERIENCE_PATTERNS: List[Tuple[Tuple[str, ...], ExperienceLevel]] = [
    (("senior", "sr.", "lead"), "Senior"),
    (("junior", "jr.", "entry"), "Entry"),
    (("mid", "intermediate"), "Mid"),
    (("lead", "principal", "staff"), "Lead"),
]


def normalize_experience_level(title: Optional[str]) -> Optional[ExperienceLevel]:
    """Infer the experience level from a job title, or None when nothing matches."""
    t = (title or "").lower()
    for keywords, label in EXPERIENCE_PATTERNS:
        if any(kw in t for kw in keywords):
            return label
    return None


CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "software-development": [
        "developer", "engineer", "programming", "software", "backend", "frontend", "fullstack",
        "full-stack", "devops", "react", "node", "python", "java", "javascript",
    ],
    "customer-support": ["support", "customer", "service", "help desk", "success", "care"],
    "marketing-growth": [
        "marketing", "growth", "seo", "content marketing", "digital marketing", "social media", "brand",
    ],
    "design-creative": ["designer", "design", "ui", "ux", "graphic", "creative", "visual"],
    "writing-content": ["writer", "content", "copywriter", "editor", "blog", "technical writing"],
    "sales-business": ["sales", "business development", "account executive", "bdr", "sdr"],
    "project-management": ["project manager", "product manager", "scrum", "agile", "pm"],
    "data-analytics": ["data", "analyst", "analytics", "scientist", "bi", "business intelligence"],
    "finance-accounting": ["finance", "accounting", "accountant", "financial", "cpa"],
    "hr-recruiting": ["hr", "human resources", "recruiter", "recruiting", "talent"],
}


def category_score(text: str, slug: str) -> int:
    """Number of the slug's keywords found as substrings of `text` (already lowercased)."""
    return sum(1 for kw in CATEGORY_KEYWORDS.get(slug, []) if kw in text)


def detect_category(title: str, description: str, categories: Sequence[Category]) -> Optional[str]:
    """Pick the active category whose keywords best match title + description.

    Only a strictly higher score replaces the current best, so ties go to the
    category listed first. Returns None when no keyword matches at all.
    """
    text = f"{title or ''} {description or ''}".lower()

    best_id: Optional[str] = None
    best_score = 0
    for category in categories:
        if not category.is_active:
            continue
        score = category_score(text, category.slug)
        if score > best_score:
            best_score = score
            best_id = category.id
    return best_id


def location_restriction_from_tags(tags: Optional[Iterable[str]]) -> LocationRestriction:
    """RemoteOK rule: an exact `usa` or `europe` tag restricts the posting."""
    lowered = [str(t).lower() for t in (tags or [])]
    if "usa" in lowered:
        return "US Only"
    if "europe" in lowered:
        return "Europe"
    return "Worldwide"


LOCATION_PATTERNS: List[Tuple[Tuple[str, ...], LocationRestriction]] = [
    (("usa", "united states"), "US Only"),
    (("europe", "eu"), "Europe"),
    (("americas",), "Americas"),
    (("asia", "apac"), "APAC"),
]


def location_restriction_from_text(text: Optional[str]) -> LocationRestriction:
    """Remotive rule: substring match on the candidate location text."""
    t = (text or "").lower()
    for keywords, label in LOCATION_PATTERNS:
        if any(kw in t for kw in keywords):
            return label
    return "Worldwide"


DEFAULT_COMPANY = "Company"


def split_company_title(raw_title: str) -> Tuple[str, str]:
    """Split a "Company: Job Title" string on its first colon.

    Returns (company, title). Without a colon the whole string is the title
    and the company falls back to a placeholder.
    """
    company, sep, title = (raw_title or "").partition(":")
    if not sep:
        return DEFAULT_COMPANY, (raw_title or "").strip()
    return company.strip(), title.strip()
