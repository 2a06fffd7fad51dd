"""Remotive jobs source connector.

Remotive provides a public JSON endpoint wrapping its postings in a `jobs`
array. Salary, when present, is a free-text `salary` field; the location
restriction is read from `candidate_required_location`.

Docs: https://remotive.com/api/remote-jobs

Note: Free APIs can change; treat this as a pluggable connector.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import httpx

from ..errors import FeedError
from ..models import Category, JobRecord, SalaryInfo
from ..normalize import (
    detect_category,
    location_restriction_from_text,
    normalize_experience_level,
    normalize_job_type,
    parse_salary,
)
from ..utils import clean_html, normalize_logo_url, to_iso8601
from .base import JobSource


class RemotiveSource(JobSource):
    """Fetch jobs from Remotive and normalize them."""

    name = "remotive"
    platform = "Remotive"
    id_prefix = "remotive"
    default_url = "https://remotive.com/api/remote-jobs"

    def parse_feed(self, response: httpx.Response) -> List[Dict[str, Any]]:
        payload = self._json(response)
        if not isinstance(payload, dict):
            raise FeedError("expected a JSON object from Remotive")
        return payload.get("jobs", []) or []

    def source_job_id(self, raw: Dict[str, Any]) -> str:
        val = raw.get("id")
        if val is None or str(val).strip() == "":
            raise ValueError("missing id")
        return str(val).strip()

    @staticmethod
    def _salary(raw: Dict[str, Any]) -> SalaryInfo:
        val = raw.get("salary")
        if isinstance(val, (int, float)) and not isinstance(val, bool):
            val = str(val)
        if isinstance(val, str) and val.strip():
            return parse_salary(val)
        return SalaryInfo()

    def to_record(self, raw: Dict[str, Any], source_job_id: str, categories: Sequence[Category]) -> JobRecord:
        title = (raw.get("title") or "").strip()
        company = (raw.get("company_name") or "").strip()
        raw_desc = raw.get("description") or ""
        candidate_location = (raw.get("candidate_required_location") or "").strip()
        salary = self._salary(raw)

        return self.build_record(
            source_job_id,
            title,
            company,
            company_logo_url=normalize_logo_url(raw.get("company_logo")),
            location=candidate_location or "Remote",
            location_restriction=location_restriction_from_text(candidate_location),
            job_type=normalize_job_type(raw.get("job_type") or "Full-time"),
            experience_level=normalize_experience_level(title),
            category_id=detect_category(title, raw_desc, categories),
            salary_min=salary.min or None,
            salary_max=salary.max or None,
            salary_currency=salary.currency,
            salary_period=salary.period,
            description=clean_html(raw_desc),
            source_url=(raw.get("url") or "").strip(),
            posted_date=to_iso8601(raw.get("publication_date")),
        )
