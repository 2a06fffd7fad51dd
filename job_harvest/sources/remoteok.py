"""RemoteOK jobs source connector.

Docs: https://remoteok.com/api

The API returns one JSON array. Its first element is a legal notice, not a
job, and is dropped. Salary usually lives in the description text; some
postings also carry numeric `salary_min`/`salary_max` fields.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urljoin

import httpx

from ..errors import FeedError
from ..models import Category, JobRecord
from ..normalize import (
    detect_category,
    location_restriction_from_tags,
    normalize_experience_level,
    parse_salary,
)
from ..utils import clean_html, normalize_logo_url, to_iso8601
from .base import JobSource


class RemoteOKSource(JobSource):
    """Fetch jobs from RemoteOK and normalize them."""

    name = "remoteok"
    platform = "RemoteOK"
    id_prefix = "remoteok"
    default_url = "https://remoteok.com/api"
    site_url = "https://remoteok.com"
    title_field = "position"

    def parse_feed(self, response: httpx.Response) -> List[Dict[str, Any]]:
        data = self._json(response)
        if not isinstance(data, list):
            raise FeedError("expected a JSON array from RemoteOK")
        return data[1:]

    def source_job_id(self, raw: Dict[str, Any]) -> str:
        val = raw.get("id")
        if val is None or str(val).strip() == "":
            raise ValueError("missing id")
        return str(val).strip()

    @staticmethod
    def _explicit_salary(raw: Dict[str, Any], key: str) -> Optional[float]:
        val = raw.get(key)
        if isinstance(val, (int, float)) and not isinstance(val, bool) and val > 0:
            return float(val)
        return None

    def to_record(self, raw: Dict[str, Any], source_job_id: str, categories: Sequence[Category]) -> JobRecord:
        title = (raw.get("position") or "").strip()
        company = (raw.get("company") or "").strip()
        raw_desc = raw.get("description") or ""
        tags = raw.get("tags") or []

        salary = parse_salary(raw_desc)
        explicit = (self._explicit_salary(raw, "salary_min"), self._explicit_salary(raw, "salary_max"))
        if any(explicit):
            # structured fields come as a pair; never mix them with text-parsed bounds
            salary_min, salary_max = explicit
        else:
            salary_min, salary_max = salary.min or None, salary.max or None

        job_type = "Contract" if any("contract" in str(t).lower() for t in tags) else "Full-time"
        url = raw.get("url") or f"/remote-jobs/{source_job_id}"

        return self.build_record(
            source_job_id,
            title,
            company,
            company_logo_url=normalize_logo_url(raw.get("company_logo") or raw.get("logo")),
            location="Remote",
            location_restriction=location_restriction_from_tags(tags),
            job_type=job_type,
            experience_level=normalize_experience_level(title),
            category_id=detect_category(title, raw_desc, categories),
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency=salary.currency,
            salary_period=salary.period,
            description=clean_html(raw_desc),
            source_url=urljoin(self.site_url, url),
            posted_date=to_iso8601(raw.get("date") or raw.get("epoch")),
        )
