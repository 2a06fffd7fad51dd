"""We Work Remotely source connector.

WWR publishes RSS feeds per category; we read the full-stack programming one.
Items carry no structured company field: the title reads "Company: Job Title"
and is split on its first colon. The job id is the last path segment of the
item link.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence
from urllib.parse import urlparse

import feedparser  # RSS/Atom parser
import httpx

from ..errors import FeedError
from ..logging_config import get_logger
from ..models import Category, JobRecord
from ..normalize import detect_category, normalize_experience_level, normalize_job_type, split_company_title
from ..utils import clean_html, to_iso8601
from .base import JobSource

logger = get_logger(__name__)


class WeWorkRemotelySource(JobSource):
    """Fetch the WWR RSS feed and normalize its items."""

    name = "weworkremotely"
    platform = "We Work Remotely"
    id_prefix = "weworkremotely"
    default_url = "https://weworkremotely.com/categories/remote-full-stack-programming-jobs.rss"
    accept = "application/rss+xml, application/xml;q=0.9, text/xml;q=0.8, */*;q=0.5"

    def parse_feed(self, response: httpx.Response) -> List[Dict[str, Any]]:
        # descriptions go to clean_html as published
        parsed = feedparser.parse(response.content, sanitize_html=False, resolve_relative_uris=False)
        if parsed.bozo and not parsed.entries:
            raise FeedError(f"unparseable RSS feed: {parsed.bozo_exception}")
        if parsed.bozo:
            # Non-fatal: feedparser recovered some entries from a malformed document
            logger.warning("%s feed is malformed: %s", self.platform, parsed.bozo_exception)

        items: List[Dict[str, Any]] = []
        for entry in parsed.entries:
            title = (entry.get("title") or "").strip()
            link = (entry.get("link") or "").strip()
            if not (title and link):
                continue
            items.append(
                {
                    "title": title,
                    "link": link,
                    "pubDate": (entry.get("published") or "").strip(),
                    "published_parsed": entry.get("published_parsed"),
                    "description": (entry.get("summary") or entry.get("description") or "").strip(),
                }
            )
        return items

    def source_job_id(self, raw: Dict[str, Any]) -> str:
        segments = [p for p in urlparse(raw.get("link") or "").path.split("/") if p]
        if not segments:
            raise ValueError(f"no job id in link {raw.get('link')!r}")
        return segments[-1]

    def to_record(self, raw: Dict[str, Any], source_job_id: str, categories: Sequence[Category]) -> JobRecord:
        company, title = split_company_title(raw["title"])
        raw_desc = raw.get("description") or ""

        return self.build_record(
            source_job_id,
            title,
            company,
            location="Remote",
            location_restriction="Worldwide",
            job_type=normalize_job_type(raw_desc),
            experience_level=normalize_experience_level(title),
            category_id=detect_category(title, raw_desc, categories),
            description=clean_html(raw_desc),
            source_url=raw["link"],
            posted_date=to_iso8601(raw.get("published_parsed") or raw.get("pubDate")),
        )
