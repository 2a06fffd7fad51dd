"""Base class for source connectors.

A source knows how to fetch one feed and map one raw item into a `JobRecord`.
Everything else (dedup, slug collisions, insert, per-record isolation, run
logging) is the same for every source and lives in `JobSource.run`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

import httpx

from ..errors import DuplicateSlugError, FeedError
from ..logging_config import get_logger
from ..models import Category, JobRecord, RecordError, SourceResult
from ..storage import JobStore, insert_job, job_exists, log_scraper_run, suffixed_slug, unique_slug
from ..utils import generate_job_id, generate_slug

logger = get_logger(__name__)

USER_AGENT = "RemoteHireHub Job Aggregator"


class JobSource(ABC):
    """Abstract base class for a job source connector."""

    name: str  # key in the run report
    platform: str  # display name, stored as source_platform and in the run log
    id_prefix: str  # namespace of job_id
    default_url: str
    title_field: str = "title"
    accept: str = "application/json"

    def __init__(
        self,
        feed_url: Optional[str] = None,
        timeout_s: float = 20.0,
        user_agent: str = USER_AGENT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.feed_url = feed_url or self.default_url
        self._timeout = timeout_s
        self._user_agent = user_agent
        self._transport = transport

    # -----------------------
    # Source-specific hooks
    # -----------------------
    @abstractmethod
    def parse_feed(self, response: httpx.Response) -> List[Any]:
        """Turn the feed response into a list of raw items."""
        raise NotImplementedError

    @abstractmethod
    def source_job_id(self, raw: Any) -> str:
        """The id the origin feed uses for this item, as a string."""
        raise NotImplementedError

    @abstractmethod
    def to_record(self, raw: Any, source_job_id: str, categories: Sequence[Category]) -> JobRecord:
        """Map one raw item to the canonical record."""
        raise NotImplementedError

    # -----------------------
    # Fetching
    # -----------------------
    def fetch(self) -> List[Any]:
        """Fetch and parse the feed. Raises FeedError on network or HTTP failures."""
        headers = {"User-Agent": self._user_agent, "Accept": self.accept}
        with httpx.Client(
            timeout=self._timeout, headers=headers, follow_redirects=True, transport=self._transport
        ) as client:
            try:
                resp = client.get(self.feed_url)
            except httpx.HTTPError as e:
                raise FeedError(f"{type(e).__name__}: {e}") from e
            if not resp.is_success:
                raise FeedError(f"HTTP {resp.status_code}: {resp.reason_phrase}")
            return self.parse_feed(resp)

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise FeedError(f"invalid JSON from {self.feed_url}: {e}") from e

    # -----------------------
    # Mapping helpers
    # -----------------------
    def build_record(self, source_job_id: str, title: str, company: str, **fields: Any) -> JobRecord:
        """Fill in the fields every source derives the same way."""
        if not title:
            raise ValueError("missing title")
        if not company:
            raise ValueError("missing company")
        return JobRecord(
            job_id=generate_job_id(source_job_id, self.id_prefix),
            source_job_id=source_job_id,
            title=title,
            company=company,
            source_platform=self.platform,
            slug=generate_slug(title, company),
            **fields,
        )

    def describe(self, raw: Any) -> Optional[str]:
        if isinstance(raw, dict):
            val = raw.get(self.title_field)
            return str(val) if val is not None else None
        return None

    def _safe_source_job_id(self, raw: Any) -> Optional[str]:
        try:
            return self.source_job_id(raw)
        except Exception:
            return None

    # -----------------------
    # Run
    # -----------------------
    def process_record(self, store: JobStore, raw: Any, categories: Sequence[Category]) -> bool:
        """Insert one item. Returns False for a duplicate; raises on any failure."""
        source_job_id = self.source_job_id(raw)
        if job_exists(store, source_job_id, self.id_prefix):
            logger.debug("skipping duplicate %s: %s", self.platform, self.describe(raw))
            return False

        record = self.to_record(raw, source_job_id, categories)
        base_slug = record.slug
        slug = unique_slug(store, base_slug, record.job_id)
        if slug != record.slug:
            record = record.model_copy(update={"slug": slug})
        try:
            insert_job(store, record)
        except DuplicateSlugError:
            # another source took the slug between the check and the insert
            retry = suffixed_slug(base_slug, record.job_id)
            if retry == record.slug:
                raise
            logger.debug("slug %s taken concurrently, retrying as %s", record.slug, retry)
            record = record.model_copy(update={"slug": retry})
            insert_job(store, record)
        logger.debug("inserted %s at %s", record.title, record.company)
        return True

    def run(self, store: JobStore) -> SourceResult:
        """Fetch the feed and insert every new item. Never raises."""
        logger.info("starting %s scrape", self.platform)
        scraped = inserted = skipped = 0
        errors: List[RecordError] = []

        try:
            raws = self.fetch()
            scraped = len(raws)
            logger.info("found %d jobs from %s", scraped, self.platform)
            categories = store.list_active_categories()

            for raw in raws:
                try:
                    if self.process_record(store, raw, categories):
                        inserted += 1
                    else:
                        skipped += 1
                except Exception as e:
                    message = str(e) or type(e).__name__
                    logger.warning("error processing %s job %r: %s", self.platform, self.describe(raw), message)
                    errors.append(
                        RecordError(
                            source_job_id=self._safe_source_job_id(raw),
                            title=self.describe(raw),
                            error=message,
                        )
                    )
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error("%s scrape failed: %s", self.platform, message, exc_info=True)
            log_scraper_run(store, self.platform, "error", scraped, inserted, message)
            return SourceResult(
                success=False,
                jobs_scraped=scraped,
                jobs_inserted=inserted,
                skipped=skipped,
                error=message,
                errors=errors,
            )

        log_scraper_run(store, self.platform, "success", scraped, inserted)
        logger.info(
            "%s scrape complete: inserted %d/%d (%d duplicates, %d failed)",
            self.platform, inserted, scraped, skipped, len(errors),
        )
        return SourceResult(
            success=True,
            jobs_scraped=scraped,
            jobs_inserted=inserted,
            skipped=skipped,
            errors=errors,
        )
