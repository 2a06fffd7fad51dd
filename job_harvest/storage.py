"""Persistence boundary.

Sources never talk to a database directly. They receive a `JobStore` and go
through the helpers below, which is all the pipeline needs: key lookup,
insert, category listing and an append-only run log.

`InMemoryJobStore` backs the tests and `run_fetch.py --dry-run`; the
SQLAlchemy implementation lives in `db.py`.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from .errors import DuplicateJobError, DuplicateSlugError
from .logging_config import get_logger
from .models import Category, JobRecord, RunStatus, ScraperRunLog
from .utils import SLUG_MAX_LENGTH, generate_job_id, stable_suffix, utc_now_iso

logger = get_logger(__name__)


class JobStore(ABC):
    """Abstract storage used by the sources."""

    @abstractmethod
    def exists(self, job_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def slug_exists(self, slug: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def insert(self, record: JobRecord) -> JobRecord:
        """Store a new record.

        Raises StorageError: DuplicateJobError on a job_id clash, DuplicateSlugError
        when only the slug is taken.
        """
        raise NotImplementedError

    @abstractmethod
    def list_active_categories(self) -> List[Category]:
        """Active categories in taxonomy order."""
        raise NotImplementedError

    @abstractmethod
    def append_run_log(self, entry: ScraperRunLog) -> None:
        raise NotImplementedError


class InMemoryJobStore(JobStore):
    """Dict-backed store. Safe to share between the orchestrator's threads."""

    def __init__(self, categories: Optional[Iterable[Category]] = None) -> None:
        self._lock = threading.Lock()
        self.jobs: Dict[str, JobRecord] = {}
        self.categories: List[Category] = list(categories or [])
        self.run_logs: List[ScraperRunLog] = []

    def exists(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self.jobs

    def slug_exists(self, slug: str) -> bool:
        with self._lock:
            return any(j.slug == slug for j in self.jobs.values())

    def insert(self, record: JobRecord) -> JobRecord:
        with self._lock:
            if record.job_id in self.jobs:
                raise DuplicateJobError(f"job_id already stored: {record.job_id}")
            if any(j.slug == record.slug for j in self.jobs.values()):
                raise DuplicateSlugError(f"slug already stored: {record.slug}")
            self.jobs[record.job_id] = record
            return record

    def list_active_categories(self) -> List[Category]:
        with self._lock:
            return [c for c in self.categories if c.is_active]

    def append_run_log(self, entry: ScraperRunLog) -> None:
        with self._lock:
            self.run_logs.append(entry)


def job_exists(store: JobStore, source_job_id: str, platform: str) -> bool:
    """True when the record's job_id is already stored."""
    return store.exists(generate_job_id(source_job_id, platform))


def unique_slug(store: JobStore, slug: str, job_id: str) -> str:
    """Return `slug`, or a job_id-suffixed variant when it is already taken.

    The suffix is derived from job_id, so the same record always gets the same
    slug and the 100-character bound still holds.
    """
    if not store.slug_exists(slug):
        return slug
    return suffixed_slug(slug, job_id)


def suffixed_slug(slug: str, job_id: str) -> str:
    """`slug` with a short job_id digest appended, trimmed to the slug bound."""
    suffix = stable_suffix(job_id)
    base = slug[: SLUG_MAX_LENGTH - len(suffix) - 1].rstrip("-")
    return f"{base}-{suffix}" if base else suffix


def insert_job(store: JobStore, record: JobRecord) -> JobRecord:
    """Insert with the default flags stamped. Storage errors propagate."""
    stamped = record.model_copy(
        update={
            "is_remote": True,
            "is_active": True,
            "is_featured": False,
            "scraped_at": utc_now_iso(),
        }
    )
    return store.insert(stamped)


def log_scraper_run(
    store: JobStore,
    platform: str,
    status: RunStatus,
    jobs_scraped: int,
    jobs_inserted: int,
    error_message: Optional[str] = None,
) -> None:
    """Append one audit entry. A failed write is logged, never raised."""
    entry = ScraperRunLog(
        platform=platform,
        status=status,
        jobs_scraped=jobs_scraped,
        jobs_inserted=jobs_inserted,
        error_message=error_message,
        scraped_at=utc_now_iso(),
    )
    try:
        store.append_run_log(entry)
    except Exception as e:
        logger.warning("could not write run log for %s: %s", platform, e)
