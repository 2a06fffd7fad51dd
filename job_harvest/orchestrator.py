"""Run every source concurrently and combine their results.

Total wall-clock time is bounded by the slowest feed rather than the sum of
all feeds. Sources share nothing except the store; their job_ids are
namespaced by platform so concurrent inserts never collide.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Optional, Sequence

from .logging_config import get_logger
from .models import RunReport, SourceResult
from .sources import JobSource, default_sources
from .storage import JobStore
from .utils import utc_now_iso

logger = get_logger(__name__)


def run_all_scrapers(
    store: JobStore,
    sources: Optional[Sequence[JobSource]] = None,
    max_workers: Optional[int] = None,
) -> RunReport:
    """Fan out `source.run(store)` for every source, join, and sum the counts.

    Never raises: a source that fails shows up only in its own `results` entry.
    """
    sources = list(sources) if sources is not None else default_sources()
    if not sources:
        return RunReport(timestamp=utc_now_iso())

    by_name: Dict[str, SourceResult] = {}
    with ThreadPoolExecutor(max_workers=max_workers or len(sources), thread_name_prefix="scraper") as ex:
        futures = {ex.submit(source.run, store): source for source in sources}
        for fut in as_completed(futures):
            source = futures[fut]
            try:
                by_name[source.name] = fut.result()
            except Exception as e:
                # JobSource.run is not supposed to raise; keep the other sources' results anyway
                logger.exception("%s crashed outside its own error handling", source.name)
                by_name[source.name] = SourceResult(success=False, error=str(e) or type(e).__name__)

    results = {source.name: by_name[source.name] for source in sources}
    report = RunReport(
        success=True,
        total_scraped=sum(r.jobs_scraped for r in results.values()),
        total_inserted=sum(r.jobs_inserted for r in results.values()),
        results=results,
        timestamp=utc_now_iso(),
    )
    failed = [name for name, r in results.items() if not r.success]
    logger.info(
        "scrape run finished: scraped=%d inserted=%d failed_sources=%s",
        report.total_scraped, report.total_inserted, failed or "none",
    )
    return report
