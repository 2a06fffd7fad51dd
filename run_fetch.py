"""CLI entry point.

This script runs every job source once, inserts new postings into the store,
and writes the run report as JSON. It is what the scheduler (cron) invokes.

Examples:
    python run_fetch.py --init-db
    python run_fetch.py --out report.json
    python run_fetch.py --only remotive --dry-run

The output is the camelCase run report (totals plus one entry per source).
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from job_harvest.config import get_settings
from job_harvest.db import DEFAULT_CATEGORIES, SqlJobStore, init_db, make_engine, make_session_factory, seed_categories
from job_harvest.logging_config import configure_logging, get_logger
from job_harvest.models import Category
from job_harvest.orchestrator import run_all_scrapers
from job_harvest.sources import default_sources
from job_harvest.storage import InMemoryJobStore


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    p = argparse.ArgumentParser(description="Fetch remote jobs from all sources and store the new ones.")
    p.add_argument("--database-url", type=str, default=settings.database_url, help="SQLAlchemy database URL.")
    p.add_argument("--init-db", action="store_true", help="Create tables and seed the default categories, then exit.")
    p.add_argument("--dry-run", action="store_true", help="Use an in-memory store instead of the database.")
    p.add_argument("--only", nargs="+", default=None, metavar="SOURCE", help="Run only these sources (by name).")
    p.add_argument("--out", type=str, default=None, help="Write the JSON report here instead of stdout.")
    p.add_argument("--log-level", type=str, default=settings.log_level, help="Logging level.")
    args = p.parse_args(argv)
    if args.init_db and args.dry_run:
        p.error("--init-db needs a real database; it cannot be combined with --dry-run")
    return args


def main() -> int:
    args = parse_args()
    configure_logging(args.log_level)
    logger = get_logger("run_fetch")
    settings = get_settings()

    if args.dry_run:
        store = InMemoryJobStore(
            Category(id=slug, name=name, slug=slug, sort_order=i)
            for i, (slug, name) in enumerate(DEFAULT_CATEGORIES)
        )
    else:
        engine = make_engine(args.database_url)
        session_factory = make_session_factory(engine)
        if args.init_db:
            init_db(engine)
            added = seed_categories(session_factory)
            logger.info("database ready at %s (%d categories seeded)", args.database_url, added)
            return 0
        store = SqlJobStore(session_factory)

    sources = default_sources(settings)
    if args.only:
        wanted = {n.lower() for n in args.only}
        unknown = wanted - {s.name for s in sources}
        if unknown:
            logger.error("unknown source(s): %s", ", ".join(sorted(unknown)))
            return 2
        sources = [s for s in sources if s.name in wanted]

    report = run_all_scrapers(store, sources, max_workers=settings.max_workers)
    data = json.dumps(report.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)

    if args.out:
        out_path = Path(args.out).expanduser().resolve()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(data, encoding="utf-8")
        print(f"Inserted {report.total_inserted}/{report.total_scraped} jobs; report written to: {out_path}")
    else:
        print(data)
    return 0


if __name__ == "__main__":
    sys.exit(main())
