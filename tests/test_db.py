"""
Tests for the SQLAlchemy store, run against in-memory SQLite.
"""

import pytest
from sqlalchemy import select

from conftest import FeedServer, all_feeds_ok
from job_harvest.db import (
    DEFAULT_CATEGORIES,
    CategoryORM,
    JobORM,
    ScraperLogORM,
    SqlJobStore,
    init_db,
    make_engine,
    make_session_factory,
    seed_categories,
)
from job_harvest.errors import DuplicateJobError, DuplicateSlugError
from job_harvest.models import JobRecord
from job_harvest.orchestrator import run_all_scrapers
from job_harvest.sources import default_sources
from job_harvest.config import Settings
from job_harvest.storage import insert_job, log_scraper_run


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    init_db(engine)
    factory = make_session_factory(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def sql_store(session_factory):
    seed_categories(session_factory)
    return SqlJobStore(session_factory)


def make_record(**overrides):
    data = dict(
        job_id="remotive-1",
        source_job_id="1",
        title="Backend Engineer",
        company="Initech",
        source_platform="Remotive",
        source_url="https://remotive.com/remote-jobs/1",
        posted_date="2024-05-03T08:30:00.000Z",
        slug="backend-engineer-initech",
    )
    data.update(overrides)
    return JobRecord(**data)


class TestSeed:
    def test_seed_once(self, session_factory):
        assert seed_categories(session_factory) == len(DEFAULT_CATEGORIES)
        assert seed_categories(session_factory) == 0

    def test_categories_in_sort_order(self, sql_store):
        slugs = [c.slug for c in sql_store.list_active_categories()]
        assert slugs == [slug for slug, _ in DEFAULT_CATEGORIES]

    def test_inactive_category_hidden(self, session_factory, sql_store):
        with session_factory() as session:
            row = session.scalars(select(CategoryORM).where(CategoryORM.slug == "hr-recruiting")).one()
            row.is_active = False
            session.commit()
        assert "hr-recruiting" not in [c.slug for c in sql_store.list_active_categories()]


class TestSqlJobStore:
    def test_insert_and_exists(self, sql_store, session_factory):
        assert not sql_store.exists("remotive-1")
        insert_job(sql_store, make_record())
        assert sql_store.exists("remotive-1")
        assert sql_store.slug_exists("backend-engineer-initech")

        with session_factory() as session:
            row = session.scalars(select(JobORM)).one()
            assert row.is_remote is True
            assert row.is_featured is False
            assert row.posted_date.year == 2024
            assert row.scraped_at is not None

    def test_duplicate_job_id(self, sql_store):
        sql_store.insert(make_record())
        with pytest.raises(DuplicateJobError) as exc:
            sql_store.insert(make_record(slug="another-slug"))
        assert not isinstance(exc.value, DuplicateSlugError)

    def test_duplicate_slug(self, sql_store):
        sql_store.insert(make_record())
        with pytest.raises(DuplicateSlugError):
            sql_store.insert(make_record(job_id="remotive-2", source_job_id="2"))

    def test_run_log_appended(self, sql_store, session_factory):
        log_scraper_run(sql_store, "Remotive", "error", 0, 0, "HTTP 500: Internal Server Error")
        with session_factory() as session:
            row = session.scalars(select(ScraperLogORM)).one()
            assert row.platform == "Remotive"
            assert row.status == "error"
            assert row.error_message == "HTTP 500: Internal Server Error"


class TestPipelineOnSql:
    def test_full_run_and_rerun(self, sql_store, session_factory):
        server = FeedServer(all_feeds_ok())
        sources = default_sources(Settings(_env_file=None), transport=server.transport)

        first = run_all_scrapers(sql_store, sources, max_workers=1)
        second = run_all_scrapers(sql_store, sources, max_workers=1)

        assert first.total_inserted == 6
        assert second.total_inserted == 0
        with session_factory() as session:
            assert len(session.scalars(select(JobORM)).all()) == 6
            assert len(session.scalars(select(ScraperLogORM)).all()) == 6

    def test_threaded_run_on_file_database(self, tmp_path):
        engine = make_engine(f"sqlite:///{tmp_path / 'jobs.db'}")
        init_db(engine)
        factory = make_session_factory(engine)
        seed_categories(factory)
        store = SqlJobStore(factory)
        server = FeedServer(all_feeds_ok())
        sources = default_sources(Settings(_env_file=None), transport=server.transport)

        try:
            first = run_all_scrapers(store, sources)
            second = run_all_scrapers(store, sources)
        finally:
            engine.dispose()

        assert all(r.errors == [] for r in first.results.values())
        assert first.total_inserted == 6
        assert second.total_inserted == 0
        with factory() as session:
            assert len(session.scalars(select(JobORM)).all()) == 6
