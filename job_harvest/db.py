"""SQLAlchemy-backed job store.

Three tables matter to the harvester: `jobs` (write-once), `remote_categories`
(read-only taxonomy) and `scraper_logs` (append-only audit trail).
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text, create_engine, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import DuplicateJobError, DuplicateSlugError, StorageError
from .logging_config import get_logger
from .models import Category, JobRecord, ScraperRunLog
from .storage import JobStore

logger = get_logger(__name__)

Base = declarative_base()


class JobORM(Base):
    __tablename__ = "jobs"
    id = Column(Integer, primary_key=True)
    job_id = Column(String(255), nullable=False, unique=True, index=True)
    source_job_id = Column(String(255), nullable=False)
    title = Column(String(512), nullable=False)
    company = Column(String(256), nullable=False)
    company_logo_url = Column(Text, nullable=True)
    location = Column(String(256), nullable=False, default="Remote")
    location_restriction = Column(String(32), nullable=True)
    job_type = Column(String(32), nullable=False, default="Full-time")
    experience_level = Column(String(32), nullable=True)
    category_id = Column(String(64), nullable=True)
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    salary_currency = Column(String(8), nullable=True)
    salary_period = Column(String(16), nullable=True)
    description = Column(Text, nullable=True)
    source_platform = Column(String(64), nullable=False)
    source_url = Column(Text, nullable=False)
    posted_date = Column(DateTime(timezone=True), nullable=True)
    slug = Column(String(100), nullable=False, unique=True)
    is_remote = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    scraped_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class CategoryORM(Base):
    __tablename__ = "remote_categories"
    id = Column(String(64), primary_key=True)
    name = Column(String(128), nullable=False)
    slug = Column(String(128), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)


class ScraperLogORM(Base):
    __tablename__ = "scraper_logs"
    id = Column(Integer, primary_key=True)
    platform = Column(String(64), nullable=False)
    status = Column(String(16), nullable=False)
    jobs_scraped = Column(Integer, nullable=False, default=0)
    jobs_inserted = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)
    scraped_at = Column(DateTime(timezone=True), nullable=False)


DEFAULT_CATEGORIES: List[Tuple[str, str]] = [
    ("software-development", "Software Development"),
    ("customer-support", "Customer Support"),
    ("marketing-growth", "Marketing & Growth"),
    ("design-creative", "Design & Creative"),
    ("writing-content", "Writing & Content"),
    ("sales-business", "Sales & Business"),
    ("project-management", "Project Management"),
    ("data-analytics", "Data & Analytics"),
    ("finance-accounting", "Finance & Accounting"),
    ("hr-recruiting", "HR & Recruiting"),
]


def make_engine(url: str):
    kwargs = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # the orchestrator shares the engine across worker threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine):
    """Create the tables. Development convenience; use migrations in production."""
    Base.metadata.create_all(bind=engine)


def seed_categories(session_factory, categories: Optional[Iterable[Tuple[str, str]]] = None) -> int:
    """Insert the default taxonomy when the categories table is empty. Returns rows added."""
    with session_factory() as session:
        if session.scalar(select(func.count()).select_from(CategoryORM)):
            return 0
        rows = [
            CategoryORM(id=str(uuid.uuid4()), name=name, slug=slug, is_active=True, sort_order=i)
            for i, (slug, name) in enumerate(categories or DEFAULT_CATEGORIES)
        ]
        session.add_all(rows)
        session.commit()
        logger.info("seeded %d categories", len(rows))
        return len(rows)


def _is_slug_clash(error: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: jobs.slug"; Postgres: constraint "jobs_slug_key"
    message = str(error.orig).lower()
    if "unique" not in message and "duplicate" not in message:
        return False
    return "slug" in message and "job_id" not in message


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class SqlJobStore(JobStore):
    """JobStore over a SQLAlchemy session factory; one short session per call."""

    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory

    def exists(self, job_id: str) -> bool:
        try:
            with self._session_factory() as session:
                stmt = select(JobORM.id).where(JobORM.job_id == job_id).limit(1)
                return session.scalar(stmt) is not None
        except SQLAlchemyError as e:
            raise StorageError(f"exists({job_id}) failed: {e}") from e

    def slug_exists(self, slug: str) -> bool:
        try:
            with self._session_factory() as session:
                stmt = select(JobORM.id).where(JobORM.slug == slug).limit(1)
                return session.scalar(stmt) is not None
        except SQLAlchemyError as e:
            raise StorageError(f"slug_exists({slug}) failed: {e}") from e

    def insert(self, record: JobRecord) -> JobRecord:
        data = record.model_dump()
        data["posted_date"] = _parse_ts(record.posted_date)
        data["scraped_at"] = _parse_ts(record.scraped_at)
        with self._session_factory() as session:
            try:
                session.add(JobORM(**data))
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if _is_slug_clash(e):
                    raise DuplicateSlugError(f"slug already stored: {record.slug}") from e
                raise DuplicateJobError(f"insert {record.job_id} rejected: {e.orig}") from e
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError(f"insert {record.job_id} failed: {e}") from e
        return record

    def list_active_categories(self) -> List[Category]:
        try:
            with self._session_factory() as session:
                stmt = (
                    select(CategoryORM)
                    .where(CategoryORM.is_active.is_(True))
                    .order_by(CategoryORM.sort_order, CategoryORM.name)
                )
                return [
                    Category(id=r.id, name=r.name, slug=r.slug, is_active=r.is_active, sort_order=r.sort_order)
                    for r in session.scalars(stmt)
                ]
        except SQLAlchemyError as e:
            raise StorageError(f"listing categories failed: {e}") from e

    def append_run_log(self, entry: ScraperRunLog) -> None:
        with self._session_factory() as session:
            try:
                session.add(
                    ScraperLogORM(
                        platform=entry.platform,
                        status=entry.status,
                        jobs_scraped=entry.jobs_scraped,
                        jobs_inserted=entry.jobs_inserted,
                        error_message=entry.error_message,
                        scraped_at=_parse_ts(entry.scraped_at),
                    )
                )
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError(f"run log for {entry.platform} failed: {e}") from e
