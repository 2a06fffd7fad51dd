"""Data models for the harvester.

Every source adapter maps its feed into the same `JobRecord` shape; that record
is what gets stored, so field names follow the `jobs` table columns. The
result models (`SourceResult`, `RunReport`) serialise with camelCase aliases
because they are returned as-is to the HTTP layer that triggers a run.

This file uses Pydantic v2.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


JobType = Literal["Full-time", "Part-time", "Contract", "Freelance"]
ExperienceLevel = Literal["Entry", "Mid", "Senior", "Lead"]
LocationRestriction = Literal["Worldwide", "US Only", "Europe", "Americas", "APAC"]
RunStatus = Literal["success", "error"]


class JobRecord(BaseModel):
    """A normalized job posting, ready for insertion.

    `job_id` is the only deduplication key. It embeds the source platform, so
    two sources can never collide on it.
    """

    job_id: str = Field(..., description="'<platform>-<source_job_id>', lowercased platform.")
    source_job_id: str

    title: str
    company: str
    company_logo_url: Optional[str] = None

    location: str = "Remote"
    location_restriction: LocationRestriction = "Worldwide"
    job_type: JobType = "Full-time"
    experience_level: Optional[ExperienceLevel] = None
    category_id: Optional[str] = None

    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: str = "USD"
    salary_period: str = "year"

    description: str = ""
    source_platform: str
    source_url: str
    posted_date: str = Field(..., description="ISO-8601 timestamp.")
    slug: str = Field(..., max_length=100)

    # Stamped by storage.insert_job
    is_remote: bool = True
    is_active: bool = True
    is_featured: bool = False
    scraped_at: Optional[str] = None


class Category(BaseModel):
    """A row of the pre-existing category taxonomy. Read-only for the harvester."""

    id: str
    name: str
    slug: str
    is_active: bool = True
    sort_order: int = 0


class ScraperRunLog(BaseModel):
    platform: str
    status: RunStatus
    jobs_scraped: int = 0
    jobs_inserted: int = 0
    error_message: Optional[str] = None
    scraped_at: str


class SalaryInfo(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"
    period: str = "year"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordError(_CamelModel):
    """One feed record that could not be inserted."""

    source_job_id: Optional[str] = None
    title: Optional[str] = None
    error: str


class SourceResult(_CamelModel):
    """Outcome of a single adapter run."""

    success: bool
    jobs_scraped: int = 0
    jobs_inserted: int = 0
    skipped: int = 0
    error: Optional[str] = None
    errors: List[RecordError] = Field(default_factory=list)


class RunReport(_CamelModel):
    """Combined outcome of one orchestrated run across all sources."""

    success: bool = True
    total_scraped: int = 0
    total_inserted: int = 0
    results: Dict[str, SourceResult] = Field(default_factory=dict)
    timestamp: str
