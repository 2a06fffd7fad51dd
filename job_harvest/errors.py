"""Exception types raised inside the harvester.

None of these escape a source's `run()`; they exist so that the places which
do catch them can tell a broken feed from a broken store.
"""

from __future__ import annotations


class HarvestError(Exception):
    """Base class for harvester errors."""


class FeedError(HarvestError):
    """A source feed could not be fetched or parsed."""


class StorageError(HarvestError):
    """The job store rejected or failed an operation."""


class DuplicateJobError(StorageError):
    """A record with the same job_id is already stored."""


class DuplicateSlugError(DuplicateJobError):
    """Another record already holds this slug; the record itself is new."""
