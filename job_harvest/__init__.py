"""Remote job harvester.

The package is structured to keep each concern in one place:
- `models.py` defines the canonical job record and the run report shapes.
- `sources/` contains per-source connectors that fetch and map jobs.
- `normalize.py` and `utils.py` contain the deterministic parsing heuristics.
- `storage.py` / `db.py` define the persistence boundary and its SQL backend.
- `orchestrator.py` runs every source concurrently and sums the results.
"""

from .orchestrator import run_all_scrapers

__all__ = ["run_all_scrapers"]
