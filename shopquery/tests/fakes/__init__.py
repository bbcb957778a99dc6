"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeCatalogStorePort: In-memory fixture rows with captured seed calls
- sample_catalog: A small catalog whose query answers are worked out by hand
"""

from .catalog import sample_catalog, sample_snapshot
from .store import FakeCatalogStorePort

__all__ = [
    "FakeCatalogStorePort",
    "sample_catalog",
    "sample_snapshot",
]
