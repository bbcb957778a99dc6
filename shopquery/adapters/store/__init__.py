"""Catalog store adapters for fixture ingestion.

Implementations support multiple backends:
- SQLite (zero-config, single-file)
- PostgreSQL (shared server database)
"""
