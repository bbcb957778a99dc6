"""Test suite for the shopquery catalog.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - No external dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Integration tests for adapter implementations
   - SQLite tests run against temporary database files
   - PostgreSQL tests use mocked connection pools

3. fakes/: Port implementations and sample data for testing
   - In-memory CatalogStorePort
   - A small hand-checked catalog
"""
