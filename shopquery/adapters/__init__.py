"""External adapters for the shopquery catalog.

This package contains all external dependencies (SQLite, PostgreSQL,
command-line I/O) and provides implementations of the core port interfaces.

Adapter Organization:

- store/: Adapters that hydrate the catalog from a fixture database
- cli/: Command-line query commands and the exercise report
"""
