"""Unit tests for core domain logic.

These tests exercise core query logic without external dependencies.
The store port is replaced with an in-memory fake from tests/fakes/.
"""
