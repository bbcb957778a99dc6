"""Bundled fixture data for the shopquery catalog."""

from pathlib import Path

_FIXTURE_DIR = Path(__file__).parent


def default_fixture_path() -> Path:
    """Path to the bundled sample catalog SQL script."""
    return _FIXTURE_DIR / "data.sql"


__all__ = ["default_fixture_path"]
