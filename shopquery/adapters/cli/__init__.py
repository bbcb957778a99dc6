"""Command-line interface adapter.

Maps named commands with JSON arguments onto CatalogQueryPort operations.
"""
