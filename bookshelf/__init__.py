"""Bookshelf: per-owner book catalogue with search-indexed keyset pagination."""

__version__ = "0.1.0"
