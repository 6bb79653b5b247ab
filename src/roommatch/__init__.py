"""Roommate compatibility scoring and candidate search."""

__version__ = "0.1.0"
