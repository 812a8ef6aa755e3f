"""Async client toolkit for hosting control panels."""

__version__ = "0.1.0"
