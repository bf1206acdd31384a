"""Analyst rating-change REST service with upstream feed synchronization."""

__version__ = "0.1.0"
