"""Configuration package for the analyst ratings service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
