"""Database helpers."""

from .base import Base
from .database import Database
from .types import MoneyType

__all__ = ["Base", "Database", "MoneyType"]
