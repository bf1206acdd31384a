"""Custom column types and server-side defaults."""

from __future__ import annotations

from typing import Any

from sqlalchemy import DateTime, Float
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import FunctionElement
from sqlalchemy.types import TypeDecorator

from analyst_ratings.core.money import money_from_storage, money_to_storage


class MoneyType(TypeDecorator):
    """Float column that accepts float, numeric-string or bytes results."""

    impl = Float
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> float | None:
        if value is None:
            return None
        return money_to_storage(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> float:
        return money_from_storage(value)


class utcnow(FunctionElement):
    """Insert-time clock of the database server."""

    type = DateTime(timezone=True)
    inherit_cache = True


@compiles(utcnow)
def _utcnow_default(element: utcnow, compiler: Any, **kw: Any) -> str:
    return "now()"


@compiles(utcnow, "sqlite")
def _utcnow_sqlite(element: utcnow, compiler: Any, **kw: Any) -> str:
    # CURRENT_TIMESTAMP only has second resolution on SQLite
    return "(strftime('%Y-%m-%d %H:%M:%f', 'now'))"


__all__ = ["MoneyType", "utcnow"]
