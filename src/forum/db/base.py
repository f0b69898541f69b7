"""Declarative base shared by all ORM models."""

from typing import Any

from sqlalchemy import BigInteger, Integer
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase

# SQLite only autoincrements an INTEGER PRIMARY KEY.
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    pass


def dialect_insert(db: AsyncSession, model: type[Base]) -> Any:  # noqa: ANN401
    """Return an INSERT supporting ``on_conflict_*`` for the session's backend."""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite_insert(model)
    return pg_insert(model)
