"""Shared FastAPI dependencies."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Path, Query

MAX_PAGE_SIZE = 1000
DEFAULT_PAGE_SIZE = 100

# Largest value a BIGINT primary key can hold
MAX_RESOURCE_ID = 2**63 - 1

ResourceId = Annotated[int, Path(ge=1, le=MAX_RESOURCE_ID)]


@dataclass(frozen=True)
class Page:
    limit: int
    offset: int


def get_page(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
) -> Page:
    """Parse ``limit``/``offset`` query parameters."""
    return Page(limit=limit, offset=offset)
