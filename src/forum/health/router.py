"""Liveness, readiness and version probes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from forum.config import get_settings
from forum.database import get_session
from forum.db.models import ReactionType

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: the process is up and serving."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_session)) -> JSONResponse:  # noqa: B008
    """Readiness probe.

    Ready means the database answers and the reaction types exist, since
    without them no reaction can be recorded. Returns 503 otherwise.
    """
    checks: dict[str, str] = {}
    try:
        reaction_types = (await db.execute(select(func.count()).select_from(ReactionType))).scalar_one()
        checks["database"] = "ok"
        checks["reaction_types"] = "ok" if reaction_types else "missing"
    except SQLAlchemyError as exc:
        checks["database"] = f"error: {type(exc).__name__}"
        checks["reaction_types"] = "unknown"

    ready = all(v == "ok" for v in checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "degraded", "checks": checks},
    )


@router.get("/version")
async def version() -> dict[str, str]:
    """API version and deployment environment."""
    settings = get_settings()
    return {"version": settings.app_version, "environment": settings.environment}
