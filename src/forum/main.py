"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from forum.auth.router import router as auth_router
from forum.categories.router import router as categories_router
from forum.comments.router import router as comments_router
from forum.config import get_settings
from forum.database import close_db, get_session, init_db
from forum.health.router import router as health_router
from forum.middleware import setup_middleware
from forum.notifications.router import router as notifications_router
from forum.posts.router import router as posts_router
from forum.reactions.router import router as reactions_router
from forum.reactions.service import seed_reaction_types
from forum.storage.router import router as uploads_router
from forum.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)

    # Seed reaction types (idempotent)
    try:
        async for db in get_session():
            await seed_reaction_types(db, settings.seed_reaction_types)
            break
    except SQLAlchemyError:
        logger.warning("reaction_type_seeding_failed", exc_info=True)

    yield

    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Web Forum API",
        description="Backend API for a web forum: categories, posts, comments, reactions and notifications",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(categories_router)
    app.include_router(posts_router)
    app.include_router(comments_router)
    app.include_router(reactions_router)
    app.include_router(notifications_router)
    app.include_router(uploads_router)

    return app


app = create_app()
