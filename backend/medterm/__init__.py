from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medterm.config import settings
from medterm.db import init_all_databases
from medterm.logging_setup import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(
        settings.data_dir / settings.logs_dirname, settings.log_filename, settings.log_level
    )
    await init_all_databases(settings.data_dir)
    from medterm.db.sqlite import connect
    from medterm.seed import ensure_admin

    async with connect() as db:
        await ensure_admin(db)
    yield

    from medterm.services import desk_registry

    desk_registry.close_all()


def create_app() -> FastAPI:
    application = FastAPI(
        title="Medical Terminology API", version="0.1.0", lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from medterm.routers import (
        auth,
        categories,
        flashcards,
        health,
        phrases,
        study,
        terms,
        users,
    )

    application.include_router(health.router)
    application.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    application.include_router(terms.router, prefix="/api/terms", tags=["terms"])
    application.include_router(
        phrases.router, prefix="/api/phrases", tags=["phrases"]
    )
    application.include_router(
        categories.router, prefix="/api/categories", tags=["categories"]
    )
    application.include_router(users.router, prefix="/api/users", tags=["users"])
    application.include_router(
        flashcards.router, prefix="/api/flashcards", tags=["flashcards"]
    )
    application.include_router(study.router, prefix="/api/study", tags=["study"])

    return application


app = create_app()
