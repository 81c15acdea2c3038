"""FastAPI application for the DayFlow reminder service."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dayflow.config import settings
from dayflow.db import init_db
from dayflow.routers import activity, context, reminders, session
from dayflow.routers import settings as settings_router

logger = logging.getLogger("dayflow")


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="DayFlow Reminders",
        description="Activity logging and context-aware reminder scheduling",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(settings_router.router)
    app.include_router(activity.router)
    app.include_router(reminders.router)
    app.include_router(session.router)
    app.include_router(context.router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "dayflow-reminders"}

    return app


configure_logging()
app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("dayflow.main:app", host="0.0.0.0", port=8000, reload=settings.debug)


if __name__ == "__main__":
    main()
