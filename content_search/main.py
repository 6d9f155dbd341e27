"""
FastAPI application entry point.
Mounts the v1 routes and Prometheus metrics; closes the search client on shutdown.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from content_search.api.v1.router import api_router
from content_search.config import get_settings
from content_search.core.logging import configure_logging
from content_search.search.elasticsearch_client import close_elasticsearch


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield
    await close_elasticsearch()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Content autosuggest over per-site search indexes, and change batch intake for indexing.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Suggestions are requested straight from site frontends
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
