"""
HTTP API for Primenym.

Routes:
    GET  /api/generate/check-domain?name=...   single .com check
    POST /api/generate/full-report {"name"}    every configured extension + socials
    GET  /api/health
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .config import Settings, configure_http_logging, debug_enabled, load_settings
from .labels import normalize_label
from .report import check_domain_payload, full_report_payload
from .resolver import DomainAvailabilityResolver

logger = logging.getLogger(__name__)


class FullReportRequest(BaseModel):
    name: str | None = None


def _missing_name() -> JSONResponse:
    return JSONResponse({"error": "Name parameter is required"}, status_code=400)


def create_app(
    resolver: DomainAvailabilityResolver | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the FastAPI app around one resolver (and therefore one cache)."""
    if settings is None and resolver is None:
        settings = load_settings()
    configure_http_logging(settings.debug if settings is not None else debug_enabled())
    if resolver is None:
        resolver = DomainAvailabilityResolver.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await resolver.aclose()

    app = FastAPI(
        title="Primenym",
        description="Domain availability checks for business name ideas",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.resolver = resolver

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.get("/api/generate/check-domain")
    async def check_domain(
        name: str | None = Query(default=None),
        refresh: bool = Query(default=False),
    ):
        """Check the .com domain for a name. `refresh=true` skips the cache."""
        if not name or not normalize_label(name):
            return _missing_name()
        return await check_domain_payload(resolver, name, ".com", force_refresh=refresh)

    @app.post("/api/generate/full-report")
    async def full_report(request_data: FullReportRequest):
        name = request_data.name
        if not name or not normalize_label(name):
            return _missing_name()
        return await full_report_payload(resolver, name)

    @app.get("/api/health")
    async def health_check():
        return {
            "status": "ok",
            "version": __version__,
            "providers": {
                "domainr": resolver.has_primary,
                "dnsFallback": resolver.dns_fallback,
            },
            "extensions": resolver.extensions,
        }

    return app
