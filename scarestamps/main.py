import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from scarestamps.api.routes import router
from scarestamps.core.config import settings
from scarestamps.core.sites import SiteProfile, get_site

logger = logging.getLogger(__name__)

def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Nothing to initialize besides logging; the site profile is immutable.
    """
    site = app.state.site
    logger.info("Scare timestamp proxy for %s (%s) starting", site.display_name, site.origin)

    yield

    logger.info("Scare timestamp proxy for %s shutting down", site.display_name)

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

def create_app(site: Optional[SiteProfile] = None) -> FastAPI:
    configure_logging()
    site = site or get_site(settings.SOURCE_SITE)

    app = FastAPI(
        title="Scare Timestamp Proxy",
        description="Search movie pages on a jump-scare site and extract their timestamps",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.site = site

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    # Include API routes
    app.include_router(router)

    @app.get("/")
    async def root():
        """Root endpoint with basic info"""
        return {
            "service": "Scare Timestamp Proxy",
            "source": site.name,
            "version": "1.0.0",
            "endpoints": {
                "health": "GET /api/health",
                "search": "GET /api/search?q=<title>",
                "timestamps": "GET /api/timestamps?url=<movie page url>",
            },
        }

    return app

app = create_app()

def main() -> None:
    logger.info("Listening on %s:%s", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())

if __name__ == "__main__":
    main()
