import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from scarestamps.core.errors import FetchTimeoutError, InvalidInputError, LookupFailure, UpstreamError
from scarestamps.core.sites import SiteProfile
from scarestamps.schemas import ErrorResponse, HealthResponse, SearchResult, TimestampPage
from scarestamps.services import lookup

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid input"},
    500: {"model": ErrorResponse, "description": "Timeout or unexpected failure"},
    502: {"model": ErrorResponse, "description": "Upstream site failure"},
}

def current_site(request: Request) -> SiteProfile:
    return request.app.state.site

def _failure_to_http(e: LookupFailure, timeout_message: str, generic_message: str) -> HTTPException:
    if isinstance(e, FetchTimeoutError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=timeout_message)
    if isinstance(e, InvalidInputError):
        return HTTPException(status_code=e.status_code, detail=e.message)
    if e.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        return HTTPException(status_code=e.status_code, detail=generic_message)
    if isinstance(e, UpstreamError):
        logger.warning("Upstream failure (status %s): %s", e.upstream_status, e.message)
    return HTTPException(status_code=e.status_code, detail=e.message)

@router.get("/health", response_model=HealthResponse)
async def health_check(site: SiteProfile = Depends(current_site)):
    """Health check endpoint"""
    return HealthResponse(status="ok", source=site.name)

@router.get("/search", response_model=List[SearchResult], responses=ERROR_RESPONSES)
async def search(q: Optional[str] = None, site: SiteProfile = Depends(current_site)):
    """
    Search the configured site for titles.

    Returns at most 10 {title, url} pairs, each url a movie page on the site.
    """
    try:
        return await lookup.search_titles(q, site)
    except LookupFailure as e:
        raise _failure_to_http(
            e,
            timeout_message=f"{site.display_name} search timed out.",
            generic_message="Server error during search.",
        )
    except Exception:
        logger.exception("Unexpected error during search for %r", q)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error during search."
        )

@router.get("/timestamps", response_model=TimestampPage, responses=ERROR_RESPONSES)
async def timestamps(url: Optional[str] = None, site: SiteProfile = Depends(current_site)):
    """
    Scrape a movie page for its jump-scare timestamps.

    Returns {url, title, timestamps} with timestamps in HH:MM:SS, page order.
    """
    try:
        return await lookup.fetch_timestamp_page(url, site)
    except LookupFailure as e:
        raise _failure_to_http(
            e,
            timeout_message=f"{site.display_name} timestamps timed out.",
            generic_message="Server error during timestamps.",
        )
    except Exception:
        logger.exception("Unexpected error fetching timestamps for %r", url)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error during timestamps."
        )
