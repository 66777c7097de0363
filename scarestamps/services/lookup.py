import json
import logging
from typing import List

from scarestamps.core.config import settings
from scarestamps.core.errors import InvalidInputError, UpstreamError
from scarestamps.core.sites import JSON_MODE, SiteProfile
from scarestamps.fetch import fetcher
from scarestamps.fetch.extractors import (
    extract_html_results,
    extract_json_results,
    extract_timestamp_page,
)
from scarestamps.fetch.utils import normalize_spaces
from scarestamps.schemas import SearchResult, TimestampPage

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2

async def search_titles(raw_query, site: SiteProfile) -> List[SearchResult]:
    """
    Search pipeline:

    1. Normalize and validate the query
    2. Fetch the site's search page (or structured API)
    3. Extract, de-duplicate and cap results
    """
    query = normalize_spaces(raw_query)
    if len(query) < MIN_QUERY_LENGTH:
        logger.debug("Rejected search query %r", raw_query)
        raise InvalidInputError("Missing or too-short query `q`.")

    if site.mode == JSON_MODE:
        return await _search_api(query, site)

    search_url = site.search_page_url(query)
    logger.info("SEARCH %s -> %s", query, search_url)
    fetched = await fetcher.fetch_document(search_url)
    if not fetched.ok:
        raise UpstreamError(f"{site.display_name} search failed: {fetched.status}", fetched.status)

    results = extract_html_results(fetched.body, site, limit=settings.MAX_RESULTS)
    logger.info("SEARCH %s -> %d results", query, len(results))
    return results

async def _search_api(query: str, site: SiteProfile) -> List[SearchResult]:
    api_url = site.api_search_url(query)
    logger.info("SEARCH API %s -> %s", query, api_url)
    fetched = await fetcher.fetch_json(
        api_url,
        api_key=settings.SCARE_API_KEY,
        api_key_header=site.api_key_header,
    )
    if not fetched.ok:
        raise UpstreamError(f"{site.display_name} search failed: {fetched.status}", fetched.status)

    payload = json.loads(fetched.body)
    if isinstance(payload, dict) and payload.get("error"):
        raise UpstreamError(
            f"{site.display_name} search failed: {fetched.status} ({normalize_spaces(payload['error'])})",
            fetched.status,
        )

    results = extract_json_results(payload, site, limit=settings.MAX_RESULTS)
    logger.info("SEARCH API %s -> %d results", query, len(results))
    return results

async def fetch_timestamp_page(raw_url, site: SiteProfile) -> TimestampPage:
    """Validate a movie page URL, fetch it and pull its title and timestamps."""
    url = str(raw_url or "").strip()
    if not site.is_valid_page_url(url):
        logger.debug("Rejected page url %r", raw_url)
        raise InvalidInputError(f"Invalid {site.display_name} movie url.")

    logger.info("TIMESTAMPS %s", url)
    fetched = await fetcher.fetch_document(url)
    if not fetched.ok:
        raise UpstreamError(f"{site.display_name} page failed: {fetched.status}", fetched.status)

    page = extract_timestamp_page(fetched.body, url, strict=site.strict_timestamps)
    logger.info("TIMESTAMPS %s -> %d markers", url, len(page.timestamps))
    return page
