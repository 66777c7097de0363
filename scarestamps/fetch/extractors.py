"""
Result and timestamp extraction from fetched documents.

HTML search pages are scanned with an ordered chain of selector strategies,
most specific first. Each strategy is a pure function from a parsed document
to candidate (href, text) pairs; the chain stops as soon as enough accepted
results have been collected.
"""

from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from bs4 import BeautifulSoup

from scarestamps.core.config import settings
from scarestamps.fetch.urls import resolve_href
from scarestamps.fetch.utils import extract_timestamps, normalize_spaces
from scarestamps.schemas import SearchResult, TimestampPage

if TYPE_CHECKING:
    from scarestamps.core.sites import SiteProfile

Candidate = tuple[Optional[str], str]
SelectorStrategy = Callable[[BeautifulSoup], list[Candidate]]
TitleSource = Callable[[BeautifulSoup], str]


def css_strategy(selector: str) -> SelectorStrategy:
    """Strategy returning (href, visible text) for every node matching selector."""

    def strategy(soup: BeautifulSoup) -> list[Candidate]:
        return [(node.get("href"), node.get_text(" ", strip=True)) for node in soup.select(selector)]

    strategy.__name__ = f"css({selector})"
    return strategy


def extract_html_results(html: str, site: "SiteProfile", limit: Optional[int] = None) -> list[SearchResult]:
    """
    Collect search results from an HTML page using site.strategies in order.

    A candidate is kept when its resolved URL is a valid page URL for the
    site, is not a listing/search page, has not been seen yet, and a title
    can be found (visible text, else derived from the URL slug).
    """
    limit = settings.MAX_RESULTS if limit is None else limit
    soup = BeautifulSoup(html or "", "html.parser")
    results: list[SearchResult] = []
    seen: set[str] = set()

    for strategy in site.strategies:
        for href, text in strategy(soup):
            url = resolve_href(href, site.origin)
            if not url or url in seen:
                continue
            if not site.is_valid_page_url(url) or site.is_excluded(url):
                continue

            title = normalize_spaces(text) or site.derive_title(url)
            if not title:
                continue

            seen.add(url)
            results.append(SearchResult(title=title, url=url))
            if len(results) >= limit:
                break

        if len(results) >= limit:
            break

    return results[:limit]


def _json_items(payload: Any) -> list:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("results"), list):
        return payload["results"]
    return []


def _json_title(item: dict) -> str:
    title = normalize_spaces(item.get("title") or item.get("name"))
    if not title:
        return ""
    year = normalize_spaces(item.get("year"))
    return f"{title} ({year})" if year else title


def _json_url(item: dict, site: "SiteProfile") -> Optional[str]:
    raw_url = item.get("url")
    if isinstance(raw_url, str) and raw_url.strip():
        return resolve_href(raw_url, site.origin)
    slug = item.get("slug")
    if isinstance(slug, str) and slug.strip():
        return site.slug_page_url(slug)
    return None


def extract_json_results(payload: Any, site: "SiteProfile", limit: Optional[int] = None) -> list[SearchResult]:
    """
    Collect search results from a structured API response.

    Accepts either a bare list of items or an object with a 'results' list.
    Items need a title/name and either a url or a slug.
    """
    limit = settings.MAX_RESULTS if limit is None else limit
    results: list[SearchResult] = []
    seen: set[str] = set()

    for item in _json_items(payload):
        if not isinstance(item, dict):
            continue
        title = _json_title(item)
        url = _json_url(item, site)
        if not title or not url or url in seen:
            continue
        if not site.is_valid_page_url(url):
            continue

        seen.add(url)
        results.append(SearchResult(title=title, url=url))
        if len(results) >= limit:
            break

    return results


def first_heading(soup: BeautifulSoup) -> str:
    h1 = soup.find("h1")
    return normalize_spaces(h1.get_text(" ")) if h1 else ""


def document_title(soup: BeautifulSoup) -> str:
    title = soup.find("title")
    return normalize_spaces(title.get_text(" ")) if title else ""


TITLE_SOURCES: tuple[TitleSource, ...] = (first_heading, document_title)


def extract_page_title(soup: BeautifulSoup, sources: Iterable[TitleSource] = TITLE_SOURCES) -> str:
    """First non-empty title among sources, or ''."""
    for source in sources:
        title = source(soup)
        if title:
            return title
    return ""


def extract_timestamp_page(
    html: str,
    url: str,
    strict: bool = False,
    title_sources: Iterable[TitleSource] = TITLE_SOURCES,
) -> TimestampPage:
    """Title and ordered, de-duplicated timestamps of a movie page."""
    soup = BeautifulSoup(html or "", "html.parser")
    title = extract_page_title(soup, title_sources)

    body = soup.body if soup.body else soup
    text = normalize_spaces(body.get_text(" "))

    return TimestampPage(url=url, title=title, timestamps=extract_timestamps(text, strict=strict))
