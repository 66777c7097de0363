"""
Per-site configuration.

One service instance proxies exactly one site. Everything that differs
between target sites (origin, URL shapes, selector chain, timestamp
strictness, title derivation) lives on an immutable SiteProfile so the
extraction pipeline itself stays site-agnostic.
"""

import re
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Optional, Sequence
from urllib.parse import quote, urlsplit

from scarestamps.fetch.extractors import SelectorStrategy, css_strategy
from scarestamps.fetch.urls import is_valid_site_url
from scarestamps.fetch.utils import title_from_slug

HTML_MODE = "html"
JSON_MODE = "json"

@dataclass(frozen=True)
class SiteProfile:
    name: str
    display_name: str
    domain: str
    path_prefix: str
    search_url: str
    mode: str = HTML_MODE
    strategies: Sequence[SelectorStrategy] = ()
    excluded_paths: Sequence[str] = ()
    strict_timestamps: bool = False
    slug_title: Callable[[str], str] = title_from_slug
    # Structured API only
    api_url: Optional[str] = None
    api_key_header: Optional[str] = None
    slug_url: Optional[str] = None
    _excluded: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_excluded", tuple(re.compile(p) for p in self.excluded_paths))

    @property
    def origin(self) -> str:
        return f"https://{self.domain}"

    def is_valid_page_url(self, url: str) -> bool:
        return is_valid_site_url(url, self.domain, self.path_prefix)

    def search_page_url(self, query: str) -> str:
        return self.search_url.format(query=quote(query, safe=""))

    def api_search_url(self, query: str) -> str:
        if not self.api_url:
            raise ValueError(f"Site {self.name!r} has no structured search API")
        return self.api_url.format(query=quote(query, safe=""))

    def slug_page_url(self, slug: str) -> str:
        template = self.slug_url or f"{self.origin}{self.path_prefix}{{slug}}"
        return template.format(slug=quote(slug.strip("/"), safe=""))

    def derive_title(self, url: str) -> str:
        return self.slug_title(url)

    def is_excluded(self, url: str) -> bool:
        """Search page itself, or a listing page that is never a result."""
        parts = urlsplit(url)
        search_path = urlsplit(self.search_url).path.rstrip("/")
        if parts.query and parts.path.rstrip("/") == search_path:
            return True
        return any(p.search(parts.path) for p in self._excluded)


NOTSCARE = SiteProfile(
    name="notscare",
    display_name="NotScare",
    domain="notscare.me",
    path_prefix="/movies/",
    search_url="https://notscare.me/movies?q={query}&search={query}&page=1",
    strategies=(
        css_strategy("a[href^='/movies/']"),
        css_strategy("a[href*='notscare.me/movies/']"),
        css_strategy("a[href]"),
    ),
    excluded_paths=(r"^/movies/?$",),
    strict_timestamps=True,
    slug_title=partial(title_from_slug, lowercase_words=("jump", "scares", "in")),
)

WHERES_THE_JUMP = SiteProfile(
    name="wheresthejump",
    display_name="Where's The Jump",
    domain="wheresthejump.com",
    path_prefix="/jump-scares-in-",
    search_url="https://wheresthejump.com/?s={query}",
    strategies=(
        css_strategy("article .entry-title a[href]"),
        css_strategy("article h2 a[href], article h3 a[href]"),
        css_strategy("article a[href]"),
        css_strategy("a[href]"),
    ),
    excluded_paths=(r"^/tag/", r"^/category/", r"/page/\d+"),
    strict_timestamps=False,
    slug_title=partial(title_from_slug, lowercase_words=("jump", "scares", "in")),
)

NOTSCARE_API = SiteProfile(
    name="notscare-api",
    display_name="NotScare API",
    domain="notscare.me",
    path_prefix="/movies/",
    search_url="https://notscare.me/movies?q={query}&search={query}&page=1",
    mode=JSON_MODE,
    strict_timestamps=True,
    api_url="https://notscare.me/api/movies?search={query}",
    api_key_header="X-API-Key",
    slug_url="https://notscare.me/movies/{slug}",
)

SITES = {site.name: site for site in (NOTSCARE, WHERES_THE_JUMP, NOTSCARE_API)}

def get_site(name: str) -> SiteProfile:
    try:
        return SITES[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(SITES))
        raise ValueError(f"Unknown SOURCE_SITE {name!r}; expected one of: {known}") from None
