from typing import Optional
from urllib.parse import unquote, urldefrag, urljoin, urlsplit

SECURE_SCHEME = "https"

def remove_dot_segments(path: str) -> str:
    """
    Resolve '.' and '..' segments (including percent-encoded ones) the way
    a browser or HTTP client does before sending the request.
    '/movies/../admin' -> '/admin', '/movies/x/..' -> '/movies/'
    """
    segments = path.split("/")
    output: list[str] = []
    for i, segment in enumerate(segments):
        decoded = unquote(segment)
        last = i == len(segments) - 1
        if decoded == ".":
            if last:
                output.append("")
            continue
        if decoded == "..":
            if len(output) > 1:
                output.pop()
            if last:
                output.append("")
            continue
        output.append(segment)
    return "/".join(output)

def is_valid_site_url(url: str, domain: str, path_prefix: Optional[str] = None) -> bool:
    """
    True when url is an absolute https URL whose hostname is exactly domain
    (no subdomains), and whose resolved path starts with path_prefix when
    one is given. Never raises.
    """
    if not url or not isinstance(url, str):
        return False
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
        # Accessing .port validates it; a malformed port raises ValueError
        parts.port
    except ValueError:
        return False

    if parts.scheme.lower() != SECURE_SCHEME:
        return False
    if not hostname or hostname != domain.lower():
        return False
    if path_prefix is not None and not remove_dot_segments(parts.path).startswith(path_prefix):
        return False
    return True

def resolve_href(href: Optional[str], base_url: str) -> Optional[str]:
    """Absolute form of an href against base_url, without fragment."""
    if href is None:
        return None
    href = href.strip()
    if not href or href.startswith(("javascript:", "mailto:", "tel:")):
        return None
    try:
        absolute = urljoin(base_url, href)
    except ValueError:
        return None
    return urldefrag(absolute)[0]
