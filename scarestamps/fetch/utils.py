import re
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import unquote, urlsplit

# 1-2 digit lead, then :SS, optionally :SS again (H:MM:SS or M:SS)
TIMESTAMP_PATTERN = re.compile(r"\b(\d{1,2}:\d{2}(?::\d{2})?)\b")
# Sites that always print the hour field
STRICT_TIMESTAMP_PATTERN = re.compile(r"\b(\d{1,2}:\d{2}:\d{2})\b")

_DIGITS = re.compile(r"[0-9]+")

def normalize_spaces(value) -> str:
    """Collapse all whitespace runs to single spaces and trim. None -> ''."""
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip()

@dataclass(frozen=True)
class TimeCode:
    hours: int
    minutes: int
    seconds: int

    @classmethod
    def parse(cls, raw: str) -> Optional["TimeCode"]:
        """
        Parse 'M:SS', 'MM:SS', 'H:MM:SS' or 'HH:MM:SS'.
        Returns None when the shape is wrong or a field is out of range
        (hours > 99, minutes > 59, seconds > 59).
        """
        if raw is None:
            return None
        parts = str(raw).strip().split(":")
        if len(parts) not in (2, 3):
            return None
        if not all(_DIGITS.fullmatch(p) for p in parts):
            return None

        numbers = [int(p) for p in parts]
        if len(numbers) == 2:
            numbers.insert(0, 0)
        hh, mm, ss = numbers

        if hh > 99 or mm > 59 or ss > 59:
            return None
        return cls(hh, mm, ss)

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"

def normalize_timecode(raw: str) -> Optional[str]:
    """
    Canonical HH:MM:SS form of a raw time token, or None if rejected.
    Examples: '0:45' -> '00:00:45', '1:12:03' -> '01:12:03', '1:75' -> None
    """
    tc = TimeCode.parse(raw)
    return str(tc) if tc else None

def extract_timestamps(text: str, strict: bool = False) -> list[str]:
    """
    Find time markers in text and return their canonical forms,
    deduplicated, in order of first appearance.

    strict=True only accepts three-field markers (H:MM:SS).
    """
    if not text:
        return []

    pattern = STRICT_TIMESTAMP_PATTERN if strict else TIMESTAMP_PATTERN
    found: list[str] = []
    seen: set[str] = set()
    for match in pattern.finditer(str(text)):
        canonical = normalize_timecode(match.group(1))
        if canonical and canonical not in seen:
            seen.add(canonical)
            found.append(canonical)
    return found

def slug_from_url(url: str) -> str:
    """Last non-empty path segment of a URL, percent-decoded."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return ""
    segments = [s for s in path.split("/") if s]
    return unquote(segments[-1]) if segments else ""

def title_from_slug(url: str, lowercase_words: Iterable[str] = ()) -> str:
    """
    Derive a readable title from the final path segment of a URL.
    '/movies/jump-scares-in-insidious-2010' -> 'jump scares in insidious 2010'

    Words listed in lowercase_words are forced to lower case, everything
    else keeps the slug's casing.
    """
    slug = slug_from_url(url)
    if not slug:
        return ""
    words = slug.replace("-", " ").split()
    lowered = {w.lower() for w in lowercase_words}
    if lowered:
        words = [w.lower() if w.lower() in lowered else w for w in words]
    return normalize_spaces(" ".join(words))
