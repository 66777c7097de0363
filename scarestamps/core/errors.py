"""
Error taxonomy for lookups.

Each failure carries the HTTP status it is surfaced with, so the API layer
can map it without inspecting messages.
"""

from typing import Optional


class LookupFailure(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(LookupFailure):
    """Malformed or out-of-domain input. Never a server fault."""
    status_code = 400


class UpstreamError(LookupFailure):
    """The third-party site or API answered with a failure."""
    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class FetchTimeoutError(LookupFailure):
    """The fetch deadline expired before the upstream answered."""
    status_code = 500


class FetchTransportError(LookupFailure):
    """DNS, connection or protocol failure below HTTP."""
    status_code = 500
