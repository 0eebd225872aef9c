"""Helpers shared by routers: lenient query parsing and error envelopes."""

from __future__ import annotations

import re

from fastapi.responses import JSONResponse

# Largest value forwarded to the store as a count, page or limit.
MAX_QUERY_INT = 2**31 - 1

_DIGITS = re.compile(r"[0-9]+")


def parse_positive_int(raw: str | None, default: int) -> int:
    """Parse an integer query parameter, falling back to ``default``.

    Only plain ASCII digits are accepted. Missing, malformed, zero and
    negative values all yield ``default``; larger values are capped at
    ``MAX_QUERY_INT``.

    Example:
        >>> parse_positive_int("5", 10)
        5
        >>> parse_positive_int("abc", 10)
        10
        >>> parse_positive_int("0", 10)
        10
    """
    if raw is None:
        return default
    raw = raw.strip()
    if not _DIGITS.fullmatch(raw):
        return default
    value = int(raw)
    if value <= 0:
        return default
    return min(value, MAX_QUERY_INT)


def not_found(message: str) -> JSONResponse:
    return JSONResponse({"message": message}, status_code=404)


def server_error(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=500)
