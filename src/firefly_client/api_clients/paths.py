"""Helpers for composing relative request paths."""

from typing import Any, Mapping, Optional
from urllib.parse import quote, urlencode


def quote_path_segment(value: Any) -> str:
    """Percent-encode an identifier for use as a single path segment.

    Every reserved character is encoded, including "/", so an identifier
    can never change the route it is embedded in.
    """
    return quote(str(value), safe="")


def with_query(path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Append a query string to ``path``.

    Parameters whose value is None or an empty string are skipped.
    Insertion order is preserved.
    """
    if not params:
        return path
    pairs = [(key, value) for key, value in params.items() if value is not None and value != ""]
    if not pairs:
        return path
    return f"{path}?{urlencode(pairs, doseq=True)}"
