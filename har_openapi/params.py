"""Path and query parameter extraction."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple
from urllib.parse import parse_qsl, urljoin, urlsplit

from .models import Parameter
from .path_normalizer import is_placeholder, placeholder_name, split_path

logger = logging.getLogger(__name__)

FALLBACK_ORIGIN = "http://har.local"


def resolve_url(url: str) -> str:
    """Make a possibly relative HAR URL absolute against a placeholder origin."""
    url = (url or "").strip()
    try:
        parts = urlsplit(url)
    except ValueError:
        logger.debug("Malformed URL %r, using the fallback origin", url)
        return FALLBACK_ORIGIN + "/"
    if parts.scheme and parts.netloc:
        return url
    return urljoin(FALLBACK_ORIGIN + "/", url)


def url_path(url: str) -> str:
    """Return the path component of a URL, '/' when empty or unparseable."""
    try:
        return urlsplit(resolve_url(url)).path or "/"
    except ValueError:
        return "/"


def extract_path_params(template: str, original_path: str) -> List[Parameter]:
    """Build path parameters for every placeholder in a route template.

    The example is the literal segment at the same position in the
    original path.
    """
    t_segs = split_path(template)
    o_segs = split_path(original_path)

    params: Dict[str, Parameter] = {}
    for i, seg in enumerate(t_segs):
        if not is_placeholder(seg):
            continue
        name = placeholder_name(seg)
        if name in params:
            continue
        params[name] = Parameter(
            name=name,
            location="path",
            required=True,
            example=o_segs[i] if i < len(o_segs) else None,
        )
    return list(params.values())


def extract_query_params(url: str,
                         recorded: Iterable[Tuple[str, str]] = ()) -> List[Parameter]:
    """Build query parameters from a URL's query string and HAR's queryString list.

    Values found in the URL win over the separately recorded fields.
    """
    try:
        query = urlsplit(url).query
    except ValueError:
        logger.debug("Unparseable URL, ignoring its query string: %s", url)
        query = ""

    params: Dict[str, Parameter] = {}
    for name, value in parse_qsl(query, keep_blank_values=True):
        _add_query_param(params, name, value)
    for name, value in recorded:
        _add_query_param(params, name, value)
    return list(params.values())


def merge_params(existing: List[Parameter], new: Iterable[Parameter]) -> List[Parameter]:
    """Union two parameter lists by (location, name), keeping the earliest entry."""
    merged = {p.key: p for p in existing}
    for p in new:
        if p.key not in merged:
            merged[p.key] = p
    return list(merged.values())


def _add_query_param(params: Dict[str, Parameter], name: str, value) -> None:
    if not name or name in params:
        return
    params[name] = Parameter(
        name=name,
        location="query",
        required=False,
        example="" if value is None else str(value),
    )
