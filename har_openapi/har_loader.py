"""HAR capture loading: read the file, validate the envelope, convert entries."""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple

from .models import CapturedCall, Header

logger = logging.getLogger(__name__)

STATIC_ASSET_RE = re.compile(
    r"\.(js|css|map|png|jpg|jpeg|gif|svg|ico|woff2?|woff|ttf|eot)$",
    re.IGNORECASE,
)
API_RESOURCE_TYPE = "xhr"


class CaptureError(ValueError):
    """Raised when a HAR file cannot be read or has no entries."""


def load_har(path: str) -> Dict[str, Any]:
    """Read and validate a HAR file. Raises CaptureError on failure."""
    if not os.path.isfile(path):
        raise CaptureError(f"HAR file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", path, e)
        raise CaptureError(f"Cannot read HAR file {path}: {e}") from e

    try:
        har = json.loads(content)
    except ValueError as e:
        logger.warning("Invalid JSON in %s: %s", path, e)
        raise CaptureError(f"HAR file is not valid JSON: {path}") from e

    get_entries(har)
    return har


def get_entries(har: Any) -> List[Any]:
    """Return log.entries[], raising CaptureError when it is missing or empty."""
    log = har.get("log") if isinstance(har, dict) else None
    entries = log.get("entries") if isinstance(log, dict) else None
    if not isinstance(entries, list) or not entries:
        raise CaptureError("HAR does not contain log.entries[]")
    return entries


def entry_to_call(entry: Any) -> Optional[CapturedCall]:
    """Convert a HAR entry to a CapturedCall. None for entries without a usable request."""
    if not isinstance(entry, dict):
        return None
    request = entry.get("request")
    if not isinstance(request, dict) or not request.get("url"):
        return None
    response = entry.get("response")
    if not isinstance(response, dict):
        response = {}

    post_data = request.get("postData")
    request_body = None
    request_mime = ""
    form_fields: Tuple[Header, ...] = ()
    if isinstance(post_data, dict):
        request_body = _as_text(post_data.get("text"))
        request_mime = post_data.get("mimeType") or ""
        form_fields = _pairs(post_data.get("params"))

    content = response.get("content")
    if not isinstance(content, dict):
        content = {}

    return CapturedCall(
        method=str(request.get("method") or "GET").upper(),
        url=str(request["url"]),
        request_headers=_pairs(request.get("headers")),
        request_body=request_body,
        request_mime_type=request_mime,
        form_fields=form_fields,
        query_fields=_pairs(request.get("queryString")),
        status=_as_status(response.get("status")),
        response_headers=_pairs(response.get("headers")),
        response_body=_as_text(content.get("text")),
        response_mime_type=content.get("mimeType") or "",
        resource_type=entry.get("_resourceType"),
    )


def is_static_asset(path: str) -> bool:
    return bool(STATIC_ASSET_RE.search(path))


def is_excluded(call: CapturedCall, path: str) -> bool:
    """Static assets and anything the browser did not classify as XHR."""
    if is_static_asset(path):
        return True
    return bool(call.resource_type) and call.resource_type != API_RESOURCE_TYPE


def matches_base_path(path: str, base_path: str) -> bool:
    return path.startswith(base_path or "")


def _pairs(items: Any) -> Tuple[Header, ...]:
    """HAR name/value lists ([{"name": ..., "value": ...}]) as tuples."""
    if not isinstance(items, list):
        return ()
    result = []
    for item in items:
        if isinstance(item, dict) and item.get("name") is not None:
            value = item.get("value")
            result.append((str(item["name"]), "" if value is None else str(value)))
    return tuple(result)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_status(value: Any) -> int:
    try:
        return int(value) or 200
    except (TypeError, ValueError):
        return 200
