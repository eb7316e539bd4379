"""Request/response payload interpretation: JSON, form-encoded or opaque text."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional, Tuple

from .models import BodyExample, CapturedCall

logger = logging.getLogger(__name__)

JSON_MIME = "application/json"
FORM_MIME = "application/x-www-form-urlencoded"

# deeper payloads are kept as raw text; schema inference and YAML output recurse
MAX_JSON_DEPTH = 100

_NOT_JSON = object()


def content_type_of(headers: Iterable[Tuple[str, str]]) -> str:
    """Return the Content-Type header value without parameters ('' if absent)."""
    for name, value in headers:
        if (name or "").lower() == "content-type":
            return (value or "").split(";")[0].strip()
    return ""


def parse_json(text: Optional[str]) -> Any:
    """Parse a full JSON document, returning None on failure.

    Falsy scalars (0, false, "", null) are reported as None too: they carry
    no structure worth describing.
    """
    value = _load_json(text)
    if value is _NOT_JSON or _is_falsy_scalar(value):
        return None
    return value


def interpret_request_body(call: CapturedCall) -> Optional[BodyExample]:
    """Best-effort example for a request payload, None when the entry has none."""
    if call.request_body is None:
        return None

    mime_type = (call.request_mime_type
                 or content_type_of(call.request_headers)
                 or JSON_MIME)
    text = call.request_body

    parsed = parse_json(text)
    if parsed is not None:
        return BodyExample(JSON_MIME, parsed)

    if FORM_MIME in mime_type:
        fields = {}
        for name, value in call.form_fields:
            fields[name] = "" if value is None else value
        return BodyExample(FORM_MIME, fields)

    return BodyExample(mime_type, text)


def interpret_response_body(call: CapturedCall) -> Optional[BodyExample]:
    """Best-effort example for a response payload, None when there is nothing to show."""
    mime_type = call.response_mime_type or content_type_of(call.response_headers)
    text = call.response_body or ""
    status = call.status or 200

    parsed = parse_json(text)
    if parsed is not None:
        return BodyExample(JSON_MIME, parsed, status=status)

    if text and mime_type:
        return BodyExample(mime_type, text, status=status)

    return None


def _load_json(text: Optional[str]) -> Any:
    if not text:
        return _NOT_JSON
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        logger.debug("Payload is not JSON (%d chars), keeping raw text", len(text))
        return _NOT_JSON
    if _nesting_exceeds(value, MAX_JSON_DEPTH):
        logger.debug("JSON payload nested deeper than %d levels, keeping raw text",
                     MAX_JSON_DEPTH)
        return _NOT_JSON
    return value


def _nesting_exceeds(value: Any, limit: int) -> bool:
    """True when containers nest more than `limit` levels deep."""
    stack = [(value, 1)]
    while stack:
        current, depth = stack.pop()
        if isinstance(current, dict):
            children = current.values()
        elif isinstance(current, list):
            children = current
        else:
            continue
        if depth > limit:
            return True
        stack.extend((child, depth + 1) for child in children)
    return False


def _is_falsy_scalar(value: Any) -> bool:
    if isinstance(value, (dict, list)):
        return False
    return not value
