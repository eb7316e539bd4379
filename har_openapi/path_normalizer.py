"""Route template normalization: replace identifier-shaped segments with placeholders."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Tuple

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
OBJECT_ID_RE = re.compile(r"^[0-9a-f]{24}$", re.IGNORECASE)
NUMERIC_RE = re.compile(r"^\d+$")
OPAQUE_TOKEN_RE = re.compile(r"^[A-Za-z0-9\-_]+$")
OPAQUE_TOKEN_MIN_LENGTH = 16

PLACEHOLDER_RE = re.compile(r"^\{([A-Za-z0-9_]+)\}$")
PLACEHOLDER_NAME = "id"

Predicate = Callable[[str], bool]


def is_uuid(segment: str) -> bool:
    return bool(UUID_RE.match(segment))


def is_object_id(segment: str) -> bool:
    return bool(OBJECT_ID_RE.match(segment))


def is_numeric(segment: str) -> bool:
    return bool(NUMERIC_RE.match(segment))


def is_opaque_token(segment: str) -> bool:
    """Long tokens made of letters, digits, '-' and '_' (slugs, hashes, base64url)."""
    return len(segment) >= OPAQUE_TOKEN_MIN_LENGTH and bool(OPAQUE_TOKEN_RE.match(segment))


@dataclass(frozen=True)
class IdentifierRules:
    """The set of predicates deciding whether a path segment is an identifier."""

    predicates: Tuple[Predicate, ...] = (is_uuid, is_object_id, is_numeric, is_opaque_token)

    def matches(self, segment: str) -> bool:
        return any(predicate(segment) for predicate in self.predicates)


DEFAULT_RULES = IdentifierRules()


def split_path(path: str) -> List[str]:
    """Split a URL path on '/' and drop empty segments."""
    return [seg for seg in (path or "").split("/") if seg]


def placeholder(ordinal: int) -> str:
    """Placeholder token for the n-th identifier of a path: {id}, {id2}, {id3}..."""
    if ordinal == 1:
        return "{%s}" % PLACEHOLDER_NAME
    return "{%s%d}" % (PLACEHOLDER_NAME, ordinal)


def is_placeholder(segment: str) -> bool:
    return bool(PLACEHOLDER_RE.match(segment))


def placeholder_name(segment: str) -> str:
    """Strip the bracket markup from a placeholder token."""
    match = PLACEHOLDER_RE.match(segment)
    return match.group(1) if match else segment


def normalize_path(path: str, rules: IdentifierRules = DEFAULT_RULES) -> str:
    """Turn a literal URL path into a route template.

    /api/users/507f1f77bcf86cd799439011/orders/42 -> /api/users/{id}/orders/{id2}

    Paths without identifiers come back unchanged (apart from collapsed
    slashes), so literal routes dedupe exactly.
    """
    count = 0
    normalized = []
    for seg in split_path(path):
        if rules.matches(seg):
            count += 1
            normalized.append(placeholder(count))
        else:
            normalized.append(seg)
    return "/" + "/".join(normalized)
