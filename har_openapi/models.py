"""Data models for HAR to OpenAPI conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

Header = Tuple[str, str]


@dataclass(frozen=True)
class CapturedCall:
    """One request/response exchange taken from a HAR entry."""

    method: str  # GET, POST, ... (upper-cased)
    url: str  # absolute, relative ones are resolved against http://har.local
    request_headers: Tuple[Header, ...] = ()
    request_body: Optional[str] = None  # None when the entry has no postData
    request_mime_type: str = ""
    form_fields: Tuple[Header, ...] = ()  # postData.params
    query_fields: Tuple[Header, ...] = ()  # request.queryString
    status: int = 200
    response_headers: Tuple[Header, ...] = ()
    response_body: str = ""
    response_mime_type: str = ""
    resource_type: Optional[str] = None  # Chrome's _resourceType hint


@dataclass
class Parameter:
    name: str
    location: str  # "path" | "query"
    param_type: str = "string"
    required: bool = False
    example: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.location, self.name)


@dataclass
class BodyExample:
    media_type: str
    example: Any
    status: Optional[int] = None  # responses only


@dataclass
class Observation:
    """A single captured call, reduced to what the aggregator needs."""

    method: str
    path: str  # literal path as observed
    template: str  # /api/users/{id}
    tag: str
    path_params: List[Parameter] = field(default_factory=list)
    query_params: List[Parameter] = field(default_factory=list)
    request_body: Optional[BodyExample] = None
    response_body: Optional[BodyExample] = None
    status: int = 200


@dataclass
class Endpoint:
    """Aggregate of every observation sharing one (method, template) key."""

    method: str
    template: str
    path: str  # literal path of the first observation
    tag: str
    status: int = 200  # status of the first response seen
    path_params: List[Parameter] = field(default_factory=list)
    query_params: List[Parameter] = field(default_factory=list)
    request_examples: List[BodyExample] = field(default_factory=list)
    response_examples: List[BodyExample] = field(default_factory=list)

    @property
    def parameters(self) -> List[Parameter]:
        return self.path_params + self.query_params


@dataclass
class ConversionStats:
    """Counters reported once a capture has been processed."""

    total_entries: int = 0
    skipped_prefix: int = 0  # path outside the base path
    skipped_static: int = 0  # static assets and non-XHR resources
    skipped_malformed: int = 0  # entries without a usable request
    unique_endpoints: int = 0
    request_examples: int = 0
    response_examples: int = 0

    @property
    def candidates(self) -> int:
        return self.total_entries - self.skipped_prefix - self.skipped_malformed
