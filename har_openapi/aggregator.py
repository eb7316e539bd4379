"""Endpoint aggregation: one record per (method, route template)."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .bodies import interpret_request_body, interpret_response_body
from .models import CapturedCall, Endpoint, Observation
from .params import extract_path_params, extract_query_params, merge_params, url_path
from .path_normalizer import (
    DEFAULT_RULES,
    IdentifierRules,
    is_placeholder,
    normalize_path,
    split_path,
)

logger = logging.getLogger(__name__)

EndpointKey = Tuple[str, str]

DEFAULT_TAG = "default"


def endpoint_key(method: str, template: str) -> EndpointKey:
    """Dedup key: the query string is deliberately not part of it."""
    return (method.upper(), template)


def build_tag(template: str, base_path: str = "") -> str:
    """First literal segment after the base path: /api/users/{id}/roles -> users."""
    segs = split_path(template)
    remaining = segs[len(split_path(base_path)):]
    for seg in remaining:
        if not is_placeholder(seg):
            return seg
    return remaining[0] if remaining else DEFAULT_TAG


def build_observation(call: CapturedCall, base_path: str = "",
                      rules: IdentifierRules = DEFAULT_RULES) -> Observation:
    """Reduce one captured call to its template, parameters and body examples."""
    method = (call.method or "GET").upper()
    path = url_path(call.url)
    template = normalize_path(path, rules)

    return Observation(
        method=method,
        path=path,
        template=template,
        tag=build_tag(template, base_path),
        path_params=extract_path_params(template, path),
        query_params=extract_query_params(call.url, call.query_fields),
        request_body=interpret_request_body(call),
        response_body=interpret_response_body(call),
        status=call.status or 200,
    )


def new_endpoint(obs: Observation) -> Endpoint:
    """Create the aggregate record for the first observation of a key."""
    endpoint = Endpoint(
        method=obs.method,
        template=obs.template,
        path=obs.path,
        tag=obs.tag,
        status=obs.status,
        path_params=merge_params([], obs.path_params),
        query_params=merge_params([], obs.query_params),
    )
    _append_examples(endpoint, obs)
    return endpoint


def merge_observation(endpoint: Endpoint, obs: Observation) -> Endpoint:
    """Fold a later observation of the same key into an existing record.

    Parameters are unioned by (location, name), keeping the earliest
    example; body examples are appended in arrival order.
    """
    endpoint.path_params = merge_params(endpoint.path_params, obs.path_params)
    endpoint.query_params = merge_params(endpoint.query_params, obs.query_params)
    _append_examples(endpoint, obs)
    return endpoint


def _append_examples(endpoint: Endpoint, obs: Observation) -> None:
    if obs.request_body is not None and obs.request_body.example is not None:
        endpoint.request_examples.append(obs.request_body)
    if obs.response_body is not None and obs.response_body.example is not None:
        endpoint.response_examples.append(obs.response_body)


class EndpointAggregator:
    """Collect observations into endpoints keyed by (method, route template)."""

    def __init__(self):
        self._endpoints: Dict[EndpointKey, Endpoint] = {}

    def observe(self, obs: Observation) -> Tuple[Endpoint, bool]:
        """Record an observation. Returns (endpoint, created)."""
        key = endpoint_key(obs.method, obs.template)
        existing = self._endpoints.get(key)
        if existing is None:
            endpoint = new_endpoint(obs)
            self._endpoints[key] = endpoint
            logger.debug("New endpoint %s %s", *key)
            return endpoint, True

        return merge_observation(existing, obs), False

    def get(self, method: str, template: str) -> Optional[Endpoint]:
        return self._endpoints.get(endpoint_key(method, template))

    @property
    def endpoints(self) -> List[Endpoint]:
        """Endpoints in order of first observation."""
        return list(self._endpoints.values())

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, key: EndpointKey) -> bool:
        return key in self._endpoints
