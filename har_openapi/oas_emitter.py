"""OpenAPI 3.0.3 document assembly and serialization."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

import yaml

from .bodies import JSON_MIME
from .models import BodyExample, Endpoint, Parameter
from .path_normalizer import split_path
from .schema import SchemaRegistry, capitalize, infer_schema

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.3"
DEFAULT_TITLE = "HAR Generated API"
DEFAULT_VERSION = "1.0.0"
DEFAULT_SERVER_URL = "http://localhost"

EXAMPLE_NAME = "fromHar"
CAPTURED_RESPONSE_DESCRIPTION = "Response captured from HAR"

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")


def emit_openapi(endpoints: Iterable[Endpoint], title: str = DEFAULT_TITLE,
                 version: str = DEFAULT_VERSION,
                 server_url: str = DEFAULT_SERVER_URL) -> Dict[str, Any]:
    """Build an OpenAPI 3.0.3 document from aggregated endpoints."""
    endpoints = list(endpoints)
    registry = SchemaRegistry()

    spec: Dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": title,
            "version": version,
        },
        "servers": [{"url": server_url}],
        "tags": [{"name": t} for t in sorted({ep.tag for ep in endpoints})],
        "paths": {},
        "components": {"schemas": registry.schemas},
    }

    for ep in endpoints:
        path_item = spec["paths"].setdefault(ep.template, {})
        path_item[ep.method.lower()] = _build_operation(ep, registry)

    logger.debug("Assembled %d paths, %d schemas", len(spec["paths"]), len(registry))
    return spec


def make_operation_id(method: str, template: str) -> str:
    """Stable operationId: GET /api/users/{id} -> get_api_users_id."""
    segs = split_path(template.lstrip("/").replace("{", "").replace("}", ""))
    clean = "_".join(_NON_ALNUM_RE.sub("_", s) for s in segs)
    return f"{method.lower()}_{clean or 'root'}"


def pick_example(examples: List[BodyExample]) -> Optional[BodyExample]:
    """The first JSON example if there is one, else the first example at all."""
    for ex in examples:
        if ex.media_type == JSON_MIME:
            return ex
    return examples[0] if examples else None


def emit_yaml(spec: Dict[str, Any]) -> str:
    """Serialize spec to YAML."""
    return yaml.dump(spec, Dumper=_SpecDumper, default_flow_style=False,
                     sort_keys=False, allow_unicode=True, width=120)


def emit_json(spec: Dict[str, Any]) -> str:
    """Serialize spec to JSON."""
    return json.dumps(spec, indent=2, ensure_ascii=False)


def _build_operation(ep: Endpoint, registry: SchemaRegistry) -> Dict[str, Any]:
    """Build one operation object for an endpoint."""
    operation: Dict[str, Any] = {
        "tags": [ep.tag],
        "summary": f"{ep.method} {ep.template}",
        "operationId": make_operation_id(ep.method, ep.template),
    }

    parameters = [_build_parameter(p) for p in ep.parameters]
    if parameters:
        operation["parameters"] = parameters

    request_body = _build_request_body(ep, registry)
    if request_body:
        operation["requestBody"] = request_body

    operation["responses"] = _build_responses(ep, registry)
    return operation


def _build_parameter(param: Parameter) -> Dict[str, Any]:
    result: Dict[str, Any] = {
        "name": param.name,
        "in": param.location,
        "required": param.required,
        "schema": {"type": param.param_type},
    }
    if param.example is not None:
        result["example"] = param.example
    return result


def _build_request_body(ep: Endpoint,
                        registry: SchemaRegistry) -> Optional[Dict[str, Any]]:
    best = pick_example(ep.request_examples)
    if best is None:
        return None

    tag = capitalize(ep.tag)
    component = f"{tag}{capitalize(ep.method.lower())}Request"
    schema = _schema_for(best, registry, component, f"{tag}Request")

    return {
        "required": True,
        "content": {best.media_type or JSON_MIME: _media(schema, best.example)},
    }


def _build_responses(ep: Endpoint, registry: SchemaRegistry) -> Dict[str, Any]:
    best = pick_example(ep.response_examples)
    if best is None:
        return {"200": {"description": "Success"}}

    component = f"{capitalize(ep.tag)}Response"
    schema = _schema_for(best, registry, component, component)

    return {
        str(best.status or 200): {
            "description": CAPTURED_RESPONSE_DESCRIPTION,
            "content": {best.media_type or JSON_MIME: _media(schema, best.example)},
        }
    }


def _schema_for(best: BodyExample, registry: SchemaRegistry, component: str,
                name_hint: str) -> Dict[str, Any]:
    """Register the inferred schema of a structured example, else a plain string schema."""
    if best.media_type == JSON_MIME and isinstance(best.example, (dict, list)):
        try:
            inferred = infer_schema(best.example, name_hint)
        except RecursionError:
            logger.warning("Example for %s nested too deeply, using a string schema", component)
            return {"type": "string"}
        return registry.register(component, inferred)
    return {"type": "string"}


def _media(schema: Dict[str, Any], example: Any) -> Dict[str, Any]:
    return {
        "schema": schema,
        "examples": {EXAMPLE_NAME: {"value": example}},
    }


class _SpecDumper(yaml.SafeDumper):
    """SafeDumper that never emits anchors/aliases for shared sub-objects."""

    def ignore_aliases(self, data):
        return True
