"""Structural schema inference from example payloads."""

from __future__ import annotations

from typing import Any, Dict

COMPONENT_REF_PREFIX = "#/components/schemas/"


def capitalize(s: str) -> str:
    """Upper-case the first character only ('users' -> 'Users', 'userId' -> 'UserId')."""
    return s[:1].upper() + s[1:] if s else s


def infer_schema(example: Any, name_hint: str = "") -> Dict[str, Any]:
    """Infer an OpenAPI schema from a single example value.

    Every key of an observed object is marked required: with one sample
    there is no way to tell optional members apart. Nested objects are
    inlined; ``name_hint`` only carries the naming path down the tree.
    """
    if example is None:
        return {"nullable": True}

    if isinstance(example, list):
        if example:
            items = infer_schema(example[0], f"{name_hint}Item")
        else:
            items = {"type": "string"}
        return {"type": "array", "items": items}

    # bool is a subclass of int, test it first
    if isinstance(example, bool):
        return {"type": "boolean"}
    if isinstance(example, int):
        return {"type": "integer"}
    if isinstance(example, float):
        if example.is_integer():
            return {"type": "integer"}
        return {"type": "number"}
    if isinstance(example, str):
        return {"type": "string"}

    if isinstance(example, dict):
        properties = {}
        required = []
        for key, value in example.items():
            properties[key] = infer_schema(value, f"{name_hint}{capitalize(str(key))}")
            required.append(key)
        schema = {"type": "object", "properties": properties}
        # OpenAPI 3.0 forbids an empty required list
        if required:
            schema["required"] = required
        return schema

    return {"type": "string"}


class SchemaRegistry:
    """Named, reusable component schemas. The first registration of a name wins."""

    def __init__(self):
        self.schemas: Dict[str, Dict[str, Any]] = {}

    def register(self, name: str, schema: Dict[str, Any]) -> Dict[str, str]:
        """Store ``schema`` under ``name`` unless taken; return a $ref to the name."""
        if name not in self.schemas:
            self.schemas[name] = schema
        return self.ref(name)

    @staticmethod
    def ref(name: str) -> Dict[str, str]:
        return {"$ref": f"{COMPONENT_REF_PREFIX}{name}"}

    def __contains__(self, name: str) -> bool:
        return name in self.schemas

    def __len__(self) -> int:
        return len(self.schemas)
