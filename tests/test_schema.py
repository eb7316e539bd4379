"""Tests for schema inference and the component registry."""

from har_openapi.schema import SchemaRegistry, capitalize, infer_schema


class TestInferSchema:
    def test_primitive_members(self):
        schema = infer_schema({"a": 1, "b": "x", "c": True, "d": None})
        assert schema["type"] == "object"
        assert schema["properties"] == {
            "a": {"type": "integer"},
            "b": {"type": "string"},
            "c": {"type": "boolean"},
            "d": {"nullable": True},
        }
        assert schema["required"] == ["a", "b", "c", "d"]

    def test_numbers(self):
        assert infer_schema(3) == {"type": "integer"}
        assert infer_schema(3.0) == {"type": "integer"}
        assert infer_schema(3.5) == {"type": "number"}

    def test_bool_is_not_integer(self):
        assert infer_schema(False) == {"type": "boolean"}

    def test_array_uses_first_element(self):
        schema = infer_schema([{"id": 1}, {"name": "x"}])
        assert schema["type"] == "array"
        assert schema["items"]["properties"] == {"id": {"type": "integer"}}

    def test_empty_array(self):
        assert infer_schema([]) == {"type": "array", "items": {"type": "string"}}

    def test_nested_objects_inlined(self):
        schema = infer_schema({"user": {"address": {"zip": "123"}}}, "Orders")
        address = schema["properties"]["user"]["properties"]["address"]
        assert address == {
            "type": "object",
            "properties": {"zip": {"type": "string"}},
            "required": ["zip"],
        }

    def test_empty_object(self):
        assert infer_schema({}) == {"type": "object", "properties": {}}


class TestSchemaRegistry:
    def test_register_returns_ref(self):
        registry = SchemaRegistry()
        ref = registry.register("UsersResponse", {"type": "object"})
        assert ref == {"$ref": "#/components/schemas/UsersResponse"}
        assert "UsersResponse" in registry

    def test_first_registration_wins(self):
        registry = SchemaRegistry()
        registry.register("UsersResponse", {"type": "object", "properties": {"a": {}}})
        registry.register("UsersResponse", {"type": "array"})
        assert registry.schemas["UsersResponse"]["type"] == "object"
        assert len(registry) == 1

    def test_registries_are_independent(self):
        first, second = SchemaRegistry(), SchemaRegistry()
        first.register("A", {"type": "string"})
        assert "A" not in second


def test_capitalize():
    assert capitalize("users") == "Users"
    assert capitalize("userId") == "UserId"
    assert capitalize("") == ""
