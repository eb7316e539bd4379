"""Tests for path/query parameter extraction."""

from har_openapi.models import Parameter
from har_openapi.params import (
    extract_path_params,
    extract_query_params,
    merge_params,
    resolve_url,
    url_path,
)


class TestUrls:
    def test_absolute_url_kept(self):
        assert resolve_url("https://x.io/api/a?b=1") == "https://x.io/api/a?b=1"

    def test_relative_url_resolved(self):
        assert resolve_url("/api/a?b=1") == "http://har.local/api/a?b=1"

    def test_url_path(self):
        assert url_path("https://x.io/api/users/1?x=2") == "/api/users/1"
        assert url_path("https://x.io") == "/"
        assert url_path("") == "/"

    def test_malformed_url_falls_back(self):
        assert url_path("http://[::1/api") == "/"


class TestPathParams:
    def test_examples_align_with_original(self):
        params = extract_path_params(
            "/api/users/{id}/orders/{id2}", "/api/users/42/orders/99")
        assert [(p.name, p.example) for p in params] == [("id", "42"), ("id2", "99")]
        assert all(p.location == "path" and p.required for p in params)
        assert all(p.param_type == "string" for p in params)

    def test_literal_template_has_no_params(self):
        assert extract_path_params("/api/users", "/api/users") == []


class TestQueryParams:
    def test_from_url(self):
        params = extract_query_params("https://x.io/api?active=true&page=2")
        assert [(p.name, p.example) for p in params] == [("active", "true"), ("page", "2")]
        assert all(p.location == "query" and not p.required for p in params)

    def test_blank_values_kept(self):
        params = extract_query_params("https://x.io/api?q=")
        assert params[0].name == "q"
        assert params[0].example == ""

    def test_duplicate_names_keep_first(self):
        params = extract_query_params("https://x.io/api?a=1&a=2")
        assert len(params) == 1
        assert params[0].example == "1"

    def test_recorded_fields_do_not_override_url(self):
        params = extract_query_params(
            "https://x.io/api?a=url",
            recorded=[("a", "recorded"), ("b", "only-recorded")],
        )
        assert [(p.name, p.example) for p in params] == [("a", "url"), ("b", "only-recorded")]


class TestMergeParams:
    def test_union_keeps_earliest(self):
        existing = [Parameter(name="a", location="query", example="1")]
        new = [
            Parameter(name="a", location="query", example="2"),
            Parameter(name="b", location="query", example="3"),
        ]
        merged = merge_params(existing, new)
        assert [(p.name, p.example) for p in merged] == [("a", "1"), ("b", "3")]

    def test_location_is_part_of_key(self):
        merged = merge_params(
            [Parameter(name="id", location="path", required=True)],
            [Parameter(name="id", location="query")],
        )
        assert len(merged) == 2
