"""Tests for payload interpretation."""

from har_openapi.bodies import (
    MAX_JSON_DEPTH,
    content_type_of,
    interpret_request_body,
    interpret_response_body,
    parse_json,
)
from har_openapi.models import CapturedCall


def _call(**kwargs):
    return CapturedCall(method="POST", url="https://x.io/api/a", **kwargs)


class TestContentType:
    def test_strips_parameters(self):
        headers = [("Accept", "*/*"), ("content-type", "application/json; charset=utf-8")]
        assert content_type_of(headers) == "application/json"

    def test_missing(self):
        assert content_type_of([]) == ""


class TestParseJson:
    def test_structures(self):
        assert parse_json('{"a": 1}') == {"a": 1}
        assert parse_json("[1, 2]") == [1, 2]
        assert parse_json("{}") == {}

    def test_invalid_or_falsy(self):
        assert parse_json("not json") is None
        assert parse_json("") is None
        assert parse_json(None) is None
        assert parse_json("0") is None
        assert parse_json("false") is None
        assert parse_json("null") is None

    def test_too_deep_for_the_parser(self):
        assert parse_json("[" * 100000 + "]" * 100000) is None

    def test_nested_past_the_limit(self):
        depth = MAX_JSON_DEPTH + 1
        assert parse_json("[" * depth + "]" * depth) is None
        assert parse_json("[" * MAX_JSON_DEPTH + "]" * MAX_JSON_DEPTH) is not None


class TestRequestBody:
    def test_no_post_data(self):
        assert interpret_request_body(_call()) is None

    def test_json(self):
        body = interpret_request_body(_call(request_body='{"qty": 2}',
                                            request_mime_type="text/plain"))
        assert body.media_type == "application/json"
        assert body.example == {"qty": 2}

    def test_form_encoded(self):
        body = interpret_request_body(_call(
            request_body="a=1&b=",
            request_mime_type="application/x-www-form-urlencoded; charset=UTF-8",
            form_fields=(("a", "1"), ("b", "")),
        ))
        assert body.media_type == "application/x-www-form-urlencoded"
        assert body.example == {"a": "1", "b": ""}

    def test_raw_text_uses_declared_type(self):
        body = interpret_request_body(_call(request_body="<xml/>",
                                            request_mime_type="application/xml"))
        assert body.media_type == "application/xml"
        assert body.example == "<xml/>"

    def test_media_type_from_header(self):
        body = interpret_request_body(_call(
            request_body="hello",
            request_headers=(("Content-Type", "text/plain; charset=utf-8"),),
        ))
        assert body.media_type == "text/plain"

    def test_media_type_defaults_to_json(self):
        body = interpret_request_body(_call(request_body="hello"))
        assert body.media_type == "application/json"
        assert body.example == "hello"

    def test_deeply_nested_json_kept_as_text(self):
        text = '{"a": ' * 200 + "1" + "}" * 200
        body = interpret_request_body(_call(request_body=text,
                                            request_mime_type="application/json"))
        assert body.media_type == "application/json"
        assert body.example == text


class TestResponseBody:
    def test_json_carries_status(self):
        body = interpret_response_body(_call(status=201, response_body='{"id": 1}'))
        assert body.media_type == "application/json"
        assert body.example == {"id": 1}
        assert body.status == 201

    def test_text_with_mime_type(self):
        body = interpret_response_body(_call(response_body="<p>hi</p>",
                                             response_mime_type="text/html"))
        assert body.media_type == "text/html"
        assert body.example == "<p>hi</p>"

    def test_mime_type_from_header(self):
        body = interpret_response_body(_call(
            response_body="ok",
            response_headers=(("Content-Type", "text/plain"),),
        ))
        assert body.media_type == "text/plain"

    def test_empty_body(self):
        assert interpret_response_body(_call(response_mime_type="application/json")) is None

    def test_text_without_mime_type(self):
        assert interpret_response_body(_call(response_body="opaque")) is None

    def test_deeply_nested_json_kept_as_text(self):
        text = "[" * 100000 + "]" * 100000
        body = interpret_response_body(_call(response_body=text,
                                             response_mime_type="application/json"))
        assert body.media_type == "application/json"
        assert body.example == text
