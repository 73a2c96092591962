"""Tests for the Request/Response values and response decoding."""

import dataclasses

import pytest

from esbridge.content import encode, extract, has_text, parse_content
from esbridge.exceptions import ProtocolError
from esbridge.request import Method, Request, Response


def test_request_accessors_return_constructed_values():
    request = Request(Method.POST, "http://node1:9200", "idx/_search", "scroll=1m", b"{}")

    assert request.method is Method.POST
    assert request.uri == "http://node1:9200"
    assert request.path == "idx/_search"
    assert request.params == "scroll=1m"
    assert request.body == b"{}"


def test_request_is_immutable():
    request = Request(Method.GET, None, "_nodes")

    with pytest.raises(dataclasses.FrozenInstanceError):
        request.path = "_cluster/nodes"


def test_request_defaults():
    request = Request(Method.HEAD, None, "twitter")

    assert request.params is None
    assert request.body is None
    assert request.target == "/twitter"


@pytest.mark.parametrize("path,params,target", [
    ("_search/scroll", "scroll=10m", "/_search/scroll?scroll=10m"),
    ("/idx/_search?q=a", "size=5", "/idx/_search?q=a&size=5"),
    ("_cluster/health/idx", None, "/_cluster/health/idx"),
])
def test_request_target(path, params, target):
    assert Request(Method.GET, None, path, params).target == target


def test_response_status_classification():
    assert Response(201, b"", "n").has_succeeded
    assert Response(403, b"", "n").has_failed
    assert Response(404, b"", "n").is_not_found
    assert not Response(500, b"", "n").is_not_found
    assert Response(200, "héllo".encode("utf-8"), "n").text == "héllo"


def test_parse_content_with_and_without_key():
    body = b'{"nodes": {"a": {}}, "cluster_name": "es", "extra": [1, 2]}'

    assert parse_content(body)["cluster_name"] == "es"
    assert parse_content(body, "nodes") == {"a": {}}
    assert parse_content(body, "missing") is None


@pytest.mark.parametrize("body", [b"", b"not json", b"{\"open\": "])
def test_parse_content_rejects_invalid_bodies(body):
    with pytest.raises(ProtocolError):
        parse_content(body)


def test_extract_walks_nested_maps():
    tree = {"hits": {"total": 5, "hits": []}}

    assert extract(tree, "hits", "total") == 5
    assert extract(tree, "hits", "total", "value") is None
    assert extract(tree, "missing", "total") is None


def test_has_text():
    assert has_text("x")
    assert not has_text("  ")
    assert not has_text(None)
    assert has_text({"type": "error"})


def test_encode_passes_bytes_and_serializes_trees():
    assert encode(b"raw") == b"raw"
    assert encode("text") == b"text"
    assert parse_content(encode({"a": [1, "b"]})) == {"a": [1, "b"]}
