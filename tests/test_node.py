"""Tests for node address parsing."""

import pytest

from esbridge.node import Node, parse_http_address


@pytest.mark.parametrize("address,expected", [
    ("inet[/10.0.0.1:9200]", "10.0.0.1:9200"),
    ("inet[es-1/192.168.1.7:9201]", "192.168.1.7:9201"),
    ("10.0.0.2:9200", "10.0.0.2:9200"),
    ("", None),
    ("  ", None),
    (None, None),
])
def test_parse_http_address(address, expected):
    assert parse_http_address(address) == expected


def test_node_falls_back_to_publish_address():
    node = Node("n1", {"name": "alpha", "http": {"publish_address": "10.0.0.3:9200"}})

    assert node.http_address == "10.0.0.3:9200"
    assert node.is_data
    assert not node.is_client


def test_node_equality_by_id_and_attributes():
    assert Node("n1", {"name": "a"}) == Node("n1", {"name": "a"})
    assert Node("n1", {"name": "a"}) != Node("n2", {"name": "a"})
    assert "n1" in repr(Node("n1", {}))


def test_node_takes_node_id_keyword():
    node = Node(node_id="n7", attributes={"name": "gamma"})

    assert node.id == "n7"
    assert node.name == "gamma"
