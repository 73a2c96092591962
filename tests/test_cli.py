"""Tests for the command-line interface with a mocked RestClient."""

import json
from unittest.mock import MagicMock, patch

import pytest

from esbridge.cli import get_settings, main
from esbridge.client import Health
from esbridge.node import Node
from esbridge.resource import Resource
from esbridge.unit import TimeValue


@pytest.fixture
def rest():
    instance = MagicMock()
    instance.__enter__.return_value = instance
    instance.__exit__.return_value = False
    with patch("esbridge.client.RestClient", return_value=instance) as cls:
        instance.cls = cls
        yield instance


def test_global_options_build_settings():
    args = MagicMock(hosts="es1,es2:9201", port=9300)

    assert get_settings(args).nodes() == ["es1:9300", "es2:9201"]


def test_nodes_prints_discovered_addresses(rest, capsys):
    rest.discover_nodes.return_value = ["10.0.0.1:9200", "10.0.0.2:9200"]

    assert main(["--hosts", "es1", "nodes"]) == 0

    assert capsys.readouterr().out.splitlines() == ["10.0.0.1:9200", "10.0.0.2:9200"]
    settings = rest.cls.call_args[0][0]
    assert settings.nodes() == ["es1:9200"]
    rest.__exit__.assert_called_once()


def test_nodes_info(rest, capsys):
    rest.get_nodes.return_value = {
        "abc": Node("abc", {"name": "alpha", "http_address": "inet[/10.0.0.1:9200]"}),
    }

    main(["nodes", "--info"])

    out = capsys.readouterr().out
    assert "alpha" in out
    assert "10.0.0.1:9200" in out


def test_health_exit_codes(rest):
    rest.health.return_value = True
    assert main(["health", "logs", "--status", "green", "--timeout", "5s"]) == 0
    rest.health.assert_called_with("logs", Health.GREEN, TimeValue.parse("5s"))

    rest.health.return_value = False
    assert main(["health", "logs"]) == 1


def test_exists(rest, capsys):
    rest.exists.return_value = False

    assert main(["exists", "twitter"]) == 1
    assert "missing" in capsys.readouterr().out


def test_refresh_and_forced_delete(rest):
    main(["refresh", "twitter/tweet"])
    main(["delete", "twitter", "--force"])

    rest.refresh.assert_called_once_with(Resource("twitter", "tweet"))
    rest.delete_index.assert_called_once_with("twitter")


def test_delete_aborts_without_confirmation(rest, capsys):
    with patch("builtins.input", return_value="n"):
        main(["delete", "twitter"])

    rest.delete_index.assert_not_called()
    assert "Aborted" in capsys.readouterr().out


def test_shards(rest, capsys):
    rest.target_shards.return_value = [[{"shard": 0, "primary": True, "state": "STARTED", "node": "n1"}]]

    main(["shards", "twitter/tweet"])

    assert "STARTED" in capsys.readouterr().out


def test_scan_prints_hits(rest, capsys):
    with patch("esbridge.repository.ScrollQuery") as query_cls:
        query = query_cls.return_value.__enter__.return_value
        query.__iter__.return_value = iter([{"_id": "1"}, {"_id": "2"}])

        main(["scan", "twitter/tweet", "--query", '{"query": {"match_all": {}}}'])

    lines = capsys.readouterr().out.splitlines()
    assert [json.loads(line)["_id"] for line in lines] == ["1", "2"]
    assert query_cls.call_args[0][3] == {"query": {"match_all": {}}}


def test_load_writes_jsonl(rest, tmp_path, capsys):
    data = tmp_path / "docs.jsonl"
    data.write_text('{"id": "a", "n": 1}\n\n{"id": "b", "n": 2}\n', encoding="utf-8")
    rest.bulk.return_value = None

    main(["load", "twitter/tweet", str(data), "--id-field", "id"])

    rest.bulk.assert_called_once()
    resource, payload = rest.bulk.call_args[0]
    assert resource == Resource("twitter", "tweet")
    lines = [json.loads(line) for line in payload.decode("utf-8").splitlines()]
    assert [line["index"]["_id"] for line in lines[::2]] == ["a", "b"]
    assert "Loaded 2 documents" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main([]) == 2
    assert "usage" in capsys.readouterr().out
