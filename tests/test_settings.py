"""Tests for settings parsing and duration/size units."""

import dataclasses

import pytest

from esbridge.exceptions import ConfigurationError
from esbridge.resource import Resource
from esbridge.settings import Settings
from esbridge.unit import TimeValue, parse_bytes


def test_defaults():
    settings = Settings()

    assert settings.nodes() == ["localhost:9200"]
    assert str(settings.scroll_keep_alive) == "10m"
    assert settings.scroll_size == 50
    assert settings.index_read_missing_as_empty is False
    assert settings.batch_size_entries == 1000
    assert settings.batch_size_bytes == 1024 * 1024
    assert settings.batch_write_refresh is True


def test_hosts_resolution_applies_default_port():
    settings = Settings(hosts="es1, es2:9201,http://es3/", port=9300)

    assert settings.hosts == ("es1", "es2:9201", "http://es3/")
    assert settings.nodes() == ["es1:9300", "es2:9201", "es3:9300"]


def test_settings_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        Settings().port = 9300


def test_from_properties():
    settings = Settings.from_properties({
        "es.nodes": "a,b",
        "es.port": "9400",
        "es.resource": "twitter/tweet",
        "es.scroll.keepalive": "5m",
        "es.scroll.size": "100",
        "es.index.read.missing.as.empty": "true",
        "es.batch.size.entries": "10",
        "es.batch.size.bytes": "2mb",
        "es.batch.write.refresh": "false",
        "es.http.timeout": "30s",
        "mapred.job.name": "ignored",
    })

    assert settings.nodes() == ["a:9400", "b:9400"]
    assert settings.target_resource() == Resource("twitter", "tweet")
    assert settings.scroll_keep_alive == TimeValue.of_minutes(5)
    assert settings.scroll_size == 100
    assert settings.index_read_missing_as_empty is True
    assert settings.batch_size_entries == 10
    assert settings.batch_size_bytes == 2 * 1024 * 1024
    assert settings.batch_write_refresh is False
    assert settings.http_timeout.seconds == 30


@pytest.mark.parametrize("props", [
    {"es.port": "http"},
    {"es.port": "70000"},
    {"es.nodes": " , "},
    {"es.index.read.missing.as.empty": "maybe"},
    {"es.scroll.keepalive": "10 fortnights"},
    {"es.batch.size.bytes": "1pb"},
])
def test_invalid_properties(props):
    with pytest.raises(ConfigurationError):
        Settings.from_properties(props)


def test_missing_resource():
    with pytest.raises(ConfigurationError):
        Settings().target_resource()


@pytest.mark.parametrize("millis,text", [
    (0, "0s"),
    (250, "250ms"),
    (1000, "1s"),
    (30_000, "30s"),
    (90_000, "1.5m"),
    (600_000, "10m"),
    (3_600_000, "1h"),
    (2 * 86_400_000, "2d"),
])
def test_time_value_format(millis, text):
    assert str(TimeValue(millis)) == text


@pytest.mark.parametrize("text,millis", [
    ("10m", 600_000),
    ("30s", 30_000),
    ("500ms", 500),
    ("1h", 3_600_000),
    ("1.5s", 1500),
    ("750", 750),
    (1200, 1200),
])
def test_time_value_parse(text, millis):
    assert TimeValue.parse(text).millis == millis


@pytest.mark.parametrize("text,size", [
    ("1mb", 1024 * 1024),
    ("512kb", 512 * 1024),
    ("100", 100),
    ("1gb", 1024 ** 3),
    (64, 64),
])
def test_parse_bytes(text, size):
    assert parse_bytes(text) == size
