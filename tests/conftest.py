"""Shared fixtures: a recording transport and a client wired to it."""

import json
from typing import List

import pytest

from esbridge.client import RestClient
from esbridge.request import Request, Response
from esbridge.settings import Settings


class FakeTransport:
    """Transport handle answering from a queue of canned responses."""

    def __init__(self):
        self.requests: List[Request] = []
        self.responses: List[Response] = []
        self.close_calls = 0

    def reply(self, body=None, status=200, uri="http://node1:9200"):
        if body is None:
            raw = b""
        elif isinstance(body, bytes):
            raw = body
        else:
            raw = json.dumps(body).encode("utf-8")
        self.responses.append(Response(status=status, body=raw, uri=uri))
        return self

    def execute(self, request: Request) -> Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request {request}")
        return self.responses.pop(0)

    def close(self) -> None:
        self.close_calls += 1

    @property
    def last(self) -> Request:
        return self.requests[-1]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def settings():
    return Settings(hosts=("node1",))


@pytest.fixture
def client(settings, transport):
    rest = RestClient(settings, transport=transport)
    yield rest
    rest.close()
