# Shared fakes: a scripted model client and a canned search client.
# Nothing in the test suite talks to the network.

from typing import Dict, List

import pytest

from finalsay.generate.generator import ReplyGenerator
from finalsay.search.types import SearchHit


class ScriptedClient:
    """Model client returning queued replies in order; exceptions are raised."""

    def __init__(self, *replies):
        self.model = "scripted"
        self.replies = list(replies)
        self.calls = []

    def generate(self, messages, params):
        self.calls.append((messages, params))
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply, {"engine": "scripted", "model": self.model}


class FakeSearchClient:
    """Returns canned hits per query; a query mapped to an exception raises it."""

    def __init__(self, results: Dict[str, object]):
        self.results = results
        self.queries: List[str] = []

    def search(self, query):
        self.queries.append(query)
        result = self.results.get(query, [])
        if isinstance(result, Exception):
            raise result
        return [SearchHit(title=t, link=l) for t, l in result]


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scripted():
    def make(*replies):
        client = ScriptedClient(*replies)
        return client, ReplyGenerator(client)
    return make
