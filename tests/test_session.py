"""
Tests for version-tagged search passes and stale result discarding.

Uses real threads. A gated stub handler holds a pass open so a newer query
can overtake it.
"""

import threading

import pytest

from quicksearch.models import CalculatorResult
from quicksearch.search.router import QueryRouter
from quicksearch.search.session import SearchSession
from quicksearch.services.state import UiStateStore

TIMEOUT = 5


class GatedHandler:
    """Echoes the query; queries starting with 'slow' wait for the gate."""

    name = "echo"
    priority = 100

    def __init__(self):
        self.gate = threading.Event()
        self.started = threading.Event()

    def matches(self, query):
        return True

    def get_results(self, query):
        if query.startswith("slow"):
            self.started.set()
            self.gate.wait(TIMEOUT)
        return [CalculatorResult(expression=query, result=query)]


class FailingHandler:
    name = "broken"
    priority = 100

    def matches(self, query):
        return True

    def get_results(self, query):
        raise RuntimeError("boom")


@pytest.fixture
def handler():
    return GatedHandler()


@pytest.fixture
def session(handler, ui_state):
    router = QueryRouter()
    router.register(handler)
    session = SearchSession(router, ui_state)
    yield session
    handler.gate.set()
    session.close()


class TestSearchSession:

    def test_publishes_results(self, session, ui_state):
        assert session.submit("hello").result(TIMEOUT) is True
        state = ui_state.state
        assert state.query == "hello"
        assert state.query_version == 1
        assert state.handler == "echo"
        assert [r.title for r in state.results] == ["hello"]

    def test_versions_increase(self, session):
        session.submit("a").result(TIMEOUT)
        session.submit("b").result(TIMEOUT)
        assert session.latest_version == 2

    def test_stale_pass_discarded(self, session, handler, ui_state):
        slow = session.submit("slow query")
        assert handler.started.wait(TIMEOUT)

        assert session.submit("fast").result(TIMEOUT) is True
        handler.gate.set()

        assert slow.result(TIMEOUT) is False
        assert ui_state.state.query == "fast"
        assert ui_state.state.query_version == 2

    def test_resubmit_reruns_latest_query(self, session, ui_state):
        session.submit("hello").result(TIMEOUT)
        assert session.resubmit().result(TIMEOUT) is True
        assert ui_state.state.query == "hello"
        assert ui_state.state.query_version == 2

    def test_blank_query_clears_results(self, session, ui_state):
        session.submit("hello").result(TIMEOUT)
        session.submit("").result(TIMEOUT)
        assert ui_state.state.results == ()
        assert ui_state.state.handler == "none"

    def test_handler_failure_publishes_empty(self):
        router = QueryRouter()
        router.register(FailingHandler())
        ui_state = UiStateStore()
        session = SearchSession(router, ui_state)
        assert session.submit("anything").result(TIMEOUT) is True
        assert ui_state.state.results == ()
        assert ui_state.state.handler == "none"
        session.close()
