# tests/test_service.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from ashstudio.config import Settings
from ashstudio.parsers.base import Parser
from ashstudio.parsers.service import ParserService
from ashstudio.parsers.simple import SimpleParser


class Boom(Parser):
    name = "Boom"

    def parse(self, source):
        raise RuntimeError("boom")


class Counting(SimpleParser):
    def __init__(self):
        self.calls = 0

    def parse(self, source):
        self.calls += 1
        return super().parse(source)


def test_default_order():
    service = ParserService()
    assert [p.name for p in service.parsers] == ["ModuleParser", "AshParser", "SimpleParser"]


def test_configured_parser_wins(ticket_source, user_auth_source):
    service = ParserService()
    assert service.parse(ticket_source).parser_name == "ModuleParser"
    assert service.parse(user_auth_source).parser_name == "ModuleParser"


def test_falls_through_to_the_fallback(enum_source):
    result = ParserService().parse(enum_source)
    assert result.is_ash_file
    assert result.parser_name == "SimpleParser"
    assert result.sections[0].keyword == "enum_definition"


def test_non_ash_file_returns_last_result(phoenix_source):
    result = ParserService().parse(phoenix_source)
    assert not result.is_ash_file
    assert result.parser_name == "SimpleParser"
    assert result.module_name == "HelpdeskWeb.PageController"


def test_failing_parser_is_skipped(ticket_source, caplog):
    service = ParserService([Boom(), SimpleParser()])
    with caplog.at_level(logging.WARNING, logger="ashstudio.parsers.service"):
        result = service.parse(ticket_source)
    assert result.parser_name == "SimpleParser"
    assert "Boom failed: boom" in caplog.text


def test_every_parser_failing(caplog):
    with caplog.at_level(logging.ERROR, logger="ashstudio.parsers.service"):
        result = ParserService([Boom(), Boom()]).parse("anything")
    assert result.parser_name == "EmptyFallback"
    assert not result.is_ash_file
    assert result.sections == []
    assert "every parser failed" in caplog.text


def test_cache_by_key_and_version(ticket_source):
    counting = Counting()
    service = ParserService([counting])
    first = service.parse(ticket_source, key="ticket.ex", version=1)
    assert service.parse(ticket_source, key="ticket.ex", version=1) is first
    assert counting.calls == 1
    assert service.cached("ticket.ex", 1) is first

    service.parse(ticket_source, key="ticket.ex", version=2)
    assert counting.calls == 2

    service.clear_cache("ticket.ex")
    assert service.cached("ticket.ex", 1) is None
    assert service.cached("ticket.ex", 2) is None


def test_uncached_without_key(ticket_source):
    counting = Counting()
    service = ParserService([counting])
    service.parse(ticket_source)
    service.parse(ticket_source)
    assert counting.calls == 2


def test_cache_is_bounded(ticket_source):
    service = ParserService([SimpleParser()], cache_size=2)
    for key in ("a", "b", "c"):
        service.parse(ticket_source, key=key)
    assert service.cached("a") is None
    assert service.cached("b") is not None
    assert service.cached("c") is not None
    service.clear_cache()
    assert service.cached("c") is None


@pytest.mark.parametrize("names, expected", [
    (("simple",), ["SimpleParser"]),
    (("grammar", "configuration"), ["AshParser", "ModuleParser"]),
])
def test_from_settings(names, expected):
    service = ParserService.from_settings(Settings(parsers=names, cache_size=3))
    assert [p.name for p in service.parsers] == expected
    assert service.cache_size == 3


def test_from_settings_max_trees():
    service = ParserService.from_settings(Settings(parsers=("grammar",), max_trees=2))
    assert service.parsers[0].grammar.parser.max_trees == 2


def test_shared_service_from_many_threads(ticket_source, domain_source, enum_source):
    service = ParserService([SimpleParser()], cache_size=2)
    sources = {"ticket.ex": ticket_source, "support.ex": domain_source, "status.ex": enum_source}
    expected = {k: SimpleParser().parse(v) for k, v in sources.items()}
    jobs = list(sources) * 40

    def run(key):
        return key, service.parse(sources[key], key=key, version=1)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(run, jobs))
    assert all(result == expected[key] for key, result in results)
    assert len(service._cache) <= 2
