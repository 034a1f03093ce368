# tests/test_names.py
from __future__ import annotations

import pytest

from ashstudio.parsers.names import extract_name, strip_statement_tail
from ashstudio.registry.types import BOOLEAN_NAME, EVERYTHING_UP_TO_DO, NOT_BOOLEAN_NAME


@pytest.mark.parametrize("text, expected", [
    (":email, :string", ":email"),
    ("get_by_subject do", "get_by_subject"),
    ("do", ""),
    ("", ""),
    (":default do", ":default"),
    # the atom and the identifier shapes never overlap: the first one wins
    (":status, default", ":status"),
    ("status, :default", "status"),
])
def test_extract_name_default_pattern(text, expected):
    assert extract_name(text) == expected


def test_strip_statement_tail():
    assert strip_statement_tail(":open do") == ":open"
    assert strip_statement_tail(":open, :string # note") == ":open, :string"
    assert strip_statement_tail("a; b") == "a"
    # `do` inside a word is not a block marker
    assert strip_statement_tail("undo") == "undo"


def test_boolean_patterns():
    assert extract_name(":has_tickets?, :tickets", BOOLEAN_NAME) == ":has_tickets?"
    assert extract_name(":count_of_tickets, :tickets", NOT_BOOLEAN_NAME) == ":count_of_tickets"
    assert extract_name(":open?, :tickets", NOT_BOOLEAN_NAME) == ":tickets"


def test_everything_up_to_do():
    assert extract_name("action_type(:read) do", EVERYTHING_UP_TO_DO) == "action_type(:read)"
    assert extract_name("Helpdesk.Support.Ticket", EVERYTHING_UP_TO_DO) == "Helpdesk.Support.Ticket"
