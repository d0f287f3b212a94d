"""Shared fixtures for chat_budget tests."""
from __future__ import annotations

import re

import pytest

from chat_budget import tokenizer
from chat_budget.dialects import CONTROL_TOKENS
from chat_budget.schemas import Message
from chat_budget.tokenizer import TokenCounter

_MARKER_RE = re.compile("(" + "|".join(re.escape(m) for m in CONTROL_TOKENS) + ")")


class WordEncoder:
    """Deterministic stand-in for tiktoken: one token per word, one per control marker."""

    def __init__(self):
        self.calls = 0

    def encode(self, text, *, allowed_special=frozenset()):
        self.calls += 1
        ids = []
        for part in _MARKER_RE.split(text):
            if part in CONTROL_TOKENS:
                ids.append(CONTROL_TOKENS[part])
            else:
                ids.extend(len(word) for word in part.split())
        return ids


@pytest.fixture
def encoder():
    return WordEncoder()


@pytest.fixture
def counter(encoder):
    return TokenCounter(encoder)


@pytest.fixture
def default_counter(counter):
    """Install the fake counter as the process-wide one for the test."""
    previous = tokenizer._default_counter
    tokenizer.set_token_counter(counter)
    yield counter
    tokenizer.set_token_counter(previous)


@pytest.fixture
def no_default_counter():
    previous = tokenizer._default_counter
    tokenizer.set_token_counter(None)
    yield
    tokenizer.set_token_counter(previous)


@pytest.fixture
def conversation():
    return [
        Message(role="system", content="S"),
        Message(role="user", content="U1"),
        Message(role="assistant", content="A1"),
        Message(role="user", content="U2"),
    ]
