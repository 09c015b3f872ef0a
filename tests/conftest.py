"""Shared fixtures for the verbs bot test suite."""

import random

import pytest

from verbs_bot.services.evaluator import StaticEvaluator
from verbs_bot.services.quiz_service import QuizService
from verbs_bot.services.session_registry import SessionRegistry

ANSWERS = {
    "go": "went gone",
    "do": "did done",
    "be": "was were been",
    "take": "took taken",
}


class Outbox:
    """Recording replacement for the outbound `send(chat_id, text)`."""

    def __init__(self):
        self.sent: list[tuple[int, str]] = []

    async def __call__(self, chat_id, text):
        self.sent.append((chat_id, text))

    def texts(self, chat_id):
        return [text for cid, text in self.sent if cid == chat_id]

    def last_prompt(self, chat_id):
        """The verb of the last quoted prompt sent to the chat."""
        for text in reversed(self.texts(chat_id)):
            if text.startswith('"') and text.endswith('"'):
                return text[1:-1]
        return None


@pytest.fixture
def outbox():
    return Outbox()


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def evaluator():
    return StaticEvaluator(dict(ANSWERS))


@pytest.fixture
def service(evaluator, registry):
    return QuizService(evaluator, registry=registry, rng=random.Random(1234))
