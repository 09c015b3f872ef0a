from enum import Enum
from typing import Optional

from verbs_bot.services.session_registry import Session

START_COMMAND = "/start"
STOP_COMMAND = "/stop"


class QuizPhase(Enum):
    """Where a chat is in the quiz."""

    NO_SESSION = "no_session"
    AWAITING_ANSWER = "awaiting_answer"  # Session exists, a prompt was sent
    EXHAUSTED = "exhausted"  # Session exists, nothing left to ask


class Trigger(Enum):
    START = "start"
    STOP = "stop"
    ANSWER = "answer"


class Action(Enum):
    BEGIN_QUIZ = "begin_quiz"
    CHECK_ANSWER = "check_answer"
    FINISH_QUIZ = "finish_quiz"
    IGNORE = "ignore"


TRANSITIONS: dict[tuple[QuizPhase, Trigger], Action] = {
    (QuizPhase.NO_SESSION, Trigger.START): Action.BEGIN_QUIZ,
    (QuizPhase.NO_SESSION, Trigger.STOP): Action.IGNORE,
    (QuizPhase.NO_SESSION, Trigger.ANSWER): Action.IGNORE,
    (QuizPhase.AWAITING_ANSWER, Trigger.START): Action.IGNORE,
    (QuizPhase.AWAITING_ANSWER, Trigger.STOP): Action.FINISH_QUIZ,
    (QuizPhase.AWAITING_ANSWER, Trigger.ANSWER): Action.CHECK_ANSWER,
    (QuizPhase.EXHAUSTED, Trigger.START): Action.IGNORE,
    (QuizPhase.EXHAUSTED, Trigger.STOP): Action.FINISH_QUIZ,
    (QuizPhase.EXHAUSTED, Trigger.ANSWER): Action.FINISH_QUIZ,
}


def phase_of(session: Optional[Session]) -> QuizPhase:
    """Derive the phase of a chat from its session."""
    if session is None:
        return QuizPhase.NO_SESSION
    if session.current is None:
        return QuizPhase.EXHAUSTED
    return QuizPhase.AWAITING_ANSWER


def trigger_of(text: str) -> Trigger:
    """Commands match the whole message text exactly."""
    if text == START_COMMAND:
        return Trigger.START
    if text == STOP_COMMAND:
        return Trigger.STOP
    return Trigger.ANSWER


def next_action(phase: QuizPhase, trigger: Trigger) -> Action:
    return TRANSITIONS[(phase, trigger)]
