import logging
import random
from typing import Awaitable, Callable, Hashable, Optional

from verbs_bot import texts
from verbs_bot.services.evaluator import (
    EvaluatorClient,
    EvaluatorError,
    EvaluatorProtocolError,
)
from verbs_bot.services.session_registry import SessionRegistry
from verbs_bot.states import Action, next_action, phase_of, trigger_of

SendFunc = Callable[[Hashable, str], Awaitable[None]]


def shuffle_prompts(prompts: list[str], rng: random.Random) -> list[str]:
    """Return a shuffled copy; the input list is left untouched."""
    shuffled = list(prompts)
    rng.shuffle(shuffled)
    return shuffled


class QuizService:
    """Runs one quiz transition per inbound text message."""

    def __init__(
        self,
        evaluator: EvaluatorClient,
        registry: Optional[SessionRegistry] = None,
        rng: Optional[random.Random] = None,
    ):
        self.evaluator = evaluator
        self.registry = registry if registry is not None else SessionRegistry()
        self.rng = rng if rng is not None else random.Random()

    async def handle(
        self,
        chat_id: Hashable,
        text: str,
        send: SendFunc,
        username: Optional[str] = None,
    ) -> Action:
        """Process a message and send the replies while the chat is locked.

        Returns the action that was taken.
        """
        async with self.registry.lock(chat_id):
            session = self.registry.get(chat_id)
            action = next_action(phase_of(session), trigger_of(text))

            if action is Action.BEGIN_QUIZ:
                await self._begin_quiz(chat_id, send, username)
            elif action is Action.CHECK_ANSWER:
                await self._check_answer(chat_id, session.current, text, send)
            elif action is Action.FINISH_QUIZ:
                await self._finish_quiz(chat_id, send)
            else:
                logging.debug(f"Ignoring message in chat {chat_id}")
            return action

    async def _begin_quiz(
        self, chat_id: Hashable, send: SendFunc, username: Optional[str]
    ) -> None:
        try:
            prompts = await self.evaluator.list_prompts()
        except EvaluatorError as e:
            logging.warning(f"Cannot start quiz in chat {chat_id}: {e}")
            return
        if not prompts:
            logging.warning(f"Cannot start quiz in chat {chat_id}: no prompts")
            return

        if not self.registry.create(chat_id, shuffle_prompts(prompts, self.rng)):
            return

        first = self.registry.advance(chat_id)
        logging.info(f"Quiz started in chat {chat_id} with {len(prompts)} prompts")
        await send(chat_id, texts.greeting(username))
        await send(chat_id, texts.prompt(first))

    async def _check_answer(
        self, chat_id: Hashable, verb: str, answer: str, send: SendFunc
    ) -> None:
        try:
            outcome = await self.evaluator.check_answer(verb, answer)
        except EvaluatorProtocolError as e:
            logging.warning(f"Malformed evaluator output for '{verb}': {e}")
            await send(chat_id, texts.check_malformed(verb))
            await self._finish_quiz(chat_id, send)
            return
        except EvaluatorError as e:
            logging.warning(f"Evaluator failed for '{verb}': {e}")
            await send(chat_id, texts.CHECK_FAILED)
            await self._finish_quiz(chat_id, send)
            return

        if outcome.is_success:
            await send(chat_id, texts.CORRECT)
        else:
            await send(chat_id, texts.incorrect(outcome.message))

        next_verb = self.registry.advance(chat_id)
        if next_verb is None:
            await self._finish_quiz(chat_id, send)
            return
        await send(chat_id, texts.prompt(next_verb))

    async def _finish_quiz(self, chat_id: Hashable, send: SendFunc) -> None:
        self.registry.remove(chat_id)
        logging.info(f"Quiz finished in chat {chat_id}")
        await send(chat_id, texts.DONE)
