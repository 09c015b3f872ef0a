import logging
from typing import Hashable

from aiogram import Bot, F, Router
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Message

from verbs_bot.services.quiz_service import QuizService, SendFunc

router = Router()


def make_sender(bot: Bot) -> SendFunc:
    """Build the outbound `send(chat_id, text)` used by the quiz service."""

    async def send(chat_id: Hashable, text: str) -> None:
        try:
            await bot.send_message(chat_id=chat_id, text=text)
        except TelegramAPIError as e:
            # Delivery is best effort, the quiz goes on
            logging.warning(f"Failed to send message to chat {chat_id}: {e}")

    return send


@router.message(F.text)
async def handle_text(msg: Message, bot: Bot, quiz_service: QuizService) -> None:
    """Feed every non-blank text message to the quiz."""
    if not msg.text.strip():
        return

    await quiz_service.handle(
        msg.chat.id, msg.text, make_sender(bot), username=msg.chat.username
    )
