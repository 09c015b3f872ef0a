"""Tests for verbs_bot.handlers.quiz -- the Telegram boundary."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.exceptions import TelegramBadRequest

from verbs_bot.handlers.quiz import handle_text, make_sender


def _message(text, chat_id=100, username="alice"):
    msg = MagicMock()
    msg.text = text
    msg.chat.id = chat_id
    msg.chat.username = username
    return msg


class TestHandleText:

    @pytest.mark.asyncio
    async def test_text_is_passed_to_quiz_service(self):
        quiz_service = MagicMock()
        quiz_service.handle = AsyncMock()
        bot = AsyncMock()

        await handle_text(_message("/start"), bot, quiz_service)

        quiz_service.handle.assert_awaited_once()
        args, kwargs = quiz_service.handle.call_args
        assert args[0] == 100
        assert args[1] == "/start"
        assert kwargs["username"] == "alice"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_text_is_ignored(self, text):
        quiz_service = MagicMock()
        quiz_service.handle = AsyncMock()

        await handle_text(_message(text), AsyncMock(), quiz_service)

        quiz_service.handle.assert_not_awaited()


class TestSender:

    @pytest.mark.asyncio
    async def test_sends_plain_text(self):
        bot = AsyncMock()
        send = make_sender(bot)

        await send(100, '"go"')

        bot.send_message.assert_awaited_once_with(chat_id=100, text='"go"')

    @pytest.mark.asyncio
    async def test_telegram_errors_are_logged_not_raised(self, caplog):
        bot = AsyncMock()
        bot.send_message.side_effect = TelegramBadRequest(
            method=MagicMock(), message="chat not found"
        )
        send = make_sender(bot)

        await send(100, "Done!")

        assert "Failed to send message to chat 100" in caplog.text
