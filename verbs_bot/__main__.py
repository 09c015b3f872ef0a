import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.types import BotCommand, BotCommandScopeDefault

from verbs_bot.config import load_settings
from verbs_bot.handlers import setup_routers
from verbs_bot.services.evaluator import SubprocessEvaluator
from verbs_bot.services.quiz_service import QuizService


async def on_startup(bot: Bot) -> None:
    await bot.set_my_commands(
        [
            BotCommand(command="start", description="Start the irregular verbs quiz"),
            BotCommand(command="stop", description="Stop the current quiz"),
        ],
        scope=BotCommandScopeDefault(),
    )
    logging.info("Bot commands menu updated")


async def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level)

    evaluator = SubprocessEvaluator(
        settings.evaluator_path, timeout=settings.evaluator_timeout
    )
    if not settings.evaluator_path.is_file():
        logging.warning(f"Evaluator not found at {settings.evaluator_path}")

    bot = Bot(token=settings.bot_token)
    dp = Dispatcher(quiz_service=QuizService(evaluator))
    dp.startup.register(on_startup)
    dp.include_router(setup_routers())

    logging.info(f"Starting bot, evaluator: {settings.evaluator_path}")
    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
