from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher, F
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject
from aiogram.types import LinkPreviewOptions, Message

from tgmarkdown.config import Settings
from tgmarkdown.formatting import convert
from tgmarkdown.logging import setup_logging
from tgmarkdown.telegram_api import MAX_MESSAGE_LENGTH

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Пришлите сообщение в обычном Markdown, и я отвечу им же в Telegram MarkdownV2.\n"
    "Поддерживается: **жирный**, *курсив*, _курсив_, ***жирный курсив***, ~~зачёркнутый~~, "
    "`код`, ```блоки кода``` и [ссылки](https://core.telegram.org/bots/api).\n"
    "Литерал \\n считается переводом строки.\n\n"
    "/raw <текст> - показать исходник MarkdownV2 вместо отрисовки"
)


async def cmd_help(message: Message) -> None:
    await message.answer(HELP_TEXT)


async def cmd_raw(message: Message, command: CommandObject) -> None:
    if not command.args:
        await message.answer("Напишите Markdown после команды /raw")
        return
    await message.answer(convert(command.args)[:MAX_MESSAGE_LENGTH])


async def on_text(message: Message, settings: Settings) -> None:
    converted = convert(message.text or "")
    try:
        await message.answer(
            converted,
            parse_mode=ParseMode.MARKDOWN_V2,
            link_preview_options=LinkPreviewOptions(
                is_disabled=settings.telegram.disable_web_page_preview
            ),
        )
    except TelegramBadRequest:
        logger.exception("Telegram rejected converted text")
        reply = "Telegram не принял разметку:\n\n" + converted
        await message.answer(reply[:MAX_MESSAGE_LENGTH])


def build_dispatcher(settings: Settings) -> Dispatcher:
    dp = Dispatcher(settings=settings)
    dp.message.register(cmd_help, Command("start", "help"))
    dp.message.register(cmd_raw, Command("raw"))
    dp.message.register(on_text, F.text)
    return dp


async def main() -> None:
    settings = Settings.load()
    setup_logging(settings.app.log_level)

    if not settings.telegram.token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN не задан")

    session = AiohttpSession(proxy=settings.telegram.proxy_url) if settings.telegram.proxy_url else None
    bot = Bot(token=settings.telegram.token, session=session)
    dp = build_dispatcher(settings)

    logger.info("Starting MarkdownV2 preview bot")
    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()


if __name__ == "__main__":
    asyncio.run(main())
