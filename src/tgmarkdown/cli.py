from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from tgmarkdown.config import Settings
from tgmarkdown.formatting import convert
from tgmarkdown.logging import setup_logging
from tgmarkdown.telegram_api import TelegramAPI, TelegramAPIError


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="md2tg", description="Конвертация Markdown в Telegram MarkdownV2"
    )
    parser.add_argument(
        "path",
        nargs="?",
        default="-",
        help="Markdown-файл для конвертации (stdin, если не указан или '-')",
    )
    parser.add_argument(
        "--send",
        metavar="CHAT_ID",
        default=None,
        help="Отправить результат в этот чат вместо вывода (токен из CONFIG/.env)",
    )
    parser.add_argument("--log-level", default=None, help="Уровень логирования (по умолчанию из CONFIG/.env)")
    return parser.parse_args(argv)


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


async def _send(settings: Settings, chat_id: str, text: str) -> None:
    api = TelegramAPI(
        settings.telegram.token,
        endpoint=settings.telegram.endpoint,
        timeout=settings.telegram.timeout,
        proxy_url=settings.telegram.proxy_url,
    )
    await api.send_markdown(
        chat_id,
        text,
        disable_web_page_preview=settings.telegram.disable_web_page_preview,
    )


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = Settings.load()
    setup_logging(args.log_level or settings.app.log_level)

    try:
        source = _read_source(args.path)
    except OSError as exc:
        print(f"Не удалось прочитать {args.path}: {exc}", file=sys.stderr)
        return 1

    if args.send is None:
        sys.stdout.write(convert(source))
        return 0

    try:
        asyncio.run(_send(settings, args.send, source))
    except TelegramAPIError as exc:
        print(f"Ошибка Telegram API: {exc}", file=sys.stderr)
        return 1
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
