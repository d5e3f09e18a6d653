from __future__ import annotations

import logging
from typing import Any

import httpx

from tgmarkdown.formatting import convert

logger = logging.getLogger(__name__)

MARKDOWN_V2 = "MarkdownV2"
MAX_MESSAGE_LENGTH = 4096


class TelegramAPIError(RuntimeError):
    pass


def utf16_length(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


class TelegramAPI:
    def __init__(
        self,
        token: str,
        *,
        endpoint: str = "https://api.telegram.org",
        timeout: float = 10.0,
        proxy_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not token:
            raise TelegramAPIError("Пустой токен Telegram")
        self._base_url = f"{endpoint.rstrip('/')}/bot{token}"
        self._timeout = timeout
        self._proxy_url = proxy_url
        self._transport = transport

    async def call(self, method: str, payload: dict[str, Any]) -> Any:
        url = f"{self._base_url}/{method}"
        async with httpx.AsyncClient(
            proxy=self._proxy_url, timeout=self._timeout, transport=self._transport
        ) as client:
            resp = await client.post(url, json=payload)

        if resp.status_code >= 400:
            # В теле ответа Bot API объясняет, почему разметка отклонена.
            raise TelegramAPIError(f"Telegram API HTTP {resp.status_code}: {resp.text}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise TelegramAPIError("Некорректный ответ Telegram API") from exc
        if not data.get("ok"):
            raise TelegramAPIError(str(data.get("description") or "Ошибка Telegram API"))
        return data.get("result")

    async def get_me(self) -> dict[str, Any]:
        result = await self.call("getMe", {})
        if not isinstance(result, dict):
            raise TelegramAPIError("Некорректный ответ getMe")
        return result

    async def send_message(
        self,
        chat_id: int | str,
        text: str,
        *,
        parse_mode: str | None = None,
        disable_web_page_preview: bool | None = None,
        message_thread_id: int | None = None,
    ) -> dict[str, Any]:
        # С parse_mode лимит считается по тексту после разбора сущностей, его проверяет Telegram.
        if parse_mode is None and utf16_length(text) > MAX_MESSAGE_LENGTH:
            raise TelegramAPIError(
                f"Сообщение длиной {utf16_length(text)}, Telegram принимает не больше {MAX_MESSAGE_LENGTH}"
            )
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode is not None:
            payload["parse_mode"] = parse_mode
        if disable_web_page_preview is not None:
            payload["link_preview_options"] = {"is_disabled": disable_web_page_preview}
        if message_thread_id is not None:
            payload["message_thread_id"] = message_thread_id
        result = await self.call("sendMessage", payload)
        if not isinstance(result, dict):
            raise TelegramAPIError("Некорректный ответ sendMessage")
        return result

    async def send_markdown(self, chat_id: int | str, text: str, **kwargs: Any) -> dict[str, Any]:
        converted = convert(text)
        logger.info("Sending %d chars of MarkdownV2 to chat %s", len(converted), chat_id)
        return await self.send_message(chat_id, converted, parse_mode=MARKDOWN_V2, **kwargs)
