import asyncio
import json

import httpx
import pytest

from tgmarkdown.telegram_api import MAX_MESSAGE_LENGTH, TelegramAPI, TelegramAPIError, utf16_length


def _api(handler) -> TelegramAPI:
    return TelegramAPI("123:abc", transport=httpx.MockTransport(handler))


def test_send_markdown_posts_converted_text() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["payload"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 7}})

    result = asyncio.run(
        _api(handler).send_markdown(42, "**hi** there.", disable_web_page_preview=True)
    )
    assert result == {"message_id": 7}
    assert seen["url"] == "https://api.telegram.org/bot123:abc/sendMessage"
    assert seen["payload"] == {
        "chat_id": 42,
        "text": "*hi* there\\.",
        "parse_mode": "MarkdownV2",
        "link_preview_options": {"is_disabled": True},
    }


def test_http_error_keeps_telegram_description() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"ok": False, "description": "Bad Request: can't parse entities"},
        )

    with pytest.raises(TelegramAPIError, match="HTTP 400.*can't parse entities"):
        asyncio.run(_api(handler).send_message(1, "x"))


def test_not_ok_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": False, "description": "chat not found"})

    with pytest.raises(TelegramAPIError, match="chat not found"):
        asyncio.run(_api(handler).send_message(1, "x"))


def test_get_me() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/bot123:abc/getMe"
        return httpx.Response(200, json={"ok": True, "result": {"username": "md_bot"}})

    assert asyncio.run(_api(handler).get_me()) == {"username": "md_bot"}


def test_too_long_message_is_rejected_locally() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(TelegramAPIError, match="не больше"):
        asyncio.run(_api(handler).send_message(1, "a" * (MAX_MESSAGE_LENGTH + 1)))


def test_empty_token() -> None:
    with pytest.raises(TelegramAPIError):
        TelegramAPI("")


def test_escaped_markdown_is_not_measured_locally() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["text"] = json.loads(request.content)["text"]
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 1}})

    asyncio.run(_api(handler).send_markdown(1, "." * 2100))
    assert len(seen["text"]) == 4200


def test_plain_length_counts_utf16_units() -> None:
    assert utf16_length("ab") == 2
    assert utf16_length("😀") == 2

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(TelegramAPIError, match="4098"):
        asyncio.run(_api(handler).send_message(1, "😀" * 2049))
