from __future__ import annotations

import json

import httpx
import pytest

from orderbot.application.exceptions import NotificationError, TransportError
from orderbot.domain.entities.prompt import Button, Prompt
from orderbot.infrastructure.telegram.telegram_client import TelegramClient
from orderbot.infrastructure.telegram.telegram_notifier import TelegramAdminNotifier
from orderbot.infrastructure.telegram.telegram_platform import TelegramPlatform

BASE = "https://api.telegram.test"


def _client(handler) -> tuple[TelegramClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http = httpx.Client(transport=httpx.MockTransport(record))
    return TelegramClient(bot_token="TOKEN", base_url=BASE, http_client=http), requests


def _ok(result=True) -> httpx.Response:
    return httpx.Response(200, json={"ok": True, "result": result})


def test_send_prompt_renders_inline_keyboard():
    client, requests = _client(lambda r: _ok({"message_id": 1}))
    platform = TelegramPlatform(client)

    prompt = Prompt("Choose minutes:", [[Button("00", "minute_00"), Button("15", "minute_15")]])
    platform.send_prompt("4200", prompt)

    assert str(requests[0].url) == f"{BASE}/botTOKEN/sendMessage"
    body = json.loads(requests[0].content)
    assert body == {
        "chat_id": "4200",
        "text": "Choose minutes:",
        "reply_markup": {
            "inline_keyboard": [
                [
                    {"text": "00", "callback_data": "minute_00"},
                    {"text": "15", "callback_data": "minute_15"},
                ]
            ]
        },
    }


def test_send_text_has_no_markup():
    client, requests = _client(lambda r: _ok({"message_id": 1}))
    TelegramPlatform(client).send_text("4200", "hello")

    body = json.loads(requests[0].content)
    assert body == {"chat_id": "4200", "text": "hello"}


def test_answer_button():
    client, requests = _client(lambda r: _ok())
    TelegramPlatform(client).answer_button("cb-1")

    assert requests[0].url.path.endswith("/answerCallbackQuery")
    assert json.loads(requests[0].content) == {"callback_query_id": "cb-1"}


def test_download_file_resolves_path_then_fetches_bytes():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/getFile"):
            return _ok({"file_id": "big", "file_path": "photos/file_1.jpg"})
        assert str(request.url) == f"{BASE}/file/botTOKEN/photos/file_1.jpg"
        return httpx.Response(200, content=b"jpeg-bytes")

    client, _ = _client(handler)
    assert TelegramPlatform(client).download_file("big") == b"jpeg-bytes"


def test_download_failure_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/getFile"):
            return _ok({"file_path": "photos/file_1.jpg"})
        return httpx.Response(404)

    client, _ = _client(handler)
    with pytest.raises(TransportError):
        client.download_file("big")


def test_api_error_raises_transport_error():
    client, _ = _client(
        lambda r: httpx.Response(400, json={"ok": False, "error_code": 400, "description": "chat not found"})
    )
    with pytest.raises(TransportError):
        client.send_message("1", "hi")


def test_network_error_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    client, _ = _client(handler)
    with pytest.raises(TransportError):
        client.answer_callback_query("cb")


def test_set_webhook_passes_secret():
    client, requests = _client(lambda r: _ok())
    client.set_webhook("https://bot.example/webhooks/telegram", secret_token="s3cret")

    body = json.loads(requests[0].content)
    assert body["url"] == "https://bot.example/webhooks/telegram"
    assert body["secret_token"] == "s3cret"


def test_admin_notifier_sends_to_admin_chat():
    client, requests = _client(lambda r: _ok({"message_id": 1}))
    notifier = TelegramAdminNotifier(TelegramPlatform(client), admin_chat_id="777")

    notifier.notify("New order")

    assert json.loads(requests[0].content) == {"chat_id": "777", "text": "New order"}


def test_admin_notifier_failure_is_notification_error():
    client, _ = _client(lambda r: httpx.Response(500, json={"ok": False}))
    notifier = TelegramAdminNotifier(TelegramPlatform(client), admin_chat_id="777")

    with pytest.raises(NotificationError):
        notifier.notify("New order")
