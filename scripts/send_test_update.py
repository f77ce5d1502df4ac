#!/usr/bin/env python3
from __future__ import annotations

import argparse
import time
from typing import Any

import httpx
from httpx import ConnectError


def build_message_update(user_id: int, text: str) -> dict[str, Any]:
    now = int(time.time())
    return {
        "update_id": now,
        "message": {
            "message_id": now,
            "date": now,
            "from": {"id": user_id, "is_bot": False, "first_name": "Test"},
            "chat": {"id": user_id, "type": "private"},
            "text": text,
        },
    }


def build_photo_update(user_id: int, file_id: str) -> dict[str, Any]:
    update = build_message_update(user_id, "")
    message = update["message"]
    del message["text"]
    message["photo"] = [
        {"file_id": f"{file_id}_small", "file_unique_id": "s", "width": 90, "height": 90},
        {"file_id": file_id, "file_unique_id": "l", "width": 1280, "height": 1280},
    ]
    return update


def build_button_update(user_id: int, data: str) -> dict[str, Any]:
    now = int(time.time())
    return {
        "update_id": now,
        "callback_query": {
            "id": f"cb_{now}",
            "from": {"id": user_id, "is_bot": False, "first_name": "Test"},
            "message": {"message_id": now, "date": now, "chat": {"id": user_id, "type": "private"}},
            "chat_instance": "local",
            "data": data,
        },
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a test Telegram update to the webhook")
    parser.add_argument("--url", default="http://127.0.0.1:8001/webhooks/telegram")
    parser.add_argument("--user", type=int, default=123)
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--text", default="/start")
    group.add_argument("--photo", metavar="FILE_ID", help="Send a photo update with this file id")
    group.add_argument("--button", metavar="TOKEN", help="Send a button press, e.g. month_04")
    parser.add_argument("--secret", default="", help="Webhook secret token")
    args = parser.parse_args()

    if args.photo:
        payload = build_photo_update(args.user, args.photo)
    elif args.button:
        payload = build_button_update(args.user, args.button)
    else:
        payload = build_message_update(args.user, args.text)

    headers = {}
    if args.secret:
        headers["X-Telegram-Bot-Api-Secret-Token"] = args.secret

    try:
        resp = httpx.post(args.url, json=payload, headers=headers, timeout=10.0)
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn orderbot.main:app --reload --port 8001")
        return

    print(resp.status_code)
    if resp.text:
        print(resp.text)


if __name__ == "__main__":
    main()
