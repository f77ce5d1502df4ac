from __future__ import annotations

import pytest

from orderbot.application.exceptions import (
    NotificationError,
    RecordInsertError,
    StorageUploadError,
    TransportError,
)
from orderbot.application.ports.message_platform import MessagePlatformPort
from orderbot.application.ports.notifier import AdminNotifierPort
from orderbot.application.ports.object_storage import ObjectStoragePort
from orderbot.application.ports.order_repository import OrderRepositoryPort
from orderbot.application.use_cases.commit_order import CommitOrderUseCase
from orderbot.application.use_cases.handle_incoming_event import HandleIncomingEventUseCase
from orderbot.application.use_cases.restart import RestartUseCase
from orderbot.domain.entities.event import (
    EVENT_BUTTON,
    EVENT_PHOTO,
    EVENT_RESTART,
    EVENT_START,
    EVENT_TEXT,
    ChatEvent,
    PhotoVariant,
)
from orderbot.domain.entities.order import Order
from orderbot.domain.entities.prompt import Prompt
from orderbot.infrastructure.store.memory_store import MemorySessionStore

ADMIN_ID = "999"
PHOTO_BYTES = b"\xff\xd8large-photo\xff\xd9"


class RecordingPlatform(MessagePlatformPort):
    def __init__(self) -> None:
        self.texts: list[tuple[str, str]] = []
        self.prompts: list[tuple[str, Prompt]] = []
        self.answered: list[str] = []
        self.downloads: list[str] = []
        self.fail_download = False
        self.failing_texts: set[str] = set()

    def send_text(self, chat_id: str, text: str) -> None:
        if text in self.failing_texts:
            raise TransportError("send failed")
        self.texts.append((chat_id, text))

    def send_prompt(self, chat_id: str, prompt: Prompt) -> None:
        self.prompts.append((chat_id, prompt))

    def answer_button(self, callback_id: str) -> None:
        self.answered.append(callback_id)

    def download_file(self, file_id: str) -> bytes:
        self.downloads.append(file_id)
        if self.fail_download:
            raise TransportError("download failed")
        return PHOTO_BYTES

    @property
    def last_text(self) -> str | None:
        return self.texts[-1][1] if self.texts else None

    @property
    def last_prompt(self) -> Prompt | None:
        return self.prompts[-1][1] if self.prompts else None


class FakeStorage(ObjectStoragePort):
    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail_upload = False
        self.missing_url = False

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        if self.fail_upload:
            raise StorageUploadError("storage unavailable")
        self.objects[key] = (data, content_type)

    def public_url(self, key: str) -> str | None:
        if self.missing_url:
            return None
        return f"https://cdn.example/photos/{key}"


class FakeOrders(OrderRepositoryPort):
    def __init__(self) -> None:
        self.inserted: list[Order] = []
        self.fail_insert = False

    def insert(self, order: Order) -> None:
        if self.fail_insert:
            raise RecordInsertError("insert rejected")
        self.inserted.append(order)


class FakeNotifier(AdminNotifierPort):
    def __init__(self) -> None:
        self.sent: list[str] = []
        self.fail_notify = False

    def notify(self, text: str) -> None:
        if self.fail_notify:
            raise NotificationError("admin chat unreachable")
        self.sent.append(text)


class FixedClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def start_event(user_id: str = "42", chat_id: str = "4200") -> ChatEvent:
    return ChatEvent(kind=EVENT_START, user_id=user_id, chat_id=chat_id, text="/start")


def restart_event(user_id: str, chat_id: str = "1") -> ChatEvent:
    return ChatEvent(kind=EVENT_RESTART, user_id=user_id, chat_id=chat_id, text="/restart")


def text_event(text: str, user_id: str = "42", chat_id: str = "4200") -> ChatEvent:
    return ChatEvent(kind=EVENT_TEXT, user_id=user_id, chat_id=chat_id, text=text)


def photo_event(user_id: str = "42", chat_id: str = "4200") -> ChatEvent:
    variants = (
        PhotoVariant(file_id="small", width=90, height=67, file_size=1200),
        PhotoVariant(file_id="large", width=1280, height=960, file_size=98000),
        PhotoVariant(file_id="medium", width=320, height=240, file_size=14000),
    )
    return ChatEvent(kind=EVENT_PHOTO, user_id=user_id, chat_id=chat_id, photos=variants)


def button_event(data: str, user_id: str = "42", chat_id: str = "4200", callback_id: str | None = None) -> ChatEvent:
    return ChatEvent(
        kind=EVENT_BUTTON,
        user_id=user_id,
        chat_id=chat_id,
        callback_id=callback_id or f"cb-{data}",
        data=data,
    )


@pytest.fixture
def platform() -> RecordingPlatform:
    return RecordingPlatform()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def orders() -> FakeOrders:
    return FakeOrders()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def terminations() -> list[str]:
    return []


@pytest.fixture
def commit_order(storage, orders, notifier) -> CommitOrderUseCase:
    ticks = iter(range(1_700_000_000_000, 1_800_000_000_000))
    return CommitOrderUseCase(
        storage=storage,
        orders=orders,
        notifier=notifier,
        amount=300000,
        initial_status="pending",
        clock=lambda: next(ticks),
    )


@pytest.fixture
def restart(terminations) -> RestartUseCase:
    return RestartUseCase(
        admin_user_id=ADMIN_ID,
        delay_seconds=0.0,
        terminate=lambda: terminations.append("terminated"),
    )


@pytest.fixture
def bot(store, platform, commit_order, restart, clock) -> HandleIncomingEventUseCase:
    return HandleIncomingEventUseCase(
        store=store,
        platform=platform,
        commit_order=commit_order,
        restart=restart,
        clock=clock,
    )
