from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable

from orderbot.application.exceptions import OrderCommitError
from orderbot.application.ports.message_platform import MessagePlatformPort
from orderbot.application.ports.session_store import SessionStorePort
from orderbot.application.use_cases.commit_order import CommitOrderUseCase
from orderbot.application.use_cases.restart import RestartUseCase
from orderbot.application.utils import replies
from orderbot.application.utils.input_normalizer import (
    DAY_PREFIX,
    HOUR_PREFIX,
    MINUTE_PREFIX,
    MONTH_PREFIX,
    day_grid,
    hour_grid,
    minute_grid,
    month_grid,
    parse_selection_token,
    pick_largest_photo,
)
from orderbot.domain.entities.conversation import Conversation, Step
from orderbot.domain.entities.event import (
    EVENT_BUTTON,
    EVENT_PHOTO,
    EVENT_RESTART,
    EVENT_START,
    EVENT_TEXT,
    ChatEvent,
)
from orderbot.domain.entities.prompt import Button, Prompt


@dataclass(frozen=True)
class _Selection:
    prefix: str
    field: str
    next_step: Step | None
    next_text: str | None = None
    next_grid: Callable[[], list[list[Button]]] | None = None


# next_step None means the selection completes the appointment and commits the order.
_SELECTIONS: dict[Step, _Selection] = {
    Step.SELECTING_MONTH: _Selection(MONTH_PREFIX, "month", Step.SELECTING_DAY, replies.CHOOSE_DAY, day_grid),
    Step.SELECTING_DAY: _Selection(DAY_PREFIX, "day", Step.SELECTING_HOUR, replies.CHOOSE_HOUR, hour_grid),
    Step.SELECTING_HOUR: _Selection(HOUR_PREFIX, "hour", Step.SELECTING_MINUTE, replies.CHOOSE_MINUTES, minute_grid),
    Step.SELECTING_MINUTE: _Selection(MINUTE_PREFIX, "minute", None),
}


class HandleIncomingEventUseCase:
    def __init__(
        self,
        store: SessionStorePort,
        platform: MessagePlatformPort,
        commit_order: CommitOrderUseCase,
        restart: RestartUseCase,
        session_idle_ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._platform = platform
        self._commit_order = commit_order
        self._restart = restart
        self._session_idle_ttl_seconds = session_idle_ttl_seconds
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def handle(self, event: ChatEvent) -> None:
        try:
            self._expire_idle_sessions()
            with self._store.lock(event.user_id):
                self._dispatch(event)
        except Exception as e:
            self._logger.exception(
                "Unhandled error while processing event",
                extra={"user_id": event.user_id, "chat_id": event.chat_id, "error": str(e)},
            )
            self._report_failure(event.chat_id)

    def _dispatch(self, event: ChatEvent) -> None:
        if event.kind == EVENT_START:
            self._start(event)
            return
        if event.kind == EVENT_RESTART:
            self._restart_process(event)
            return

        conversation = self._store.get(event.user_id)
        if conversation is None:
            self._logger.info("Event without conversation", extra={"user_id": event.user_id})
            self._platform.send_text(event.chat_id, replies.START_OVER)
            if event.kind == EVENT_BUTTON:
                self._acknowledge(event)
            return

        if event.kind == EVENT_BUTTON:
            self._on_button(conversation, event)
        elif event.kind == EVENT_TEXT and conversation.step == Step.AWAITING_NAME:
            self._on_name(conversation, event)
        elif event.kind == EVENT_PHOTO and conversation.step == Step.AWAITING_PHOTO:
            self._on_photo(conversation, event)
        else:
            self._logger.info(
                "Unexpected event for step",
                extra={"user_id": event.user_id, "step": conversation.step.value},
            )
            self._platform.send_text(conversation.chat_id, replies.USE_START)

    def _start(self, event: ChatEvent) -> None:
        conversation = Conversation(user_id=event.user_id, chat_id=event.chat_id, updated_at=self._clock())
        self._store.set(event.user_id, conversation)
        self._logger.info("Conversation started", extra={"user_id": event.user_id, "chat_id": event.chat_id})
        self._platform.send_text(event.chat_id, replies.ASK_NAME)

    def _restart_process(self, event: ChatEvent) -> None:
        if not self._restart.is_authorized(event.user_id):
            self._logger.warning("Restart refused", extra={"user_id": event.user_id})
            self._platform.send_text(event.chat_id, replies.NOT_ALLOWED)
            return
        self._platform.send_text(event.chat_id, replies.RESTARTING)
        self._restart.schedule()

    def _on_name(self, conversation: Conversation, event: ChatEvent) -> None:
        if not event.text:
            self._platform.send_text(conversation.chat_id, replies.ASK_NAME_AGAIN)
            return
        conversation = conversation.advance(Step.AWAITING_PHOTO, self._clock(), client_name=event.text)
        self._store.set(conversation.user_id, conversation)
        self._platform.send_text(conversation.chat_id, replies.ASK_PHOTO)

    def _on_photo(self, conversation: Conversation, event: ChatEvent) -> None:
        variant = pick_largest_photo(event.photos)
        if variant is None:
            self._platform.send_text(conversation.chat_id, replies.USE_START)
            return
        photo_bytes = self._platform.download_file(variant.file_id)
        self._logger.info(
            "Photo received",
            extra={"user_id": conversation.user_id, "step": Step.SELECTING_MONTH.value},
        )
        conversation = conversation.advance(Step.SELECTING_MONTH, self._clock(), photo_bytes=photo_bytes)
        self._store.set(conversation.user_id, conversation)
        self._platform.send_prompt(conversation.chat_id, Prompt(replies.CHOOSE_MONTH, month_grid()))

    def _on_button(self, conversation: Conversation, event: ChatEvent) -> None:
        selection = _SELECTIONS.get(conversation.step)
        value = parse_selection_token(event.data, selection.prefix) if selection else None
        if value is None:
            # Stale or foreign token: no state change, no reply, no acknowledgement.
            self._logger.debug(
                "Button ignored",
                extra={"user_id": conversation.user_id, "step": conversation.step.value},
            )
            return

        try:
            appointment = replace(conversation.appointment, **{selection.field: value})
            if selection.next_step is None:
                conversation = replace(conversation, appointment=appointment, updated_at=self._clock())
                self._store.set(conversation.user_id, conversation)
                self._commit(conversation)
                return
            conversation = conversation.advance(selection.next_step, self._clock(), appointment=appointment)
            self._store.set(conversation.user_id, conversation)
            self._platform.send_prompt(conversation.chat_id, Prompt(selection.next_text, selection.next_grid()))
        finally:
            self._acknowledge(event)

    def _commit(self, conversation: Conversation) -> None:
        try:
            self._commit_order.execute(conversation)
        except OrderCommitError as e:
            self._logger.error(
                "Order commit failed",
                exc_info=True,
                extra={"user_id": conversation.user_id, "chat_id": conversation.chat_id, "error": str(e)},
            )
            self._platform.send_text(conversation.chat_id, replies.ORDER_FAILED)
            return
        self._store.delete(conversation.user_id)
        try:
            self._platform.send_text(conversation.chat_id, replies.ORDER_SAVED)
        except Exception as e:
            # Order is already committed at this point.
            self._logger.error(
                "Failed to confirm saved order",
                extra={"user_id": conversation.user_id, "chat_id": conversation.chat_id, "error": str(e)},
            )

    def _acknowledge(self, event: ChatEvent) -> None:
        if not event.callback_id:
            return
        try:
            self._platform.answer_button(event.callback_id)
        except Exception as e:
            self._logger.warning(
                "Failed to acknowledge button",
                extra={"user_id": event.user_id, "error": str(e)},
            )

    def _report_failure(self, chat_id: str) -> None:
        try:
            self._platform.send_text(chat_id, replies.GENERIC_FAILURE)
        except Exception as e:
            self._logger.error("Failed to report error to user", extra={"chat_id": chat_id, "error": str(e)})

    def _expire_idle_sessions(self) -> None:
        if not self._session_idle_ttl_seconds:
            return
        removed = self._store.purge_idle(self._clock() - self._session_idle_ttl_seconds)
        if removed:
            self._logger.info("Expired idle conversations: %s", len(removed))
