from functools import lru_cache
import logging

from orderbot.application.ports.message_platform import MessagePlatformPort
from orderbot.application.ports.notifier import AdminNotifierPort
from orderbot.application.ports.object_storage import ObjectStoragePort
from orderbot.application.ports.order_repository import OrderRepositoryPort
from orderbot.application.use_cases.commit_order import CommitOrderUseCase
from orderbot.application.use_cases.handle_incoming_event import HandleIncomingEventUseCase
from orderbot.application.use_cases.restart import RestartUseCase
from orderbot.core.config import settings
from orderbot.infrastructure.store.memory_store import MemorySessionStore
from orderbot.infrastructure.supabase.mock_supabase import MockObjectStorage, MockOrderRepository
from orderbot.infrastructure.supabase.supabase_client import SupabaseClient
from orderbot.infrastructure.supabase.supabase_orders import SupabaseOrderRepository
from orderbot.infrastructure.supabase.supabase_storage import SupabaseObjectStorage
from orderbot.infrastructure.telegram.mock_platform import MockAdminNotifier, MockTelegramPlatform
from orderbot.infrastructure.telegram.telegram_client import TelegramClient
from orderbot.infrastructure.telegram.telegram_notifier import TelegramAdminNotifier
from orderbot.infrastructure.telegram.telegram_platform import TelegramPlatform


logger = logging.getLogger(__name__)


@lru_cache
def get_session_store() -> MemorySessionStore:
    return MemorySessionStore()


@lru_cache
def get_telegram_client() -> TelegramClient | None:
    if not settings.TELEGRAM_BOT_TOKEN:
        return None
    return TelegramClient(bot_token=settings.TELEGRAM_BOT_TOKEN, base_url=settings.TELEGRAM_API_BASE_URL)


@lru_cache
def get_message_platform() -> MessagePlatformPort:
    client = get_telegram_client()
    if client is None:
        if settings.is_dev:
            logger.info("Using MockTelegramPlatform (token missing, ENV=dev/local)")
            return MockTelegramPlatform()
        raise ValueError("TELEGRAM_BOT_TOKEN is required to talk to Telegram.")
    return TelegramPlatform(client=client)


@lru_cache
def get_supabase_client() -> SupabaseClient | None:
    if not (settings.SUPABASE_URL and settings.SUPABASE_KEY):
        return None
    return SupabaseClient(url=settings.SUPABASE_URL, api_key=settings.SUPABASE_KEY)


@lru_cache
def get_object_storage() -> ObjectStoragePort:
    client = get_supabase_client()
    if client is None:
        if settings.is_dev:
            logger.info("Using MockObjectStorage (Supabase credentials missing, ENV=dev/local)")
            return MockObjectStorage()
        raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for photo storage.")
    return SupabaseObjectStorage(client=client, bucket=settings.SUPABASE_BUCKET)


@lru_cache
def get_order_repository() -> OrderRepositoryPort:
    client = get_supabase_client()
    if client is None:
        if settings.is_dev:
            logger.info("Using MockOrderRepository (Supabase credentials missing, ENV=dev/local)")
            return MockOrderRepository()
        raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for order records.")
    return SupabaseOrderRepository(client=client, table=settings.SUPABASE_ORDERS_TABLE)


def get_admin_notifier() -> AdminNotifierPort:
    if not settings.ADMIN_CHAT_ID:
        if settings.is_dev:
            logger.info("Using MockAdminNotifier (ADMIN_CHAT_ID missing, ENV=dev/local)")
            return MockAdminNotifier()
        raise ValueError("ADMIN_CHAT_ID is required to notify about new orders.")
    return TelegramAdminNotifier(platform=get_message_platform(), admin_chat_id=settings.ADMIN_CHAT_ID)


@lru_cache
def get_handle_incoming_event_use_case() -> HandleIncomingEventUseCase:
    commit_order = CommitOrderUseCase(
        storage=get_object_storage(),
        orders=get_order_repository(),
        notifier=get_admin_notifier(),
        amount=settings.ORDER_AMOUNT,
        initial_status=settings.ORDER_INITIAL_STATUS,
    )
    return HandleIncomingEventUseCase(
        store=get_session_store(),
        platform=get_message_platform(),
        commit_order=commit_order,
        restart=RestartUseCase(
            admin_user_id=settings.ADMIN_USER_ID,
            delay_seconds=settings.RESTART_DELAY_SECONDS,
        ),
        session_idle_ttl_seconds=settings.SESSION_IDLE_TTL_SECONDS,
    )
