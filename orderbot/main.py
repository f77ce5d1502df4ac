import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from orderbot.api.webhooks import router as webhooks_router
from orderbot.core.config import settings
from orderbot.core.rate_limiter import RateLimiter, RateLimitMiddleware
from orderbot.wiring.dependencies import get_telegram_client

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("user_id", "chat_id", "event", "step", "storage_key", "photo_url", "reply_text", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = get_telegram_client()
    if client is not None and settings.WEBHOOK_URL:
        client.set_webhook(settings.WEBHOOK_URL, secret_token=settings.TELEGRAM_WEBHOOK_SECRET)
        logger.info("Telegram webhook registered at %s", settings.WEBHOOK_URL)
    yield


app = FastAPI(title="Photo Order Bot", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    RateLimitMiddleware,
    limiter=RateLimiter(requests=settings.RATE_LIMIT_REQUESTS, window=settings.RATE_LIMIT_WINDOW_SECONDS),
)
app.include_router(webhooks_router, tags=["webhooks"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
