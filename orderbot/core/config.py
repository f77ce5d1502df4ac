from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    TELEGRAM_BOT_TOKEN: str | None = None
    TELEGRAM_API_BASE_URL: str = "https://api.telegram.org"
    TELEGRAM_WEBHOOK_SECRET: str | None = None
    WEBHOOK_URL: str | None = None

    ADMIN_USER_ID: str | None = None
    ADMIN_CHAT_ID: str | None = None

    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    SUPABASE_BUCKET: str = "photos"
    SUPABASE_ORDERS_TABLE: str = "orders"

    ORDER_AMOUNT: int = 300000
    ORDER_INITIAL_STATUS: str = "pending"

    RESTART_DELAY_SECONDS: float = 1.0
    # Disabled by default: conversations never expire unless this is set.
    SESSION_IDLE_TTL_SECONDS: float | None = None

    RATE_LIMIT_REQUESTS: int = 60
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    @property
    def is_dev(self) -> bool:
        return self.ENV.lower() in {"dev", "local"}


settings = Settings()
