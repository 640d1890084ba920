from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str
    DB_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    PUBLIC_ORIGIN: str = "http://localhost:5173"
    SUPER_ADMIN_TOKEN: str

    WHATSAPP_APP_SCHEME: str = "whatsapp"
    WHATSAPP_WEB_HOST: str = "wa.me"
    DEFAULT_CURRENCY: str = "SYP"

    DASHBOARD_ORDER_LIMIT: int = 50
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    FEED_QUEUE_SIZE: int = 100

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()
