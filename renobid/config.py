from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "postgresql+asyncpg://renobid:renobid_dev@db:5432/renobid"
    DATABASE_ECHO: bool = False

    # Redis
    REDIS_URL: str = "redis://redis:6379/0"

    # Security
    SECRET_KEY: str = "dev-secret-key-not-for-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    ALLOWED_ORIGINS: str = "*"

    # SendGrid
    SENDGRID_API_KEY: str = "mock_sendgrid_key"
    FROM_EMAIL: str = "no-reply@renobid.app"

    # Twilio
    TWILIO_ACCOUNT_SID: str = "mock_twilio_sid"
    TWILIO_AUTH_TOKEN: str = "mock_twilio_token"
    TWILIO_FROM_NUMBER: str = "+15555555555"

    # Bidding
    DEFAULT_MAX_BIDS: int = 20
    BID_PAGE_SIZE_MAX: int = 100

    # App
    APP_ENV: str = "development"
    APP_URL: str = "http://localhost:8000"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
