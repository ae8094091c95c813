from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Inventory Manager"
    DATABASE_URL: str = "sqlite:///./inventory.db"

    # JWT signing
    SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # Default accounts created on first start (empty users table only)
    SEED_DEFAULT_USERS: bool = True
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    DEFAULT_STAFF_PASSWORD: str = "staff123"

    # Allowed CORS origins (comma-separated)
    CORS_ORIGINS: str = "*"

    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env"}


settings = Settings()
