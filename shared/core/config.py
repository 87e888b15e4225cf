import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    # Full URL wins over the DB_* parts (tests use sqlite://)
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")

    DB_USER: str | None = os.getenv("DB_USER")
    DB_PASS: str | None = os.getenv("DB_PASS")
    DB_HOST: str | None = os.getenv("DB_HOST", "localhost")
    DB_PORT: str | None = os.getenv("DB_PORT", "5432")
    DB_NAME: str | None = os.getenv("DB_NAME", "estate_billing")
    DB_SSLMODE: str | None = os.getenv("DB_SSLMODE")

    # Lease status window and payment form horizon
    EXPIRING_SOON_DAYS: int = int(os.getenv("EXPIRING_SOON_DAYS", 30))
    PAYMENT_FORM_FUTURE_MONTHS: int = int(
        os.getenv("PAYMENT_FORM_FUTURE_MONTHS", 12))

    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS", "http://localhost:8080,http://127.0.0.1:8002")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()


def build_database_url(cfg: Settings) -> str:
    if cfg.DATABASE_URL:
        return cfg.DATABASE_URL

    url = (
        f"postgresql+psycopg2://{cfg.DB_USER}:{cfg.DB_PASS}@{cfg.DB_HOST}:{cfg.DB_PORT}/{cfg.DB_NAME}"
    )
    if cfg.DB_SSLMODE:
        url += f"?sslmode={cfg.DB_SSLMODE}"
    return url


ESTATE_DATABASE_URL = build_database_url(settings)
