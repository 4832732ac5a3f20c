# newsreader/config.py
import os
from urllib.parse import quote

from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _database_url() -> str:
    """
    Build the Tortoise connection URL.

    DATABASE_URL wins when set; otherwise the URL is assembled from the
    individual DB_* variables. DB_SSL=false turns TLS off, anything else requires it.
    """
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    user = quote(os.getenv("DB_USER", "postgres"), safe="")
    password = quote(os.getenv("DB_PASSWORD", ""), safe="")
    host = os.getenv("DB_HOST", "127.0.0.1")
    port = os.getenv("DB_PORT") or "5432"
    name = os.getenv("DB_NAME", "newsreader")
    ssl = "disable" if os.getenv("DB_SSL", "false").lower() == "false" else "require"
    return f"postgres://{user}:{password}@{host}:{port}/{name}?ssl={ssl}"


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = os.getenv("APP_NAME", "News Reader")
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # Database
    database_url: str = _database_url()
    db_generate_schemas: bool = _env_flag("DB_GENERATE_SCHEMAS")

    # Sessions (server-side store, cookie carries a signed session id)
    session_secret: str = os.getenv("SESSION_SECRET", "defaultsecret")
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "newsreader.sid")
    session_ttl_minutes: int = int(os.getenv("SESSION_TTL_MINUTES", "1440"))
    session_cookie_secure: bool = _env_flag("SESSION_COOKIE_SECURE")

    # Accounts
    password_min_length: int = int(os.getenv("PASSWORD_MIN_LENGTH", "8"))
    admin_username: str = os.getenv("ADMIN_USERNAME", "admin")
    admin_password: str | None = os.getenv("ADMIN_PASSWORD")

    # Webz news API (landing page feed)
    webz_api_key: str | None = os.getenv("WEBZ_API_KEY")
    webz_api_url: str = os.getenv("WEBZ_API_URL", "https://api.webz.io/newsApiLite")
    news_timeout_seconds: float = float(os.getenv("NEWS_TIMEOUT_SECONDS", "10"))

settings = Settings()  # Instantiate configuration
