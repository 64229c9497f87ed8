import os
from dataclasses import dataclass
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            value = default
    if min_value is not None:
        return max(min_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    app_name: str
    database_url: str
    database_sslmode: str
    frontend_base_url: str
    cors_origins: tuple[str, ...]
    session_auth_enabled: bool
    session_secret: str
    report_timezone: str
    ledger_sync_enabled: bool
    log_level: str
    currency_symbol: str
    pdf_font_size: int

    @property
    def report_tzinfo(self) -> tzinfo | None:
        # Empty means the server's local zone.
        if not self.report_timezone:
            return None
        try:
            return ZoneInfo(self.report_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return None


settings = Settings(
    app_name=os.getenv("APP_NAME", "Shop Ledger API"),
    database_url=os.getenv("DATABASE_URL", "sqlite:///./shopledger.db"),
    database_sslmode=os.getenv("DATABASE_SSLMODE", "prefer"),
    frontend_base_url=os.getenv("FRONTEND_BASE_URL", "http://localhost:8080"),
    cors_origins=tuple(
        origin.strip().rstrip("/")
        for origin in os.getenv("CORS_ORIGINS", os.getenv("FRONTEND_BASE_URL", "http://localhost:8080")).split(",")
        if origin.strip()
    ),
    session_auth_enabled=_env_bool("SESSION_AUTH_ENABLED", False),
    session_secret=os.getenv("SESSION_SECRET", ""),
    report_timezone=os.getenv("REPORT_TIMEZONE", ""),
    ledger_sync_enabled=_env_bool("LEDGER_SYNC_ENABLED", True),
    log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    currency_symbol=os.getenv("CURRENCY_SYMBOL", "₹"),
    pdf_font_size=_env_int("PDF_FONT_SIZE", 9, min_value=6),
)
