from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_PACKAGE_DIR = Path(__file__).resolve().parent

# Load .env from project root
load_dotenv(_PACKAGE_DIR.parent / ".env")

DEFAULT_DATA_PATH = _PACKAGE_DIR / "data" / "processed" / "dishes.csv"


def _split_origins(raw: str) -> tuple[str, ...]:
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or ("*",)


@dataclass(frozen=True)
class AppConfig:
    """
    Runtime configuration, built once at startup and handed to the app factory.
    """

    data_path: Path = DEFAULT_DATA_PATH
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: tuple[str, ...] = ("*",)
    cors_methods: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")
    cors_headers: tuple[str, ...] = ("Content-Type", "Authorization")
    log_level: str = "INFO"
    api_prefix: str = "/api"
    api_version: str = "v1"
    default_page_size: int = 10
    max_page_size: int = 100
    match_limit: int = 10
    search_limit: int = 10

    @property
    def dishes_prefix(self) -> str:
        return f"{self.api_prefix}/{self.api_version}/dishes"


def load_config() -> AppConfig:
    """Build an AppConfig from environment variables."""
    return AppConfig(
        data_path=Path(os.getenv("DISH_CATALOG_DATA_PATH", str(DEFAULT_DATA_PATH))),
        environment=os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        cors_origins=_split_origins(os.getenv("CORS_ORIGIN", "*")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        max_page_size=int(os.getenv("MAX_PAGE_SIZE", "100")),
    )
