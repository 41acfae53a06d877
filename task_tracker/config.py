"""Settings loaded from environment variables (+ optional .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

ENV_PREFIX = "TASK_TRACKER"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return tuple(p.strip() for p in raw.replace(",", " ").split() if p.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./task_manager.db"
    seed_users: tuple[str, ...] = ("Alice", "Bob")
    enforce_foreign_keys: bool = True
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3000

    @staticmethod
    def from_env() -> "Settings":
        defaults = Settings()
        return Settings(
            database_url=_env(_k("DATABASE_URL"), defaults.database_url),
            seed_users=_env_list(_k("SEED_USERS"), defaults.seed_users),
            enforce_foreign_keys=_env_bool(_k("ENFORCE_FOREIGN_KEYS"), defaults.enforce_foreign_keys),
            log_level=_env(_k("LOG_LEVEL"), defaults.log_level).upper(),
            host=_env(_k("HOST"), defaults.host),
            port=_env_int(_k("PORT"), defaults.port),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
