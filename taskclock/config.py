from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name, "").strip().lower()
    if not value:
        return default
    return value in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_path: str = "tareas.db"
    log_level: str = "INFO"
    log_dir: str = "logs"
    strict_row_decode: bool = False
    seed_examples: bool = True
    refresh_interval_ms: int = 200
    timer_notify: bool = True

    def resolved_database_path(self) -> Path:
        path = Path(self.database_path).expanduser()
        return path if path.is_absolute() else PROJECT_ROOT / path


load_env()

SETTINGS = Settings(
    database_path=os.getenv("DATABASE_PATH", "").strip() or "tareas.db",
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_dir=os.getenv("LOG_DIR", "logs"),
    strict_row_decode=_env_flag("STRICT_ROW_DECODE", False),
    seed_examples=_env_flag("SEED_EXAMPLES", True),
    refresh_interval_ms=int(os.getenv("REFRESH_INTERVAL_MS", "200")),
    timer_notify=_env_flag("TIMER_NOTIFY", True),
)
