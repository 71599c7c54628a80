"""Configuration helpers for the IdeaVault CLI."""

from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_PATH = PROJECT_ROOT / ".env"
APP_NAME = "ideavault"

# Load .env from the project root (if present) regardless of current working dir
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)
else:
    load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Runtime configuration loaded from environment variables."""

    data_dir: Path
    editor: Optional[str]
    max_list_items: Optional[int]
    log_level: str

    @property
    def ideas_file(self) -> Path:
        return self.data_dir / "ideas.json"

    @property
    def projects_file(self) -> Path:
        return self.data_dir / "projects.json"

    @property
    def tags_file(self) -> Path:
        return self.data_dir / "tags.json"

    @property
    def tasks_file(self) -> Path:
        return self.data_dir / "tasks.json"


def _platform_data_dir() -> Path:
    home = Path.home()
    if sys.platform.startswith("win"):
        base = os.getenv("APPDATA")
        return Path(base) / APP_NAME if base else home / "AppData" / "Roaming" / APP_NAME
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / APP_NAME
    xdg = os.getenv("XDG_DATA_HOME")
    return (Path(xdg) if xdg else home / ".local" / "share") / APP_NAME


def _resolve_data_dir(raw_value: str | None) -> Path:
    if not raw_value:
        return _platform_data_dir()

    path = Path(raw_value).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    else:
        path = path.resolve()
    return path


def _resolve_editor(raw_value: str | None) -> Optional[str]:
    if raw_value:
        return raw_value
    return shutil.which("nano") or shutil.which("vi") or shutil.which("vim")


def _parse_limit(raw_value: str | None) -> Optional[int]:
    if not raw_value:
        return None
    try:
        limit = int(raw_value)
    except ValueError:
        return None
    return limit if limit > 0 else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(
        data_dir=_resolve_data_dir(os.getenv("IDEAVAULT_DATA_DIR") or os.getenv("DATA_DIR")),
        editor=_resolve_editor(os.getenv("EDITOR")),
        max_list_items=_parse_limit(os.getenv("IDEAVAULT_MAX_LIST_ITEMS")),
        log_level=os.getenv("IDEAVAULT_LOG_LEVEL", "WARNING").upper(),
    )


__all__ = ["Settings", "get_settings", "PROJECT_ROOT"]
