"""Storage utilities for persisting ideas, projects, tags and tasks."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from .config import get_settings
from .errors import ParseError, StorageError
from .models import Idea, Project, Tag, Task


logger = logging.getLogger(__name__)

Record = TypeVar("Record", Idea, Project, Tag, Task)


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Failed to create data directory: {path}") from exc


class Storage:
    """Whole-collection JSON persistence, one file per entity kind."""

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        settings = get_settings()
        if data_dir is not None:
            settings = replace(settings, data_dir=Path(data_dir))
        self.data_dir = settings.data_dir
        _ensure_dir(self.data_dir)
        self.ideas_file = settings.ideas_file
        self.projects_file = settings.projects_file
        self.tags_file = settings.tags_file
        self.tasks_file = settings.tasks_file

    def _load(
        self,
        path: Path,
        kind: str,
        factory: Callable[[Dict[str, Any]], Record],
    ) -> List[Record]:
        if not path.exists():
            logger.debug("No %s file at %s; starting empty", kind, path)
            return []

        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ParseError(f"Failed to parse {kind} JSON at {path}: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to read {kind} file: {path}") from exc

        if not isinstance(payload, list):
            raise ParseError(f"Expected a JSON array of {kind} in {path}")

        try:
            items = [factory(entry) for entry in payload]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ParseError(f"Invalid {kind} record in {path}: {exc}") from exc

        logger.debug("Loaded %d %s from %s", len(items), kind, path)
        return items

    def _save(self, path: Path, kind: str, items: Sequence[Record]) -> None:
        payload = [item.to_dict() for item in items]
        try:
            with path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
        except OSError as exc:
            raise StorageError(f"Failed to write {kind} file: {path}") from exc
        logger.debug("Saved %d %s to %s", len(payload), kind, path)

    def load_ideas(self) -> List[Idea]:
        return self._load(self.ideas_file, "ideas", Idea.from_dict)

    def save_ideas(self, ideas: Sequence[Idea]) -> None:
        self._save(self.ideas_file, "ideas", ideas)

    def load_projects(self) -> List[Project]:
        return self._load(self.projects_file, "projects", Project.from_dict)

    def save_projects(self, projects: Sequence[Project]) -> None:
        self._save(self.projects_file, "projects", projects)

    def load_tags(self) -> List[Tag]:
        return self._load(self.tags_file, "tags", Tag.from_dict)

    def save_tags(self, tags: Sequence[Tag]) -> None:
        self._save(self.tags_file, "tags", tags)

    def load_tasks(self) -> List[Task]:
        return self._load(self.tasks_file, "tasks", Task.from_dict)

    def save_tasks(self, tasks: Sequence[Task]) -> None:
        self._save(self.tasks_file, "tasks", tasks)


__all__ = ["Storage", "StorageError", "ParseError"]
