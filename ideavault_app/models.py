"""Records for ideas, projects, tasks and tags."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .errors import ValidationError


_FRACTION = re.compile(r"\.(\d+)")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Serialize a UTC instant as ISO-8601 with a trailing Z."""

    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 instant, accepting Z suffixes and nanosecond fractions."""

    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), text, count=1)
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_id(raw: str) -> uuid.UUID:
    """Parse a user-supplied identifier."""

    try:
        return uuid.UUID(raw.strip())
    except ValueError:
        raise ValidationError(f"Invalid ID '{raw}'. Expected a UUID") from None


def _parse_uuid(raw: Any) -> uuid.UUID:
    return raw if isinstance(raw, uuid.UUID) else uuid.UUID(str(raw))


def _optional_uuid(raw: Any) -> Optional[uuid.UUID]:
    return None if raw is None else _parse_uuid(raw)


def _optional_timestamp(raw: Optional[str]) -> Optional[datetime]:
    return None if raw is None else parse_timestamp(raw)


def _dedupe(values: Iterable[Any]) -> List[Any]:
    seen: set = set()
    cleaned: List[Any] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        cleaned.append(value)
    return cleaned


class _Choice(str, Enum):
    """Closed enumeration with alias-aware parsing and a canonical display name."""

    @classmethod
    def _aliases(cls) -> Dict[str, "_Choice"]:
        raise NotImplementedError

    @classmethod
    def _label(cls) -> str:
        return "status"

    @classmethod
    def parse(cls, raw: str) -> "_Choice":
        key = raw.strip().lower()
        try:
            return cls._aliases()[key]
        except KeyError:
            names = ", ".join(member.value for member in cls)
            raise ValidationError(f"Invalid {cls._label()}. Must be one of: {names}") from None

    def __str__(self) -> str:
        return self.value


class IdeaStatus(_Choice):
    BRAINSTORMING = "Brainstorming"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"

    @classmethod
    def _aliases(cls) -> Dict[str, "IdeaStatus"]:
        return {
            "brainstorming": cls.BRAINSTORMING,
            "brainstorm": cls.BRAINSTORMING,
            "active": cls.ACTIVE,
            "completed": cls.COMPLETED,
            "complete": cls.COMPLETED,
            "done": cls.COMPLETED,
            "archived": cls.ARCHIVED,
            "archive": cls.ARCHIVED,
        }


class ProjectStatus(_Choice):
    PLANNING = "Planning"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    ON_HOLD = "OnHold"

    @classmethod
    def _aliases(cls) -> Dict[str, "ProjectStatus"]:
        return {
            "planning": cls.PLANNING,
            "plan": cls.PLANNING,
            "inprogress": cls.IN_PROGRESS,
            "in-progress": cls.IN_PROGRESS,
            "progress": cls.IN_PROGRESS,
            "completed": cls.COMPLETED,
            "complete": cls.COMPLETED,
            "done": cls.COMPLETED,
            "onhold": cls.ON_HOLD,
            "on-hold": cls.ON_HOLD,
            "hold": cls.ON_HOLD,
        }


class TaskStatus(_Choice):
    TODO = "Todo"
    IN_PROGRESS = "InProgress"
    BLOCKED = "Blocked"
    DONE = "Done"
    CANCELLED = "Cancelled"

    @classmethod
    def _aliases(cls) -> Dict[str, "TaskStatus"]:
        return {
            "todo": cls.TODO,
            "t": cls.TODO,
            "inprogress": cls.IN_PROGRESS,
            "in-progress": cls.IN_PROGRESS,
            "progress": cls.IN_PROGRESS,
            "ip": cls.IN_PROGRESS,
            "blocked": cls.BLOCKED,
            "block": cls.BLOCKED,
            "b": cls.BLOCKED,
            "done": cls.DONE,
            "complete": cls.DONE,
            "d": cls.DONE,
            "x": cls.DONE,
            "cancelled": cls.CANCELLED,
            "cancel": cls.CANCELLED,
            "c": cls.CANCELLED,
        }


class TaskPriority(_Choice):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"

    @classmethod
    def _label(cls) -> str:
        return "priority"

    @classmethod
    def _aliases(cls) -> Dict[str, "TaskPriority"]:
        return {
            "low": cls.LOW,
            "l": cls.LOW,
            "medium": cls.MEDIUM,
            "m": cls.MEDIUM,
            "med": cls.MEDIUM,
            "high": cls.HIGH,
            "h": cls.HIGH,
            "urgent": cls.URGENT,
            "u": cls.URGENT,
            "crit": cls.URGENT,
            "critical": cls.URGENT,
        }


@dataclass
class Idea:
    id: uuid.UUID
    title: str
    description: Optional[str]
    tags: List[str]
    status: IdeaStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def new(cls, title: str) -> "Idea":
        now = utcnow()
        return cls(
            id=uuid.uuid4(),
            title=title,
            description=None,
            tags=[],
            status=IdeaStatus.BRAINSTORMING,
            created_at=now,
            updated_at=now,
        )

    def touch(self) -> None:
        self.updated_at = utcnow()

    def _copy(self, **changes: Any) -> "Idea":
        """Return a modified copy that owns its own tag list."""

        changes.setdefault("tags", list(self.tags))
        return replace(self, updated_at=utcnow(), **changes)

    def with_description(self, description: str) -> "Idea":
        return self._copy(description=description)

    def with_tags(self, tags: Iterable[str]) -> "Idea":
        return self._copy(tags=_dedupe(tags))

    def with_status(self, status: IdeaStatus) -> "Idea":
        return self._copy(status=status)

    def update_title(self, title: str) -> None:
        self.title = title
        self.touch()

    def update_description(self, description: Optional[str]) -> None:
        self.description = description
        self.touch()

    def set_tags(self, tags: Iterable[str]) -> None:
        self.tags = _dedupe(tags)
        self.touch()

    def add_tag(self, tag: str) -> None:
        if tag in self.tags:
            return
        self.tags.append(tag)
        self.touch()

    def remove_tag(self, tag: str) -> None:
        if tag not in self.tags:
            return
        self.tags.remove(tag)
        self.touch()

    def set_status(self, status: IdeaStatus) -> None:
        self.status = status
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "status": self.status.value,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Idea":
        return cls(
            id=_parse_uuid(data["id"]),
            title=data["title"],
            description=data.get("description"),
            tags=list(data.get("tags") or []),
            status=IdeaStatus(data["status"]),
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(data["updated_at"]),
        )


@dataclass
class Project:
    id: uuid.UUID
    title: str
    description: Optional[str]
    milestone: Optional[str]
    url: Optional[str]
    repository: Optional[str]
    status: ProjectStatus
    idea_ids: List[uuid.UUID]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def new(cls, title: str) -> "Project":
        now = utcnow()
        return cls(
            id=uuid.uuid4(),
            title=title,
            description=None,
            milestone=None,
            url=None,
            repository=None,
            status=ProjectStatus.PLANNING,
            idea_ids=[],
            created_at=now,
            updated_at=now,
        )

    def touch(self) -> None:
        self.updated_at = utcnow()

    def _copy(self, **changes: Any) -> "Project":
        changes.setdefault("idea_ids", list(self.idea_ids))
        return replace(self, updated_at=utcnow(), **changes)

    def with_description(self, description: str) -> "Project":
        return self._copy(description=description)

    def with_milestone(self, milestone: str) -> "Project":
        return self._copy(milestone=milestone)

    def with_url(self, url: str) -> "Project":
        return self._copy(url=url)

    def with_repository(self, repository: str) -> "Project":
        return self._copy(repository=repository)

    def with_ideas(self, idea_ids: Iterable[uuid.UUID]) -> "Project":
        return self._copy(idea_ids=_dedupe(idea_ids))

    def with_status(self, status: ProjectStatus) -> "Project":
        return self._copy(status=status)

    def update_title(self, title: str) -> None:
        self.title = title
        self.touch()

    def update_description(self, description: Optional[str]) -> None:
        self.description = description
        self.touch()

    def update_milestone(self, milestone: Optional[str]) -> None:
        self.milestone = milestone
        self.touch()

    def update_url(self, url: Optional[str]) -> None:
        self.url = url
        self.touch()

    def update_repository(self, repository: Optional[str]) -> None:
        self.repository = repository
        self.touch()

    def add_idea(self, idea_id: uuid.UUID) -> None:
        if idea_id in self.idea_ids:
            return
        self.idea_ids.append(idea_id)
        self.touch()

    def remove_idea(self, idea_id: uuid.UUID) -> None:
        if idea_id not in self.idea_ids:
            return
        self.idea_ids.remove(idea_id)
        self.touch()

    def set_status(self, status: ProjectStatus) -> None:
        self.status = status
        self.touch()

    @property
    def idea_count(self) -> int:
        return len(self.idea_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "milestone": self.milestone,
            "url": self.url,
            "repository": self.repository,
            "status": self.status.value,
            "idea_ids": [str(idea_id) for idea_id in self.idea_ids],
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            id=_parse_uuid(data["id"]),
            title=data["title"],
            description=data.get("description"),
            milestone=data.get("milestone"),
            url=data.get("url"),
            repository=data.get("repository"),
            status=ProjectStatus(data["status"]),
            idea_ids=[_parse_uuid(raw) for raw in data.get("idea_ids") or []],
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(data["updated_at"]),
        )


@dataclass
class Task:
    id: uuid.UUID
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime]
    project_id: Optional[uuid.UUID]
    idea_id: Optional[uuid.UUID]
    tags: List[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def new(cls, title: str) -> "Task":
        now = utcnow()
        return cls(
            id=uuid.uuid4(),
            title=title,
            description=None,
            status=TaskStatus.TODO,
            priority=TaskPriority.MEDIUM,
            due_date=None,
            project_id=None,
            idea_id=None,
            tags=[],
            created_at=now,
            updated_at=now,
        )

    def touch(self) -> None:
        self.updated_at = utcnow()

    def _copy(self, **changes: Any) -> "Task":
        changes.setdefault("tags", list(self.tags))
        return replace(self, updated_at=utcnow(), **changes)

    def with_description(self, description: str) -> "Task":
        return self._copy(description=description)

    def with_priority(self, priority: TaskPriority) -> "Task":
        return self._copy(priority=priority)

    def with_status(self, status: TaskStatus) -> "Task":
        return self._copy(status=status)

    def with_tags(self, tags: Iterable[str]) -> "Task":
        return self._copy(tags=_dedupe(tags))

    def with_due_date(self, due_date: datetime) -> "Task":
        return self._copy(due_date=due_date)

    def with_project(self, project_id: uuid.UUID) -> "Task":
        return self._copy(project_id=project_id)

    def with_idea(self, idea_id: uuid.UUID) -> "Task":
        return self._copy(idea_id=idea_id)

    def update_title(self, title: str) -> None:
        self.title = title
        self.touch()

    def update_description(self, description: Optional[str]) -> None:
        self.description = description
        self.touch()

    def set_status(self, status: TaskStatus) -> None:
        self.status = status
        self.touch()

    def set_priority(self, priority: TaskPriority) -> None:
        self.priority = priority
        self.touch()

    def set_due_date(self, due_date: Optional[datetime]) -> None:
        self.due_date = due_date
        self.touch()

    def set_tags(self, tags: Iterable[str]) -> None:
        self.tags = _dedupe(tags)
        self.touch()

    def add_tag(self, tag: str) -> None:
        if tag in self.tags:
            return
        self.tags.append(tag)
        self.touch()

    def remove_tag(self, tag: str) -> None:
        if tag not in self.tags:
            return
        self.tags.remove(tag)
        self.touch()

    def link_project(self, project_id: uuid.UUID) -> None:
        self.project_id = project_id
        self.touch()

    def unlink_project(self) -> None:
        self.project_id = None
        self.touch()

    def link_idea(self, idea_id: uuid.UUID) -> None:
        self.idea_id = idea_id
        self.touch()

    def unlink_idea(self) -> None:
        self.idea_id = None
        self.touch()

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        if self.due_date is None:
            return False
        if self.status in (TaskStatus.DONE, TaskStatus.CANCELLED):
            return False
        return self.due_date < (now or utcnow())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "due_date": format_timestamp(self.due_date) if self.due_date else None,
            "project_id": str(self.project_id) if self.project_id else None,
            "idea_id": str(self.idea_id) if self.idea_id else None,
            "tags": list(self.tags),
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=_parse_uuid(data["id"]),
            title=data["title"],
            description=data.get("description"),
            status=TaskStatus(data["status"]),
            priority=TaskPriority(data["priority"]),
            due_date=_optional_timestamp(data.get("due_date")),
            project_id=_optional_uuid(data.get("project_id")),
            idea_id=_optional_uuid(data.get("idea_id")),
            tags=list(data.get("tags") or []),
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(data["updated_at"]),
        )


@dataclass
class Tag:
    name: str
    color: Optional[str] = field(default=None)

    @classmethod
    def new(cls, name: str) -> "Tag":
        return cls(name=name)

    def with_color(self, color: str) -> "Tag":
        return replace(self, color=color)

    def set_color(self, color: Optional[str]) -> None:
        self.color = color

    def set_name(self, name: str) -> None:
        self.name = name

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tag":
        return cls(name=data["name"], color=data.get("color"))


__all__ = [
    "Idea",
    "IdeaStatus",
    "Project",
    "ProjectStatus",
    "Tag",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "format_timestamp",
    "parse_id",
    "parse_timestamp",
    "utcnow",
]
