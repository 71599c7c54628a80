"""Markdown-like documents used to edit ideas and tasks in an external editor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .errors import ParseError, ValidationError
from .models import Idea, IdeaStatus, Task, TaskPriority, TaskStatus


METADATA_PREFIXES = ("Tags:", "Status:", "Priority:")


@dataclass
class EditedDocument:
    title: str
    description: Optional[str]
    tags: Optional[List[str]] = None
    status: Optional[str] = None
    priority: Optional[str] = None


def render_idea(idea: Idea) -> str:
    return (
        f"# {idea.title}\n\n"
        f"{idea.description or ''}\n\n"
        f"Tags: {', '.join(idea.tags)}\n\n"
        f"Status: {idea.status}\n\n"
    )


def render_task(task: Task) -> str:
    return (
        f"# {task.title}\n\n"
        f"{task.description or ''}\n\n"
        f"Priority: {task.priority}\n"
        f"Status: {task.status}\n"
        f"Tags: {', '.join(task.tags)}\n\n"
    )


def _split_tags(raw: str) -> List[str]:
    tags: List[str] = []
    for part in raw.split(","):
        cleaned = part.strip()
        if cleaned and cleaned not in tags:
            tags.append(cleaned)
    return tags


def parse_document(text: str) -> EditedDocument:
    """Parse an edited document back into its fields.

    The description is every non-blank line after the ``# `` heading and
    before the first metadata line. Later metadata lines win over earlier
    ones.
    """

    lines = text.splitlines()
    title_line = next((line for line in lines if line.startswith("# ")), None)
    if title_line is None:
        raise ParseError("Edited document has no '# <title>' heading")

    title = title_line[2:].strip()
    if not title:
        raise ParseError("Edited document has an empty title")

    description_parts: List[str] = []
    in_description = False
    for line in lines:
        if line.startswith("# "):
            in_description = True
            continue
        if line.startswith(METADATA_PREFIXES):
            in_description = False
            continue
        if in_description and line.strip():
            description_parts.append(line.strip())

    document = EditedDocument(
        title=title,
        description="\n".join(description_parts) if description_parts else None,
    )

    for line in lines:
        if line.startswith("Tags:"):
            document.tags = _split_tags(line[len("Tags:"):])
        elif line.startswith("Status:"):
            document.status = line[len("Status:"):].strip()
        elif line.startswith("Priority:"):
            document.priority = line[len("Priority:"):].strip()

    return document


def _parse_choice(parser, raw: str, label: str):
    try:
        return parser(raw)
    except ValidationError as exc:
        raise ParseError(f"Invalid {label} in edited document: {exc}") from exc


def apply_to_idea(idea: Idea, document: EditedDocument) -> None:
    """Apply an edited document to an idea in place."""

    status = _parse_choice(IdeaStatus.parse, document.status, "status") if document.status else None

    idea.update_title(document.title)
    if document.description is not None:
        idea.update_description(document.description)
    if document.tags is not None:
        idea.set_tags(document.tags)
    if status is not None:
        idea.set_status(status)


def apply_to_task(task: Task, document: EditedDocument) -> None:
    """Apply an edited document to a task in place."""

    status = _parse_choice(TaskStatus.parse, document.status, "status") if document.status else None
    priority = (
        _parse_choice(TaskPriority.parse, document.priority, "priority") if document.priority else None
    )

    task.update_title(document.title)
    if document.description is not None:
        task.update_description(document.description)
    if document.tags is not None:
        task.set_tags(document.tags)
    if status is not None:
        task.set_status(status)
    if priority is not None:
        task.set_priority(priority)


__all__ = [
    "EditedDocument",
    "apply_to_idea",
    "apply_to_task",
    "parse_document",
    "render_idea",
    "render_task",
]
