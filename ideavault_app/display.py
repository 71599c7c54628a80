"""Rendering helpers for idea, project and task listings."""

from __future__ import annotations

import uuid
from typing import List, Optional, Sequence, Tuple

from .models import (
    Idea,
    IdeaStatus,
    Project,
    ProjectStatus,
    Tag,
    Task,
    TaskPriority,
    TaskStatus,
    utcnow,
)

IDEA_ICONS = {
    IdeaStatus.BRAINSTORMING: "🧠",
    IdeaStatus.ACTIVE: "🚀",
    IdeaStatus.COMPLETED: "✅",
    IdeaStatus.ARCHIVED: "📦",
}

PROJECT_ICONS = {
    ProjectStatus.PLANNING: "📋",
    ProjectStatus.IN_PROGRESS: "🚀",
    ProjectStatus.COMPLETED: "✅",
    ProjectStatus.ON_HOLD: "⏸️",
}

TASK_ICONS = {
    TaskStatus.TODO: "📋",
    TaskStatus.IN_PROGRESS: "🔄",
    TaskStatus.BLOCKED: "🚫",
    TaskStatus.DONE: "✅",
    TaskStatus.CANCELLED: "❌",
}

PRIORITY_ICONS = {
    TaskPriority.LOW: "⬇️",
    TaskPriority.MEDIUM: "➡️",
    TaskPriority.HIGH: "⬆️",
    TaskPriority.URGENT: "🔴",
}

SHORT_STAMP = "%Y-%m-%d %H:%M"
LONG_STAMP = "%Y-%m-%d %H:%M:%S UTC"


def _preview(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def _describe(description: Optional[str]) -> List[str]:
    if description:
        return ["Description:", description]
    return ["No description"]


def format_idea_summary(idea: Idea, indent: str = "") -> List[str]:
    lines = [f"{indent}{IDEA_ICONS[idea.status]} {idea.title} [{idea.id}]"]
    if idea.description:
        lines.append(f"{indent}   {_preview(idea.description, 50)}")
    if idea.tags:
        lines.append(f"{indent}   🏷️  {', '.join(idea.tags)}")
    lines.append(f"{indent}   📅 Updated: {idea.updated_at.strftime(SHORT_STAMP)}")
    return lines


def format_idea_detail(idea: Idea) -> List[str]:
    lines = [
        f"{IDEA_ICONS[idea.status]} {idea.title}",
        f"ID: {idea.id}",
        f"Status: {idea.status}",
    ]
    if idea.tags:
        lines.append(f"Tags: {', '.join(idea.tags)}")
    lines.extend(
        [
            f"Created: {idea.created_at.strftime(LONG_STAMP)}",
            f"Updated: {idea.updated_at.strftime(LONG_STAMP)}",
            "",
        ]
    )
    lines.extend(_describe(idea.description))
    return lines


def format_project_summary(project: Project) -> List[str]:
    lines = [f"{PROJECT_ICONS[project.status]} {project.title} [{project.id}]"]
    if project.description:
        lines.append(f"   {_preview(project.description, 50)}")
    if project.milestone:
        lines.append(f"   🎯 {project.milestone}")
    if project.idea_ids:
        lines.append(f"   💡 {project.idea_count} idea(s)")
    lines.append(f"   📅 Updated: {project.updated_at.strftime(SHORT_STAMP)}")
    return lines


def format_linked_idea(idea_id: uuid.UUID, idea: Optional[Idea]) -> List[str]:
    if idea is None:
        return [f"  ⚠️  Idea {idea_id} (not found)"]
    lines = [f"  {IDEA_ICONS[idea.status]} {idea.title} [{idea.id}]"]
    if idea.description:
        lines.append(f"     {_preview(idea.description, 80)}")
    if idea.tags:
        lines.append(f"     🏷️  {', '.join(idea.tags)}")
    lines.append(f"     📅 {idea.updated_at.strftime(SHORT_STAMP)}")
    return lines


def format_project_detail(
    project: Project, linked: Sequence[Tuple[uuid.UUID, Optional[Idea]]]
) -> List[str]:
    lines = [
        f"{PROJECT_ICONS[project.status]} {project.title}",
        f"ID: {project.id}",
        f"Status: {project.status}",
    ]
    if project.milestone:
        lines.append(f"Milestone: {project.milestone}")
    if project.url:
        lines.append(f"URL: {project.url}")
    if project.repository:
        lines.append(f"Repository: {project.repository}")
    lines.extend(
        [
            f"Ideas: {project.idea_count} linked",
            f"Created: {project.created_at.strftime(LONG_STAMP)}",
            f"Updated: {project.updated_at.strftime(LONG_STAMP)}",
            "",
        ]
    )
    lines.extend(_describe(project.description))

    if linked:
        lines.extend(["", "💡 Linked Ideas:"])
        for idea_id, idea in linked:
            lines.extend(format_linked_idea(idea_id, idea))
    return lines


def _due_line(task: Task, fmt: str, label: str) -> str:
    stamp = task.due_date.strftime(fmt) if task.due_date else ""
    suffix = " (OVERDUE)" if task.is_overdue(utcnow()) else ""
    return f"{label}{stamp}{suffix}"


def format_task_summary(task: Task) -> List[str]:
    lines = [f"{TASK_ICONS[task.status]} {PRIORITY_ICONS[task.priority]} {task.title} [{task.id}]"]
    if task.description:
        lines.append(f"   {_preview(task.description, 50)}")
    if task.tags:
        lines.append(f"   🏷️  {', '.join(task.tags)}")
    if task.due_date:
        lines.append(_due_line(task, "%Y-%m-%d", "   ⏰ Due: "))
    if task.project_id:
        lines.append("   📁 Linked to project")
    if task.idea_id:
        lines.append("   💡 Linked to idea")
    lines.append(f"   📅 Updated: {task.updated_at.strftime(SHORT_STAMP)}")
    return lines


def format_task_detail(
    task: Task,
    project: Optional[Project],
    idea: Optional[Idea],
) -> List[str]:
    lines = [
        f"{TASK_ICONS[task.status]} {PRIORITY_ICONS[task.priority]} {task.title}",
        f"ID: {task.id}",
        f"Status: {task.status}",
        f"Priority: {task.priority}",
    ]
    if task.due_date:
        lines.append(_due_line(task, "%Y-%m-%d %H:%M UTC", "Due Date: "))
    else:
        lines.append("Due Date: Not set")

    if task.tags:
        lines.append(f"Tags (Contexts): {', '.join(task.tags)}")

    if task.project_id is None:
        lines.append("Project: Not linked")
    elif project is None:
        lines.append(f"Project: {task.project_id} (not found)")
    else:
        lines.append(f"Project: {project.title} [{project.id}]")

    if task.idea_id is None:
        lines.append("Idea: Not linked")
    elif idea is None:
        lines.append(f"Idea: {task.idea_id} (not found)")
    else:
        lines.append(f"Idea: {idea.title} [{idea.id}]")

    lines.extend(
        [
            f"Created: {task.created_at.strftime(LONG_STAMP)}",
            f"Updated: {task.updated_at.strftime(LONG_STAMP)}",
            "",
        ]
    )
    lines.extend(_describe(task.description))
    return lines


def format_tag_rows(rows: Sequence[Tuple[str, Optional[str], int]]) -> List[str]:
    lines = []
    for name, color, count in rows:
        color_tile = f" [{color}]" if color else ""
        lines.append(f"{name:<20} {count:>3} use(s){color_tile}")
    return lines


def format_tag(tag: Tag) -> str:
    return f"{tag.name} [{tag.color}]" if tag.color else tag.name


__all__ = [
    "format_idea_detail",
    "format_idea_summary",
    "format_linked_idea",
    "format_project_detail",
    "format_project_summary",
    "format_tag",
    "format_tag_rows",
    "format_task_detail",
    "format_task_summary",
]
