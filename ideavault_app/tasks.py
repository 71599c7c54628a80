"""Core task operations backed by JSON storage."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .documents import EditedDocument, apply_to_task
from .errors import NotFoundError
from .ideas import find_idea
from .models import Task, TaskPriority, TaskStatus, utcnow
from .projects import find_project
from .storage import Storage
from .tags import register_tags


def _index_of(tasks: Sequence[Task], task_id: uuid.UUID) -> int:
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    raise NotFoundError(f"Task with ID {task_id} not found")


def _load_with(storage: Storage, task_id: uuid.UUID) -> Tuple[List[Task], Task]:
    tasks = storage.load_tasks()
    return tasks, tasks[_index_of(tasks, task_id)]


def create_task(
    storage: Storage,
    title: str,
    description: Optional[str] = None,
    priority: Optional[TaskPriority] = None,
    due_date: Optional[datetime] = None,
    tags: Sequence[str] = (),
    project_id: Optional[uuid.UUID] = None,
    idea_id: Optional[uuid.UUID] = None,
) -> Task:
    task = Task.new(title)
    if description is not None:
        task = task.with_description(description)
    if priority is not None:
        task = task.with_priority(priority)
    cleaned = [tag.strip() for tag in tags if tag and tag.strip()]
    if cleaned:
        task = task.with_tags(cleaned)
    if due_date is not None:
        task = task.with_due_date(due_date)
    if project_id is not None:
        task = task.with_project(project_id)
    if idea_id is not None:
        task = task.with_idea(idea_id)

    tasks = storage.load_tasks()
    tasks.append(task)
    storage.save_tasks(tasks)
    register_tags(storage, task.tags)
    return task


def list_tasks(
    storage: Storage,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    tag: Optional[str] = None,
    project_id: Optional[uuid.UUID] = None,
    idea_id: Optional[uuid.UUID] = None,
    overdue: bool = False,
) -> List[Task]:
    tasks = storage.load_tasks()
    if status is not None:
        tasks = [task for task in tasks if task.status == status]
    if priority is not None:
        tasks = [task for task in tasks if task.priority == priority]
    if tag is not None:
        tasks = [task for task in tasks if tag in task.tags]
    if project_id is not None:
        tasks = [task for task in tasks if task.project_id == project_id]
    if idea_id is not None:
        tasks = [task for task in tasks if task.idea_id == idea_id]
    if overdue:
        now = utcnow()
        tasks = [task for task in tasks if task.is_overdue(now)]
    return tasks


def get_task(storage: Storage, task_id: uuid.UUID) -> Task:
    _, task = _load_with(storage, task_id)
    return task


def set_task_status(
    storage: Storage, task_id: uuid.UUID, status: TaskStatus
) -> Tuple[Task, TaskStatus]:
    tasks, task = _load_with(storage, task_id)
    previous = task.status
    task.set_status(status)
    storage.save_tasks(tasks)
    return task, previous


def set_task_priority(
    storage: Storage, task_id: uuid.UUID, priority: TaskPriority
) -> Tuple[Task, TaskPriority]:
    tasks, task = _load_with(storage, task_id)
    previous = task.priority
    task.set_priority(priority)
    storage.save_tasks(tasks)
    return task, previous


def set_task_due(storage: Storage, task_id: uuid.UUID, due_date: Optional[datetime]) -> Task:
    """Set or clear (``None``) the due date."""

    tasks, task = _load_with(storage, task_id)
    task.set_due_date(due_date)
    storage.save_tasks(tasks)
    return task


def link_task_project(storage: Storage, task_id: uuid.UUID, project_id: uuid.UUID) -> Task:
    if find_project(storage.load_projects(), project_id) is None:
        raise NotFoundError(f"Project with ID {project_id} not found")

    tasks, task = _load_with(storage, task_id)
    task.link_project(project_id)
    storage.save_tasks(tasks)
    return task


def link_task_idea(storage: Storage, task_id: uuid.UUID, idea_id: uuid.UUID) -> Task:
    if find_idea(storage.load_ideas(), idea_id) is None:
        raise NotFoundError(f"Idea with ID {idea_id} not found")

    tasks, task = _load_with(storage, task_id)
    task.link_idea(idea_id)
    storage.save_tasks(tasks)
    return task


def unlink_task_project(storage: Storage, task_id: uuid.UUID) -> bool:
    """Clear the project link. Returns ``False`` when none was set."""

    tasks, task = _load_with(storage, task_id)
    if task.project_id is None:
        return False
    task.unlink_project()
    storage.save_tasks(tasks)
    return True


def unlink_task_idea(storage: Storage, task_id: uuid.UUID) -> bool:
    """Clear the idea link. Returns ``False`` when none was set."""

    tasks, task = _load_with(storage, task_id)
    if task.idea_id is None:
        return False
    task.unlink_idea()
    storage.save_tasks(tasks)
    return True


def apply_task_document(storage: Storage, task_id: uuid.UUID, document: EditedDocument) -> Task:
    tasks, task = _load_with(storage, task_id)
    apply_to_task(task, document)
    storage.save_tasks(tasks)
    register_tags(storage, task.tags)
    return task


def delete_task(storage: Storage, task_id: uuid.UUID) -> Task:
    tasks = storage.load_tasks()
    removed = tasks.pop(_index_of(tasks, task_id))
    storage.save_tasks(tasks)
    return removed


__all__ = [
    "apply_task_document",
    "create_task",
    "delete_task",
    "get_task",
    "link_task_idea",
    "link_task_project",
    "list_tasks",
    "set_task_due",
    "set_task_priority",
    "set_task_status",
    "unlink_task_idea",
    "unlink_task_project",
]
