"""Core project operations backed by JSON storage."""

from __future__ import annotations

import uuid
from typing import List, Optional, Sequence, Tuple

from .errors import NotFoundError
from .ideas import find_idea
from .models import Idea, Project, ProjectStatus
from .storage import Storage


def _index_of(projects: Sequence[Project], project_id: uuid.UUID) -> int:
    for index, project in enumerate(projects):
        if project.id == project_id:
            return index
    raise NotFoundError(f"Project with ID {project_id} not found")


def find_project(projects: Sequence[Project], project_id: uuid.UUID) -> Optional[Project]:
    return next((project for project in projects if project.id == project_id), None)


def create_project(
    storage: Storage,
    title: str,
    description: Optional[str] = None,
    milestone: Optional[str] = None,
    url: Optional[str] = None,
    repository: Optional[str] = None,
) -> Project:
    project = Project.new(title)
    if description is not None:
        project = project.with_description(description)
    if milestone is not None:
        project = project.with_milestone(milestone)
    if url is not None:
        project = project.with_url(url)
    if repository is not None:
        project = project.with_repository(repository)

    projects = storage.load_projects()
    projects.append(project)
    storage.save_projects(projects)
    return project


def list_projects(storage: Storage, status: Optional[ProjectStatus] = None) -> List[Project]:
    projects = storage.load_projects()
    if status is not None:
        projects = [project for project in projects if project.status == status]
    return projects


def get_project(storage: Storage, project_id: uuid.UUID) -> Project:
    projects = storage.load_projects()
    return projects[_index_of(projects, project_id)]


def link_idea(storage: Storage, project_id: uuid.UUID, idea_id: uuid.UUID) -> bool:
    """Link an idea to a project. Returns ``False`` when it was already linked."""

    projects = storage.load_projects()
    if find_idea(storage.load_ideas(), idea_id) is None:
        raise NotFoundError(f"Idea with ID {idea_id} not found")

    project = projects[_index_of(projects, project_id)]
    if idea_id in project.idea_ids:
        return False

    project.add_idea(idea_id)
    storage.save_projects(projects)
    return True


def unlink_idea(storage: Storage, project_id: uuid.UUID, idea_id: uuid.UUID) -> bool:
    """Remove an idea link. Returns ``False`` when the idea was not linked."""

    projects = storage.load_projects()
    project = projects[_index_of(projects, project_id)]
    if idea_id not in project.idea_ids:
        return False

    project.remove_idea(idea_id)
    storage.save_projects(projects)
    return True


def project_ideas(
    storage: Storage, project_id: uuid.UUID
) -> Tuple[Project, List[Tuple[uuid.UUID, Optional[Idea]]]]:
    """Return the project and its linked ideas, ``None`` for dangling links."""

    project = get_project(storage, project_id)
    ideas = storage.load_ideas()
    return project, [(idea_id, find_idea(ideas, idea_id)) for idea_id in project.idea_ids]


def set_project_status(
    storage: Storage, project_id: uuid.UUID, status: ProjectStatus
) -> Tuple[Project, ProjectStatus]:
    projects = storage.load_projects()
    project = projects[_index_of(projects, project_id)]
    previous = project.status
    project.set_status(status)
    storage.save_projects(projects)
    return project, previous


def delete_project(storage: Storage, project_id: uuid.UUID) -> Project:
    projects = storage.load_projects()
    removed = projects.pop(_index_of(projects, project_id))
    storage.save_projects(projects)
    return removed


__all__ = [
    "create_project",
    "delete_project",
    "find_project",
    "get_project",
    "link_idea",
    "list_projects",
    "project_ideas",
    "set_project_status",
    "unlink_idea",
]
