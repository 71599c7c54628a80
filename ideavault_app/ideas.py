"""Core idea operations backed by JSON storage."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .documents import EditedDocument, apply_to_idea
from .errors import NotFoundError, ValidationError
from .models import Idea, IdeaStatus
from .storage import Storage
from .tags import register_tags


CLEARABLE_IDEA_FIELDS = ("description",)


def _clean_tags(tags: Iterable[str]) -> List[str]:
    return [tag.strip() for tag in tags if tag and tag.strip()]


def _index_of(ideas: Sequence[Idea], idea_id: uuid.UUID) -> int:
    for index, idea in enumerate(ideas):
        if idea.id == idea_id:
            return index
    raise NotFoundError(f"Idea with ID {idea_id} not found")


def find_idea(ideas: Sequence[Idea], idea_id: uuid.UUID) -> Optional[Idea]:
    """Return the idea with ``idea_id`` or ``None`` for a dangling reference."""

    return next((idea for idea in ideas if idea.id == idea_id), None)


def create_idea(
    storage: Storage,
    title: str,
    description: Optional[str] = None,
    tags: Sequence[str] = (),
) -> Idea:
    idea = Idea.new(title)
    if description is not None:
        idea = idea.with_description(description)
    cleaned = _clean_tags(tags)
    if cleaned:
        idea = idea.with_tags(cleaned)

    ideas = storage.load_ideas()
    ideas.append(idea)
    storage.save_ideas(ideas)
    register_tags(storage, idea.tags)
    return idea


def list_ideas(
    storage: Storage,
    status: Optional[IdeaStatus] = None,
    tag: Optional[str] = None,
) -> List[Idea]:
    ideas = storage.load_ideas()
    if status is not None:
        ideas = [idea for idea in ideas if idea.status == status]
    if tag is not None:
        ideas = [idea for idea in ideas if tag in idea.tags]
    return ideas


def get_idea(storage: Storage, idea_id: uuid.UUID) -> Idea:
    ideas = storage.load_ideas()
    return ideas[_index_of(ideas, idea_id)]


def replace_idea_tags(storage: Storage, idea_id: uuid.UUID, tags: Sequence[str]) -> Idea:
    ideas = storage.load_ideas()
    idea = ideas[_index_of(ideas, idea_id)]
    idea.set_tags(_clean_tags(tags))
    storage.save_ideas(ideas)
    register_tags(storage, idea.tags)
    return idea


def set_idea_status(
    storage: Storage, idea_id: uuid.UUID, status: IdeaStatus
) -> Tuple[Idea, IdeaStatus]:
    """Set the status and return the idea along with its previous status."""

    ideas = storage.load_ideas()
    idea = ideas[_index_of(ideas, idea_id)]
    previous = idea.status
    idea.set_status(status)
    storage.save_ideas(ideas)
    return idea, previous


@dataclass
class IdeaUpdate:
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[IdeaStatus] = None
    clear: Sequence[str] = ()


def update_idea(storage: Storage, idea_id: uuid.UUID, update: IdeaUpdate) -> Tuple[Idea, List[str]]:
    """Apply field updates and return the idea with a list of change descriptions."""

    for name in update.clear:
        if name not in CLEARABLE_IDEA_FIELDS:
            raise ValidationError(
                f"Cannot clear '{name}'. Valid fields: {', '.join(CLEARABLE_IDEA_FIELDS)}"
            )

    ideas = storage.load_ideas()
    idea = ideas[_index_of(ideas, idea_id)]
    changes: List[str] = []

    if update.title is not None:
        old = idea.title
        idea.update_title(update.title)
        changes.append(f'title: "{old}" → "{update.title}"')

    if update.description is not None:
        old = idea.description or ""
        idea.update_description(update.description)
        changes.append(f'description: "{old}" → "{update.description}"')

    if update.status is not None:
        old_status = idea.status
        idea.set_status(update.status)
        changes.append(f"status: {old_status} → {update.status}")

    if "description" in update.clear:
        idea.update_description(None)
        changes.append("description: cleared")

    if changes:
        storage.save_ideas(ideas)
    return idea, changes


def apply_idea_document(storage: Storage, idea_id: uuid.UUID, document: EditedDocument) -> Idea:
    ideas = storage.load_ideas()
    idea = ideas[_index_of(ideas, idea_id)]
    apply_to_idea(idea, document)
    storage.save_ideas(ideas)
    register_tags(storage, idea.tags)
    return idea


def delete_idea(storage: Storage, idea_id: uuid.UUID) -> Idea:
    ideas = storage.load_ideas()
    removed = ideas.pop(_index_of(ideas, idea_id))
    storage.save_ideas(ideas)
    return removed


__all__ = [
    "CLEARABLE_IDEA_FIELDS",
    "IdeaUpdate",
    "apply_idea_document",
    "create_idea",
    "delete_idea",
    "find_idea",
    "get_idea",
    "list_ideas",
    "replace_idea_tags",
    "set_idea_status",
    "update_idea",
]
