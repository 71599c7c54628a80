"""Registry of known tags, kept in step with idea and task tags."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional, Tuple

from .models import Tag
from .storage import Storage


def register_tags(storage: Storage, names: Iterable[str]) -> List[Tag]:
    """Add any unseen tag names to the registry and return the new entries."""

    tags = storage.load_tags()
    known = {tag.name for tag in tags}
    added: List[Tag] = []
    for name in names:
        cleaned = name.strip()
        if not cleaned or cleaned in known:
            continue
        tag = Tag.new(cleaned)
        tags.append(tag)
        added.append(tag)
        known.add(cleaned)

    if added:
        storage.save_tags(tags)
    return added


def tag_usage(storage: Storage) -> List[Tuple[str, Optional[str], int]]:
    """Return (name, color, count) rows across ideas and tasks, most used first."""

    counter: Counter[str] = Counter()
    for idea in storage.load_ideas():
        counter.update(tag for tag in idea.tags if tag)
    for task in storage.load_tasks():
        counter.update(tag for tag in task.tags if tag)

    colors = {tag.name: tag.color for tag in storage.load_tags()}
    names = list(colors) + [name for name in counter if name not in colors]
    rows = [(name, colors.get(name), counter.get(name, 0)) for name in names]
    rows.sort(key=lambda row: (-row[2], row[0].lower()))
    return rows


def set_tag_color(storage: Storage, name: str, color: Optional[str]) -> Tag:
    tags = storage.load_tags()
    for tag in tags:
        if tag.name == name:
            tag.set_color(color)
            break
    else:
        tag = Tag.new(name)
        tag.set_color(color)
        tags.append(tag)

    storage.save_tags(tags)
    return tag


__all__ = ["register_tags", "tag_usage", "set_tag_color"]
