"""Search across ideas, projects, tasks and tags with relevance ranking.

Scoring is a pure function of already-loaded collections so it can be
exercised with in-memory fixtures; :class:`SearchEngine` only adds the
storage round-trip.

Title (or tag name) matches score 100 for an exact match, 80 for a prefix
and 60 for any other substring. Descriptions add 40, each matching idea or
task tag adds 20 and a matching project milestone adds 30.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import ValidationError
from .models import Idea, Project, Tag, Task, utcnow
from .storage import Storage


logger = logging.getLogger(__name__)

EXACT_TITLE_SCORE = 100.0
PREFIX_TITLE_SCORE = 80.0
CONTAINS_TITLE_SCORE = 60.0
DESCRIPTION_SCORE = 40.0
MILESTONE_SCORE = 30.0
TAG_SCORE = 20.0

SNIPPET_CONTEXT = 50
TAG_RESULT_ID = "tag"
TAG_RESULT_STATUS = "Active"

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
)


class EntityType(str, Enum):
    IDEA = "Idea"
    PROJECT = "Project"
    TASK = "Task"
    TAG = "Tag"

    def __str__(self) -> str:
        return self.value


# Tie-break order for equal scores.
KIND_RANK = {
    EntityType.IDEA: 0,
    EntityType.PROJECT: 1,
    EntityType.TASK: 2,
    EntityType.TAG: 3,
}

DEFAULT_ENTITY_TYPES = (EntityType.IDEA, EntityType.PROJECT, EntityType.TAG)


@dataclass
class SearchFilters:
    entity_types: List[EntityType] = field(default_factory=lambda: list(DEFAULT_ENTITY_TYPES))
    status_filter: Optional[str] = None
    tags_filter: List[str] = field(default_factory=list)
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


@dataclass
class SearchResult:
    id: str
    title: str
    description: Optional[str]
    entity_type: EntityType
    status: str
    relevance_score: float
    created_at: datetime
    snippet: Optional[str] = None
    tags: List[str] = field(default_factory=list)


def create_snippet(text: str, query_lower: str) -> str:
    """Return up to 50 characters either side of the first match of the query."""

    position = text.lower().find(query_lower)
    if position < 0:
        return text

    start = max(position - SNIPPET_CONTEXT, 0)
    end = min(position + len(query_lower) + SNIPPET_CONTEXT, len(text))
    snippet = text[start:end]
    return f"...{snippet}" if start > 0 else snippet


def _title_score(title: str, query_lower: str) -> float:
    title_lower = title.lower()
    if query_lower not in title_lower:
        return 0.0
    if title_lower == query_lower:
        return EXACT_TITLE_SCORE
    if title_lower.startswith(query_lower):
        return PREFIX_TITLE_SCORE
    return CONTAINS_TITLE_SCORE


def _score_text_fields(
    title: str,
    description: Optional[str],
    tags: Sequence[str],
    query_lower: str,
) -> Tuple[float, Optional[str]]:
    score = 0.0
    snippet: Optional[str] = None

    title_score = _title_score(title, query_lower)
    if title_score:
        score += title_score
        snippet = create_snippet(title, query_lower)

    if description and query_lower in description.lower():
        score += DESCRIPTION_SCORE
        if snippet is None:
            snippet = create_snippet(description, query_lower)

    for tag in tags:
        if query_lower in tag.lower():
            score += TAG_SCORE
            if snippet is None:
                snippet = f"Tag: {tag}"

    return score, snippet


def search_in_idea(idea: Idea, query: str) -> Optional[SearchResult]:
    query_lower = query.lower()
    if not query_lower:
        return None

    score, snippet = _score_text_fields(idea.title, idea.description, idea.tags, query_lower)
    if score <= 0:
        return None

    return SearchResult(
        id=str(idea.id),
        title=idea.title,
        description=idea.description,
        entity_type=EntityType.IDEA,
        status=idea.status.value,
        relevance_score=score,
        created_at=idea.created_at,
        snippet=snippet,
        tags=list(idea.tags),
    )


def search_in_project(project: Project, query: str) -> Optional[SearchResult]:
    query_lower = query.lower()
    if not query_lower:
        return None

    score, snippet = _score_text_fields(project.title, project.description, (), query_lower)

    if project.milestone and query_lower in project.milestone.lower():
        score += MILESTONE_SCORE
        if snippet is None:
            snippet = f"Milestone: {project.milestone}"

    if score <= 0:
        return None

    return SearchResult(
        id=str(project.id),
        title=project.title,
        description=project.description,
        entity_type=EntityType.PROJECT,
        status=project.status.value,
        relevance_score=score,
        created_at=project.created_at,
        snippet=snippet,
        tags=[],
    )


def search_in_task(task: Task, query: str) -> Optional[SearchResult]:
    query_lower = query.lower()
    if not query_lower:
        return None

    score, snippet = _score_text_fields(task.title, task.description, task.tags, query_lower)
    if score <= 0:
        return None

    return SearchResult(
        id=str(task.id),
        title=task.title,
        description=task.description,
        entity_type=EntityType.TASK,
        status=task.status.value,
        relevance_score=score,
        created_at=task.created_at,
        snippet=snippet,
        tags=list(task.tags),
    )


def search_in_tag(tag: Tag, query: str, now: Optional[datetime] = None) -> Optional[SearchResult]:
    query_lower = query.lower()
    if not query_lower:
        return None

    score = _title_score(tag.name, query_lower)
    if score <= 0:
        return None

    return SearchResult(
        id=TAG_RESULT_ID,
        title=tag.name,
        description=tag.color,
        entity_type=EntityType.TAG,
        status=TAG_RESULT_STATUS,
        relevance_score=score,
        created_at=now or utcnow(),
        snippet=f"Tag: {tag.name}",
        tags=[],
    )


def _status_matches(status: str, filters: SearchFilters) -> bool:
    if filters.status_filter is None:
        return True
    return filters.status_filter.lower() in status.lower()


def _tags_match_all(tags: Sequence[str], filters: SearchFilters) -> bool:
    if not filters.tags_filter:
        return True
    lowered = [tag.lower() for tag in tags]
    return all(
        any(term.lower() in tag for tag in lowered)
        for term in filters.tags_filter
    )


def _date_matches(created_at: datetime, filters: SearchFilters) -> bool:
    if filters.date_from is not None and created_at < filters.date_from:
        return False
    if filters.date_to is not None and created_at > filters.date_to:
        return False
    return True


def matches_idea_filters(idea: Idea, filters: SearchFilters) -> bool:
    return (
        _status_matches(idea.status.value, filters)
        and _tags_match_all(idea.tags, filters)
        and _date_matches(idea.created_at, filters)
    )


def matches_project_filters(project: Project, filters: SearchFilters) -> bool:
    # Projects carry no tags, so the tag filter does not apply to them.
    return _status_matches(project.status.value, filters) and _date_matches(project.created_at, filters)


def matches_task_filters(task: Task, filters: SearchFilters) -> bool:
    return (
        _status_matches(task.status.value, filters)
        and _tags_match_all(task.tags, filters)
        and _date_matches(task.created_at, filters)
    )


def matches_tag_filters(tag: Tag, filters: SearchFilters) -> bool:
    if not filters.tags_filter:
        return True
    name = tag.name.lower()
    return any(term.lower() in name for term in filters.tags_filter)


def rank_results(results: Iterable[SearchResult]) -> List[SearchResult]:
    """Order by score, then kind priority, then the order results were produced."""

    indexed = list(enumerate(results))
    indexed.sort(
        key=lambda item: (-item[1].relevance_score, KIND_RANK[item[1].entity_type], item[0])
    )
    return [result for _, result in indexed]


def search_collections(
    query: str,
    filters: SearchFilters,
    *,
    ideas: Sequence[Idea] = (),
    projects: Sequence[Project] = (),
    tasks: Sequence[Task] = (),
    tags: Sequence[Tag] = (),
    now: Optional[datetime] = None,
) -> List[SearchResult]:
    """Score, filter and rank already-loaded collections."""

    wanted = set(filters.entity_types)
    results: List[SearchResult] = []

    if EntityType.IDEA in wanted:
        for idea in ideas:
            if matches_idea_filters(idea, filters):
                result = search_in_idea(idea, query)
                if result is not None:
                    results.append(result)

    if EntityType.PROJECT in wanted:
        for project in projects:
            if matches_project_filters(project, filters):
                result = search_in_project(project, query)
                if result is not None:
                    results.append(result)

    if EntityType.TASK in wanted:
        for task in tasks:
            if matches_task_filters(task, filters):
                result = search_in_task(task, query)
                if result is not None:
                    results.append(result)

    if EntityType.TAG in wanted:
        stamp = now or utcnow()
        for tag in tags:
            if matches_tag_filters(tag, filters):
                result = search_in_tag(tag, query, now=stamp)
                if result is not None:
                    results.append(result)

    return rank_results(results)


class SearchEngine:
    """Runs searches against collections loaded from storage."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def search(self, query: str, filters: Optional[SearchFilters] = None) -> List[SearchResult]:
        filters = filters or SearchFilters()
        wanted = set(filters.entity_types)

        # Load failures propagate; there are no partial results.
        ideas = self.storage.load_ideas() if EntityType.IDEA in wanted else []
        projects = self.storage.load_projects() if EntityType.PROJECT in wanted else []
        tasks = self.storage.load_tasks() if EntityType.TASK in wanted else []
        tags = self.storage.load_tags() if EntityType.TAG in wanted else []

        results = search_collections(
            query,
            filters,
            ideas=ideas,
            projects=projects,
            tasks=tasks,
            tags=tags,
        )
        logger.debug(
            "Search %r over %s returned %d result(s)",
            query,
            ", ".join(kind.value for kind in filters.entity_types),
            len(results),
        )
        return results


def parse_date(raw: str) -> datetime:
    """Parse a user-supplied date (optionally with a time of day) as UTC."""

    text = raw.strip()
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)

    raise ValidationError(
        f"Unable to parse date: {raw}. Expected formats: YYYY-MM-DD, YYYY/MM/DD, MM/DD/YYYY"
    )


def _truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max(max_len - 3, 0)] + "..."


def format_results(results: Sequence[SearchResult]) -> List[str]:
    """Render search results as printable lines."""

    if not results:
        return ["No results found."]

    lines = [f"Found {len(results)} result(s):", ""]
    for index, result in enumerate(results, 1):
        lines.append(
            f"{index}. {_truncate(result.title, 30)} [{result.entity_type}] (ID: {result.id[:8]})"
        )
        if result.description:
            lines.append(f"   Desc: {_truncate(result.description, 50)}")
        lines.append(
            f"   Status: {result.status} | "
            f"Created: {result.created_at.strftime('%Y-%m-%d %H:%M')} | "
            f"Score: {result.relevance_score:.1f}"
        )
        if result.snippet:
            lines.append(f"   Match: {_truncate(result.snippet, 50)}")
        if result.tags:
            lines.append(f"   Tags: {', '.join(result.tags)}")
        lines.append("")
    return lines


__all__ = [
    "EntityType",
    "SearchEngine",
    "SearchFilters",
    "SearchResult",
    "create_snippet",
    "format_results",
    "parse_date",
    "rank_results",
    "search_collections",
    "search_in_idea",
    "search_in_project",
    "search_in_tag",
    "search_in_task",
]
