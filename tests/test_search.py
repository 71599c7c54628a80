"""Tests for relevance scoring, filtering and result rendering."""

from datetime import datetime, timezone

import pytest

from ideavault_app.errors import ValidationError
from ideavault_app.models import Idea, IdeaStatus, Project, Tag, Task
from ideavault_app.search import (
    EntityType,
    SearchEngine,
    SearchFilters,
    SearchResult,
    create_snippet,
    format_results,
    parse_date,
    rank_results,
    search_collections,
    search_in_idea,
    search_in_project,
    search_in_tag,
    search_in_task,
)


NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _idea(title, description=None, tags=(), created=None, status=IdeaStatus.BRAINSTORMING):
    idea = Idea.new(title)
    idea.description = description
    idea.tags = list(tags)
    idea.status = status
    if created is not None:
        idea.created_at = created
    return idea


class TestScoring:
    def test_exact_title(self):
        result = search_in_idea(_idea("Rust"), "rust")
        assert result.relevance_score == 100

    def test_prefix_title(self):
        assert search_in_idea(_idea("Rust CLI"), "rust").relevance_score == 80

    def test_substring_title(self):
        assert search_in_idea(_idea("Learn Rust"), "rust").relevance_score == 60

    def test_description_and_tag(self):
        idea = _idea("Weekend plan", description="build a tiny rust parser", tags=["rustlang", "fun"])
        result = search_in_idea(idea, "Rust")
        assert result.relevance_score == 60
        assert result.snippet == "build a tiny rust parser"
        assert result.tags == ["rustlang", "fun"]

    def test_each_matching_tag_counts(self):
        idea = _idea("Other", tags=["web", "webdev", "api"])
        result = search_in_idea(idea, "web")
        assert result.relevance_score == 40
        assert result.snippet == "Tag: web"

    def test_no_match_returns_none(self):
        assert search_in_idea(_idea("Something"), "rust") is None

    def test_empty_query_never_matches(self):
        assert search_in_idea(_idea("Rust"), "") is None
        assert search_in_tag(Tag.new("rust"), "") is None

    def test_project_milestone(self):
        project = Project.new("Website")
        project.milestone = "Launch beta"
        result = search_in_project(project, "beta")
        assert result.relevance_score == 30
        assert result.snippet == "Milestone: Launch beta"
        assert result.entity_type is EntityType.PROJECT

    def test_task_scoring(self):
        task = Task.new("Deploy api")
        task.tags = ["api"]
        result = search_in_task(task, "api")
        assert result.relevance_score == 80
        assert result.status == "Todo"

    def test_tag_result_shape(self):
        tag = Tag.new("python").with_color("yellow")
        result = search_in_tag(tag, "py", now=NOW)
        assert result.id == "tag"
        assert result.status == "Active"
        assert result.description == "yellow"
        assert result.created_at == NOW
        assert result.relevance_score == 80
        assert result.snippet == "Tag: python"


class TestSnippet:
    def test_short_text_is_returned_whole(self):
        assert create_snippet("a rust parser", "rust") == "a rust parser"

    def test_long_prefix_gets_ellipsis(self):
        text = "x" * 80 + "needle" + "y" * 80
        snippet = create_snippet(text, "needle")
        assert snippet.startswith("...")
        assert snippet == "..." + "x" * 50 + "needle" + "y" * 50


class TestFilters:
    def test_tags_filter_requires_every_term(self):
        ideas = [
            _idea("rust one", tags=["rust", "cli"]),
            _idea("rust two", tags=["rust"]),
        ]
        filters = SearchFilters(tags_filter=["rust", "cli"])
        results = search_collections("rust", filters, ideas=ideas)
        assert [result.title for result in results] == ["rust one"]

    def test_tags_filter_is_substring_and_case_insensitive(self):
        ideas = [_idea("rust one", tags=["RustLang"])]
        filters = SearchFilters(tags_filter=["rust"])
        assert len(search_collections("rust", filters, ideas=ideas)) == 1

    def test_projects_ignore_tags_filter(self):
        filters = SearchFilters(tags_filter=["anything"])
        results = search_collections("site", filters, projects=[Project.new("Site")])
        assert len(results) == 1

    def test_tag_entities_match_any_term(self):
        filters = SearchFilters(entity_types=[EntityType.TAG], tags_filter=["py", "zzz"])
        results = search_collections("py", filters, tags=[Tag.new("python")], now=NOW)
        assert [result.title for result in results] == ["python"]

    def test_status_filter_is_substring(self):
        ideas = [
            _idea("rust a", status=IdeaStatus.ACTIVE),
            _idea("rust b", status=IdeaStatus.ARCHIVED),
        ]
        filters = SearchFilters(status_filter="act")
        assert [r.title for r in search_collections("rust", filters, ideas=ideas)] == ["rust a"]

    def test_date_range_is_inclusive(self):
        day = datetime(2024, 1, 10, tzinfo=timezone.utc)
        ideas = [
            _idea("rust early", created=datetime(2024, 1, 9, tzinfo=timezone.utc)),
            _idea("rust on day", created=day),
            _idea("rust late", created=datetime(2024, 1, 11, tzinfo=timezone.utc)),
        ]
        filters = SearchFilters(date_from=day, date_to=day)
        results = search_collections("rust", filters, ideas=ideas)
        assert [r.title for r in results] == ["rust on day"]

    def test_tags_are_exempt_from_date_filter(self):
        filters = SearchFilters(date_to=datetime(2000, 1, 1, tzinfo=timezone.utc))
        results = search_collections("rust", filters, tags=[Tag.new("rust")], now=NOW)
        assert len(results) == 1

    def test_tasks_are_not_searched_by_default(self):
        task = Task.new("rust task")
        assert search_collections("rust", SearchFilters(), tasks=[task]) == []
        filters = SearchFilters(entity_types=[EntityType.TASK])
        assert len(search_collections("rust", filters, tasks=[task])) == 1

    def test_entity_restriction(self):
        filters = SearchFilters(entity_types=[EntityType.PROJECT])
        results = search_collections(
            "rust", filters, ideas=[_idea("rust")], projects=[Project.new("rust")]
        )
        assert [r.entity_type for r in results] == [EntityType.PROJECT]


class TestRanking:
    def test_ties_break_by_kind_then_scan_order(self):
        def result(title, kind, score):
            return SearchResult(
                id=title,
                title=title,
                description=None,
                entity_type=kind,
                status="",
                relevance_score=score,
                created_at=NOW,
            )

        ranked = rank_results(
            [
                result("tag", EntityType.TAG, 60),
                result("project", EntityType.PROJECT, 60),
                result("idea-1", EntityType.IDEA, 60),
                result("best", EntityType.TAG, 100),
                result("idea-2", EntityType.IDEA, 60),
            ]
        )
        assert [r.title for r in ranked] == ["best", "idea-1", "idea-2", "project", "tag"]


def test_engine_searches_storage(storage):
    storage.save_ideas([_idea("Ship the launch")])
    storage.save_projects([Project.new("Product launch week")])
    storage.save_tags([Tag.new("launch")])

    results = SearchEngine(storage).search("launch")

    assert [(r.entity_type, r.relevance_score) for r in results] == [
        (EntityType.TAG, 100),
        (EntityType.IDEA, 60),
        (EntityType.PROJECT, 60),
    ]


class TestParseDate:
    @pytest.mark.parametrize(
        "raw",
        ["2024-03-05", "2024/03/05", "03/05/2024", "2024-03-05 00:00:00"],
    )
    def test_accepted_formats(self, raw):
        assert parse_date(raw) == datetime(2024, 3, 5, tzinfo=timezone.utc)

    def test_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Unable to parse date"):
            parse_date("next tuesday")


class TestFormatResults:
    def test_empty(self):
        assert format_results([]) == ["No results found."]

    def test_layout(self):
        idea = _idea("A very long idea title that keeps going", description="desc", tags=["x"])
        idea.created_at = NOW
        lines = format_results([search_in_idea(idea, "idea")])
        assert lines[0] == "Found 1 result(s):"
        assert lines[2] == f"1. A very long idea title that... [Idea] (ID: {str(idea.id)[:8]})"
        assert lines[3] == "   Desc: desc"
        assert lines[4] == "   Status: Brainstorming | Created: 2024-06-01 12:00 | Score: 60.0"
        assert lines[5].startswith("   Match: ")
        assert lines[6] == "   Tags: x"
