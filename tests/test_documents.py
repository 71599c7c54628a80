"""Tests for editor document rendering and parsing."""

import pytest

from ideavault_app.documents import (
    apply_to_idea,
    apply_to_task,
    parse_document,
    render_idea,
    render_task,
)
from ideavault_app.errors import ParseError
from ideavault_app.models import Idea, IdeaStatus, Task, TaskPriority, TaskStatus


def test_render_idea_layout():
    idea = Idea.new("Garden robot").with_description("Waters plants").with_tags(["hw", "fun"])
    assert render_idea(idea) == (
        "# Garden robot\n\nWaters plants\n\nTags: hw, fun\n\nStatus: Brainstorming\n\n"
    )


def test_render_task_layout():
    task = Task.new("Order parts").with_tags(["shop"])
    assert render_task(task) == (
        "# Order parts\n\n\n\nPriority: Medium\nStatus: Todo\nTags: shop\n\n"
    )


def test_parse_round_trips_idea_fields():
    idea = Idea.new("Garden robot").with_description("Waters plants").with_tags(["hw", "fun"])
    document = parse_document(render_idea(idea))
    assert document.title == "Garden robot"
    assert document.description == "Waters plants"
    assert document.tags == ["hw", "fun"]
    assert document.status == "Brainstorming"
    assert document.priority is None


def test_multi_line_description_drops_blank_lines():
    text = "# Title\n\nfirst line\n\n  second line  \n\nTags: a\n"
    assert parse_document(text).description == "first line\nsecond line"


def test_empty_description_is_none():
    assert parse_document("# Title\n\n\nStatus: Active\n").description is None


def test_blank_tags_line_clears_tags():
    assert parse_document("# Title\n\nTags:\n").tags == []


def test_missing_title_raises():
    with pytest.raises(ParseError):
        parse_document("no heading here\nStatus: Active\n")


def test_empty_title_raises():
    with pytest.raises(ParseError):
        parse_document("# \n\nbody\n")


def test_apply_to_idea_updates_fields():
    idea = Idea.new("Old").with_description("keep me")
    document = parse_document("# New\n\n\n\nTags: a, b, a\n\nStatus: active\n")
    apply_to_idea(idea, document)
    assert idea.title == "New"
    assert idea.description == "keep me"
    assert idea.tags == ["a", "b"]
    assert idea.status is IdeaStatus.ACTIVE


def test_apply_rejects_unknown_status_without_mutating():
    idea = Idea.new("Old")
    document = parse_document("# New\n\nStatus: someday\n")
    with pytest.raises(ParseError, match="Invalid status"):
        apply_to_idea(idea, document)
    assert idea.title == "Old"


def test_apply_to_task_sets_priority_and_status():
    task = Task.new("Old")
    document = parse_document("# Old\n\nnotes\n\nPriority: high\nStatus: blocked\nTags: x\n")
    apply_to_task(task, document)
    assert task.priority is TaskPriority.HIGH
    assert task.status is TaskStatus.BLOCKED
    assert task.description == "notes"
    assert task.tags == ["x"]


def test_apply_to_task_rejects_unknown_priority():
    task = Task.new("Old")
    with pytest.raises(ParseError, match="Invalid priority"):
        apply_to_task(task, parse_document("# Old\n\nPriority: asap\n"))
    assert task.priority is TaskPriority.MEDIUM
