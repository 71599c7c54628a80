"""Tests for entity records, enum parsing and timestamp handling."""

import uuid
from datetime import datetime, timezone

import pytest

from ideavault_app.errors import ValidationError
from ideavault_app.models import (
    Idea,
    IdeaStatus,
    Project,
    ProjectStatus,
    Tag,
    Task,
    TaskPriority,
    TaskStatus,
    format_timestamp,
    parse_id,
    parse_timestamp,
)


class TestTimestamps:
    def test_format_uses_z_suffix(self):
        stamp = datetime(2024, 3, 1, 12, 30, 0, 123456, tzinfo=timezone.utc)
        assert format_timestamp(stamp) == "2024-03-01T12:30:00.123456Z"

    def test_parse_accepts_z_and_offset(self):
        a = parse_timestamp("2024-03-01T12:30:00Z")
        b = parse_timestamp("2024-03-01T12:30:00+00:00")
        assert a == b
        assert a.tzinfo is not None

    def test_parse_truncates_nanoseconds(self):
        value = parse_timestamp("2024-03-01T12:30:00.123456789Z")
        assert value.microsecond == 123456

    def test_parse_pads_short_fraction(self):
        value = parse_timestamp("2024-03-01T12:30:00.5Z")
        assert value.microsecond == 500000

    def test_naive_timestamp_is_treated_as_utc(self):
        value = parse_timestamp("2024-03-01T12:30:00")
        assert value.utcoffset().total_seconds() == 0


class TestParseId:
    def test_valid(self):
        raw = uuid.uuid4()
        assert parse_id(f"  {raw} ") == raw

    def test_invalid(self):
        with pytest.raises(ValidationError, match="Invalid ID"):
            parse_id("not-a-uuid")


class TestChoices:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("brainstorm", IdeaStatus.BRAINSTORMING),
            ("ACTIVE", IdeaStatus.ACTIVE),
            ("done", IdeaStatus.COMPLETED),
            ("archive", IdeaStatus.ARCHIVED),
        ],
    )
    def test_idea_status_aliases(self, raw, expected):
        assert IdeaStatus.parse(raw) is expected

    def test_project_status_aliases(self):
        assert ProjectStatus.parse("in-progress") is ProjectStatus.IN_PROGRESS
        assert ProjectStatus.parse("hold") is ProjectStatus.ON_HOLD

    def test_task_aliases(self):
        assert TaskStatus.parse("x") is TaskStatus.DONE
        assert TaskStatus.parse("ip") is TaskStatus.IN_PROGRESS
        assert TaskPriority.parse("crit") is TaskPriority.URGENT
        assert TaskPriority.parse("Med") is TaskPriority.MEDIUM

    def test_invalid_status_lists_choices(self):
        with pytest.raises(ValidationError) as excinfo:
            IdeaStatus.parse("someday")
        assert "Invalid status" in str(excinfo.value)
        assert "Brainstorming" in str(excinfo.value)

    def test_invalid_priority_uses_priority_label(self):
        with pytest.raises(ValidationError, match="Invalid priority"):
            TaskPriority.parse("whenever")

    def test_display_name(self):
        assert str(ProjectStatus.ON_HOLD) == "OnHold"
        assert f"{TaskStatus.IN_PROGRESS}" == "InProgress"


class TestIdea:
    def test_new_defaults(self):
        idea = Idea.new("Write a book")
        assert idea.status is IdeaStatus.BRAINSTORMING
        assert idea.tags == []
        assert idea.description is None
        assert idea.created_at == idea.updated_at

    def test_with_tags_dedupes_and_copies(self):
        idea = Idea.new("Write a book")
        tagged = idea.with_tags(["writing", "fun", "writing"])
        assert tagged.tags == ["writing", "fun"]
        assert idea.tags == []
        assert tagged.id == idea.id

    def test_add_existing_tag_does_not_touch(self):
        idea = Idea.new("Write a book").with_tags(["writing"])
        before = idea.updated_at
        idea.add_tag("writing")
        assert idea.tags == ["writing"]
        assert idea.updated_at == before

    def test_remove_missing_tag_does_not_touch(self):
        idea = Idea.new("Write a book")
        before = idea.updated_at
        idea.remove_tag("absent")
        assert idea.updated_at == before

    def test_add_and_remove_tag(self):
        idea = Idea.new("Write a book")
        idea.add_tag("writing")
        assert idea.tags == ["writing"]
        assert idea.updated_at >= idea.created_at
        idea.remove_tag("writing")
        assert idea.tags == []

    def test_dict_round_trip(self):
        idea = Idea.new("Write a book").with_description("Fantasy").with_tags(["a"])
        assert Idea.from_dict(idea.to_dict()) == idea


class TestProject:
    def test_add_idea_is_idempotent(self):
        project = Project.new("Site")
        idea_id = uuid.uuid4()
        project.add_idea(idea_id)
        stamp = project.updated_at
        project.add_idea(idea_id)
        assert project.idea_ids == [idea_id]
        assert project.idea_count == 1
        assert project.updated_at == stamp

    def test_dict_keeps_links(self):
        project = Project.new("Site").with_ideas([uuid.uuid4(), uuid.uuid4()]).with_url("https://x.test")
        restored = Project.from_dict(project.to_dict())
        assert restored == project
        assert restored.url == "https://x.test"


class TestTask:
    def test_new_defaults(self):
        task = Task.new("Call Bob")
        assert task.status is TaskStatus.TODO
        assert task.priority is TaskPriority.MEDIUM
        assert task.due_date is None

    def test_overdue(self):
        past = datetime(2020, 1, 1, tzinfo=timezone.utc)
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        task = Task.new("Call Bob").with_due_date(past)
        assert task.is_overdue(now)
        task.set_status(TaskStatus.DONE)
        assert not task.is_overdue(now)

    def test_links(self):
        task = Task.new("Call Bob")
        project_id = uuid.uuid4()
        task.link_project(project_id)
        assert task.project_id == project_id
        task.unlink_project()
        assert task.project_id is None

    def test_dict_round_trip_with_optional_fields(self):
        task = (
            Task.new("Call Bob")
            .with_due_date(datetime(2024, 5, 1, tzinfo=timezone.utc))
            .with_idea(uuid.uuid4())
            .with_tags(["phone"])
        )
        assert Task.from_dict(task.to_dict()) == task


def test_tag_color():
    tag = Tag.new("rust")
    assert tag.color is None
    colored = tag.with_color("orange")
    assert colored.color == "orange"
    assert tag.color is None
    assert Tag.from_dict(colored.to_dict()) == colored


def test_idea_copy_owns_its_tags():
    idea = Idea.new("Write a book")
    copy = idea.with_status(IdeaStatus.ACTIVE)
    copy.add_tag("leak")
    assert idea.tags == []
    assert copy.tags == ["leak"]


def test_project_copy_owns_its_idea_links():
    project = Project.new("Site")
    copy = project.with_status(ProjectStatus.IN_PROGRESS)
    copy.add_idea(uuid.uuid4())
    assert project.idea_ids == []
    assert copy.idea_count == 1


def test_task_copy_owns_its_tags():
    task = Task.new("Call Bob").with_tags(["phone"])
    copy = task.with_priority(TaskPriority.HIGH)
    copy.remove_tag("phone")
    assert task.tags == ["phone"]
    assert copy.tags == []
