"""Tests for JSON collection persistence."""

import json
import uuid
from datetime import datetime, timezone

import pytest

from ideavault_app.errors import ParseError
from ideavault_app.models import Idea, Project, Tag, Task
from ideavault_app.storage import Storage


def test_creates_data_dir(tmp_path):
    target = tmp_path / "nested" / "vault"
    storage = Storage(target)
    assert target.is_dir()
    assert storage.ideas_file == target / "ideas.json"


def test_missing_files_load_empty(storage):
    assert storage.load_ideas() == []
    assert storage.load_projects() == []
    assert storage.load_tags() == []
    assert storage.load_tasks() == []


def test_empty_collection_round_trip(storage):
    storage.save_ideas([])
    assert storage.ideas_file.read_text(encoding="utf-8").strip() == "[]"
    assert storage.load_ideas() == []


def test_ideas_round_trip(storage):
    ideas = [
        Idea.new("First").with_tags(["a", "b"]),
        Idea.new("Second").with_description("Détails"),
    ]
    storage.save_ideas(ideas)
    assert storage.load_ideas() == ideas


def test_projects_round_trip(storage):
    project = Project.new("Site").with_milestone("v1").with_ideas([uuid.uuid4()])
    storage.save_projects([project])
    assert storage.load_projects() == [project]


def test_tasks_round_trip(storage):
    task = Task.new("Ship").with_due_date(datetime(2024, 1, 2, tzinfo=timezone.utc))
    storage.save_tasks([task])
    assert storage.load_tasks() == [task]


def test_tags_round_trip(storage):
    tags = [Tag.new("rust"), Tag.new("web").with_color("blue")]
    storage.save_tags(tags)
    assert storage.load_tags() == tags


def test_written_json_is_indented_with_z_timestamps(storage):
    storage.save_ideas([Idea.new("First")])
    text = storage.ideas_file.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    payload = json.loads(text)
    assert payload[0]["status"] == "Brainstorming"
    assert payload[0]["created_at"].endswith("Z")


def test_accepts_nanosecond_timestamps(storage):
    storage.ideas_file.write_text(
        json.dumps(
            [
                {
                    "id": str(uuid.uuid4()),
                    "title": "Legacy",
                    "description": None,
                    "tags": [],
                    "status": "Active",
                    "created_at": "2024-01-01T10:00:00.123456789Z",
                    "updated_at": "2024-01-01T10:00:00.123456789Z",
                }
            ]
        ),
        encoding="utf-8",
    )
    (idea,) = storage.load_ideas()
    assert idea.title == "Legacy"
    assert idea.created_at.microsecond == 123456


def test_malformed_json_raises_parse_error(storage):
    storage.tasks_file.write_text("{not json", encoding="utf-8")
    with pytest.raises(ParseError):
        storage.load_tasks()


def test_non_array_payload_raises_parse_error(storage):
    storage.tags_file.write_text('{"name": "rust"}', encoding="utf-8")
    with pytest.raises(ParseError, match="JSON array"):
        storage.load_tags()


def test_bad_record_raises_parse_error(storage):
    storage.projects_file.write_text('[{"title": "no id"}]', encoding="utf-8")
    with pytest.raises(ParseError):
        storage.load_projects()


def test_default_dir_comes_from_settings(data_dir):
    storage = Storage()
    assert storage.data_dir == data_dir.resolve()


def test_invalid_utf8_raises_parse_error(storage):
    storage.ideas_file.write_bytes(b'[{"title": "\xff\xfe"}]')
    with pytest.raises(ParseError, match="Failed to parse ideas"):
        storage.load_ideas()


def test_explicit_dir_overrides_settings(data_dir, tmp_path):
    other = tmp_path / "other"
    storage = Storage(other)
    assert storage.data_dir == other
    assert storage.tasks_file == other / "tasks.json"
