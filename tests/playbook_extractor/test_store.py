"""
Test specifications for the Record Store

Records are kept per entity type in one JSON file. Reseeding clears every
collection and inserts a pipeline result, counting per-record failures.

Acceptance Criteria:
- Inserted records survive reopening the store
- get() rebuilds the record object; list() filters by platform
- Reseed reports cleared, inserted and failed counts

Edge Cases:
- Duplicate ids and records without ids are rejected
- Unknown record types raise StoreError
- An unreadable store file raises StoreError
"""

import pytest

from playbook_extractor.models import Task
from playbook_extractor.pipeline import ExtractionResult, PlaybookPipeline, SourceDocument
from playbook_extractor.store import JsonRecordStore, StoreError, reseed


# Test fixtures
PLAYBOOK = """Day 1
- Upload your first video (2 hours)
- Reply to early comments

Goals:
- Reach 100 subscribers this week
"""


@pytest.fixture
def result():
    doc = SourceDocument("YouTube Channel Playbooks.md", PLAYBOOK, scope="youtube")
    return PlaybookPipeline().run([doc])


@pytest.fixture
def store(tmp_path):
    return JsonRecordStore(tmp_path / "records.json")


class TestRecordStore:
    """Insert, read and persistence."""

    def test_insert_and_get(self, store, result):
        """A stored task comes back as a Task."""
        task = result.tasks[0]
        store.insert("task", task)
        loaded = store.get("task", task.id)
        assert isinstance(loaded, Task)
        assert loaded.title == task.title
        assert loaded.instructions == task.instructions
        assert store.get("task", "nope") is None

    def test_plural_type_names(self, store, result):
        """'tasks' and 'task' name the same collection."""
        store.insert("tasks", result.tasks[0])
        assert store.count("task") == 1

    def test_duplicate_id(self, store, result):
        """Inserting the same id twice fails."""
        store.insert("task", result.tasks[0])
        with pytest.raises(StoreError, match="Duplicate"):
            store.insert("task", result.tasks[0])

    def test_missing_id(self, store):
        """Records need an id."""
        with pytest.raises(StoreError):
            store.insert("tip", {"title": "No id here"})

    def test_unknown_type(self, store):
        """Unknown record types are rejected."""
        with pytest.raises(StoreError, match="Unknown record type"):
            store.list("widgets")

    def test_persistence(self, tmp_path, result):
        """A reopened store sees earlier inserts."""
        path = tmp_path / "nested" / "records.json"
        JsonRecordStore(path).insert("milestone", result.milestones[0])
        reopened = JsonRecordStore(path)
        assert reopened.count("milestone") == 1
        assert not path.with_suffix(".tmp").exists()

    def test_list_platform_filter(self, store, result):
        """list() filters on the platform field."""
        for task in result.tasks:
            store.insert("task", task, save=False)
        assert len(store.list("task", platform="youtube")) == 2
        assert store.list("task", platform="tiktok") == []

    def test_corrupt_file(self, tmp_path):
        """An unparsable store file raises StoreError."""
        path = tmp_path / "records.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(StoreError):
            JsonRecordStore(path)


class TestReseed:
    """Replacing store contents with a pipeline result."""

    def test_reseed_replaces_contents(self, store, result):
        """Old records are cleared and new ones inserted."""
        store.insert("tip", {"id": "old_tip_1", "content": "stale"})
        report = reseed(store, result)
        assert report.cleared["tip"] == 1
        assert report.inserted == {"task": 2, "milestone": 1, "template": 0, "tip": 0}
        assert report.failed == 0
        assert store.get("tip", "old_tip_1") is None
        assert store.counts()["task"] == 2

    def test_failures_counted(self, store, result):
        """A duplicate record fails alone; the rest are inserted."""
        task = result.tasks[0]
        report = reseed(store, ExtractionResult(tasks=[task, task]))
        assert report.inserted["task"] == 1
        assert report.failed == 1
        assert report.failures[0]["id"] == task.id
        assert report.to_dict()["failed"] == 1
