"""
Test specifications for the MCP Playbook Server tools

Acceptance Criteria:
- ExtractText returns the four collections for inline text
- SeedStore fills the store under the working directory
- ListRecords and GetRecord read stored records back

Edge Cases:
- Invalid platforms and unknown record types come back as error dicts
- Unknown record ids come back as error dicts
"""

import json

import pytest

from mcp_playbooks.server import ExtractDocument, ExtractText, GetRecord, ListRecords, SeedStore


# Test fixtures
PLAYBOOK = """Day 1
- Upload your first video (2 hours)

Goals:
- Reach 100 subscribers this week
"""


@pytest.fixture(autouse=True)
def working_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("MCP_WORKING_DIR", str(tmp_path))
    return tmp_path


class TestExtractTools:
    """ExtractText and ExtractDocument."""

    def test_extract_text(self):
        """Inline text is parsed with the given platform and kind."""
        result = ExtractText(PLAYBOOK, platform="twitch", kind="playbook")
        assert [t["id"] for t in result["tasks"]] == ["twitch_task_1"]
        assert len(result["milestones"]) == 1

    def test_extract_text_invalid_platform(self):
        """Unknown platforms are reported as errors."""
        assert "error" in ExtractText(PLAYBOOK, platform="myspace")

    def test_extract_document_relative_path(self, working_dir):
        """Relative paths resolve against the working directory."""
        (working_dir / "notes.md").write_text(PLAYBOOK, encoding="utf-8")
        result = ExtractDocument("notes.md", platform="youtube")
        assert result["tasks"][0]["platform"] == "youtube"

    def test_extract_document_missing(self):
        """Missing files are reported with their name."""
        result = ExtractDocument("gone.md")
        assert result["document"] == "gone.md"


class TestStoreTools:
    """SeedStore, ListRecords and GetRecord."""

    def test_seed_list_get(self, working_dir):
        """Seeded records can be listed and fetched."""
        (working_dir / "YouTube Channel Playbooks.md").write_text(PLAYBOOK, encoding="utf-8")
        config = working_dir / "extractor.json"
        config.write_text(
            json.dumps({"documents": [{"file": "YouTube Channel Playbooks.md", "platform": "youtube"}]})
        )

        report = SeedStore(docsDir=str(working_dir), configPath=str(config))
        assert report["extracted"]["tasks"] == 1
        assert report["errors"] == []

        listed = ListRecords("tasks", platform="youtube")
        assert listed["count"] == 1

        record = GetRecord("task", "youtube_task_1")
        assert record["title"] == "Upload your first video"

    def test_unknown_record(self):
        """Unknown ids and types are errors."""
        assert "not found" in GetRecord("task", "youtube_task_99")["error"]
        assert "error" in ListRecords("widgets")
