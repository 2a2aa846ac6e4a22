#!/usr/bin/env python3
"""
MCP Playbook Server

Provides ExtractText, ExtractDocument, SeedStore, ListRecords and GetRecord
tools over the playbook extraction pipeline.
Records are stored in .playbook/records.json relative to the working directory.
"""

import os
from pathlib import Path
from typing import Optional

from mcp.server.fastmcp import FastMCP

from playbook_extractor.config import ConfigError, load_config
from playbook_extractor.pipeline import (
    DocumentLoadError,
    PlaybookPipeline,
    SourceDocument,
    load_document,
)
from playbook_extractor.store import DEFAULT_STORE_PATH, JsonRecordStore, StoreError, reseed

mcp = FastMCP("Playbook Extractor")


def get_working_dir() -> Path:
    """Get the working directory for the record store.

    Priority:
    1. MCP_WORKING_DIR environment variable (explicit override)
    2. PWD or cwd
    """
    if os.environ.get("MCP_WORKING_DIR"):
        return Path(os.environ["MCP_WORKING_DIR"])
    return Path(os.environ.get("PWD", os.getcwd()))


def get_store(project_dir: Optional[str] = None) -> JsonRecordStore:
    base_dir = Path(project_dir) if project_dir else get_working_dir()
    return JsonRecordStore(base_dir / DEFAULT_STORE_PATH)


def get_pipeline(configPath: Optional[str] = None) -> PlaybookPipeline:
    config = load_config(
        Path(configPath) if configPath else None, project_root=get_working_dir()
    )
    return PlaybookPipeline(config)


@mcp.tool()
def ExtractText(
    text: str,
    platform: str = "all",
    kind: str = "general",
    name: str = "inline.md",
) -> dict:
    """
    Extract records from document text.

    Args:
        text: Raw playbook text
        platform: Platform scope (youtube, tiktok, twitch, all)
        kind: Document kind (playbook, content_ideas, analytics, engagement,
            monetization, technical_setup, algorithm, general)
        name: Document name recorded as the tip source

    Returns:
        The four record collections plus errors
    """
    try:
        document = SourceDocument(name=name, text=text, scope=platform, kind=kind)
        return get_pipeline().run([document]).to_dict()
    except (ValueError, ConfigError) as e:
        return {"error": str(e)}


@mcp.tool()
def ExtractDocument(path: str, platform: str = "all", kind: Optional[str] = None) -> dict:
    """
    Extract records from a document file.

    Args:
        path: Path to a UTF-8 document, relative to the working directory
        platform: Platform scope (youtube, tiktok, twitch, all)
        kind: Document kind; detected from the file name when omitted

    Returns:
        The four record collections plus errors
    """
    file_path = Path(path)
    if not file_path.is_absolute():
        file_path = get_working_dir() / file_path
    try:
        document = load_document(file_path, platform=platform, kind=kind)
        return get_pipeline().run([document]).to_dict()
    except DocumentLoadError as e:
        return {"error": str(e), "document": e.filename}
    except (ValueError, ConfigError) as e:
        return {"error": str(e)}


@mcp.tool()
def SeedStore(docsDir: Optional[str] = None, configPath: Optional[str] = None) -> dict:
    """
    Run the configured document manifest and replace the store contents.

    Args:
        docsDir: Directory holding the manifest documents (default from config)
        configPath: Optional TOML or JSON config file

    Returns:
        Extracted counts, seed report and any document load errors
    """
    try:
        pipeline = get_pipeline(configPath)
        docs_dir = Path(docsDir) if docsDir else get_working_dir() / pipeline.config.documents_dir
        result = pipeline.run_manifest(docs_dir)
        report = reseed(get_store(), result)
    except (ConfigError, StoreError) as e:
        return {"error": str(e)}

    return {"extracted": result.counts(), **report.to_dict(), "errors": result.errors}


@mcp.tool()
def ListRecords(recordType: str, platform: Optional[str] = None) -> dict:
    """
    List stored records of one type.

    Args:
        recordType: task, milestone, template or tip
        platform: Optional filter on the record's platform

    Returns:
        Matching records and their count
    """
    try:
        records = get_store().list(recordType, platform=platform)
    except StoreError as e:
        return {"error": str(e)}
    return {"records": records, "count": len(records)}


@mcp.tool()
def GetRecord(recordType: str, recordId: str) -> dict:
    """
    Retrieve a stored record by its ID.

    Args:
        recordType: task, milestone, template or tip
        recordId: The record ID, e.g. "youtube_task_3"

    Returns:
        The stored record
    """
    try:
        record = get_store().get(recordType, recordId)
    except StoreError as e:
        return {"error": str(e)}
    if record is None:
        return {"error": f"{recordType} with ID {recordId} not found"}
    return record.to_dict()


if __name__ == "__main__":
    mcp.run()
