"""
Command-line interface for the playbook extractor.

Usage:
    playbook-extractor extract "YouTube Channel Playbooks.md" --platform youtube
    playbook-extractor seed --docs-dir Docs --store .playbook/records.json
    playbook-extractor summary --store .playbook/records.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from playbook_extractor.config import ConfigError, ExtractorConfig, load_config
from playbook_extractor.logs import configure_logging
from playbook_extractor.models import PlatformScope
from playbook_extractor.pipeline import (
    DocumentKind,
    DocumentLoadError,
    ExtractionResult,
    PlaybookPipeline,
    load_document,
)
from playbook_extractor.store import DEFAULT_STORE_PATH, JsonRecordStore, StoreError, reseed

logger = logging.getLogger(__name__)


def add_global_arguments(parser: argparse.ArgumentParser) -> None:
    """Add configuration and logging arguments to parser."""
    parser.add_argument("--config", "-c", type=Path, help="TOML or JSON config file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level (default: WARNING)",
    )
    parser.add_argument("--log-dir", type=Path, help="Also write rotating JSON logs here")


def add_extract_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments for the extract action."""
    parser.add_argument("files", nargs="*", type=Path, help="Documents to extract (extract)")
    parser.add_argument(
        "--platform",
        "-p",
        choices=[scope.value for scope in PlatformScope],
        default=PlatformScope.ALL.value,
        help="Platform scope of the given documents (default: all)",
    )
    parser.add_argument(
        "--kind",
        "-k",
        choices=[kind.value for kind in DocumentKind],
        help="Document kind (default: detected from the file name)",
    )
    parser.add_argument("--output", "-o", type=Path, help="Write JSON here instead of stdout")


def add_store_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments for the seed and summary actions."""
    parser.add_argument("--docs-dir", type=Path, help="Directory holding the manifest documents")
    parser.add_argument(
        "--store",
        type=Path,
        default=DEFAULT_STORE_PATH,
        help=f"Record store file (default: {DEFAULT_STORE_PATH})",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="playbook-extractor",
        description="Extract tasks, milestones, templates and tips from creator playbooks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  playbook-extractor extract "YouTube Channel Playbooks.md" --platform youtube
  playbook-extractor extract notes.md --kind content_ideas --output templates.json
  playbook-extractor seed --docs-dir Docs
  playbook-extractor summary --store .playbook/records.json
""",
    )
    parser.add_argument("action", choices=["extract", "seed", "summary"], help="Action to perform")
    add_global_arguments(parser)
    add_extract_arguments(parser)
    add_store_arguments(parser)
    return parser


def write_output(result: ExtractionResult, output: Optional[Path]) -> None:
    payload = result.to_json()
    if output is None:
        print(payload)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload + "\n", encoding="utf-8")
    print(f"Wrote {result.counts()} to {output}", file=sys.stderr)


def handle_extract(args: argparse.Namespace, config: ExtractorConfig) -> int:
    if not args.files:
        print("Error: extract needs at least one document", file=sys.stderr)
        return 2

    pipeline = PlaybookPipeline(config)
    documents, errors = [], []
    for path in args.files:
        try:
            documents.append(load_document(path, platform=args.platform, kind=args.kind))
        except DocumentLoadError as e:
            logger.error("%s", e)
            errors.append({"document": e.filename, "error": e.reason})

    result = pipeline.run(documents)
    result.errors.extend(errors)
    write_output(result, args.output)
    return 1 if result.has_errors else 0


def handle_seed(args: argparse.Namespace, config: ExtractorConfig) -> int:
    pipeline = PlaybookPipeline(config)
    result = pipeline.run_manifest(args.docs_dir)

    store = JsonRecordStore(args.store)
    report = reseed(store, result)

    print(json.dumps({"extracted": result.counts(), **report.to_dict()}, indent=2))
    for error in result.errors:
        print(f"Error: {error['document']}: {error['error']}", file=sys.stderr)
    return 1 if result.has_errors else 0


def handle_summary(args: argparse.Namespace) -> int:
    store = JsonRecordStore(args.store)
    print(f"Records in {store.path}:")
    for name, count in store.counts().items():
        print(f"  {name + 's':<12} {count}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the playbook-extractor CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level, args.log_dir)

    try:
        config = load_config(args.config)
        if args.action == "extract":
            return handle_extract(args, config)
        if args.action == "seed":
            return handle_seed(args, config)
        return handle_summary(args)
    except (ConfigError, StoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
