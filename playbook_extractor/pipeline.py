"""
Extraction Pipeline

Routes each source document to the extractors for its kind and concatenates
the results into four flat collections: tasks, milestones, templates, tips.

Documents are processed one at a time in the order given. A document that
cannot be read is reported in ``ExtractionResult.errors`` and skipped; every
other document always yields output through the extractors' fallbacks.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from playbook_extractor.config import DocumentEntry, ExtractorConfig
from playbook_extractor.context import RunContext
from playbook_extractor.milestones import MilestoneExtractor
from playbook_extractor.models import (
    Difficulty,
    EntityType,
    Milestone,
    PlatformScope,
    PlaybookExtractorError,
    Task,
    Template,
    Tip,
)
from playbook_extractor.sections import Section, SectionSegmenter
from playbook_extractor.tasks import TaskExtractor
from playbook_extractor.templates import TemplateExtractor
from playbook_extractor.tips import TipExtractor

logger = logging.getLogger(__name__)


class DocumentLoadError(PlaybookExtractorError):
    """Raised when a source document is missing or unreadable."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"Could not load document '{filename}': {reason}")
        self.filename = filename
        self.reason = reason


class DocumentKind(Enum):
    """What a research document is about; decides which extractors run."""

    PLAYBOOK = "playbook"
    CONTENT_IDEAS = "content_ideas"
    ANALYTICS = "analytics"
    ENGAGEMENT = "engagement"
    MONETIZATION = "monetization"
    TECHNICAL_SETUP = "technical_setup"
    ALGORITHM = "algorithm"
    GENERAL = "general"


# File-name keyword for each kind, checked in order
KIND_KEYWORDS = [
    ("playbook", DocumentKind.PLAYBOOK),
    ("content idea", DocumentKind.CONTENT_IDEAS),
    ("analytics", DocumentKind.ANALYTICS),
    ("engagement", DocumentKind.ENGAGEMENT),
    ("monetization", DocumentKind.MONETIZATION),
    ("technical setup", DocumentKind.TECHNICAL_SETUP),
    ("algorithm", DocumentKind.ALGORITHM),
]

# Default tip category and difficulty per kind
TIP_DEFAULTS: dict[DocumentKind, tuple[str, Optional[Difficulty]]] = {
    DocumentKind.ANALYTICS: ("analytics", Difficulty.INTERMEDIATE),
    DocumentKind.ENGAGEMENT: ("engagement", Difficulty.BEGINNER),
    DocumentKind.ALGORITHM: ("growth", Difficulty.ADVANCED),
    DocumentKind.MONETIZATION: ("monetization", None),
    DocumentKind.CONTENT_IDEAS: ("content", None),
}


def detect_kind(filename: str) -> DocumentKind:
    lower = filename.lower()
    for keyword, kind in KIND_KEYWORDS:
        if keyword in lower:
            return kind
    return DocumentKind.GENERAL


@dataclass
class SourceDocument:
    """Raw document text with its declared platform scope and kind."""

    name: str
    text: str
    scope: PlatformScope = PlatformScope.ALL
    kind: Optional[DocumentKind] = None

    def __post_init__(self) -> None:
        # Unknown scopes or kinds raise ValueError
        if isinstance(self.scope, str):
            self.scope = PlatformScope(self.scope.lower())
        if isinstance(self.kind, str):
            self.kind = DocumentKind(self.kind.lower())
        if self.kind is None:
            self.kind = detect_kind(self.name)

    @property
    def source_name(self) -> str:
        """Document name without its file extension."""
        return Path(self.name).stem


def load_document(
    path: Path,
    platform: Union[PlatformScope, str] = PlatformScope.ALL,
    kind: Union[DocumentKind, str, None] = None,
) -> SourceDocument:
    """
    Read a UTF-8 document from disk.

    Raises:
        DocumentLoadError: If the file is missing or cannot be decoded
    """
    if not path.exists():
        raise DocumentLoadError(path.name, "file not found")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(path.name, str(e)) from e
    return SourceDocument(name=path.name, text=text, scope=platform, kind=kind)


@dataclass
class ExtractionResult:
    """The four output collections plus per-document load errors."""

    tasks: list[Task] = field(default_factory=list)
    milestones: list[Milestone] = field(default_factory=list)
    templates: list[Template] = field(default_factory=list)
    tips: list[Tip] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)

    def records(self, entity_type: EntityType) -> list:
        return {
            EntityType.TASK: self.tasks,
            EntityType.MILESTONE: self.milestones,
            EntityType.TEMPLATE: self.templates,
            EntityType.TIP: self.tips,
        }[entity_type]

    def merge(self, other: ExtractionResult) -> ExtractionResult:
        """Append another result's records and errors in place."""
        self.tasks.extend(other.tasks)
        self.milestones.extend(other.milestones)
        self.templates.extend(other.templates)
        self.tips.extend(other.tips)
        self.errors.extend(other.errors)
        return self

    def counts(self) -> dict[str, int]:
        return {
            "tasks": len(self.tasks),
            "milestones": len(self.milestones),
            "templates": len(self.templates),
            "tips": len(self.tips),
        }

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "milestones": [m.to_dict() for m in self.milestones],
            "templates": [t.to_dict() for t in self.templates],
            "tips": [t.to_dict() for t in self.tips],
            "errors": list(self.errors),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


Step = Callable[[SourceDocument, list[Section], RunContext, ExtractionResult], None]


class PlaybookPipeline:
    """Run the extractors over a set of documents."""

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()
        self.segmenter = SectionSegmenter()
        self.task_extractor = TaskExtractor(self.config)
        self.milestone_extractor = MilestoneExtractor()
        self.template_extractor = TemplateExtractor(self.config)

        self._steps: dict[DocumentKind, list[Step]] = {
            DocumentKind.PLAYBOOK: [self._day_tasks, self._milestones, self._tips],
            DocumentKind.CONTENT_IDEAS: [self._templates, self._tips],
            DocumentKind.ANALYTICS: [self._analytics_tasks, self._tips],
            DocumentKind.ENGAGEMENT: [self._engagement_tasks, self._strategy_tips, self._tips],
            DocumentKind.MONETIZATION: [self._monetization_milestones, self._tips],
            DocumentKind.TECHNICAL_SETUP: [self._technical_tasks, self._tips],
            DocumentKind.ALGORITHM: [self._algorithm_tips, self._tips],
            DocumentKind.GENERAL: [self._day_tasks, self._milestones, self._tips],
        }

    # =========================================================================
    # Public operations
    # =========================================================================

    def parse_document(
        self, document: SourceDocument, ctx: Optional[RunContext] = None
    ) -> ExtractionResult:
        """Run every extractor for the document's kind."""
        ctx = ctx or RunContext()
        sections = self.segmenter.segment(document.text, document.scope)
        result = ExtractionResult()

        for step in self._steps[document.kind]:
            step(document, sections, ctx, result)

        result.tips = self._distinct_tips(result.tips)
        logger.info(
            "Parsed %s (%s, %s): %s",
            document.name,
            document.kind.value,
            document.scope.value,
            result.counts(),
        )
        return result

    def parse_kind(
        self,
        documents: list[SourceDocument],
        kind: Union[DocumentKind, str],
        ctx: Optional[RunContext] = None,
    ) -> ExtractionResult:
        """Parse only the documents of one kind."""
        kind = DocumentKind(kind) if isinstance(kind, str) else kind
        ctx = ctx or RunContext()
        result = ExtractionResult()
        for document in documents:
            if document.kind == kind:
                result.merge(self.parse_document(document, ctx))
        return result

    def run(
        self, documents: list[SourceDocument], ctx: Optional[RunContext] = None
    ) -> ExtractionResult:
        """Parse every document and concatenate the results."""
        ctx = ctx or RunContext()
        result = ExtractionResult()
        for document in documents:
            result.merge(self.parse_document(document, ctx))
        logger.info(
            "Run %s (started %s) complete: %s", ctx.run_id, ctx.started_at, result.counts()
        )
        return result

    def load_manifest(
        self, docs_dir: Optional[Path] = None
    ) -> tuple[list[SourceDocument], list[dict]]:
        """Load the configured documents; unreadable ones are returned as errors."""
        base = docs_dir or Path(self.config.documents_dir)
        documents, errors = [], []
        for entry in self.config.documents:
            try:
                documents.append(self._load_entry(base, entry))
            except DocumentLoadError as e:
                logger.error("%s", e)
                errors.append({"document": e.filename, "error": e.reason})
        return documents, errors

    def run_manifest(
        self, docs_dir: Optional[Path] = None, ctx: Optional[RunContext] = None
    ) -> ExtractionResult:
        documents, errors = self.load_manifest(docs_dir)
        result = self.run(documents, ctx)
        result.errors.extend(errors)
        return result

    @staticmethod
    def _load_entry(base: Path, entry: DocumentEntry) -> SourceDocument:
        return load_document(base / entry.file, platform=entry.platform, kind=entry.kind)

    # =========================================================================
    # Steps
    # =========================================================================

    def _day_tasks(self, doc, sections, ctx, result) -> None:
        result.tasks.extend(self.task_extractor.extract(sections, doc.scope, ctx))

    def _analytics_tasks(self, doc, sections, ctx, result) -> None:
        result.tasks.extend(self.task_extractor.extract_analytics(doc.text, doc.scope, ctx))

    def _engagement_tasks(self, doc, sections, ctx, result) -> None:
        result.tasks.extend(self.task_extractor.extract_engagement(doc.text, doc.scope, ctx))

    def _technical_tasks(self, doc, sections, ctx, result) -> None:
        result.tasks.extend(self.task_extractor.extract_technical(doc.text, doc.scope, ctx))

    def _milestones(self, doc, sections, ctx, result) -> None:
        result.milestones.extend(self.milestone_extractor.extract(doc.text, doc.scope, ctx))

    def _monetization_milestones(self, doc, sections, ctx, result) -> None:
        result.milestones.extend(
            self.milestone_extractor.extract_monetization(doc.text, doc.scope, ctx)
        )

    def _templates(self, doc, sections, ctx, result) -> None:
        result.templates.extend(self.template_extractor.extract(sections, doc.scope, ctx))

    def _tips(self, doc, sections, ctx, result) -> None:
        result.tips.extend(
            self._tip_extractor(doc.kind).extract(sections, doc.scope, doc.source_name, ctx)
        )

    def _strategy_tips(self, doc, sections, ctx, result) -> None:
        result.tips.extend(
            self._tip_extractor(doc.kind).extract_strategies(
                doc.text, doc.scope, doc.source_name, ctx
            )
        )

    def _algorithm_tips(self, doc, sections, ctx, result) -> None:
        result.tips.extend(
            self._tip_extractor(doc.kind).extract_algorithm(
                doc.text, doc.scope, doc.source_name, ctx
            )
        )

    @staticmethod
    def _tip_extractor(kind: DocumentKind) -> TipExtractor:
        category, difficulty = TIP_DEFAULTS.get(kind, ("general", None))
        return TipExtractor(default_category=category, default_difficulty=difficulty)

    @staticmethod
    def _distinct_tips(tips: list[Tip]) -> list[Tip]:
        seen: set[str] = set()
        distinct = []
        for tip in tips:
            if tip.content in seen:
                logger.debug("Dropping duplicate tip %s", tip.id)
                continue
            seen.add(tip.content)
            distinct.append(tip)
        return distinct
