"""
Playbook Extractor - Turns creator playbooks into roadmap records.

Segments loosely structured research documents and extracts Tasks,
Milestones, Templates and Tips for the roadmap and gamification app.
"""

from playbook_extractor.models import (
    PlaybookExtractorError,
    PlatformScope,
    EntityType,
    Difficulty,
    TaskCategory,
    # Records
    Task,
    Milestone,
    Template,
    Tip,
    PlatformSpecific,
    SuccessMetric,
    Resource,
    Requirement,
    Reward,
    Celebration,
    TemplateContent,
)
from playbook_extractor.config import (
    ExtractorConfig,
    ConfigError,
    DocumentEntry,
    TaskProfile,
    NicheAdaptation,
    load_config,
)
from playbook_extractor.context import RunContext, format_identifier
from playbook_extractor.sections import SectionSegmenter, Section, DayBlock
from playbook_extractor.tasks import TaskExtractor
from playbook_extractor.variants import VariantExpander
from playbook_extractor.milestones import MilestoneExtractor
from playbook_extractor.templates import TemplateExtractor
from playbook_extractor.tips import TipExtractor
from playbook_extractor.pipeline import (
    PlaybookPipeline,
    ExtractionResult,
    SourceDocument,
    DocumentKind,
    DocumentLoadError,
    load_document,
)
from playbook_extractor.store import JsonRecordStore, SeedReport, StoreError, reseed
from playbook_extractor.logs import configure_logging

__all__ = [
    # Errors
    "PlaybookExtractorError",
    "ConfigError",
    "DocumentLoadError",
    "StoreError",
    # Vocabularies
    "PlatformScope",
    "EntityType",
    "Difficulty",
    "TaskCategory",
    "DocumentKind",
    # Records
    "Task",
    "Milestone",
    "Template",
    "Tip",
    "PlatformSpecific",
    "SuccessMetric",
    "Resource",
    "Requirement",
    "Reward",
    "Celebration",
    "TemplateContent",
    # Configuration
    "ExtractorConfig",
    "DocumentEntry",
    "TaskProfile",
    "NicheAdaptation",
    "load_config",
    "configure_logging",
    # Pipeline stages
    "SectionSegmenter",
    "Section",
    "DayBlock",
    "RunContext",
    "format_identifier",
    "TaskExtractor",
    "VariantExpander",
    "MilestoneExtractor",
    "TemplateExtractor",
    "TipExtractor",
    # Pipeline
    "PlaybookPipeline",
    "ExtractionResult",
    "SourceDocument",
    "load_document",
    # Storage
    "JsonRecordStore",
    "SeedReport",
    "reseed",
]
