"""
Extractor Configuration

Pydantic models for the data the extractors consult: platform niche lists,
niche adaptation table, seed tips/practices/mistakes, task profiles and the
document manifest. Built-in defaults are the product's published lists;
deployments override them through ``pyproject.toml`` or a config file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from playbook_extractor.models import PlaybookExtractorError

logger = logging.getLogger(__name__)

PYPROJECT_TABLE = "playbook-extractor"


class ConfigError(PlaybookExtractorError):
    """Raised when an explicit configuration source is missing or invalid."""

    pass


# =============================================================================
# Built-in data
# =============================================================================

DEFAULT_PLATFORM_NICHES = {
    "youtube": ["gaming", "education", "lifestyle", "tech", "entertainment"],
    "tiktok": ["entertainment", "education", "lifestyle", "comedy", "dance"],
    "twitch": ["gaming", "justchatting", "music", "art", "coding"],
}

DEFAULT_PLATFORM_TIPS = {
    "youtube": [
        "Upload in 1080p or higher",
        "Use end screens and cards",
        "Optimize for suggested videos",
    ],
    "tiktok": [
        "Use trending sounds",
        "Keep videos under 60 seconds",
        "Post during peak hours",
    ],
    "twitch": [
        "Stream consistently",
        "Interact with chat",
        "Use quality webcam and mic",
    ],
}

DEFAULT_BEST_PRACTICES = [
    "Be consistent with your schedule",
    "Engage authentically with your audience",
    "Focus on quality over quantity",
    "Track and analyze your performance",
    "Continuously improve based on feedback",
]

DEFAULT_COMMON_MISTAKES = [
    "Inconsistent posting schedule",
    "Ignoring audience feedback",
    "Poor audio/video quality",
    "Not optimizing titles and descriptions",
    "Giving up too early",
]

KNOWN_TOOLS = [
    "OBS Studio",
    "Audacity",
    "Canva",
    "Adobe Premiere",
    "DaVinci Resolve",
    "StreamLabs",
]


class NicheAdaptation(BaseModel):
    """How a cross-platform task is reworded for one niche."""

    label: str  # prefixed to the title, e.g. "Gaming"
    example: str = ""  # appended to the description


def _default_niche_adaptations() -> dict[str, NicheAdaptation]:
    examples = {
        "gaming": "gameplay videos, tutorials, reviews",
        "education": "lessons, explanations, demonstrations",
        "lifestyle": "vlogs, routines, tips",
        "tech": "reviews, tutorials, news",
        "entertainment": "sketches, reactions, challenges",
    }
    labels = {
        "gaming": "Gaming",
        "education": "Educational",
        "lifestyle": "Lifestyle",
        "tech": "Tech",
        "entertainment": "Entertainment",
        "comedy": "Comedy",
        "dance": "Dance",
        "music": "Music",
        "art": "Art",
        "coding": "Coding",
    }
    return {
        niche: NicheAdaptation(label=label, example=examples.get(niche, ""))
        for niche, label in labels.items()
    }


class MetricSeed(BaseModel):
    metric: str
    target: str
    how_to_measure: str


class ResourceSeed(BaseModel):
    type: str = "guide"
    title: str  # "{platform}" is replaced with the task's platform


class TaskProfile(BaseModel):
    """Fixed field values for tasks lifted from a labelled list."""

    roadmap_id: str
    phase: int = Field(default=1, ge=1)
    week: int = Field(default=1, ge=1)
    day_range: str = "Daily"
    title_prefix: str = ""
    time_estimate: int = Field(default=60, ge=1)
    category: str = "content"
    tips: list[str] = Field(default_factory=list)
    best_practices: list[str] = Field(default_factory=list)
    common_mistakes: list[str] = Field(default_factory=list)
    success_metrics: list[MetricSeed] = Field(default_factory=list)
    resources: list[ResourceSeed] = Field(default_factory=list)


def _default_task_profiles() -> dict[str, TaskProfile]:
    return {
        "analytics": TaskProfile(
            roadmap_id="analytics_optimization",
            phase=2,
            week=1,
            day_range="Weekly",
            title_prefix="{label} Analytics: ",
            time_estimate=60,
            category="analytics",
            tips=["Use platform analytics dashboard", "Export data for tracking"],
            best_practices=["Track consistently", "Compare week-over-week"],
            common_mistakes=["Ignoring analytics", "Not acting on insights"],
            success_metrics=[
                MetricSeed(
                    metric="analytics_review",
                    target="completed",
                    how_to_measure="Check task completion",
                )
            ],
            resources=[
                ResourceSeed(type="tool", title="{platform} Analytics"),
                ResourceSeed(type="guide", title="Analytics Best Practices"),
            ],
        ),
        "engagement": TaskProfile(
            roadmap_id="community_building",
            phase=1,
            week=2,
            day_range="Daily",
            title_prefix="Engagement: ",
            time_estimate=30,
            category="community",
            tips=[
                "Respond within 24 hours",
                "Use personalized responses",
                "Ask follow-up questions",
                "Show appreciation for feedback",
                "Create community discussions",
            ],
            best_practices=["Be authentic", "Respond promptly", "Add value"],
            common_mistakes=["Generic responses", "Ignoring negative feedback"],
            success_metrics=[
                MetricSeed(
                    metric="comments_replied",
                    target="10",
                    how_to_measure="Track daily responses",
                ),
                MetricSeed(
                    metric="engagement_rate",
                    target="5%",
                    how_to_measure="Calculate interactions/views",
                ),
            ],
        ),
        "technical": TaskProfile(
            roadmap_id="technical_setup",
            phase=1,
            week=1,
            day_range="Day 1-2",
            title_prefix="{label} Setup: ",
            time_estimate=120,
            category="technical",
            tips=["Research before buying", "Start with basics", "Upgrade gradually"],
            best_practices=["Test everything", "Create backups", "Document settings"],
            common_mistakes=["Overspending initially", "Ignoring audio quality"],
            success_metrics=[
                MetricSeed(
                    metric="setup_complete",
                    target="yes",
                    how_to_measure="All equipment working",
                )
            ],
        ),
    }


class DocumentEntry(BaseModel):
    """One research document in the manifest."""

    file: str
    platform: str = "all"
    kind: Optional[str] = None  # detected from the file name when omitted


def _default_manifest() -> list[DocumentEntry]:
    return [
        DocumentEntry(file="YouTube Channel Playbooks.md", platform="youtube"),
        DocumentEntry(file="TikTok Content Creator Playbooks.md", platform="tiktok"),
        DocumentEntry(file="Twitch Streaming Playbooks.md", platform="twitch"),
        DocumentEntry(file="Content Idea Generators.md"),
        DocumentEntry(file="Analytics and Optimization.md"),
        DocumentEntry(file="Engagement and Community Building.md"),
        DocumentEntry(file="Monetization Pathways.md"),
        DocumentEntry(file="Platform Algorithm Analysis.md"),
        DocumentEntry(file="Technical Setup Guides.md"),
        DocumentEntry(file="Bio and Channel Optimization.md"),
        DocumentEntry(file="Cross-Platform Growth Strategies.md"),
    ]


# =============================================================================
# Top-level configuration
# =============================================================================


class ExtractorConfig(BaseModel):
    """All tunable data used by the extraction pipeline."""

    platform_niches: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_PLATFORM_NICHES.items()}
    )
    niche_adaptations: dict[str, NicheAdaptation] = Field(
        default_factory=_default_niche_adaptations
    )
    platform_tips: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_PLATFORM_TIPS.items()}
    )
    best_practices: list[str] = Field(default_factory=lambda: list(DEFAULT_BEST_PRACTICES))
    common_mistakes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_COMMON_MISTAKES)
    )
    known_tools: list[str] = Field(default_factory=lambda: list(KNOWN_TOOLS))
    task_profiles: dict[str, TaskProfile] = Field(default_factory=_default_task_profiles)

    list_cap: int = Field(default=5, ge=1, le=20)
    default_time_estimate: int = Field(default=60, ge=1)
    max_niche_variants: int = Field(default=3, ge=0, le=10)
    cross_platform_fallback: str = "youtube"
    default_niche: str = "general"

    documents_dir: str = "Docs"
    documents: list[DocumentEntry] = Field(default_factory=_default_manifest)

    def niches_for(self, platform: str) -> list[str]:
        """Default niches for a platform, limited to ``max_niche_variants``."""
        return self.platform_niches.get(platform, [])[: self.max_niche_variants]

    def seed_tips_for(self, platform: str) -> list[str]:
        return list(self.platform_tips.get(platform, []))

    def profile(self, name: str) -> TaskProfile:
        try:
            return self.task_profiles[name]
        except KeyError:
            raise ConfigError(f"No task profile named '{name}'") from None


def load_config_from_pyproject(project_root: Path) -> ExtractorConfig:
    """Load configuration from ``[tool.playbook-extractor]`` in pyproject.toml.

    Args:
        project_root: Directory containing pyproject.toml

    Returns:
        ExtractorConfig (defaults if the file or table is absent or invalid)
    """
    pyproject_path = project_root / "pyproject.toml"

    if not pyproject_path.exists():
        return ExtractorConfig()

    try:
        import tomllib
    except ImportError:
        import tomli as tomllib

    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)

        tool_config = data.get("tool", {}).get(PYPROJECT_TABLE, {})
        if not tool_config:
            return ExtractorConfig()

        return ExtractorConfig(**tool_config)

    except (tomllib.TOMLDecodeError, ValidationError) as e:
        logger.warning("Could not parse %s: %s", pyproject_path, e)
        return ExtractorConfig()


def load_config_file(path: Path) -> ExtractorConfig:
    """Load configuration from an explicit TOML or JSON file.

    Raises:
        ConfigError: If the file is missing or its contents are invalid
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            try:
                import tomllib
            except ImportError:
                import tomli as tomllib
            with open(path, "rb") as f:
                data = tomllib.load(f)
            # Accept either a bare table or a full pyproject layout
            data = data.get("tool", {}).get(PYPROJECT_TABLE, data)
        return ExtractorConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
    except ValueError as e:
        # json.JSONDecodeError and tomllib.TOMLDecodeError are ValueErrors
        raise ConfigError(f"Could not parse config file {path}: {e}") from e


def load_config(
    path: Optional[Path] = None, project_root: Optional[Path] = None
) -> ExtractorConfig:
    """Resolve configuration: explicit file, then pyproject.toml, then defaults."""
    if path is not None:
        return load_config_file(path)
    return load_config_from_pyproject(project_root or Path.cwd())
