"""
Extracted Records

Plain records produced by the extraction pipeline: Tasks, Milestones,
Templates and Tips, plus the small value records nested inside them.

Records are built once per run and never mutated by the pipeline afterwards.
``to_dict`` emits the camelCase keys the storage layer expects; ``from_dict``
reverses it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class PlaybookExtractorError(Exception):
    """Base class for all extraction errors."""

    pass


class PlatformScope(Enum):
    """Declared platform scope of a source document."""

    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    TWITCH = "twitch"
    ALL = "all"


class EntityType(Enum):
    """The four record kinds produced by the pipeline."""

    TASK = "task"
    MILESTONE = "milestone"
    TEMPLATE = "template"
    TIP = "tip"


class Difficulty(Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class TaskCategory(Enum):
    CONTENT = "content"
    TECHNICAL = "technical"
    COMMUNITY = "community"
    ANALYTICS = "analytics"
    MONETIZATION = "monetization"


class ResourceType(Enum):
    TEMPLATE = "template"
    GUIDE = "guide"
    TOOL = "tool"
    EXAMPLE = "example"


class RequirementType(Enum):
    TASK_COMPLETION = "task_completion"
    METRIC_ACHIEVEMENT = "metric_achievement"
    TIME_BASED = "time_based"


class RewardType(Enum):
    BADGE = "badge"
    FEATURE_UNLOCK = "feature_unlock"


class CelebrationType(Enum):
    MODAL = "modal"
    CONFETTI = "confetti"
    NOTIFICATION = "notification"


class TemplateCategory(Enum):
    VIDEO_SCRIPT = "video_script"
    THUMBNAIL = "thumbnail"
    DESCRIPTION = "description"
    SOCIAL_MEDIA = "social_media"
    CHANNEL_ASSETS = "channel_assets"


class TemplateType(Enum):
    HOOK = "hook"
    OUTRO = "outro"
    STRUCTURE = "structure"
    CALL_TO_ACTION = "call_to_action"
    GENERAL = "general"


# =============================================================================
# Nested value records
# =============================================================================


@dataclass
class PlatformSpecific:
    """Platform tips, best practices and common mistakes (each at most 5)."""

    tips: list[str] = field(default_factory=list)
    best_practices: list[str] = field(default_factory=list)
    common_mistakes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "tips": list(self.tips),
            "bestPractices": list(self.best_practices),
            "commonMistakes": list(self.common_mistakes),
        }

    @classmethod
    def from_dict(cls, data: dict) -> PlatformSpecific:
        return cls(
            tips=list(data.get("tips", [])),
            best_practices=list(data.get("bestPractices", [])),
            common_mistakes=list(data.get("commonMistakes", [])),
        )


@dataclass
class SuccessMetric:
    """A measurable target attached to a task."""

    metric: str
    target: str
    how_to_measure: str
    synthesized: bool = False

    def to_dict(self) -> dict:
        return {
            "metric": self.metric,
            "target": self.target,
            "howToMeasure": self.how_to_measure,
            "synthesized": self.synthesized,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SuccessMetric:
        return cls(
            metric=data["metric"],
            target=str(data["target"]),
            how_to_measure=data.get("howToMeasure", ""),
            synthesized=data.get("synthesized", False),
        )


@dataclass
class Resource:
    """A tool, guide, template or example referenced by a task."""

    type: ResourceType
    title: str
    url: Optional[str] = None
    content: Optional[str] = None
    synthesized: bool = False

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"type": self.type.value, "title": self.title}
        if self.url is not None:
            data["url"] = self.url
        if self.content is not None:
            data["content"] = self.content
        data["synthesized"] = self.synthesized
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Resource:
        return cls(
            type=ResourceType(data["type"]),
            title=data["title"],
            url=data.get("url"),
            content=data.get("content"),
            synthesized=data.get("synthesized", False),
        )


@dataclass
class Requirement:
    """What a creator must do to earn a milestone."""

    type: RequirementType
    value: str

    def to_dict(self) -> dict:
        return {"type": self.type.value, "value": self.value}


@dataclass
class Reward:
    type: RewardType
    value: str

    def to_dict(self) -> dict:
        return {"type": self.type.value, "value": self.value}


@dataclass
class Celebration:
    type: CelebrationType
    message: str
    share_prompt: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"type": self.type.value, "message": self.message}
        if self.share_prompt is not None:
            data["sharePrompt"] = self.share_prompt
        return data


@dataclass
class TemplateContent:
    structure: str
    sections: list[str] = field(default_factory=list)
    examples: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "structure": self.structure,
            "sections": list(self.sections),
            "examples": list(self.examples),
        }


# =============================================================================
# Records
# =============================================================================


@dataclass
class Task:
    """A daily roadmap task."""

    id: str
    roadmap_id: str
    platform: str
    niche: str
    phase: int
    week: int
    day_range: str
    title: str
    description: str
    instructions: list[str]
    time_estimate: int  # minutes
    difficulty: Difficulty
    category: TaskCategory
    platform_specific: PlatformSpecific
    success_metrics: list[SuccessMetric]
    resources: list[Resource]
    order_index: int
    synthesized: list[str] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "roadmapId": self.roadmap_id,
            "platform": self.platform,
            "niche": self.niche,
            "phase": self.phase,
            "week": self.week,
            "dayRange": self.day_range,
            "title": self.title,
            "description": self.description,
            "instructions": list(self.instructions),
            "timeEstimate": self.time_estimate,
            "difficulty": self.difficulty.value,
            "category": self.category.value,
            "platformSpecific": self.platform_specific.to_dict(),
            "successMetrics": [m.to_dict() for m in self.success_metrics],
            "resources": [r.to_dict() for r in self.resources],
            "orderIndex": self.order_index,
            "synthesized": list(self.synthesized),
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        return cls(
            id=data["id"],
            roadmap_id=data["roadmapId"],
            platform=data["platform"],
            niche=data["niche"],
            phase=data["phase"],
            week=data["week"],
            day_range=data["dayRange"],
            title=data["title"],
            description=data["description"],
            instructions=list(data["instructions"]),
            time_estimate=data["timeEstimate"],
            difficulty=Difficulty(data["difficulty"]),
            category=TaskCategory(data["category"]),
            platform_specific=PlatformSpecific.from_dict(
                data.get("platformSpecific", {})
            ),
            success_metrics=[
                SuccessMetric.from_dict(m) for m in data.get("successMetrics", [])
            ],
            resources=[Resource.from_dict(r) for r in data.get("resources", [])],
            order_index=data["orderIndex"],
            synthesized=list(data.get("synthesized", [])),
            metadata=dict(data.get("metadata", {})),
        )


@dataclass
class Milestone:
    """A progression milestone with its reward and celebration."""

    id: str
    name: str
    description: str
    requirement: Requirement
    reward: Reward
    celebration: Celebration
    platform: Optional[str]  # None means cross-platform
    order_index: int
    synthesized: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "requirement": self.requirement.to_dict(),
            "reward": self.reward.to_dict(),
            "celebration": self.celebration.to_dict(),
            "platform": self.platform,
            "orderIndex": self.order_index,
            "synthesized": list(self.synthesized),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Milestone:
        celebration = data["celebration"]
        return cls(
            id=data["id"],
            name=data["name"],
            description=data["description"],
            requirement=Requirement(
                type=RequirementType(data["requirement"]["type"]),
                value=str(data["requirement"]["value"]),
            ),
            reward=Reward(
                type=RewardType(data["reward"]["type"]),
                value=data["reward"]["value"],
            ),
            celebration=Celebration(
                type=CelebrationType(celebration["type"]),
                message=celebration["message"],
                share_prompt=celebration.get("sharePrompt"),
            ),
            platform=data.get("platform"),
            order_index=data["orderIndex"],
            synthesized=list(data.get("synthesized", [])),
        )


@dataclass
class Template:
    """A reusable content template."""

    id: str
    category: TemplateCategory
    type: TemplateType
    title: str
    content: TemplateContent
    variables: list[str]
    platform: str
    niche: str
    is_public: bool = True
    uses: int = 0
    rating: Optional[float] = None
    synthesized: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category.value,
            "type": self.type.value,
            "title": self.title,
            "content": self.content.to_dict(),
            "variables": list(self.variables),
            "platform": self.platform,
            "niche": self.niche,
            "isPublic": self.is_public,
            "uses": self.uses,
            "rating": self.rating,
            "synthesized": list(self.synthesized),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Template:
        content = data.get("content", {})
        return cls(
            id=data["id"],
            category=TemplateCategory(data["category"]),
            type=TemplateType(data["type"]),
            title=data["title"],
            content=TemplateContent(
                structure=content.get("structure", ""),
                sections=list(content.get("sections", [])),
                examples=list(content.get("examples", [])),
            ),
            variables=list(data.get("variables", [])),
            platform=data["platform"],
            niche=data["niche"],
            is_public=data.get("isPublic", True),
            uses=data.get("uses", 0),
            rating=data.get("rating"),
            synthesized=list(data.get("synthesized", [])),
        )


@dataclass
class Tip:
    """A short piece of advice surfaced in the app."""

    id: str
    title: str
    content: str
    category: str
    platform: Optional[str]
    niche: Optional[str]
    difficulty: Difficulty
    tags: list[str]
    source: str
    is_active: bool = True
    synthesized: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "platform": self.platform,
            "niche": self.niche,
            "difficulty": self.difficulty.value,
            "tags": list(self.tags),
            "source": self.source,
            "isActive": self.is_active,
            "synthesized": list(self.synthesized),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Tip:
        return cls(
            id=data["id"],
            title=data["title"],
            content=data["content"],
            category=data["category"],
            platform=data.get("platform"),
            niche=data.get("niche"),
            difficulty=Difficulty(data["difficulty"]),
            tags=list(data.get("tags", [])),
            source=data.get("source", ""),
            is_active=data.get("isActive", True),
            synthesized=list(data.get("synthesized", [])),
        )


RECORD_TYPES = {
    EntityType.TASK: Task,
    EntityType.MILESTONE: Milestone,
    EntityType.TEMPLATE: Template,
    EntityType.TIP: Tip,
}


def record_from_dict(entity_type: EntityType, data: dict):
    """Rebuild a record of the given entity type from its stored form."""
    return RECORD_TYPES[entity_type].from_dict(data)
