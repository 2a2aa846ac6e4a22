"""
Task Extraction

Turns day blocks ("Day 3", "Day 3-4", "Daily Tasks") into Task records, and
turns labelled lists ("Weekly Analytics Tasks:", "Community Activities:",
"Equipment Requirements:") into Tasks shaped by a task profile.

Every non-empty day block yields at least one Task: a block without list
markers becomes a single task built from the whole body.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from playbook_extractor.config import ExtractorConfig, TaskProfile
from playbook_extractor.context import RunContext
from playbook_extractor.models import (
    EntityType,
    PlatformScope,
    PlatformSpecific,
    Resource,
    ResourceType,
    SuccessMetric,
    Task,
    TaskCategory,
)
from playbook_extractor.sections import (
    DayBlock,
    ListItem,
    Section,
    find_labelled_lists,
    parse_list_items,
)
from playbook_extractor.synthesizers import (
    analytics_instructions,
    build_platform_specific,
    clean_text,
    classify_category,
    determine_difficulty,
    extract_resources,
    extract_success_metrics,
    extract_title,
    parse_time_estimate,
    synthesize_instructions,
    title_from_block,
    unique_capped,
)
from playbook_extractor.variants import VariantExpander

logger = logging.getLogger(__name__)

ANALYTICS_LABEL_RE = re.compile(
    r"(?P<label>Daily|Weekly|Monthly)\s+Analytics\s+Tasks?:?\s*$", re.IGNORECASE
)
ENGAGEMENT_LABEL_RE = re.compile(
    r"(?P<label>Community|Engagement|Interaction)\s+(?:Tasks?|Activities|Strategies):?\s*$",
    re.IGNORECASE,
)
TECHNICAL_LABEL_RE = re.compile(
    r"(?P<label>Setup|Technical|Equipment|Software)\s+(?:Tasks?|Requirements?|Guide):?\s*$",
    re.IGNORECASE,
)

ANALYTICS_TIME_BY_FREQUENCY = {"Daily": 15, "Weekly": 60, "Monthly": 120}

# Fields a profile fixes regardless of the text
PROFILE_SYNTHESIZED = ["roadmapId", "phase", "week", "difficulty", "platformSpecific"]


def resolve_platform(scope: PlatformScope, config: ExtractorConfig) -> str:
    """Platform a task is assigned to; cross-platform documents use the fallback."""
    if scope == PlatformScope.ALL:
        return config.cross_platform_fallback
    return scope.value


def roadmap_id(scope: PlatformScope, phase: int, week: int) -> str:
    return f"{scope.value}_phase{phase}_week{week}"


class TaskExtractor:
    """Extract Tasks from segmented sections."""

    def __init__(self, config: ExtractorConfig, expander: Optional[VariantExpander] = None):
        self.config = config
        self.expander = expander or VariantExpander(config)

    # =========================================================================
    # Day blocks
    # =========================================================================

    def extract(
        self, sections: list[Section], scope: PlatformScope, ctx: RunContext
    ) -> list[Task]:
        """Extract day-block tasks from every section, expanding variants."""
        tasks = []
        for section in sections:
            for block in section.day_blocks:
                tasks.extend(self.extract_block(block, scope, ctx))
        return tasks

    def extract_block(
        self, block: DayBlock, scope: PlatformScope, ctx: RunContext
    ) -> list[Task]:
        """
        Extract tasks from one day block.

        Args:
            block: Day block with its inherited phase/week
            scope: Declared platform scope of the document
            ctx: Identifier state for this run

        Returns:
            Tasks in item order, niche variants included
        """
        if not block.body.strip():
            return []

        items = parse_list_items(block.body)
        if items:
            base = [self._task_from_item(item, block, scope, ctx) for item in items]
        else:
            logger.debug(
                "%s at line %d has no list items; using whole body",
                block.day_range,
                block.line_number,
            )
            base = [self._task_from_body(block, scope, ctx)]

        return self.expander.expand_all(base, scope)

    def _task_from_item(
        self, item: ListItem, block: DayBlock, scope: PlatformScope, ctx: RunContext
    ) -> Task:
        title_source = item.label or item.text
        instructions = [clean_text(child) for child in item.children]
        category = classify_category(item.plain)
        return self._build(
            block=block,
            scope=scope,
            ctx=ctx,
            title=extract_title(title_source),
            description=clean_text(item.plain),
            time_text=item.text,
            instructions=instructions,
            instruction_text=item.plain,
            category=category.result,
            category_defaulted=category.defaulted,
        )

    def _task_from_body(self, block: DayBlock, scope: PlatformScope, ctx: RunContext) -> Task:
        category = classify_category(block.body)
        return self._build(
            block=block,
            scope=scope,
            ctx=ctx,
            title=title_from_block(block.body) or block.day_range,
            description=clean_text(block.body),
            time_text=block.body,
            instructions=[],
            instruction_text=block.body,
            category=category.result,
            category_defaulted=category.defaulted,
        )

    def _build(
        self,
        block: DayBlock,
        scope: PlatformScope,
        ctx: RunContext,
        title: str,
        description: str,
        time_text: str,
        instructions: list[str],
        instruction_text: str,
        category: TaskCategory,
        category_defaulted: bool,
    ) -> Task:
        synthesized = []
        platform = resolve_platform(scope, self.config)

        time_estimate, time_synthesized = parse_time_estimate(
            time_text, self.config.default_time_estimate
        )
        if time_synthesized:
            synthesized.append("timeEstimate")

        if not instructions:
            instructions = synthesize_instructions(instruction_text)
            synthesized.append("instructions")

        if category_defaulted:
            synthesized.append("category")
        synthesized.append("difficulty")

        platform_specific, seeded_only = self._platform_specific(block.body, platform)
        if seeded_only:
            synthesized.append("platformSpecific")

        success_metrics = extract_success_metrics(block.body)
        if all(m.synthesized for m in success_metrics):
            synthesized.append("successMetrics")
        synthesized.append("niche")

        task_id, index = ctx.assign(EntityType.TASK, platform)
        return Task(
            id=task_id,
            roadmap_id=roadmap_id(scope, block.phase, block.week),
            platform=platform,
            niche=self.config.default_niche,
            phase=block.phase,
            week=block.week,
            day_range=block.day_range,
            title=title,
            description=description,
            instructions=instructions,
            time_estimate=time_estimate,
            difficulty=determine_difficulty(block.phase, block.week),
            category=category,
            platform_specific=platform_specific,
            success_metrics=success_metrics,
            resources=extract_resources(block.body, limit=self.config.list_cap),
            order_index=index,
            synthesized=synthesized,
        )

    def _platform_specific(self, body: str, platform: str) -> tuple[PlatformSpecific, bool]:
        found = build_platform_specific(body, [], [], [], self.config.list_cap)
        seeded_only = not (found.tips or found.best_practices or found.common_mistakes)
        merged = build_platform_specific(
            body,
            self.config.seed_tips_for(platform),
            list(self.config.best_practices),
            list(self.config.common_mistakes),
            self.config.list_cap,
        )
        return merged, seeded_only

    # =========================================================================
    # Labelled lists with task profiles
    # =========================================================================

    def extract_analytics(self, text: str, scope: PlatformScope, ctx: RunContext) -> list[Task]:
        """Tasks from "(Daily|Weekly|Monthly) Analytics Tasks:" lists."""
        return self._extract_profiled(text, "analytics", ANALYTICS_LABEL_RE, scope, ctx)

    def extract_engagement(self, text: str, scope: PlatformScope, ctx: RunContext) -> list[Task]:
        """Tasks from "Community/Engagement/Interaction Tasks|Activities|Strategies:" lists."""
        return self._extract_profiled(text, "engagement", ENGAGEMENT_LABEL_RE, scope, ctx)

    def extract_technical(self, text: str, scope: PlatformScope, ctx: RunContext) -> list[Task]:
        """Tasks from "Setup/Technical/Equipment/Software Tasks|Requirements|Guide:" lists."""
        return self._extract_profiled(text, "technical", TECHNICAL_LABEL_RE, scope, ctx)

    def _extract_profiled(
        self,
        text: str,
        profile_name: str,
        label_re: re.Pattern,
        scope: PlatformScope,
        ctx: RunContext,
    ) -> list[Task]:
        profile = self.config.profile(profile_name)
        tasks = []
        for found in find_labelled_lists(text, label_re):
            label = found.match.group("label").capitalize()
            for item in found.items:
                tasks.append(
                    self._profiled_task(profile_name, profile, label, item, found.body, scope, ctx)
                )
        return self.expander.expand_all(tasks, scope)

    def _profiled_task(
        self,
        profile_name: str,
        profile: TaskProfile,
        label: str,
        item: ListItem,
        list_body: str,
        scope: PlatformScope,
        ctx: RunContext,
    ) -> Task:
        platform = resolve_platform(scope, self.config)
        synthesized = list(PROFILE_SYNTHESIZED)
        metadata: dict = {"profile": profile_name}

        day_range = profile.day_range
        time_estimate = profile.time_estimate
        if profile_name == "analytics":
            day_range = label
            time_estimate = ANALYTICS_TIME_BY_FREQUENCY.get(label, profile.time_estimate)
            instructions = analytics_instructions(item.plain)
            metadata["frequency"] = label
        elif item.children:
            instructions = [clean_text(child) for child in item.children]
        else:
            instructions = synthesize_instructions(item.plain)
        if profile_name == "analytics" or not item.children:
            synthesized.append("instructions")
        synthesized.append("timeEstimate")
        synthesized.append("successMetrics")
        synthesized.append("niche")

        if profile_name == "engagement":
            metadata["recurring"] = True
        if profile_name == "technical":
            metadata["setupType"] = label

        resources = [
            Resource(
                type=ResourceType(seed.type),
                title=seed.title.format(platform=platform),
                synthesized=True,
            )
            for seed in profile.resources
        ]
        if profile_name == "technical":
            resources.extend(
                extract_resources(list_body, known_tools=self.config.known_tools)
            )

        task_id, index = ctx.assign(EntityType.TASK, platform)
        return Task(
            id=task_id,
            roadmap_id=profile.roadmap_id,
            platform=platform,
            niche=self.config.default_niche,
            phase=profile.phase,
            week=profile.week,
            day_range=day_range,
            title=profile.title_prefix.format(label=label) + extract_title(item.label or item.text),
            description=clean_text(item.plain),
            instructions=instructions,
            time_estimate=time_estimate,
            difficulty=determine_difficulty(profile.phase, profile.week),
            category=TaskCategory(profile.category),
            platform_specific=PlatformSpecific(
                tips=profile.tips[: self.config.list_cap],
                best_practices=profile.best_practices[: self.config.list_cap],
                common_mistakes=profile.common_mistakes[: self.config.list_cap],
            ),
            success_metrics=[
                SuccessMetric(
                    metric=seed.metric,
                    target=seed.target,
                    how_to_measure=seed.how_to_measure,
                    synthesized=True,
                )
                for seed in profile.success_metrics
            ]
            or extract_success_metrics(item.plain),
            resources=unique_capped(
                resources, self.config.list_cap, key=lambda r: r.title.lower()
            ),
            order_index=index,
            synthesized=synthesized,
            metadata=metadata,
        )
