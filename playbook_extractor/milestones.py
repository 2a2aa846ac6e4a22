"""
Milestone Extraction

Milestones come from list items under "Goals:", "Milestones:", "Success
Metrics:" and "By the end of this week/month/phase:" labels anywhere in a
document, and from "Revenue/Monetization/Income Goals|Milestones|Targets:"
lists in monetization documents.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from playbook_extractor.context import RunContext
from playbook_extractor.models import (
    Celebration,
    CelebrationType,
    EntityType,
    Milestone,
    PlatformScope,
    Requirement,
    RequirementType,
    Reward,
    RewardType,
)
from playbook_extractor.rules import (
    CaptureRule,
    Rule,
    RuleTable,
    contains_any,
    first_capture,
    keyword_rule,
    matches_pattern,
)
from playbook_extractor.sections import ListItem, find_labelled_lists
from playbook_extractor.synthesizers import clean_text, truncate

logger = logging.getLogger(__name__)

MIN_ITEM_LENGTH = 10
NAME_LIMIT = 50
MONETIZATION_ORDER_OFFSET = 100

GOAL_LABEL_RE = re.compile(
    r"(?:[A-Za-z0-9 ]+?\s+)?(?:Goals?|Milestones?|Success\s+Metrics|By\s+the\s+end\s+of\s+(?:this\s+)?(?:week|month|phase)\b[^:]*):\s*$",
    re.IGNORECASE,
)
MONETIZATION_LABEL_RE = re.compile(
    r"(?:Revenue|Monetization|Income)\s+(?:Goals?|Milestones?|Targets?):?\s*$",
    re.IGNORECASE,
)

NAME_TARGET_RE = re.compile(
    r"\d[\d,]*[kKmM]?\s*(?:subscribers?|followers?|views?|hours?)", re.IGNORECASE
)
REVENUE_RE = re.compile(r"\$?(\d[\d,]*[kKmM]?)")

REQUIREMENT_RULES: list[CaptureRule[RequirementType]] = [
    CaptureRule(
        re.compile(r"(\d[\d,]*[kKmM]?)\s*(subscribers?|followers?)", re.IGNORECASE),
        RequirementType.METRIC_ACHIEVEMENT,
    ),
    CaptureRule(
        re.compile(r"(\d[\d,]*[kKmM]?)\s*(views?)", re.IGNORECASE),
        RequirementType.METRIC_ACHIEVEMENT,
    ),
    CaptureRule(
        re.compile(r"(\d+)\s*(videos?|posts?|streams?)", re.IGNORECASE),
        RequirementType.TASK_COMPLETION,
    ),
    CaptureRule(
        re.compile(r"(\d+)\s*(days?|weeks?|months?)", re.IGNORECASE),
        RequirementType.TIME_BASED,
    ),
]
DEFAULT_REQUIREMENT_VALUE = "10"

REWARD_RULES: RuleTable[tuple[RewardType, str]] = RuleTable(
    [
        keyword_rule((RewardType.FEATURE_UNLOCK, "Monetization Features"), "monetiz", "revenue"),
        keyword_rule((RewardType.FEATURE_UNLOCK, "Advanced Features"), "advanced", "pro"),
    ],
    default=(RewardType.BADGE, "Achievement Badge"),
)

# Magnitude outranks keywords
CELEBRATION_RULES: RuleTable[CelebrationType] = RuleTable(
    [
        Rule(matches_pattern(r"\d{3,}"), CelebrationType.CONFETTI, "magnitude"),
        Rule(contains_any("first", "complete"), CelebrationType.MODAL, "first|complete"),
    ],
    default=CelebrationType.NOTIFICATION,
)

CELEBRATION_MESSAGE = "🎉 Amazing achievement! {text}"
SHARE_PROMPT = "Share your achievement with the community!"
MONETIZATION_MESSAGE = "💰 Monetization milestone achieved! {text}"
MONETIZATION_SHARE_PROMPT = "Share your revenue milestone!"


def milestone_name(text: str) -> str:
    """Name a milestone after its numeric audience target, else its truncated text."""
    match = NAME_TARGET_RE.search(text)
    if match:
        return f"Reach {match.group(0)}"
    return truncate(text, NAME_LIMIT)


def extract_requirement(text: str) -> tuple[Requirement, bool]:
    """Requirement from the first matching capture rule; (requirement, synthesized)."""
    found = first_capture(REQUIREMENT_RULES, text)
    if found is None:
        return Requirement(RequirementType.TASK_COMPLETION, DEFAULT_REQUIREMENT_VALUE), True
    requirement_type, match = found
    return Requirement(requirement_type, f"{match.group(1)} {match.group(2).lower()}"), False


def determine_celebration(text: str) -> CelebrationType:
    return CELEBRATION_RULES(text)


def extract_monetization_requirement(text: str) -> tuple[Requirement, bool]:
    match = REVENUE_RE.search(text)
    if match:
        return Requirement(RequirementType.METRIC_ACHIEVEMENT, f"${match.group(1)} revenue"), False
    lower = text.lower()
    if "partner" in lower or "monetiz" in lower:
        return (
            Requirement(RequirementType.METRIC_ACHIEVEMENT, "Platform monetization enabled"),
            False,
        )
    return Requirement(RequirementType.TIME_BASED, "90 days"), True


class MilestoneExtractor:
    """Extract Milestones from goal-style labelled lists."""

    def extract(self, text: str, scope: PlatformScope, ctx: RunContext) -> list[Milestone]:
        """
        Scan a whole document for goal labels.

        Args:
            text: Full document text
            scope: Declared platform scope; "all" yields platform None
            ctx: Identifier state for this run

        Returns:
            Milestones in document order, one per distinct item description
        """
        platform = self._platform(scope)
        milestones: list[Milestone] = []
        seen: set[str] = set()

        for found in find_labelled_lists(text, GOAL_LABEL_RE):
            for item in found.items:
                item_text = self._item_text(item)
                if len(item_text) < MIN_ITEM_LENGTH:
                    logger.debug(
                        "Skipping short milestone item '%s' at line %d", item_text, item.line_number
                    )
                    continue
                if item_text in seen:
                    continue
                seen.add(item_text)
                milestones.append(self._milestone(item_text, platform, ctx))

        return milestones

    def extract_monetization(
        self, text: str, scope: PlatformScope, ctx: RunContext
    ) -> list[Milestone]:
        """Milestones from revenue/monetization goal lists, ordered after progression ones."""
        platform = self._platform(scope)
        milestones: list[Milestone] = []
        seen: set[str] = set()

        for found in find_labelled_lists(text, MONETIZATION_LABEL_RE):
            for item in found.items:
                item_text = self._item_text(item)
                if not item_text or item_text in seen:
                    continue
                seen.add(item_text)

                requirement, requirement_synthesized = extract_monetization_requirement(item_text)
                synthesized = ["reward", "celebration"]
                if requirement_synthesized:
                    synthesized.insert(0, "requirement")

                milestone_id, index = ctx.assign(EntityType.MILESTONE, platform)
                milestones.append(
                    Milestone(
                        id=milestone_id,
                        name=milestone_name(item_text),
                        description=f"Monetization Goal: {item_text}",
                        requirement=requirement,
                        reward=Reward(
                            RewardType.FEATURE_UNLOCK, "Advanced Monetization Strategies"
                        ),
                        celebration=Celebration(
                            type=CelebrationType.MODAL,
                            message=MONETIZATION_MESSAGE.format(text=item_text),
                            share_prompt=MONETIZATION_SHARE_PROMPT,
                        ),
                        platform=platform,
                        order_index=index + MONETIZATION_ORDER_OFFSET,
                        synthesized=synthesized,
                    )
                )

        return milestones

    @staticmethod
    def _platform(scope: PlatformScope) -> Optional[str]:
        return None if scope == PlatformScope.ALL else scope.value

    @staticmethod
    def _item_text(item: ListItem) -> str:
        return clean_text(item.plain)

    def _milestone(self, text: str, platform: Optional[str], ctx: RunContext) -> Milestone:
        requirement, requirement_synthesized = extract_requirement(text)
        reward_match = REWARD_RULES.classify(text)
        celebration = CELEBRATION_RULES.classify(text)

        synthesized = []
        if requirement_synthesized:
            synthesized.append("requirement")
        if reward_match.defaulted:
            synthesized.append("reward")
        if celebration.defaulted:
            synthesized.append("celebration")

        milestone_id, index = ctx.assign(EntityType.MILESTONE, platform)
        reward_type, reward_value = reward_match.result
        return Milestone(
            id=milestone_id,
            name=milestone_name(text),
            description=text,
            requirement=requirement,
            reward=Reward(reward_type, reward_value),
            celebration=Celebration(
                type=celebration.result,
                message=CELEBRATION_MESSAGE.format(text=text),
                share_prompt=SHARE_PROMPT,
            ),
            platform=platform,
            order_index=index,
            synthesized=synthesized,
        )
