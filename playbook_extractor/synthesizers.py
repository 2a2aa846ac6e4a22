"""
Field Synthesizers

Helpers the extractors call to derive task fields from loosely written text:
titles, time estimates, instruction checklists, category, difficulty,
platform tips/practices/mistakes, success metrics and resources.

Each synthesizer reports whether its value came from the text or from a
fallback, so records can tag manufactured fields.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from playbook_extractor.models import (
    Difficulty,
    PlatformSpecific,
    Resource,
    ResourceType,
    SuccessMetric,
    TaskCategory,
)
from playbook_extractor.rules import Classification, Rule, RuleTable, keyword_rule

DEFAULT_TIME_ESTIMATE = 60
TITLE_LIMIT = 60
ELLIPSIS = "..."

TIME_ANNOTATION_RE = re.compile(
    r"\(\s*(\d+(?:\.\d+)?)\s*(hours?|hrs?|minutes?|mins?)\s*\)", re.IGNORECASE
)
SENTENCE_END_RE = re.compile(r"[.!?]")
MARKUP_RE = re.compile(r"\*\*|__|`")
WHITESPACE_RE = re.compile(r"\s+")
LIST_MARKER_RE = re.compile(r"^\s*(?:[-*•]|\d+\.)\s+")


# =============================================================================
# Text helpers
# =============================================================================


def clean_text(text: str) -> str:
    """Strip markdown emphasis and collapse whitespace."""
    return WHITESPACE_RE.sub(" ", MARKUP_RE.sub("", text)).strip()


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def unique_capped(items: Iterable, limit: int, key=None) -> list:
    """Drop duplicates (first occurrence wins) and keep at most ``limit``."""
    seen = set()
    result = []
    for item in items:
        marker = key(item) if key else item
        if marker in seen:
            continue
        seen.add(marker)
        result.append(item)
        if len(result) >= limit:
            break
    return result


def strip_time_annotations(text: str) -> str:
    return WHITESPACE_RE.sub(" ", TIME_ANNOTATION_RE.sub("", text)).strip()


def extract_title(text: str, limit: int = TITLE_LIMIT) -> str:
    """First sentence of the text without time annotations, truncated."""
    cleaned = clean_text(strip_time_annotations(text))
    first_sentence = SENTENCE_END_RE.split(cleaned, maxsplit=1)[0].strip()
    if not first_sentence:
        first_sentence = cleaned
    return truncate(first_sentence, limit)


def title_from_block(text: str, limit: int = TITLE_LIMIT) -> str:
    """Title for a whole body: its first non-blank line without list markers."""
    for line in text.splitlines():
        if line.strip():
            return extract_title(LIST_MARKER_RE.sub("", line), limit)
    return ""


# =============================================================================
# Time estimate
# =============================================================================


def parse_time_estimate(
    text: str, default: int = DEFAULT_TIME_ESTIMATE
) -> tuple[int, bool]:
    """
    Read a "(N hours|minutes)" annotation.

    Returns:
        (minutes, synthesized) where synthesized is True when no usable
        annotation was found and ``default`` was used.
    """
    match = TIME_ANNOTATION_RE.search(text)
    if not match:
        return default, True

    amount = float(match.group(1))
    unit = match.group(2).lower()
    minutes = round(amount * 60) if unit.startswith(("hour", "hr")) else round(amount)

    if minutes <= 0:
        return default, True
    return minutes, False


# =============================================================================
# Instructions
# =============================================================================

UPLOAD_STEPS = [
    "Prepare your content file in the correct format",
    "Write an engaging title and description",
    "Add relevant tags and categories",
    "Choose an eye-catching thumbnail",
    "Schedule or publish immediately",
]

ENGAGE_STEPS = [
    "Check your notifications and comments",
    "Respond to comments thoughtfully",
    "Ask questions to encourage discussion",
    "Thank viewers for their support",
    "Pin important comments",
]

ANALYZE_STEPS = [
    "Open your analytics dashboard",
    "Review key metrics for the time period",
    "Identify trends and patterns",
    "Note areas for improvement",
    "Create action items based on insights",
]

GENERIC_STEPS = [
    "Review the task requirements",
    "Gather necessary resources",
    "Complete the main task",
    "Review and refine your work",
    "Track completion and results",
]

INSTRUCTION_RULES: RuleTable[tuple[str, ...]] = RuleTable(
    [
        Rule(lambda t: "upload" in t.lower(), tuple(UPLOAD_STEPS), "upload"),
        Rule(lambda t: "engage" in t.lower(), tuple(ENGAGE_STEPS), "engage"),
        Rule(lambda t: "analyze" in t.lower(), tuple(ANALYZE_STEPS), "analyze"),
    ],
    default=tuple(GENERIC_STEPS),
)


def synthesize_instructions(text: str) -> list[str]:
    """Fixed checklist chosen by keyword; never empty."""
    return list(INSTRUCTION_RULES(text))


def analytics_instructions(text: str) -> list[str]:
    return [
        "Open your platform analytics dashboard",
        "Navigate to the relevant metrics section",
        clean_text(text),
        "Document your findings",
        "Create action items based on insights",
        "Schedule follow-up review",
    ]


# =============================================================================
# Category and difficulty
# =============================================================================

CATEGORY_RULES: RuleTable[TaskCategory] = RuleTable(
    [
        keyword_rule(TaskCategory.CONTENT, "upload", "create", "post"),
        keyword_rule(TaskCategory.TECHNICAL, "setup", "configure", "install"),
        keyword_rule(TaskCategory.COMMUNITY, "engage", "respond", "community"),
        keyword_rule(TaskCategory.ANALYTICS, "analyze", "metric", "data"),
        keyword_rule(TaskCategory.MONETIZATION, "monetiz", "revenue", "sponsor"),
    ],
    default=TaskCategory.CONTENT,
)


def classify_category(text: str) -> Classification[TaskCategory]:
    return CATEGORY_RULES.classify(text)


def determine_difficulty(phase: int, week: int) -> Difficulty:
    """Difficulty from roadmap position alone."""
    if phase == 1 and week <= 2:
        return Difficulty.BEGINNER
    if phase >= 3 or (phase == 2 and week >= 3):
        return Difficulty.ADVANCED
    return Difficulty.INTERMEDIATE


# =============================================================================
# Platform tips, best practices, common mistakes
# =============================================================================

TIP_SENTENCE_RE = re.compile(r"\b(?:tip|advice|recommend):\s*(.+?)(?=[.!\n]|$)", re.IGNORECASE)
PRACTICE_SENTENCE_RE = re.compile(
    r"\b(?:best practice|should|always):\s*(.+?)(?=[.!\n]|$)", re.IGNORECASE
)
MISTAKE_SENTENCE_RE = re.compile(
    r"(?:\bmistake|\bavoid|\bdon't):\s*(.+?)(?=[.!\n]|$)", re.IGNORECASE
)


def _labelled_sentences(pattern: re.Pattern, text: str) -> list[str]:
    return [
        clean_text(m.group(1)) for m in pattern.finditer(text) if m.group(1).strip()
    ]


def build_platform_specific(
    body: str,
    seed_tips: list[str],
    seed_practices: list[str],
    seed_mistakes: list[str],
    limit: int = 5,
) -> PlatformSpecific:
    """Seed lists followed by labelled sentences from the body, each capped."""
    return PlatformSpecific(
        tips=unique_capped(seed_tips + _labelled_sentences(TIP_SENTENCE_RE, body), limit),
        best_practices=unique_capped(
            seed_practices + _labelled_sentences(PRACTICE_SENTENCE_RE, body), limit
        ),
        common_mistakes=unique_capped(
            seed_mistakes + _labelled_sentences(MISTAKE_SENTENCE_RE, body), limit
        ),
    )


# =============================================================================
# Success metrics
# =============================================================================

METRIC_PATTERNS = [
    (
        "subscribers",
        re.compile(r"\b(\d[\d,]*(?:\.\d+)?[kKmM]?)\s*(?:subscribers?|followers?)\b", re.IGNORECASE),
    ),
    ("views", re.compile(r"\b(\d[\d,]*(?:\.\d+)?[kKmM]?)\s*views?\b", re.IGNORECASE)),
    (
        "engagement_rate",
        re.compile(r"\b(\d+(?:\.\d+)?)(%?)\s*(?:engagement|ctr|click)", re.IGNORECASE),
    ),
    (
        "watch_time",
        re.compile(r"\b(\d+)\s*(hours?|minutes?)\s*(?:of\s+)?(?:watch|stream)", re.IGNORECASE),
    ),
]

COMPLETION_METRIC = ("completion", "100%", "Mark task as complete")


def _metric_target(metric: str, match: re.Match) -> str:
    if metric == "engagement_rate":
        return match.group(1) + match.group(2)
    if metric == "watch_time":
        return f"{match.group(1)} {match.group(2).lower()}"
    return match.group(1)


def extract_success_metrics(text: str) -> list[SuccessMetric]:
    """Numeric targets found in the text, or a single completion metric."""
    metrics = []
    for metric, pattern in METRIC_PATTERNS:
        for match in pattern.finditer(text):
            metrics.append(
                SuccessMetric(
                    metric=metric,
                    target=_metric_target(metric, match),
                    how_to_measure=f"Track {metric} in analytics",
                )
            )

    metrics = unique_capped(metrics, len(metrics) or 1, key=lambda m: (m.metric, m.target))

    if not metrics:
        metric, target, how = COMPLETION_METRIC
        metrics.append(
            SuccessMetric(metric=metric, target=target, how_to_measure=how, synthesized=True)
        )
    return metrics


# =============================================================================
# Resources
# =============================================================================

TOOL_MENTION_RE = re.compile(
    r"\b(?:[Uu]se|[Uu]sing|[Ww]ith)\s+([A-Z][A-Za-z ]+?)(?=\s+to\b|\s+for\b|[.,])"
)


def extract_resources(
    text: str, known_tools: Optional[list[str]] = None, limit: int = 5
) -> list[Resource]:
    """Tools mentioned by name plus keyword-triggered template/guide resources."""
    resources = []
    for match in TOOL_MENTION_RE.finditer(text):
        tool = match.group(1).strip()
        if 2 < len(tool) < 30:
            resources.append(Resource(type=ResourceType.TOOL, title=tool))

    lower = text.lower()
    for tool in known_tools or []:
        if tool.lower() in lower:
            resources.append(Resource(type=ResourceType.TOOL, title=tool))

    if "template" in lower:
        resources.append(
            Resource(type=ResourceType.TEMPLATE, title="Content Template", synthesized=True)
        )
    if "guide" in lower:
        resources.append(
            Resource(type=ResourceType.GUIDE, title="Best Practices Guide", synthesized=True)
        )

    return unique_capped(resources, limit, key=lambda r: r.title.lower())
