"""
Tip Extraction

Tips are sentences introduced by "Tip:", "Pro Tips:", "Key Insight:",
"Important:" or "Note:". A label with nothing after it on the same line takes
the list that follows instead. Strategy and algorithm-factor lists produce
tips of their own in engagement and algorithm documents.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from playbook_extractor.context import RunContext
from playbook_extractor.models import Difficulty, EntityType, PlatformScope, Tip
from playbook_extractor.rules import RuleTable, keyword_rule
from playbook_extractor.sections import Section, find_labelled_lists, parse_list_items
from playbook_extractor.synthesizers import clean_text, determine_difficulty

logger = logging.getLogger(__name__)

MIN_TIP_LENGTH = 20
TITLE_LIMIT = 50
TITLE_WORDS = 5
TAG_LIMIT = 5

TAG_VOCABULARY = [
    "algorithm",
    "growth",
    "engagement",
    "viral",
    "trending",
    "audience",
    "content",
    "optimization",
    "analytics",
    "monetization",
]

TIP_LABEL_RE = re.compile(
    r"(?:\*\*)?\b(?:(?:Pro\s+)?Tips?|(?:Key\s+)?Insights?|Important|Note)(?:\*\*)?:(?:\*\*)?[ \t]*(?P<text>[^\n]*)",
    re.IGNORECASE,
)
STRATEGY_LABEL_RE = re.compile(r"(?:[A-Za-z]+\s+)?Strateg(?:y|ies):?\s*$", re.IGNORECASE)
ALGORITHM_LABEL_RE = re.compile(
    r"(?:Algorithm\s+|Ranking\s+|Discovery\s+)?(?:Factors?|Signals?|Tips?):?\s*$",
    re.IGNORECASE,
)

CATEGORY_RULES: RuleTable[Optional[str]] = RuleTable(
    [
        keyword_rule("analytics", "analytic", "metric", "data"),
        keyword_rule("engagement", "engag", "community", "comment"),
        keyword_rule("monetization", "monetiz", "revenue", "sponsor", "income"),
        keyword_rule("growth", "growth", "algorithm", "discover", "seo"),
        keyword_rule("content", "content", "video", "idea", "script"),
    ],
    default=None,
)


def generate_tip_title(text: str, prefix: str = "") -> str:
    """Shorter of the first five words and the first sentence, cut to 50 characters."""
    cleaned = clean_text(text)
    words = " ".join(cleaned.split()[:TITLE_WORDS])
    sentence = re.split(r"[.!?]", cleaned, maxsplit=1)[0].strip() or cleaned
    title = prefix + (words if len(words) <= len(sentence) else sentence)
    return title[:TITLE_LIMIT].rstrip()


def extract_tags(text: str) -> list[str]:
    lower = text.lower()
    return [term for term in TAG_VOCABULARY if term in lower][:TAG_LIMIT]


class TipExtractor:
    """Extract Tips from labelled sentences and lists."""

    def __init__(
        self,
        default_category: str = "general",
        default_difficulty: Optional[Difficulty] = None,
    ):
        self.default_category = default_category
        self.default_difficulty = default_difficulty

    def extract(
        self,
        sections: list[Section],
        scope: PlatformScope,
        source: str,
        ctx: RunContext,
    ) -> list[Tip]:
        """
        Extract tips from every section.

        Args:
            sections: Segmented document
            scope: Declared platform scope; "all" yields platform None
            source: Name of the originating document
            ctx: Identifier state for this run

        Returns:
            Tips in document order, one per distinct content
        """
        tips: list[Tip] = []
        seen: set[str] = set()

        for section in sections:
            for content in self._section_tip_texts(section):
                if content in seen:
                    continue
                seen.add(content)
                tips.append(self._tip(content, section, scope, source, ctx))

        return tips

    def extract_strategies(
        self, text: str, scope: PlatformScope, source: str, ctx: RunContext
    ) -> list[Tip]:
        """Engagement tips from "Strategy/Strategies:" lists."""
        return self._list_tips(
            text,
            STRATEGY_LABEL_RE,
            scope,
            source,
            ctx,
            category="engagement",
            difficulty=Difficulty.BEGINNER,
            tags=["community", "engagement", "growth"],
        )

    def extract_algorithm(
        self, text: str, scope: PlatformScope, source: str, ctx: RunContext
    ) -> list[Tip]:
        """Algorithm insight tips from ranking factor and signal lists."""
        return self._list_tips(
            text,
            ALGORITHM_LABEL_RE,
            scope,
            source,
            ctx,
            category="growth",
            difficulty=Difficulty.ADVANCED,
            tags=["algorithm", "discovery", "optimization"],
            title_prefix="Algorithm Insight: ",
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _section_tip_texts(self, section: Section) -> list[str]:
        texts = []
        lines = section.body.splitlines()
        for number, line in enumerate(lines):
            match = TIP_LABEL_RE.search(line)
            if not match:
                continue
            inline = clean_text(match.group("text"))
            if inline:
                if len(inline) >= MIN_TIP_LENGTH:
                    texts.append(inline)
                else:
                    logger.debug("Discarding short tip '%s'", inline)
                continue

            # Bare label: take the list that follows
            following = "\n".join(lines[number + 1 :])
            for item in self._leading_list(following):
                if len(item) >= MIN_TIP_LENGTH:
                    texts.append(item)
        return texts

    @staticmethod
    def _leading_list(text: str) -> list[str]:
        block = []
        for line in text.splitlines():
            if not line.strip():
                if block:
                    break
                continue
            if not re.match(r"^\s*(?:[-*•]|\d+\.)\s+", line) and not line[:1].isspace():
                break
            block.append(line)
        return [clean_text(item.plain) for item in parse_list_items("\n".join(block))]

    def _category(self, section: Section) -> tuple[str, bool]:
        found = CATEGORY_RULES.classify(section.header)
        if found.defaulted:
            return self.default_category, True
        return found.result, False

    def _tip(
        self,
        content: str,
        section: Section,
        scope: PlatformScope,
        source: str,
        ctx: RunContext,
    ) -> Tip:
        synthesized = ["title", "difficulty"]
        category, category_defaulted = self._category(section)
        if category_defaulted:
            synthesized.append("category")

        platform = None if scope == PlatformScope.ALL else scope.value
        tip_id, _ = ctx.assign(EntityType.TIP, platform)
        return Tip(
            id=tip_id,
            title=generate_tip_title(content),
            content=content,
            category=category,
            platform=platform,
            niche=None,
            difficulty=self.default_difficulty
            or determine_difficulty(section.phase, section.week),
            tags=extract_tags(content),
            source=source,
            synthesized=synthesized,
        )

    def _list_tips(
        self,
        text: str,
        label_re: re.Pattern,
        scope: PlatformScope,
        source: str,
        ctx: RunContext,
        category: str,
        difficulty: Difficulty,
        tags: list[str],
        title_prefix: str = "",
    ) -> list[Tip]:
        platform = None if scope == PlatformScope.ALL else scope.value
        tips: list[Tip] = []
        seen: set[str] = set()

        for found in find_labelled_lists(text, label_re):
            for item in found.items:
                content = clean_text(item.plain)
                if len(content) < MIN_TIP_LENGTH or content in seen:
                    continue
                seen.add(content)
                tip_id, _ = ctx.assign(EntityType.TIP, platform)
                tips.append(
                    Tip(
                        id=tip_id,
                        title=generate_tip_title(content, title_prefix),
                        content=content,
                        category=category,
                        platform=platform,
                        niche=None,
                        difficulty=difficulty,
                        tags=list(tags),
                        source=source,
                        synthesized=["title", "category", "difficulty", "tags"],
                    )
                )
        return tips
