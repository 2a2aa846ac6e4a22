"""
Template Extraction

Content-idea documents list templates as numbered items grouped under
sub-headings. The heading picks the template category, the item title picks
its type, and placeholders in the text become template variables.
"""

from __future__ import annotations

import logging
import re

from playbook_extractor.config import ExtractorConfig
from playbook_extractor.context import RunContext
from playbook_extractor.models import (
    EntityType,
    PlatformScope,
    Template,
    TemplateCategory,
    TemplateContent,
    TemplateType,
)
from playbook_extractor.rules import RuleTable, keyword_rule
from playbook_extractor.sections import ListItem, Section, parse_list_items
from playbook_extractor.synthesizers import clean_text, truncate

logger = logging.getLogger(__name__)

TITLE_LIMIT = 60
HOOK_TITLE_LIMIT = 30

CATEGORY_RULES: RuleTable[TemplateCategory] = RuleTable(
    [
        keyword_rule(TemplateCategory.VIDEO_SCRIPT, "script", "video"),
        keyword_rule(TemplateCategory.THUMBNAIL, "thumbnail"),
        keyword_rule(TemplateCategory.DESCRIPTION, "description", "bio"),
        keyword_rule(TemplateCategory.SOCIAL_MEDIA, "social"),
        keyword_rule(TemplateCategory.CHANNEL_ASSETS, "channel", "profile"),
    ],
    default=TemplateCategory.VIDEO_SCRIPT,
)

TYPE_RULES: RuleTable[TemplateType] = RuleTable(
    [
        keyword_rule(TemplateType.HOOK, "hook", "intro"),
        keyword_rule(TemplateType.OUTRO, "outro", "end"),
        keyword_rule(TemplateType.STRUCTURE, "structure", "format"),
        keyword_rule(TemplateType.CALL_TO_ACTION, "cta", "call"),
    ],
    default=TemplateType.GENERAL,
)

PLACEHOLDER_PATTERNS = [
    re.compile(r"\[([^\]\n]+)\]"),
    re.compile(r"\{([^}\n]+)\}"),
    re.compile(r"<([^>\n]+)>"),
    re.compile(r"\b(?:your|insert|add)\s+(\w+)", re.IGNORECASE),
]

EXAMPLE_RE = re.compile(
    r"(?:\be\.g\.|\bfor example\b|\bexample\b|\bsuch as\b|\blike\b)\s*:?\s*(.+?)(?=[.,;]|$)",
    re.IGNORECASE | re.MULTILINE,
)
TITLE_SPLIT_RE = re.compile(r"^(?P<title>[^:]{2,80}):\s+(?P<rest>.+)$")
QUOTED_RE = re.compile(r"\"([^\"\n]+)\"|“([^”\n]+)”")


def classify_template_category(header: str) -> TemplateCategory:
    return CATEGORY_RULES(header)


def classify_template_type(title: str) -> TemplateType:
    return TYPE_RULES(title)


def extract_variables(text: str) -> list[str]:
    """
    Placeholder names in bracket, brace, angle-bracket or "your/insert/add
    <word>" form, lowercased with underscores, deduplicated in first-seen
    order. Names outside 3-29 characters are ignored.
    """
    variables: list[str] = []
    for pattern in PLACEHOLDER_PATTERNS:
        for match in pattern.finditer(text):
            name = re.sub(r"\s+", "_", match.group(1).strip().strip("{}").strip().lower())
            if 2 < len(name) < 30 and name not in variables:
                variables.append(name)
    return variables


def extract_examples(text: str) -> list[str]:
    examples = []
    for match in EXAMPLE_RE.finditer(text):
        example = clean_text(match.group(1))
        if example and example not in examples:
            examples.append(example)
    return examples


class TemplateExtractor:
    """Extract Templates from content-idea sections."""

    def __init__(self, config: ExtractorConfig):
        self.config = config

    def extract(
        self, sections: list[Section], scope: PlatformScope, ctx: RunContext
    ) -> list[Template]:
        """
        Extract templates from every section.

        Args:
            sections: Segmented document
            scope: Declared platform scope of the document
            ctx: Identifier state for this run

        Returns:
            Numbered-item templates and hook templates in document order
        """
        platform = (
            self.config.cross_platform_fallback
            if scope == PlatformScope.ALL
            else scope.value
        )
        templates: list[Template] = []
        seen_hooks: set[str] = set()

        for section in sections:
            category = CATEGORY_RULES.classify(section.header)
            for item in parse_list_items(section.body):
                if not item.numbered:
                    continue
                templates.append(
                    self._from_item(item, category.result, category.defaulted, platform, ctx)
                )

            if "hook" in section.header.lower():
                for hook in self._quoted_hooks(section.body):
                    if hook in seen_hooks:
                        continue
                    seen_hooks.add(hook)
                    templates.append(self._hook_template(hook, platform, ctx))

        logger.debug("Extracted %d templates from %d sections", len(templates), len(sections))
        return templates

    def _from_item(
        self,
        item: ListItem,
        category: TemplateCategory,
        category_defaulted: bool,
        platform: str,
        ctx: RunContext,
    ) -> Template:
        synthesized = []
        if category_defaulted:
            synthesized.append("category")

        if item.label:
            title, description = item.label, item.rest
        else:
            split = TITLE_SPLIT_RE.match(clean_text(item.text))
            if split:
                title, description = split.group("title"), split.group("rest")
            else:
                title, description = truncate(clean_text(item.text), TITLE_LIMIT), item.text
                synthesized.append("title")

        title = clean_text(title)
        description = clean_text(description)
        template_type = TYPE_RULES.classify(title)
        if template_type.defaulted:
            synthesized.append("type")
        synthesized.append("niche")

        full_text = "\n".join([item.text, *item.children])
        template_id, _ = ctx.assign(EntityType.TEMPLATE, platform)
        return Template(
            id=template_id,
            category=category,
            type=template_type.result,
            title=title,
            content=TemplateContent(
                structure=description,
                sections=[clean_text(child) for child in item.children],
                examples=extract_examples(full_text),
            ),
            variables=extract_variables(full_text),
            platform=platform,
            niche=self.config.default_niche,
            synthesized=synthesized,
        )

    @staticmethod
    def _quoted_hooks(text: str) -> list[str]:
        hooks = []
        for match in QUOTED_RE.finditer(text):
            hook = (match.group(1) or match.group(2)).strip()
            if 10 < len(hook) < 200:
                hooks.append(hook)
        return hooks

    def _hook_template(self, hook: str, platform: str, ctx: RunContext) -> Template:
        template_id, _ = ctx.assign(EntityType.TEMPLATE, platform)
        return Template(
            id=template_id,
            category=TemplateCategory.VIDEO_SCRIPT,
            type=TemplateType.HOOK,
            title=f"Hook: {hook[:HOOK_TITLE_LIMIT]}...",
            content=TemplateContent(structure=hook, examples=[hook]),
            variables=extract_variables(hook),
            platform=platform,
            niche=self.config.default_niche,
            synthesized=["category", "title", "niche"],
        )
