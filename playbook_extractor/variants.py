"""
Niche Variant Expansion

Cross-platform tasks are rewritten once per default niche of their assigned
platform. Platform-scoped tasks pass through untouched.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from playbook_extractor.config import ExtractorConfig
from playbook_extractor.context import format_identifier
from playbook_extractor.models import EntityType, PlatformScope, Task

logger = logging.getLogger(__name__)

# Fields rewritten from the niche adaptation table
VARIANT_FIELDS = ["niche", "title"]


class VariantExpander:
    """Produce niche-specific copies of cross-platform tasks."""

    def __init__(self, config: ExtractorConfig):
        self.config = config

    def expand(self, task: Task, scope: PlatformScope) -> list[Task]:
        """
        Expand one task.

        Args:
            task: Task extracted from a document
            scope: Declared platform scope of that document

        Returns:
            One variant per configured niche that has an adaptation entry, or
            ``[task]`` when the scope is platform-specific or no niche applies
        """
        if scope != PlatformScope.ALL:
            return [task]

        variants = []
        for niche in self.config.niches_for(task.platform):
            adaptation = self.config.niche_adaptations.get(niche)
            if adaptation is None:
                logger.debug("No adaptation for niche '%s'; skipping variant", niche)
                continue

            description = task.description
            rewritten = list(VARIANT_FIELDS)
            if adaptation.example:
                description = f"{description} (e.g., {adaptation.example})"
                rewritten.append("description")

            variants.append(
                replace(
                    task,
                    id=format_identifier(
                        task.platform, EntityType.TASK, task.order_index, qualifier=niche
                    ),
                    niche=niche,
                    title=f"{adaptation.label}: {task.title}",
                    description=description,
                    instructions=list(task.instructions),
                    platform_specific=replace(
                        task.platform_specific,
                        tips=list(task.platform_specific.tips),
                        best_practices=list(task.platform_specific.best_practices),
                        common_mistakes=list(task.platform_specific.common_mistakes),
                    ),
                    success_metrics=list(task.success_metrics),
                    resources=list(task.resources),
                    synthesized=task.synthesized
                    + [f for f in rewritten if f not in task.synthesized],
                    metadata={**task.metadata, "variantOf": task.id},
                )
            )

        return variants or [task]

    def expand_all(self, tasks: list[Task], scope: PlatformScope) -> list[Task]:
        expanded = []
        for task in tasks:
            expanded.extend(self.expand(task, scope))
        return expanded
