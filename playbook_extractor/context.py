"""
Identifier Assignment

A RunContext holds one monotonically increasing counter per entity type for
a single pipeline run. It is passed explicitly into every extractor call so
two runs in the same process never share counters.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from playbook_extractor.models import EntityType

CROSS_PLATFORM_LABEL = "all"


@dataclass
class RunContext:
    """Per-run identifier state."""

    run_id: str = field(default_factory=lambda: f"run-{uuid.uuid4().hex[:8]}")
    started_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    _counters: dict[EntityType, int] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def next_index(self, entity_type: EntityType) -> int:
        """Allocate the next counter value for an entity type (starts at 1)."""
        with self._lock:
            value = self._counters.get(entity_type, 0) + 1
            self._counters[entity_type] = value
            return value

    def peek(self, entity_type: EntityType) -> int:
        """Last value handed out for an entity type (0 if none yet)."""
        return self._counters.get(entity_type, 0)

    def assign(self, entity_type: EntityType, platform: Optional[str]) -> tuple[str, int]:
        """Allocate an identifier and its counter value.

        Returns:
            (identifier, counter) where identifier is
            ``<platform>_<entitytype>_<counter>``; a missing platform is
            rendered as ``all``.
        """
        index = self.next_index(entity_type)
        return format_identifier(platform, entity_type, index), index

    def counts(self) -> dict[str, int]:
        return {et.value: self._counters.get(et, 0) for et in EntityType}


def format_identifier(
    platform: Optional[str],
    entity_type: EntityType,
    index: int,
    qualifier: Optional[str] = None,
) -> str:
    """Render ``<platform>[_<qualifier>]_<entitytype>_<index>``."""
    parts = [platform or CROSS_PLATFORM_LABEL]
    if qualifier:
        parts.append(qualifier)
    parts.extend([entity_type.value, str(index)])
    return "_".join(parts)
