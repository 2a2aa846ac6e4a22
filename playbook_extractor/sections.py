"""
Section Segmentation

Splits a playbook document into ordered sections at heading lines and tracks
the running (phase, week, dayRange) context that the extractors inherit.

Phase and week values persist from section to section until a new marker
overwrites them; a document with no markers is phase 1, week 1 throughout.
Inside a section, "Day N", "Day N-M" and "Daily Tasks" marker lines open day
blocks, which close at the next day marker, Phase/Week marker, goal-style
label, or the end of the section.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from playbook_extractor.models import PlatformScope

logger = logging.getLogger(__name__)

DEFAULT_PHASE = 1
DEFAULT_WEEK = 1

HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.*?)[ \t#]*$")
PHASE_RE = re.compile(r"\bPhase[ \t]+(\d+)", re.IGNORECASE)
WEEK_RE = re.compile(r"\bWeek[ \t]+(\d+)", re.IGNORECASE)

# Body lines only move the phase/week context when they lead with the marker
CONTEXT_MARKER_RE = re.compile(
    r"^(?:\*\*)?[ \t]*(?:Phase|Week)[ \t]+\d+", re.IGNORECASE
)

DAY_MARKER_RE = re.compile(
    r"^(?:\*\*)?"
    r"(?:Days?[ \t]+(?P<start>\d+)(?:[ \t]*[-–][ \t]*(?P<end>\d+))?|(?P<daily>Daily)[ \t]+Tasks?)"
    r"(?:\*\*)?[ \t]*(?:\([^)\n]*\))?(?:\*\*)?"
    r"[ \t]*(?:(?:[:\-–—])[ \t]*(?P<label>.*?))?[ \t]*$",
    re.IGNORECASE,
)

GOAL_LABEL_RE = re.compile(
    r"^(?:\*\*)?[ \t]*(?:(?:[A-Za-z]+[ \t]+)?(?:Goals?|Milestones?)|Success[ \t]+Metrics)"
    r"(?:\*\*)?[ \t]*:|^(?:\*\*)?[ \t]*By[ \t]+the[ \t]+end[ \t]+of\b",
    re.IGNORECASE,
)


@dataclass
class DayBlock:
    """Body text following a Day/Daily marker."""

    day_range: str  # "Day 3", "Day 3-4" or "Daily"
    phase: int
    week: int
    body: str
    label: str = ""  # inline text after the marker, e.g. "Day 1: Channel setup"
    line_number: int = 0


@dataclass
class Section:
    """A heading-bounded span of a document with its inherited context."""

    index: int
    header: str
    level: int  # number of '#' characters; 0 for text before the first heading
    body: str
    phase: int
    week: int
    platform_scope: PlatformScope
    day_blocks: list[DayBlock] = field(default_factory=list)
    start_line: int = 0

    @property
    def is_cross_platform(self) -> bool:
        return self.platform_scope == PlatformScope.ALL


def _strip_heading(line: str) -> str:
    match = HEADING_RE.match(line)
    if match:
        return match.group(2).strip()
    return line.strip()


def format_day_range(start: Optional[str], end: Optional[str]) -> str:
    if start is None:
        return "Daily"
    if end:
        return f"Day {int(start)}-{int(end)}"
    return f"Day {int(start)}"


class SectionSegmenter:
    """Splits document text into ordered sections with phase/week context."""

    def segment(
        self, text: str, platform_scope: PlatformScope | str = PlatformScope.ALL
    ) -> list[Section]:
        """
        Split a document into sections.

        Args:
            text: Raw document text
            platform_scope: Declared platform scope of the document

        Returns:
            Sections in textual order; empty for blank input
        """
        if isinstance(platform_scope, str):
            platform_scope = PlatformScope(platform_scope.lower())

        if not text or not text.strip():
            return []

        phase, week = DEFAULT_PHASE, DEFAULT_WEEK
        sections: list[Section] = []

        for level, header, lines, start_line in self._split_headings(text):
            if header:
                phase, week = self._apply_markers(header, phase, week)
            section_phase, section_week = phase, week

            blocks, phase, week = self._split_day_blocks(
                header, lines, phase, week, start_line
            )

            body = "\n".join(lines).strip("\n")
            if not header and not body.strip():
                continue

            section = Section(
                index=len(sections),
                header=header,
                level=level,
                body=body,
                phase=section_phase,
                week=section_week,
                platform_scope=platform_scope,
                day_blocks=blocks,
                start_line=start_line,
            )
            logger.debug(
                "Section %d '%s' at line %d phase=%d week=%d day_blocks=%d",
                section.index,
                header[:40],
                section.start_line,
                section_phase,
                section_week,
                len(blocks),
            )
            sections.append(section)

        return sections

    @staticmethod
    def _split_headings(text: str) -> list[tuple[int, str, list[str], int]]:
        """Coarse split at '#' heading lines: (level, header, body lines, line no)."""
        chunks: list[tuple[int, str, list[str], int]] = []
        level, header, lines, start = 0, "", [], 1

        for number, line in enumerate(text.splitlines(), start=1):
            match = HEADING_RE.match(line)
            if match:
                chunks.append((level, header, lines, start))
                level, header, lines, start = (
                    len(match.group(1)),
                    match.group(2).strip(),
                    [],
                    number,
                )
            else:
                lines.append(line)

        chunks.append((level, header, lines, start))
        return chunks

    @staticmethod
    def _apply_markers(line: str, phase: int, week: int) -> tuple[int, int]:
        phase_match = PHASE_RE.search(line)
        week_match = WEEK_RE.search(line)
        if phase_match:
            phase = int(phase_match.group(1))
        if week_match:
            week = int(week_match.group(1))
        return phase, week

    def _split_day_blocks(
        self,
        header: str,
        lines: list[str],
        phase: int,
        week: int,
        start_line: int,
    ) -> tuple[list[DayBlock], int, int]:
        """Cut day blocks out of one section, updating the running context."""
        blocks: list[DayBlock] = []
        current: Optional[dict] = None

        first_body_line = start_line + 1 if header else start_line
        candidates = ([(start_line, header, True)] if header else []) + [
            (first_body_line + offset, line, False) for offset, line in enumerate(lines)
        ]

        def close() -> None:
            if current is None:
                return
            body = "\n".join(current["lines"]).strip("\n")
            if not body.strip() and current["label"]:
                body = current["label"]
            if body.strip():
                blocks.append(
                    DayBlock(
                        day_range=current["day_range"],
                        phase=current["phase"],
                        week=current["week"],
                        body=body,
                        label=current["label"],
                        line_number=current["line_number"],
                    )
                )

        for number, raw_line, is_header in candidates:
            line = _strip_heading(raw_line)

            day = DAY_MARKER_RE.match(line)
            if day:
                close()
                current = {
                    "day_range": format_day_range(
                        None if day.group("daily") else day.group("start"),
                        day.group("end"),
                    ),
                    "phase": phase,
                    "week": week,
                    "label": (day.group("label") or "").strip(" *"),
                    "line_number": number,
                    "lines": [],
                }
                continue

            if CONTEXT_MARKER_RE.match(line):
                close()
                current = None
                phase, week = self._apply_markers(line, phase, week)
                continue

            if GOAL_LABEL_RE.match(line):
                close()
                current = None
                continue

            if current is not None and not is_header:
                current["lines"].append(raw_line)

        close()
        return blocks, phase, week


# =============================================================================
# List items and labelled lists
# =============================================================================

LIST_ITEM_RE = re.compile(r"^(?P<indent>[ \t]*)(?P<marker>[-*•]|\d+\.)[ \t]+(?P<text>.+?)[ \t]*$")
BOLD_LABEL_RE = re.compile(r"^\*\*(?P<label>[^*]+?):?\*\*:?[ \t]*(?P<rest>.*)$")


@dataclass
class ListItem:
    """A top-level list item with its indented sub-items."""

    text: str  # item text without the list marker
    label: str = ""  # "**Label:** rest" items carry the bold label here
    rest: str = ""
    children: list[str] = field(default_factory=list)
    line_number: int = 0
    numbered: bool = False

    @property
    def plain(self) -> str:
        """Item text with the bold label unwrapped."""
        if self.label:
            return f"{self.label}: {self.rest}".rstrip(": ")
        return self.text


def _indent_width(indent: str) -> int:
    return len(indent.expandtabs(4))


def parse_list_items(text: str, first_line: int = 1) -> list[ListItem]:
    """Collect top-level list items; deeper-indented items become children.

    Non-list lines directly after an item are treated as continuation text.
    A blank line ends continuation.
    """
    items: list[ListItem] = []
    base_indent: Optional[int] = None
    continuing = False

    for number, line in enumerate(text.splitlines(), start=first_line):
        match = LIST_ITEM_RE.match(line)
        if match:
            width = _indent_width(match.group("indent"))
            if base_indent is None:
                base_indent = width
            if width > base_indent and items:
                items[-1].children.append(match.group("text"))
            else:
                items.append(
                    _make_item(match.group("text"), number, numbered=match.group("marker")[0].isdigit())
                )
            continuing = True
            continue

        if not line.strip():
            continuing = False
            continue

        if continuing and items and not HEADING_RE.match(line):
            last = items[-1]
            if last.children:
                last.children[-1] = f"{last.children[-1]} {line.strip()}"
            else:
                items[-1] = _make_item(
                    f"{last.text} {line.strip()}", last.line_number, last.numbered, last.children
                )

    return items


def _make_item(
    text: str,
    line_number: int,
    numbered: bool = False,
    children: Optional[list[str]] = None,
) -> ListItem:
    item = ListItem(
        text=text,
        children=list(children or []),
        line_number=line_number,
        numbered=numbered,
    )
    bold = BOLD_LABEL_RE.match(text)
    if bold:
        item.label = bold.group("label").strip()
        item.rest = bold.group("rest").strip()
    return item


@dataclass
class LabelledList:
    """List items found under a label line such as "Weekly Analytics Tasks:"."""

    match: re.Match
    items: list[ListItem]
    body: str
    line_number: int


def _label_candidate(line: str) -> str:
    """Label form of a line: heading hashes, list markers and bold removed."""
    stripped = _strip_heading(line)
    stripped = re.sub(r"^(?:[-*•]|\d+\.)[ \t]+", "", stripped)
    return stripped.replace("**", "").strip()


def find_labelled_lists(text: str, label_re: re.Pattern) -> list[LabelledList]:
    """
    Find every line whose label form matches ``label_re`` and collect the list
    that follows it.

    A list ends at the next heading, the next matching label, a Phase/Week
    marker line, or a prose line once at least one item has been seen.

    Args:
        text: Document or section text
        label_re: Pattern matched (``re.match``) against each line's label form

    Returns:
        Labelled lists in textual order; lists with no items are dropped
    """
    lines = text.splitlines()
    found: list[LabelledList] = []
    index = 0

    while index < len(lines):
        match = label_re.match(_label_candidate(lines[index]))
        if not match:
            index += 1
            continue

        start = index
        index += 1
        body_lines: list[str] = []
        seen_item = False
        while index < len(lines):
            line = lines[index]
            if HEADING_RE.match(line) or label_re.match(_label_candidate(line)):
                break
            if CONTEXT_MARKER_RE.match(_strip_heading(line)):
                break
            if LIST_ITEM_RE.match(line):
                seen_item = True
            elif line.strip() and seen_item and not line[:1].isspace():
                break
            body_lines.append(line)
            index += 1

        body = "\n".join(body_lines)
        items = parse_list_items(body, first_line=start + 2)
        if items:
            found.append(LabelledList(match=match, items=items, body=body, line_number=start + 1))
        else:
            logger.debug("Label '%s' at line %d has no list items", lines[start].strip()[:40], start + 1)

    return found
