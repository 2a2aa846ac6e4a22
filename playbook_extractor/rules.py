"""
Ordered Rule Tables

Every classifier in the pipeline is an ordered list of (predicate, result)
rules. Rules are evaluated top to bottom and the first match wins, so
precedence is whatever order the table is written in.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")

Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class Rule(Generic[T]):
    """A single classification rule."""

    predicate: Predicate
    result: T
    name: str = ""

    def matches(self, text: str) -> bool:
        return self.predicate(text)


@dataclass(frozen=True)
class Classification(Generic[T]):
    """Outcome of running a rule table against some text."""

    result: T
    rule: Optional[str] = None  # None when the default was used

    @property
    def defaulted(self) -> bool:
        return self.rule is None


class RuleTable(Generic[T]):
    """First-match-wins rule evaluation with an explicit default."""

    def __init__(self, rules: list[Rule[T]], default: T) -> None:
        self.rules = list(rules)
        self.default = default

    def classify(self, text: str) -> Classification[T]:
        for rule in self.rules:
            if rule.matches(text):
                return Classification(result=rule.result, rule=rule.name or str(rule.result))
        return Classification(result=self.default)

    def __call__(self, text: str) -> T:
        return self.classify(text).result

    def __len__(self) -> int:
        return len(self.rules)


def contains_any(*keywords: str) -> Predicate:
    """Case-insensitive substring match on any keyword."""
    lowered = tuple(k.lower() for k in keywords)

    def predicate(text: str) -> bool:
        lower = text.lower()
        return any(k in lower for k in lowered)

    return predicate


def matches_pattern(pattern: str, flags: int = re.IGNORECASE) -> Predicate:
    compiled = re.compile(pattern, flags)
    return lambda text: compiled.search(text) is not None


def keyword_rule(result: Any, *keywords: str) -> Rule:
    return Rule(predicate=contains_any(*keywords), result=result, name="|".join(keywords))


@dataclass(frozen=True)
class CaptureRule(Generic[T]):
    """A rule whose regex capture groups feed the produced value."""

    pattern: re.Pattern
    result: T

    def search(self, text: str) -> Optional[re.Match]:
        return self.pattern.search(text)


def first_capture(
    rules: list[CaptureRule[T]], text: str
) -> Optional[tuple[T, re.Match]]:
    """Return the result and match of the first capture rule that matches."""
    for rule in rules:
        match = rule.search(text)
        if match:
            return rule.result, match
    return None
