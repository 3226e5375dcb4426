"""
Admission filters and target transformations.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from targetedid.models import TransformRule


def some_match(value: str, patterns: Sequence[re.Pattern[str]]) -> bool:
    """
    Check whether any pattern matches ``value``.

    Patterns are searched anywhere in the value, so anchors must be explicit.
    An empty pattern list matches nothing.
    """
    return any(pattern.search(value) for pattern in patterns)


def is_admitted(value: str, patterns: Sequence[re.Pattern[str]] | None) -> bool:
    """Apply an optional filter: None admits everything."""
    if patterns is None:
        return True
    return some_match(value, patterns)


def apply_transforms(value: str, rules: Sequence[TransformRule]) -> str:
    """Apply transformation rules in order, each to the previous result."""
    for rule in rules:
        value = rule.apply(value)
    return value
