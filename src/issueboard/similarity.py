"""Duplicate detection for new issues.

Scores a candidate title against existing issues by substring-probing the
significant words of the title. Advisory only: callers show the matches as
a warning and still let the issue be created.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from issueboard.core import Issue

MIN_TITLE_LENGTH = 3
# Tokens of this length or shorter ("a", "to", "in") are too common to probe with.
MAX_IGNORED_TOKEN_LENGTH = 2
# How many matches a duplicate warning shows; find_similar itself never truncates.
SIMILAR_DISPLAY_LIMIT = 3


def tokenize(title: str) -> list[str]:
    """Lowercase *title*, split on whitespace runs, drop short tokens."""
    return [word for word in title.lower().split() if len(word) > MAX_IGNORED_TOKEN_LENGTH]


def find_similar(candidate_title: str, existing_issues: Iterable[Issue]) -> list[Issue]:
    """Return the issues that share at least half of the candidate's tokens.

    A token counts as shared when it occurs as a substring of the issue's
    title or description (case-insensitive). Input order is preserved.
    """
    if len(candidate_title) < MIN_TITLE_LENGTH:
        return []

    tokens = tokenize(candidate_title)
    if not tokens:
        return []

    threshold = math.ceil(len(tokens) / 2)
    similar: list[Issue] = []
    for issue in existing_issues:
        title = issue.title.lower()
        description = issue.description.lower()
        match_count = sum(1 for token in tokens if token in title or token in description)
        if match_count >= threshold:
            similar.append(issue)
    return similar
