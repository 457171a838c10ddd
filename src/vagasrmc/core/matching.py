"""
Keyword-overlap match score between a candidate's skills and a job description.

The description is split on whitespace and case-folded. A skill matches when
any description token contains it, or it contains the token. Substring
containment makes short skills over-match ("go" matches "going"); that is a
known limitation of the heuristic.
"""

from __future__ import annotations

from collections.abc import Iterable


def tokenize(text: str) -> list[str]:
    return text.casefold().split()


def skill_matches(skill: str, tokens: Iterable[str]) -> bool:
    return any(skill in token or token in skill for token in tokens)


def calculate_match_score(skills: list[str], description: str) -> int:
    normalized = [skill.strip().casefold() for skill in skills if skill and skill.strip()]
    if not normalized:
        return 0

    tokens = tokenize(description)
    matches = sum(1 for skill in normalized if skill_matches(skill, tokens))
    # half-up rounding of matches / skills * 100
    score = (matches * 200 + len(normalized)) // (2 * len(normalized))
    return max(0, min(100, score))
