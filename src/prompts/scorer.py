"""Confidence scoring for generated prompts.

The score is a UX heuristic on a 0-100 scale telling the user how much
signal went into the prompt.  It is built from additive terms:

* a base from ``complexity_level`` (more complex projects come with more
  collected detail);
* a bonus when ``project_type`` is a known archetype;
* a bonus per detected feature, saturating;
* a bonus for naming recognised technologies in ``tech_stack``.

Each term only ever grows with its input, so the score is monotonic in the
feature count and in tech-stack specificity, and it is clamped to 100.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .models import KNOWN_ARCHETYPES, PromptContext

COMPLEXITY_BASE: dict[str, int] = {
    "simple": 40,
    "medium": 50,
    "complex": 60,
}
UNKNOWN_COMPLEXITY_BASE = 45

KNOWN_ARCHETYPE_BONUS = 10
PER_FEATURE_BONUS = 5
MAX_FEATURE_BONUS = 25
SINGLE_TECH_BONUS = 5
MULTI_TECH_BONUS = 10

RECOGNIZED_TECHNOLOGIES: frozenset[str] = frozenset({
    "next.js", "nextjs", "react", "vue", "angular", "svelte",
    "typescript", "javascript", "node.js", "nodejs",
    "tailwind", "tailwind css", "prisma", "drizzle",
    "postgresql", "postgres", "mysql", "mongodb", "sqlite", "redis",
    "supabase", "firebase", "stripe", "paypal",
    "graphql", "rest", "trpc", "docker", "vercel", "aws",
    "nextauth", "auth.js", "clerk", "zustand",
})

_TECH_SPLIT = re.compile(r"\s*[+,/|]\s*")


def recognized_technologies(tech_stack: str | list[str] | None) -> list[str]:
    """Return the recognised technology names in *tech_stack*, de-duplicated."""
    if not tech_stack:
        return []
    if isinstance(tech_stack, str):
        parts = _TECH_SPLIT.split(tech_stack)
    else:
        parts = list(tech_stack)

    found: list[str] = []
    for part in parts:
        name = str(part).strip().lower()
        if name in RECOGNIZED_TECHNOLOGIES and name not in found:
            found.append(name)
    return found


def confidence_score(context: PromptContext | Mapping[str, Any]) -> int:
    """Compute the 0-100 confidence score for a render context."""
    if isinstance(context, PromptContext):
        context = context.as_render_dict()

    complexity = str(context.get("complexity_level") or "").strip().lower()
    score = COMPLEXITY_BASE.get(complexity, UNKNOWN_COMPLEXITY_BASE)

    project_type = str(context.get("project_type") or "").strip().lower()
    if project_type in KNOWN_ARCHETYPES:
        score += KNOWN_ARCHETYPE_BONUS

    features = context.get("detected_features") or []
    if isinstance(features, (list, tuple)):
        score += min(MAX_FEATURE_BONUS, len(features) * PER_FEATURE_BONUS)

    techs = recognized_technologies(context.get("tech_stack"))
    if len(techs) > 1:
        score += MULTI_TECH_BONUS
    elif techs:
        score += SINGLE_TECH_BONUS

    return max(0, min(100, score))
