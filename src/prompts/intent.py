"""Keyword-based analysis of a free-text project description.

Turns something like *"an online store with Stripe checkout and an admin
panel"* into a ``ProjectIntent``: the archetype, the core features, a
complexity estimate, technology preferences and a confidence value.  Pure
keyword matching, no AI calls.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .models import Complexity, ProjectIntent


# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class KeywordGroup:
    keywords: tuple[str, ...]
    weight: int
    category: str  # "type" | "feature" | "tech"


_CATEGORY_MULTIPLIER = {"type": 1.5, "feature": 1.2, "tech": 0.8}

ARCHETYPE_KEYWORDS: dict[str, tuple[KeywordGroup, ...]] = {
    "ecommerce": (
        KeywordGroup(("ecommerce", "e-commerce", "shop", "store", "cart", "payment",
                      "marketplace", "retail", "online store", "sell", "buy"), 10, "type"),
        KeywordGroup(("inventory", "merchant", "vendor", "supplier", "logistics",
                      "warehouse"), 8, "feature"),
        KeywordGroup(("stripe", "paypal", "checkout"), 6, "tech"),
        KeywordGroup(("coupon", "discount", "promotion", "marketing"), 7, "feature"),
        KeywordGroup(("order", "shipping", "purchase"), 9, "type"),
    ),
    "saas": (
        KeywordGroup(("saas", "subscription", "multi-tenant", "tenant",
                      "software as a service"), 10, "type"),
        KeywordGroup(("billing", "team management", "rbac", "role", "pricing",
                      "plan"), 8, "feature"),
        KeywordGroup(("api", "webhook", "integration", "rest api", "graphql"), 6, "tech"),
        KeywordGroup(("workflow", "automation", "process"), 7, "feature"),
        KeywordGroup(("organization", "department", "collaboration", "workspace"), 8, "type"),
    ),
    "blog": (
        KeywordGroup(("blog", "post", "article", "cms", "content", "publish",
                      "news", "writing"), 10, "type"),
        KeywordGroup(("comment", "seo", "tag", "category", "archive"), 8, "feature"),
        KeywordGroup(("markdown", "editor", "wysiwyg", "mdx"), 6, "tech"),
        KeywordGroup(("newsletter", "rss", "notification"), 7, "feature"),
        KeywordGroup(("author", "editorial", "review"), 6, "feature"),
    ),
    "portfolio": (
        KeywordGroup(("portfolio", "personal website", "resume", "personal site",
                      "personal brand"), 10, "type"),
        KeywordGroup(("projects", "skills", "contact form", "about me",
                      "experience"), 8, "feature"),
        KeywordGroup(("animation", "responsive", "interactive", "parallax"), 6, "tech"),
        KeywordGroup(("designer", "creative", "artist", "photographer"), 7, "type"),
        KeywordGroup(("case study", "showcase", "gallery"), 6, "feature"),
    ),
    "dashboard": (
        KeywordGroup(("dashboard", "admin panel", "admin", "back office", "analytics",
                      "data visualization", "console"), 10, "type"),
        KeywordGroup(("user management", "data table", "statistics", "report",
                      "monitoring"), 8, "feature"),
        KeywordGroup(("echarts", "chart.js", "d3", "recharts", "plotly",
                      "highcharts"), 6, "tech"),
        KeywordGroup(("kpi", "metrics", "performance", "trend"), 7, "feature"),
        KeywordGroup(("real-time", "realtime", "live data", "data source"), 6, "tech"),
    ),
}

_ECOMMERCE_HINT = re.compile(r"\b(e-?commerce|shopping|online store|shopping cart|checkout)\b")

FALLBACK_KEYWORDS: dict[str, tuple[str, ...]] = {
    "ecommerce": ("ecommerce", "shop", "store", "cart", "order", "product", "payment"),
    "saas": ("saas", "subscription", "tenant", "billing", "enterprise"),
    "blog": ("blog", "article", "cms", "post", "publish"),
    "portfolio": ("portfolio", "personal", "showcase", "resume"),
    "dashboard": ("dashboard", "admin", "chart", "analytics", "report"),
}

FEATURE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "auth": ("login", "register", "sign up", "signup", "auth", "user account", "users"),
    "payment": ("payment", "pay", "transaction", "stripe", "checkout"),
    "admin": ("admin", "management", "back office"),
    "upload": ("upload", "file", "image", "media"),
    "email": ("email", "mail", "newsletter", "notification"),
    "realtime": ("realtime", "real-time", "chat", "websocket", "live"),
    "search": ("search", "find", "filter"),
    "analytics": ("analytics", "statistics", "metrics", "insights"),
}

COMPLEXITY_INDICATORS: dict[Complexity, tuple[str, ...]] = {
    Complexity.COMPLEX: ("complex", "enterprise", "large-scale", "advanced", "scalable"),
    Complexity.MEDIUM: ("medium", "standard", "team", "business"),
    Complexity.SIMPLE: ("simple", "basic", "minimal", "personal", "small"),
}

TECH_KEYWORDS: dict[str, tuple[str, ...]] = {
    "React": ("react",),
    "Next.js": ("next.js", "nextjs"),
    "TypeScript": ("typescript",),
    "PostgreSQL": ("postgres", "postgresql"),
    "MySQL": ("mysql",),
    "MongoDB": ("mongodb", "mongo"),
    "Stripe": ("stripe",),
    "Supabase": ("supabase",),
    "Firebase": ("firebase",),
}

RECOMMENDED_FEATURES: dict[str, tuple[str, ...]] = {
    "ecommerce": ("auth", "payment", "admin", "upload", "email"),
    "saas": ("auth", "admin", "analytics", "email"),
    "blog": ("auth", "upload", "search", "email"),
    "portfolio": ("upload", "email"),
    "dashboard": ("auth", "admin", "analytics"),
}

_AUTH_BY_DEFAULT = ("ecommerce", "saas", "dashboard")
_OPTIONAL_FEATURES = ("upload", "email", "analytics")
_ACTION_VERBS = ("build", "create", "develop", "design", "implement", "make")
_DOMAIN_WORDS = ("website", "platform", "system", "application", "app", "tool", "site")


def _contains(text: str, keyword: str) -> bool:
    return re.search(rf"(?<![a-z0-9]){re.escape(keyword)}(?![a-z0-9])", text) is not None


def _count(text: str, keyword: str) -> int:
    return len(re.findall(rf"(?<![a-z0-9]){re.escape(keyword)}(?![a-z0-9])", text))


def _merge(*sources: list[str]) -> list[str]:
    merged: list[str] = []
    for source in sources:
        for item in source:
            if item not in merged:
                merged.append(item)
    return merged


# ---------------------------------------------------------------------------
# Analyzer
# ---------------------------------------------------------------------------

class IntentAnalyzer:
    """Derives a ``ProjectIntent`` from a project description."""

    def analyze(
        self,
        description: str,
        detected_features: list[str] | None = None,
        tech_stack: list[str] | None = None,
    ) -> ProjectIntent:
        """Analyze *description*, merging in features and tech the caller already knows."""
        text = description.lower()

        archetype = self.identify_archetype(text)
        features = _merge(list(detected_features or []), self.extract_features(text))
        complexity = self.assess_complexity(text, features)
        tech = _merge(self.extract_tech_preferences(text), list(tech_stack or []))
        confidence = self.calculate_confidence(text, archetype, features)

        if archetype in _AUTH_BY_DEFAULT and "auth" not in features:
            features.append("auth")

        missing = [f for f in self.recommended_features(archetype) if f not in features]
        reasoning = (
            f"Matched '{archetype}' from description keywords; "
            f"{len(features)} feature(s) detected, complexity {complexity.value}."
        )
        return ProjectIntent(
            archetype=archetype,
            features=features,
            complexity=complexity,
            confidence=confidence,
            reasoning=reasoning,
            tech_preferences=tech,
            suggestions=[f"Consider adding '{f}'" for f in missing],
        )

    # -- Archetype ---------------------------------------------------------

    def identify_archetype(self, text: str) -> str:
        if _ECOMMERCE_HINT.search(text):
            return "ecommerce"

        scores: dict[str, float] = {}
        for archetype, groups in ARCHETYPE_KEYWORDS.items():
            score = 0.0
            for group in groups:
                multiplier = _CATEGORY_MULTIPLIER[group.category]
                for keyword in group.keywords:
                    hits = _count(text, keyword)
                    if hits:
                        score += group.weight * multiplier * hits
            scores[archetype] = score

        best_type, best_score = "blog", 0.0
        for archetype, score in scores.items():
            if score > best_score:
                best_type, best_score = archetype, score

        if best_score < 10:
            return self._fallback_archetype(text)
        if best_type != "ecommerce" and scores["ecommerce"] >= best_score * 0.9:
            return "ecommerce"
        return best_type

    def _fallback_archetype(self, text: str) -> str:
        best_type, best_count = "blog", 0
        for archetype, words in FALLBACK_KEYWORDS.items():
            count = sum(1 for w in words if w in text)
            if count > best_count:
                best_type, best_count = archetype, count
        return best_type

    # -- Features / complexity / tech -------------------------------------

    def extract_features(self, text: str) -> list[str]:
        return [
            feature
            for feature, keywords in FEATURE_KEYWORDS.items()
            if any(_contains(text, k) for k in keywords)
        ]

    def assess_complexity(self, text: str, features: list[str]) -> Complexity:
        for level, keywords in COMPLEXITY_INDICATORS.items():
            if any(_contains(text, k) for k in keywords):
                return level
        if len(features) >= 5:
            return Complexity.COMPLEX
        if len(features) >= 3:
            return Complexity.MEDIUM
        return Complexity.SIMPLE

    def extract_tech_preferences(self, text: str) -> list[str]:
        return [
            tech
            for tech, keywords in TECH_KEYWORDS.items()
            if any(_contains(text, k) for k in keywords)
        ]

    # -- Confidence ---------------------------------------------------------

    def calculate_confidence(self, text: str, archetype: str, features: list[str]) -> int:
        confidence = 50.0

        type_hits = sum(
            1
            for group in ARCHETYPE_KEYWORDS.get(archetype, ())
            if group.category == "type"
            for keyword in group.keywords
            if _contains(text, keyword)
        )
        confidence += min(20, type_hits * 5)

        recommended = self.recommended_features(archetype)
        if recommended:
            hit_rate = sum(1 for f in features if f in recommended) / len(recommended)
            confidence += hit_rate * 15

        words = text.split()
        if 5 <= len(words) <= 50:
            confidence += 5
        if any(_contains(text, v) for v in _ACTION_VERBS):
            confidence += 3
        if any(_contains(text, w) for w in _DOMAIN_WORDS):
            confidence += 2
        if len(words) < 3:
            confidence -= 10

        return int(max(0, min(100, round(confidence))))

    # -- Recommendations / validation --------------------------------------

    def recommended_features(self, archetype: str) -> list[str]:
        return list(RECOMMENDED_FEATURES.get(archetype, ("auth",)))

    def validate_intent(self, intent: ProjectIntent) -> tuple[bool, list[str]]:
        """Check whether *intent* is trustworthy enough to generate from.

        Returns:
            ``(valid, warnings)`` where ``valid`` requires a confidence of at
            least 40.
        """
        warnings: list[str] = []
        if intent.confidence < 60:
            warnings.append("Low confidence: describe the project in more detail")

        if intent.confidence <= 70:
            missing = [
                f
                for f in self.recommended_features(intent.archetype)
                if f not in intent.features and f not in _OPTIONAL_FEATURES
            ]
            if missing:
                warnings.append(f"Consider adding these features: {', '.join(missing)}")

        return intent.confidence >= 40, warnings
