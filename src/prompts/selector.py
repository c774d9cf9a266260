"""Context-aware selection of template variants.

Each archetype may register several alternative guidance bodies that differ
by target audience and focus.  ``VariantSelector`` picks one of them for a
request with a fixed set of rules:

1. keep the variants written for the caller's experience level;
2. beginners and experts fall back to intermediate variants, then to all;
3. walk the focus priority list for the development phase and return the
   first variant whose focus matches;
4. otherwise return the first remaining variant in registration order.

Feedback nudges each variant's ``weight``.  Weights are tracked per
selector instance but do not influence the rules above.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console

from .models import (
    DevelopmentPhase,
    FeedbackUsage,
    SelectionContext,
    TemplateFeedback,
    TemplateVariant,
    UserExperience,
    VariantFocus,
)

console = Console(stderr=True)

MIN_WEIGHT = 0.1
MAX_WEIGHT = 2.0
WEIGHT_STEP = 0.1


# ---------------------------------------------------------------------------
# Default catalog
# ---------------------------------------------------------------------------

DEFAULT_VARIANTS: dict[str, list[dict]] = {
    "ecommerce": [
        {
            "id": "ecommerce-beginner",
            "name": "E-commerce beginner guide",
            "description": "Step-by-step guidance for first-time store builders",
            "target_audience": "beginner",
            "focus": "implementation",
            "body_path": "ecommerce/beginner-guide.md",
        },
        {
            "id": "ecommerce-architecture",
            "name": "E-commerce architecture deep dive",
            "description": "System architecture and scalability of a store",
            "target_audience": "expert",
            "focus": "architecture",
            "body_path": "ecommerce/architecture-focused.md",
        },
        {
            "id": "ecommerce-practices",
            "name": "E-commerce best practices",
            "description": "Security and performance for production stores",
            "target_audience": "intermediate",
            "focus": "best-practices",
            "body_path": "ecommerce/best-practices.md",
        },
    ],
    "saas": [
        {
            "id": "saas-mvp",
            "name": "SaaS MVP",
            "description": "Ship a minimum viable product quickly",
            "target_audience": "beginner",
            "focus": "implementation",
            "body_path": "saas/mvp-focused.md",
        },
        {
            "id": "saas-enterprise",
            "name": "SaaS enterprise grade",
            "description": "Enterprise SaaS architecture and security",
            "target_audience": "expert",
            "focus": "architecture",
            "body_path": "saas/enterprise-grade.md",
        },
    ],
    "blog": [
        {
            "id": "blog-simple",
            "name": "Simple blog",
            "description": "Streamlined guidance for a personal blog",
            "target_audience": "beginner",
            "focus": "implementation",
            "body_path": "blog/simple-blog.md",
        },
    ],
    "portfolio": [
        {
            "id": "portfolio-creative",
            "name": "Creative portfolio",
            "description": "Visual impact and creative presentation",
            "target_audience": "intermediate",
            "focus": "implementation",
            "body_path": "portfolio/creative-focused.md",
        },
    ],
    "dashboard": [
        {
            "id": "dashboard-analytics",
            "name": "Analytics dashboard",
            "description": "Data visualisation and analysis",
            "target_audience": "intermediate",
            "focus": "implementation",
            "body_path": "dashboard/analytics-focused.md",
        },
    ],
}

FOCUS_PRIORITY: dict[DevelopmentPhase, tuple[VariantFocus, ...]] = {
    DevelopmentPhase.PLANNING: (
        VariantFocus.ARCHITECTURE,
        VariantFocus.IMPLEMENTATION,
        VariantFocus.BEST_PRACTICES,
        VariantFocus.TROUBLESHOOTING,
    ),
    DevelopmentPhase.DEVELOPMENT: (
        VariantFocus.IMPLEMENTATION,
        VariantFocus.BEST_PRACTICES,
        VariantFocus.TROUBLESHOOTING,
        VariantFocus.ARCHITECTURE,
    ),
    DevelopmentPhase.OPTIMIZATION: (
        VariantFocus.BEST_PRACTICES,
        VariantFocus.TROUBLESHOOTING,
        VariantFocus.ARCHITECTURE,
        VariantFocus.IMPLEMENTATION,
    ),
}


def default_variant(archetype: str) -> TemplateVariant:
    """Synthesise the variant used when an archetype registers none."""
    return TemplateVariant(
        id=f"{archetype}-default",
        name=f"{archetype} default template",
        description="General project guidance",
        target_audience=UserExperience.INTERMEDIATE,
        focus=VariantFocus.IMPLEMENTATION,
        body_path=f"{archetype}/main-prompt.md",
        weight=1.0,
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class VariantCatalog:
    """Ordered mapping of archetype -> registered variants."""

    def __init__(self, variants: dict[str, list[dict]] | None = None) -> None:
        self._variants: dict[str, list[TemplateVariant]] = {}
        source = DEFAULT_VARIANTS if variants is None else variants
        for archetype, entries in source.items():
            for entry in entries:
                self.register(archetype, TemplateVariant(**entry))

    def register(self, archetype: str, variant: TemplateVariant) -> None:
        self._variants.setdefault(archetype.lower(), []).append(variant)

    def variants(self, archetype: str) -> list[TemplateVariant]:
        return list(self._variants.get(archetype.lower(), []))

    def all_variants(self) -> Iterable[TemplateVariant]:
        for variants in self._variants.values():
            yield from variants


# ---------------------------------------------------------------------------
# Selector
# ---------------------------------------------------------------------------

class VariantSelector:
    """Picks the best variant for a request and tracks feedback weights."""

    def __init__(self, catalog: VariantCatalog | None = None) -> None:
        self.catalog = catalog if catalog is not None else VariantCatalog()

    def reset(self) -> None:
        """Restore the default catalog with every weight back at 1.0."""
        self.catalog = VariantCatalog()

    def available_variants(self, archetype: str) -> list[TemplateVariant]:
        return self.catalog.variants(archetype)

    def register_variant(self, archetype: str, variant: TemplateVariant) -> None:
        self.catalog.register(archetype, variant)

    def select_optimal_template(self, context: SelectionContext) -> TemplateVariant:
        """Return the variant that best fits *context*."""
        archetype = context.project_intent.archetype.lower()
        candidates = self.catalog.variants(archetype)

        if not candidates:
            return default_variant(archetype)
        if len(candidates) == 1:
            return candidates[0]
        return self._rule_based_selection(context, candidates)

    def update_weights(self, feedback: Iterable[TemplateFeedback]) -> None:
        """Adjust variant weights from user feedback.

        Helpful feedback rated 4 or 5 raises the weight by 0.1 (capped at
        2.0); unhelpful feedback or a rating of 1-2 lowers it by 0.1 (floored
        at 0.1).  Every variant carrying the id is updated.
        """
        for item in feedback:
            delta = 0.0
            if item.usage == FeedbackUsage.HELPFUL and item.rating >= 4:
                delta = WEIGHT_STEP
            elif item.usage == FeedbackUsage.NOT_HELPFUL or item.rating <= 2:
                delta = -WEIGHT_STEP
            if not delta:
                continue

            matched = False
            for variant in self.catalog.all_variants():
                if variant.id == item.variant_id:
                    variant.weight = round(
                        max(MIN_WEIGHT, min(MAX_WEIGHT, variant.weight + delta)), 1
                    )
                    matched = True
            if not matched:
                console.print(
                    f"[dim]Feedback for unknown variant '{item.variant_id}' ignored[/dim]"
                )

    # -- Internal ----------------------------------------------------------

    def _rule_based_selection(
        self,
        context: SelectionContext,
        variants: list[TemplateVariant],
    ) -> TemplateVariant:
        experience = context.user_experience
        filtered = [v for v in variants if v.target_audience == experience]

        if not filtered and experience in (UserExperience.BEGINNER, UserExperience.EXPERT):
            filtered = [
                v for v in variants if v.target_audience == UserExperience.INTERMEDIATE
            ]
        if not filtered:
            filtered = variants

        for focus in FOCUS_PRIORITY[context.development_phase]:
            for variant in filtered:
                if variant.focus == focus:
                    return variant

        return filtered[0]
