"""Catalog of the primary prompt template for each project archetype.

Every known archetype owns exactly one ``TemplateDescriptor`` whose body
lives at ``<archetype>/main-prompt.md`` in the template store.  Descriptors
are built on first use and cached for the lifetime of the registry, together
with the set of variables their body declares.
"""

from __future__ import annotations

from rich.console import Console

from .errors import TemplateReadError
from .models import KNOWN_ARCHETYPES, TemplateDescriptor
from .renderer import scan_variables
from .store import TemplateStore, read_template

console = Console(stderr=True)

MAIN_BODY_NAME = "main-prompt.md"

COMMON_VARIABLES: frozenset[str] = frozenset({
    "project_name",
    "project_type",
    "complexity_level",
    "detected_features",
    "tech_stack",
    "tool_version",
    "current_date",
})

# Feature flags each archetype's body is expected to branch on.
ARCHETYPE_FLAGS: dict[str, tuple[str, ...]] = {
    "ecommerce": ("has_payment_feature",),
    "saas": ("has_billing_feature",),
    "blog": ("has_search_feature",),
    "portfolio": (),
    "dashboard": (),
}

_DESCRIPTIONS: dict[str, str] = {
    "ecommerce": "Development guidance for online stores: catalog, cart, checkout and payments",
    "saas": "Development guidance for multi-tenant subscription software",
    "blog": "Development guidance for content publishing sites",
    "portfolio": "Development guidance for personal showcase sites",
    "dashboard": "Development guidance for admin panels and analytics dashboards",
}


def main_body_path(archetype: str) -> str:
    """Conventional store path of an archetype's primary body."""
    return f"{archetype}/{MAIN_BODY_NAME}"


class TemplateRegistry:
    """Looks up template descriptors by archetype, case-insensitively."""

    def __init__(self, store: TemplateStore) -> None:
        self.store = store
        self._descriptors: dict[str, TemplateDescriptor] = {}

    def lookup(self, archetype: str) -> TemplateDescriptor | None:
        """Return the descriptor for *archetype*, or ``None``.

        ``None`` means the archetype is unknown or its primary body is
        missing from the store.
        """
        key = archetype.strip().lower()
        if key not in KNOWN_ARCHETYPES:
            return None
        if not self.store.exists(main_body_path(key)):
            return None
        return self._descriptor(key)

    def list_all(self) -> list[TemplateDescriptor]:
        """Return one descriptor per known archetype, in catalog order."""
        return [self._descriptor(key) for key in KNOWN_ARCHETYPES]

    def reset(self) -> None:
        """Forget every cached descriptor."""
        self._descriptors.clear()

    # -- Internal ----------------------------------------------------------

    def _descriptor(self, key: str) -> TemplateDescriptor:
        cached = self._descriptors.get(key)
        if cached is not None:
            return cached

        descriptor = TemplateDescriptor(
            id=f"{key}-main",
            archetype=key,
            body_path=main_body_path(key),
            declared_variables=self._declared_variables(key),
            description=_DESCRIPTIONS[key],
        )
        self._descriptors[key] = descriptor
        return descriptor

    def _declared_variables(self, key: str) -> frozenset[str]:
        path = main_body_path(key)
        if self.store.exists(path):
            try:
                return scan_variables(read_template(self.store, path))
            except TemplateReadError as exc:
                console.print(
                    f"[yellow]Could not scan {path} for variables: {exc}[/yellow]"
                )
        return COMMON_VARIABLES | frozenset(ARCHETYPE_FLAGS[key])
