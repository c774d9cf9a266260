"""Prompt generation facade.

``PromptEngine`` ties the pieces together for one request::

    registry.lookup -> selector.select_optimal_template -> store.read_body
        -> renderer.render -> scorer.confidence_score -> RenderResult

The engine owns its registry (descriptor cache) and selector (variant
weights); nothing is shared between engine instances.  Every failure inside
a generation is reported through ``RenderResult(success=False, error=...)``.

Quick usage::

    from src.prompts import PromptEngine, FileTemplateStore

    engine = PromptEngine(FileTemplateStore())
    result = engine.generate("saas", {
        "project_name": "Acme",
        "project_type": "saas",
        ...
    })
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from rich.console import Console

from src.config import Config

from .errors import TemplateNotFoundError, TemplateReadError, TemplateSyntaxError
from .intent import IntentAnalyzer
from .models import (
    DevelopmentPhase,
    ProjectIntent,
    PromptContext,
    RenderMetadata,
    RenderResult,
    SelectionContext,
    TemplateDescriptor,
    TemplateFeedback,
    TemplateVariant,
    UserExperience,
)
from .registry import TemplateRegistry
from .renderer import render, scan_variables
from .scorer import confidence_score
from .selector import VariantSelector
from .store import FileTemplateStore, TemplateStore, read_template

console = Console(stderr=True)

DEFAULT_BASE_FILES: tuple[str, ...] = (
    "base/core.md",
    "base/best-practices.md",
    "base/tech-stack-guide.md",
)
DEFAULT_TECH_STACK: tuple[str, ...] = ("Next.js", "TypeScript", "Tailwind CSS", "Prisma")
BASE_SEPARATOR = "\n\n---\n\n"
ELLIPSIS = "..."


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_context(
    intent: ProjectIntent,
    project_name: str,
    tool_version: str,
    tech_stack: list[str] | str | None = None,
    current_date: str | None = None,
    **extra: Any,
) -> PromptContext:
    """Build a render context from an analysed intent.

    Each detected feature also becomes a ``has_<feature>_feature`` flag so
    bodies can branch on it.
    """
    flags = {f"has_{feature}_feature": True for feature in intent.features}
    if tech_stack is None:
        tech_stack = list(intent.tech_preferences) or list(DEFAULT_TECH_STACK)

    values: dict[str, Any] = {
        "project_name": project_name,
        "project_type": intent.archetype,
        "complexity_level": intent.complexity.value,
        "detected_features": list(intent.features),
        "tech_stack": tech_stack,
        "tool_version": tool_version,
        "current_date": current_date or datetime.now(timezone.utc).date().isoformat(),
        **flags,
        **extra,
    }
    return PromptContext(**values)


class PromptEngine:
    """Generates prompts from the template catalog."""

    def __init__(
        self,
        store: TemplateStore,
        registry: TemplateRegistry | None = None,
        selector: VariantSelector | None = None,
        *,
        tool_version: str = "1.0.0",
        preview_length: int = 200,
        base_files: tuple[str, ...] | list[str] = DEFAULT_BASE_FILES,
        analyzer: IntentAnalyzer | None = None,
    ) -> None:
        self.store = store
        self.registry = registry if registry is not None else TemplateRegistry(store)
        self.selector = selector if selector is not None else VariantSelector()
        self.analyzer = analyzer if analyzer is not None else IntentAnalyzer()
        self.tool_version = tool_version
        self.preview_length = preview_length
        self.base_files = tuple(base_files)

    @classmethod
    def from_config(cls, config: Config) -> "PromptEngine":
        """Create an engine backed by the template directory in *config*."""
        return cls(
            FileTemplateStore(config.templates_dir),
            tool_version=config.tool_version,
            preview_length=config.preview_length,
            base_files=config.base_files,
        )

    def reset(self) -> None:
        """Drop cached descriptors and restore default variant weights."""
        self.registry.reset()
        self.selector.reset()

    # -- Catalog -------------------------------------------------------------

    def list_templates(self) -> list[TemplateDescriptor]:
        return self.registry.list_all()

    def preview(self, archetype: str) -> Optional[str]:
        """Return the start of an archetype's raw primary body.

        Bodies longer than ``preview_length`` are cut and get a literal
        ``...`` appended.  ``None`` when the archetype is unknown or its
        body cannot be read.
        """
        descriptor = self.registry.lookup(archetype)
        if descriptor is None:
            return None
        try:
            body = read_template(self.store, descriptor.body_path)
        except TemplateReadError:
            return None
        if len(body) <= self.preview_length:
            return body
        return body[: self.preview_length] + ELLIPSIS

    # -- Generation ----------------------------------------------------------

    def generate(
        self,
        archetype_hint: str,
        context: PromptContext | Mapping[str, Any],
        selection_context: SelectionContext | None = None,
    ) -> RenderResult:
        """Render the best template for *archetype_hint* against *context*.

        Args:
            archetype_hint: Archetype name, any case.
            context: Values to substitute.  Unknown keys pass through.
            selection_context: When given, its feedback is applied and a
                variant is chosen for it; otherwise the primary body is used.

        Returns:
            A ``RenderResult``; never raises for missing templates, read
            failures or malformed bodies.
        """
        archetype = archetype_hint.strip().lower()
        values = self._render_values(context)

        try:
            descriptor = self.registry.lookup(archetype)
            if descriptor is None:
                raise TemplateNotFoundError(archetype_hint)

            template_id, body_path = self._resolve_body(descriptor, selection_context)
            body = read_template(self.store, body_path)
            if "base_content" in scan_variables(body) and "base_content" not in values:
                values["base_content"] = self._base_content()
            prompt = render(body, values)
        except TemplateNotFoundError as exc:
            return self._failure(archetype, str(exc), "none")
        except (TemplateReadError, TemplateSyntaxError) as exc:
            console.print(f"[red]Prompt generation failed for {archetype}: {exc}[/red]")
            return self._failure(archetype, str(exc), "error")

        features = values.get("detected_features") or []
        console.print(
            f"[cyan]Generated prompt for[/cyan] [bold]{descriptor.archetype}[/bold] "
            f"using {template_id} ({len(prompt)} chars)"
        )
        return RenderResult(
            success=True,
            prompt=prompt,
            metadata=RenderMetadata(
                archetype=descriptor.archetype,
                detected_features=list(features) if isinstance(features, (list, tuple)) else [],
                confidence_score=confidence_score(values),
                template_id=template_id,
                generated_at=_now_iso(),
            ),
        )

    def generate_from_description(
        self,
        description: str,
        project_name: str | None = None,
        *,
        detected_features: list[str] | None = None,
        tech_stack: list[str] | None = None,
        user_experience: UserExperience | str = UserExperience.INTERMEDIATE,
        development_phase: DevelopmentPhase | str = DevelopmentPhase.DEVELOPMENT,
        feedback: list[TemplateFeedback] | None = None,
    ) -> RenderResult:
        """Analyse a free-text description and generate a prompt for it."""
        intent = self.analyzer.analyze(description, detected_features, tech_stack)
        context = build_context(
            intent,
            project_name or f"my-{intent.archetype}-app",
            self.tool_version,
            tech_stack=tech_stack,
        )
        selection = SelectionContext(
            project_intent=intent,
            user_experience=user_experience,
            development_phase=development_phase,
            previous_feedback=feedback or [],
        )
        return self.generate(intent.archetype, context, selection)

    # -- Internal ------------------------------------------------------------

    def _render_values(self, context: PromptContext | Mapping[str, Any]) -> dict[str, Any]:
        if isinstance(context, PromptContext):
            return context.as_render_dict()
        return dict(context)

    def _resolve_body(
        self,
        descriptor: TemplateDescriptor,
        selection_context: SelectionContext | None,
    ) -> tuple[str, str]:
        if selection_context is None:
            return descriptor.id, descriptor.body_path

        if selection_context.previous_feedback:
            self.selector.update_weights(selection_context.previous_feedback)

        intent = selection_context.project_intent.model_copy(
            update={"archetype": descriptor.archetype}
        )
        variant: TemplateVariant = self.selector.select_optimal_template(
            selection_context.model_copy(update={"project_intent": intent})
        )
        if not self.store.exists(variant.body_path):
            console.print(
                f"[yellow]Variant body {variant.body_path} missing, "
                f"using {descriptor.body_path}[/yellow]"
            )
            return descriptor.id, descriptor.body_path
        return variant.id, variant.body_path

    def _base_content(self) -> str:
        sections: list[str] = []
        for path in self.base_files:
            if not self.store.exists(path):
                continue
            try:
                sections.append(read_template(self.store, path))
            except TemplateReadError as exc:
                console.print(f"[yellow]Skipping base guidance {path}: {exc}[/yellow]")
        return BASE_SEPARATOR.join(sections)

    def _failure(self, archetype: str, error: str, template_id: str) -> RenderResult:
        return RenderResult(
            success=False,
            error=error,
            metadata=RenderMetadata(
                archetype=archetype,
                detected_features=[],
                confidence_score=0,
                template_id=template_id,
                generated_at=_now_iso(),
            ),
        )
