"""Dynamic prompt generation -- turns a project description into guidance.

Determines the project archetype and features, selects the template
variant that fits the developer's experience and project phase, and renders
it with the built-in mini template language.

Quick usage::

    from src.prompts import FileTemplateStore, PromptEngine

    engine = PromptEngine(FileTemplateStore())
    result = engine.generate_from_description(
        "An online store with Stripe checkout and an admin panel",
        project_name="ShopMaster",
    )
    print(result.prompt)
"""

from src.prompts.engine import PromptEngine, build_context
from src.prompts.errors import (
    PromptEngineError,
    TemplateNotFoundError,
    TemplateReadError,
    TemplateSyntaxError,
)
from src.prompts.intent import IntentAnalyzer
from src.prompts.models import (
    PromptContext,
    ProjectIntent,
    RenderResult,
    SelectionContext,
    TemplateDescriptor,
    TemplateFeedback,
    TemplateVariant,
)
from src.prompts.registry import TemplateRegistry
from src.prompts.selector import VariantCatalog, VariantSelector
from src.prompts.store import FileTemplateStore, InMemoryTemplateStore

__all__ = [
    "FileTemplateStore",
    "InMemoryTemplateStore",
    "IntentAnalyzer",
    "PromptContext",
    "PromptEngine",
    "PromptEngineError",
    "ProjectIntent",
    "RenderResult",
    "SelectionContext",
    "TemplateDescriptor",
    "TemplateFeedback",
    "TemplateNotFoundError",
    "TemplateReadError",
    "TemplateRegistry",
    "TemplateSyntaxError",
    "TemplateVariant",
    "VariantCatalog",
    "VariantSelector",
    "build_context",
]
