"""Shared pytest fixtures for the prompt generator test suite.

Provides reusable fixtures for:
- In-memory template stores with realistic bodies
- A template directory on disk
- Prompt engines wired to those stores
- A complete render context and selection context
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any

import pytest

from src.prompts.engine import PromptEngine
from src.prompts.models import ProjectIntent, PromptContext, SelectionContext
from src.prompts.store import FileTemplateStore, InMemoryTemplateStore


# ---------------------------------------------------------------------------
# Template bodies
# ---------------------------------------------------------------------------

ECOMMERCE_MAIN = textwrap.dedent("""\
    # E-commerce Development Expert

    Guidance for **{{project_name}}**.

    **Project type**: {{project_type}}
    **Complexity**: {{complexity_level}}
    **Detected features**: {{#each detected_features}}{{this}}{{#unless @last}}, {{/unless}}{{/each}}
    **Tech stack**: {{tech_stack}}

    {{#if has_payment_feature}}
    ## Payment Integration
    Use Stripe Payment Intents for checkout.
    {{/if}}

    Remember: keep the purchase flow smooth for {{project_name}} customers.

    ---
    *Generated by promptgen v{{tool_version}} on {{current_date}}.*
    """)

SAAS_MAIN = textwrap.dedent("""\
    # SaaS Development Expert

    Guidance for **{{project_name}}**.

    - Features: {{#each detected_features}}{{this}}{{#unless @last}}, {{/unless}}{{/each}}

    {{#if has_billing_feature}}
    ## Subscription Billing
    Model plans and subscriptions explicitly.
    {{/if}}
    {{base_content}}
    """)


def _simple_main(title: str) -> str:
    return f"# {title}\n\nGuidance for **{{{{project_name}}}}** ({{{{complexity_level}}}}).\n"


def build_template_bodies() -> dict[str, str]:
    """Return ``{path: body}`` for a full catalog with a few variants."""
    return {
        "ecommerce/main-prompt.md": ECOMMERCE_MAIN,
        "ecommerce/beginner-guide.md": "Beginner store guide for {{project_name}}\n",
        "ecommerce/architecture-focused.md": "Architecture review for {{project_name}}\n",
        "ecommerce/best-practices.md": "Best practices for {{project_name}}\n",
        "saas/main-prompt.md": SAAS_MAIN,
        "saas/mvp-focused.md": "MVP plan for {{project_name}}\n",
        "blog/main-prompt.md": _simple_main("Blog Development Expert"),
        "portfolio/main-prompt.md": _simple_main("Portfolio Development Expert"),
        "dashboard/main-prompt.md": _simple_main("Dashboard Development Expert"),
        "base/core.md": "CORE GUIDANCE",
        "base/best-practices.md": "BEST PRACTICES GUIDANCE",
    }


# ---------------------------------------------------------------------------
# Stores & engines
# ---------------------------------------------------------------------------

@pytest.fixture
def template_bodies() -> dict[str, str]:
    return build_template_bodies()


@pytest.fixture
def memory_store(template_bodies: dict[str, str]) -> InMemoryTemplateStore:
    """In-memory store holding the sample catalog."""
    return InMemoryTemplateStore(template_bodies)


@pytest.fixture
def engine(memory_store: InMemoryTemplateStore) -> PromptEngine:
    """A fresh engine over the in-memory catalog."""
    return PromptEngine(memory_store, tool_version="1.2.0")


@pytest.fixture
def template_dir(tmp_path: Path, template_bodies: dict[str, str]) -> Path:
    """The sample catalog written to a temporary directory."""
    root = tmp_path / "templates"
    for rel, body in template_bodies.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
    yield root


@pytest.fixture
def file_store(template_dir: Path) -> FileTemplateStore:
    return FileTemplateStore(template_dir)


@pytest.fixture
def bundled_engine() -> PromptEngine:
    """An engine over the templates shipped with the package."""
    return PromptEngine(FileTemplateStore(), tool_version="1.2.0")


# ---------------------------------------------------------------------------
# Contexts
# ---------------------------------------------------------------------------

@pytest.fixture
def context_values() -> dict[str, Any]:
    """Raw values for a typical e-commerce render."""
    return {
        "project_name": "ShopMaster",
        "project_type": "ecommerce",
        "complexity_level": "medium",
        "detected_features": ["auth", "payment"],
        "tech_stack": "Next.js + TypeScript + Stripe",
        "tool_version": "1.2.0",
        "current_date": "2026-01-15",
        "has_payment_feature": True,
    }


@pytest.fixture
def prompt_context(context_values: dict[str, Any]) -> PromptContext:
    return PromptContext(**context_values)


@pytest.fixture
def ecommerce_intent() -> ProjectIntent:
    return ProjectIntent(
        archetype="ecommerce",
        features=["auth", "payment"],
        complexity="medium",
        confidence=80,
        reasoning="store keywords",
    )


@pytest.fixture
def selection_context(ecommerce_intent: ProjectIntent) -> SelectionContext:
    return SelectionContext(
        project_intent=ecommerce_intent,
        user_experience="intermediate",
        development_phase="development",
    )
