"""Unit tests for the template registry and stores (src.prompts.registry, src.prompts.store).

Tests cover:
- lookup() case-insensitivity, unknown archetypes, missing bodies
- list_all() always returns the five archetypes
- declared variables scanned once and cached
- FileTemplateStore / InMemoryTemplateStore read, exists and errors
"""

from __future__ import annotations

from pathlib import Path

import pytest

from src.prompts.errors import TemplateReadError
from src.prompts.models import KNOWN_ARCHETYPES
from src.prompts.registry import COMMON_VARIABLES, TemplateRegistry, main_body_path
from src.prompts.store import FileTemplateStore, InMemoryTemplateStore


class CountingStore(InMemoryTemplateStore):
    """In-memory store that counts body reads."""

    def __init__(self, bodies):
        super().__init__(bodies)
        self.reads: list[str] = []

    def read_body(self, path: str) -> str:
        self.reads.append(path)
        return super().read_body(path)


# ---------------------------------------------------------------------------
# TemplateRegistry
# ---------------------------------------------------------------------------

class TestLookup:
    @pytest.mark.unit
    @pytest.mark.parametrize("archetype", KNOWN_ARCHETYPES)
    def test_case_insensitive(self, memory_store, archetype):
        registry = TemplateRegistry(memory_store)
        lower = registry.lookup(archetype)
        upper = registry.lookup(archetype.upper())
        assert lower is not None
        assert lower == upper
        assert lower.archetype == archetype

    @pytest.mark.unit
    def test_descriptor_fields(self, memory_store):
        descriptor = TemplateRegistry(memory_store).lookup("Ecommerce")
        assert descriptor.id == "ecommerce-main"
        assert descriptor.body_path == "ecommerce/main-prompt.md"
        assert descriptor.description

    @pytest.mark.unit
    def test_unknown_archetype(self, memory_store):
        assert TemplateRegistry(memory_store).lookup("unknown-archetype") is None

    @pytest.mark.unit
    def test_missing_body(self):
        store = InMemoryTemplateStore({"saas/main-prompt.md": "x"})
        registry = TemplateRegistry(store)
        assert registry.lookup("blog") is None
        assert registry.lookup("saas") is not None

    @pytest.mark.unit
    def test_surrounding_whitespace_ignored(self, memory_store):
        assert TemplateRegistry(memory_store).lookup("  blog ") is not None


class TestListAll:
    @pytest.mark.unit
    def test_exactly_five(self, memory_store):
        descriptors = TemplateRegistry(memory_store).list_all()
        assert [d.archetype for d in descriptors] == list(KNOWN_ARCHETYPES)

    @pytest.mark.unit
    def test_five_even_when_bodies_missing(self):
        descriptors = TemplateRegistry(InMemoryTemplateStore()).list_all()
        assert len(descriptors) == 5

    @pytest.mark.unit
    def test_fallback_variables_when_body_missing(self):
        descriptors = TemplateRegistry(InMemoryTemplateStore()).list_all()
        ecommerce = descriptors[0]
        assert COMMON_VARIABLES <= ecommerce.declared_variables
        assert "has_payment_feature" in ecommerce.declared_variables


class TestDeclaredVariables:
    @pytest.mark.unit
    def test_scanned_from_body(self, memory_store):
        descriptor = TemplateRegistry(memory_store).lookup("ecommerce")
        assert {
            "project_name",
            "project_type",
            "complexity_level",
            "detected_features",
            "tech_stack",
            "tool_version",
            "current_date",
            "has_payment_feature",
        } == set(descriptor.declared_variables)

    @pytest.mark.unit
    def test_scanned_once(self, template_bodies):
        store = CountingStore(template_bodies)
        registry = TemplateRegistry(store)
        first = registry.lookup("saas")
        second = registry.lookup("SAAS")
        registry.list_all()
        assert first is second
        assert store.reads.count("saas/main-prompt.md") == 1

    @pytest.mark.unit
    def test_raw_os_error_falls_back_to_common_set(self, template_bodies):
        class OSErrorStore(InMemoryTemplateStore):
            def read_body(self, path: str) -> str:
                raise OSError(f"disk unavailable: {path}")

        descriptor = TemplateRegistry(OSErrorStore(template_bodies)).lookup("saas")
        assert descriptor is not None
        assert descriptor.declared_variables == COMMON_VARIABLES | {"has_billing_feature"}

    @pytest.mark.unit
    def test_reset_clears_cache(self, template_bodies):
        store = CountingStore(template_bodies)
        registry = TemplateRegistry(store)
        registry.lookup("blog")
        registry.reset()
        registry.lookup("blog")
        assert store.reads.count("blog/main-prompt.md") == 2


@pytest.mark.unit
def test_main_body_path():
    assert main_body_path("portfolio") == "portfolio/main-prompt.md"


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

class TestFileTemplateStore:
    @pytest.mark.unit
    def test_read_and_exists(self, file_store):
        assert file_store.exists("ecommerce/main-prompt.md")
        assert not file_store.exists("ecommerce/nope.md")
        assert "{{project_name}}" in file_store.read_body("ecommerce/main-prompt.md")

    @pytest.mark.unit
    def test_read_missing_raises(self, file_store):
        with pytest.raises(TemplateReadError) as exc_info:
            file_store.read_body("ecommerce/nope.md")
        assert exc_info.value.path == "ecommerce/nope.md"

    @pytest.mark.unit
    def test_directory_is_not_a_body(self, file_store):
        assert not file_store.exists("ecommerce")

    @pytest.mark.unit
    def test_default_dir_is_bundled(self):
        store = FileTemplateStore()
        assert store.template_dir.name == "templates"
        assert store.exists("ecommerce/main-prompt.md")


class TestInMemoryTemplateStore:
    @pytest.mark.unit
    def test_read_and_exists(self):
        store = InMemoryTemplateStore({"a/b.md": "body"})
        assert store.exists("a/b.md")
        assert store.read_body("a/b.md") == "body"

    @pytest.mark.unit
    def test_missing_raises(self):
        with pytest.raises(TemplateReadError, match="not found"):
            InMemoryTemplateStore().read_body("x.md")


@pytest.mark.integration
def test_bundled_catalog_is_complete():
    store = FileTemplateStore()
    registry = TemplateRegistry(store)
    for archetype in KNOWN_ARCHETYPES:
        assert registry.lookup(archetype) is not None
    for path in ("base/core.md", "base/best-practices.md", "base/tech-stack-guide.md"):
        assert store.exists(path)
    assert Path(store.template_dir).is_dir()
