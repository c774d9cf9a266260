"""Prompt engine configuration.

Centralised, typed configuration for prompt generation.  All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

_BUNDLED_TEMPLATE_DIR = Path(__file__).parent / "prompts" / "templates"


class Config(BaseModel):
    """Global prompt engine configuration.

    Instances are typically created once by the CLI entry point and handed
    to ``PromptEngine.from_config``.
    """

    templates_dir: Path = Field(default=_BUNDLED_TEMPLATE_DIR)
    tool_version: str = Field(default="1.0.0")
    preview_length: int = Field(
        default=200, ge=1, description="Characters kept by preview() before the ellipsis"
    )
    default_experience: Literal["beginner", "intermediate", "expert"] = Field(
        default="intermediate"
    )
    default_phase: Literal["planning", "development", "optimization"] = Field(
        default="development"
    )
    base_files: list[str] = Field(
        default=["base/core.md", "base/best-practices.md", "base/tech-stack-guide.md"],
        description="Generic guidance bodies joined into the base_content variable",
    )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            PROMPTGEN_TEMPLATES_DIR, PROMPTGEN_TOOL_VERSION,
            PROMPTGEN_PREVIEW_LENGTH, PROMPTGEN_EXPERIENCE, PROMPTGEN_PHASE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("PROMPTGEN_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["PROMPTGEN_TEMPLATES_DIR"])
        if os.environ.get("PROMPTGEN_TOOL_VERSION"):
            kwargs["tool_version"] = os.environ["PROMPTGEN_TOOL_VERSION"]
        if os.environ.get("PROMPTGEN_PREVIEW_LENGTH"):
            kwargs["preview_length"] = int(os.environ["PROMPTGEN_PREVIEW_LENGTH"])
        if os.environ.get("PROMPTGEN_EXPERIENCE"):
            kwargs["default_experience"] = os.environ["PROMPTGEN_EXPERIENCE"]
        if os.environ.get("PROMPTGEN_PHASE"):
            kwargs["default_phase"] = os.environ["PROMPTGEN_PHASE"]
        return cls(**kwargs)
