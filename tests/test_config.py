"""Unit tests for Config (src.config).

Tests cover:
- Config defaults and validation
- save/load round trip
- from_env
- building an engine from a Config
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.config import Config
from src.prompts.engine import PromptEngine


# ---------------------------------------------------------------------------
# Defaults / validation
# ---------------------------------------------------------------------------


class TestConfigDefaults:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.tool_version == "1.0.0"
        assert config.preview_length == 200
        assert config.default_experience == "intermediate"
        assert config.default_phase == "development"
        assert config.base_files == [
            "base/core.md",
            "base/best-practices.md",
            "base/tech-stack-guide.md",
        ]

    @pytest.mark.unit
    def test_default_templates_dir_is_bundled(self):
        config = Config()
        assert config.templates_dir.name == "templates"
        assert (config.templates_dir / "saas" / "main-prompt.md").is_file()

    @pytest.mark.unit
    def test_preview_length_must_be_positive(self):
        with pytest.raises(ValidationError):
            Config(preview_length=0)

    @pytest.mark.unit
    def test_rejects_unknown_experience(self):
        with pytest.raises(ValidationError):
            Config(default_experience="guru")

    @pytest.mark.unit
    def test_rejects_unknown_phase(self):
        with pytest.raises(ValidationError):
            Config(default_phase="shipping")


# ---------------------------------------------------------------------------
# Config.save / Config.load
# ---------------------------------------------------------------------------


class TestConfigSaveLoad:
    @pytest.mark.unit
    def test_load_roundtrip(self, tmp_path: Path):
        config = Config(
            templates_dir=tmp_path / "templates",
            tool_version="3.1.4",
            preview_length=80,
            default_phase="planning",
        )
        saved_path = config.save(tmp_path / "config.json")

        loaded = Config.load(saved_path)
        assert loaded.templates_dir == tmp_path / "templates"
        assert loaded.tool_version == "3.1.4"
        assert loaded.preview_length == 80
        assert loaded.default_phase == "planning"

    @pytest.mark.unit
    def test_save_creates_parent_dirs(self, tmp_path: Path):
        deep_path = tmp_path / "deep" / "nested" / "config.json"
        assert Config().save(deep_path) == deep_path
        assert deep_path.exists()

    @pytest.mark.unit
    def test_load_invalid_json(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text('{"preview_length": -5}', encoding="utf-8")
        with pytest.raises(ValidationError):
            Config.load(path)


# ---------------------------------------------------------------------------
# Config.from_env
# ---------------------------------------------------------------------------


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_defaults_when_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config == Config()

    @pytest.mark.unit
    def test_all_variables(self, tmp_path: Path):
        env = {
            "PROMPTGEN_TEMPLATES_DIR": str(tmp_path),
            "PROMPTGEN_TOOL_VERSION": "2.0.0",
            "PROMPTGEN_PREVIEW_LENGTH": "120",
            "PROMPTGEN_EXPERIENCE": "expert",
            "PROMPTGEN_PHASE": "optimization",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.templates_dir == tmp_path
        assert config.tool_version == "2.0.0"
        assert config.preview_length == 120
        assert config.default_experience == "expert"
        assert config.default_phase == "optimization"

    @pytest.mark.unit
    def test_empty_values_are_ignored(self):
        with patch.dict(os.environ, {"PROMPTGEN_TOOL_VERSION": ""}, clear=True):
            config = Config.from_env()
        assert config.tool_version == "1.0.0"

    @pytest.mark.unit
    def test_invalid_preview_length(self):
        with patch.dict(os.environ, {"PROMPTGEN_PREVIEW_LENGTH": "lots"}, clear=True):
            with pytest.raises(ValueError):
                Config.from_env()


class TestEngineFromConfig:
    @pytest.mark.unit
    def test_base_files_reach_engine(self, template_dir: Path):
        config = Config(templates_dir=template_dir, base_files=["base/core.md"])
        engine = PromptEngine.from_config(config)
        assert engine.base_files == ("base/core.md",)
        assert engine.store.template_dir == template_dir
