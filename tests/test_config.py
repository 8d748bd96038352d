"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest

from conceptgraph.config import AppConfig, default_config, load_config
from conceptgraph.llm.exceptions import LLMConfigError

SHIPPED_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "conceptgraph.yaml"


class TestLoadConfig:
    """Tests for load_config."""

    def test_shipped_config_loads(self):
        """configs/conceptgraph.yaml mirrors the built-in defaults."""
        config = load_config(str(SHIPPED_CONFIG))
        defaults = default_config()

        assert config.model.provider == "anthropic"
        assert config.model.model == "claude-sonnet-4-5-20250929"
        assert config.retry_config == defaults.retry_config
        assert config.compression == defaults.compression
        assert config.extraction == defaults.extraction
        assert config.explainer == defaults.explainer
        assert config.summary == defaults.summary

    def test_partial_file_keeps_defaults(self, tmp_path):
        config_file = tmp_path / "conceptgraph.yaml"
        config_file.write_text("compression:\n  chunk_size: 5000\nextraction:\n  default_persona: analyst\n")

        config = load_config(str(config_file))

        assert config.compression.chunk_size == 5000
        assert config.compression.max_depth == 3
        assert config.extraction.default_persona == "analyst"
        assert config.model.timeout_seconds == 120.0

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)) == AppConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(LLMConfigError, match="not found"):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("model: [unclosed\n")
        with pytest.raises(LLMConfigError):
            load_config(str(config_file))

    @pytest.mark.parametrize(
        "content",
        [
            "compression:\n  chunk_size: 0\n",
            "compression:\n  min_reduction_ratio: 1.5\n",
            "extraction:\n  orphan_policy: create\n",
            "model:\n  temperature: 3.0\n",
            "summary:\n  default_length: epic\n",
        ],
    )
    def test_invalid_values(self, tmp_path, content):
        config_file = tmp_path / "invalid.yaml"
        config_file.write_text(content)
        with pytest.raises(LLMConfigError):
            load_config(str(config_file))


def test_defaults():
    config = default_config()
    assert config.compression.chunk_size == 20_000
    assert config.compression.safety_ceiling == 500_000
    assert config.compression.min_reduction_ratio == 0.7
    assert config.extraction.context_chars == 5_000
    assert config.explainer.context_chars == 2_000
    assert config.retry_config.max_retries == 0
    assert config.summary.default_persona == "strategist"
    assert config.summary.length_chars == {"short": 300, "medium": 800, "long": 1_600}
