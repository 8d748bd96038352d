"""
Configuration loader for conceptgraph.

Loads and validates conceptgraph.yaml using Pydantic models.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from conceptgraph.llm.exceptions import LLMConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/conceptgraph.yaml"


class ModelConfig(BaseModel):
    """Configuration for the text-generation model."""

    provider: str = "anthropic"
    model: str | None = None
    api_key_env: str = "ANTHROPIC_API_KEY"
    base_url: str | None = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2500, gt=0)
    timeout_seconds: float = Field(default=120.0, gt=0)
    check_connectivity: bool = False


class RetryConfig(BaseModel):
    """Retry configuration for LLM requests (timeouts are never retried)."""

    max_retries: int = Field(default=0, ge=0)
    initial_delay_seconds: float = Field(default=1.0, gt=0)
    backoff_multiplier: float = Field(default=2.0, gt=1.0)


class CompressionConfig(BaseModel):
    """Recursive summarization settings."""

    chunk_size: int = Field(default=20_000, gt=0)
    boundary_window: int = Field(default=300, ge=0)
    safety_ceiling: int = Field(default=500_000, gt=0)
    max_depth: int = Field(default=3, ge=0)
    min_reduction_ratio: float = Field(default=0.7, gt=0.0, le=1.0)
    chunk_fallback_chars: int = Field(default=1_000, gt=0)
    summary_max_tokens: int = Field(default=500, gt=0)
    summary_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_concurrency: int = Field(default=4, gt=0)


class ExtractionConfig(BaseModel):
    """Graph extraction settings."""

    context_chars: int = Field(default=5_000, gt=0)
    max_nodes: int = Field(default=12, gt=0)
    max_tokens: int = Field(default=2_500, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    default_persona: str = "architect"
    orphan_policy: str = Field(default="drop", pattern="^(drop|synthesize)$")


class ExplainerConfig(BaseModel):
    """Concept explanation settings."""

    context_chars: int = Field(default=2_000, gt=0)
    max_length: int = Field(default=300, gt=0)
    max_tokens: int = Field(default=500, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    default_persona: str = "mentor"


class SummaryConfig(BaseModel):
    """Standalone summarization settings."""

    context_chars: int = Field(default=5_000, gt=0)
    max_tokens: int = Field(default=800, gt=0)
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    default_persona: str = "strategist"
    default_type: str = Field(default="key-points", pattern="^(key-points|tldr|teaser|headline)$")
    default_length: str = Field(default="medium", pattern="^(short|medium|long)$")
    length_chars: dict[str, int] = Field(default_factory=lambda: {"short": 300, "medium": 800, "long": 1_600})
    fallback_sentences: int = Field(default=3, gt=0)
    fallback_chars: int = Field(default=500, gt=0)


class AppConfig(BaseModel):
    """Complete conceptgraph configuration."""

    model: ModelConfig = Field(default_factory=ModelConfig)
    retry_config: RetryConfig = Field(default_factory=RetryConfig)
    compression: CompressionConfig = Field(default_factory=CompressionConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    explainer: ExplainerConfig = Field(default_factory=ExplainerConfig)
    summary: SummaryConfig = Field(default_factory=SummaryConfig)
    prompts_path: str | None = None


def default_config() -> AppConfig:
    """Configuration with every setting at its default."""
    return AppConfig()


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to conceptgraph.yaml

    Returns:
        AppConfig: Validated configuration

    Raises:
        LLMConfigError: Failed to load or validate configuration
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise LLMConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}

        config = AppConfig(**config_data)

        logger.info(
            f"Loaded config from {config_path}: provider={config.model.provider}, "
            f"chunk_size={config.compression.chunk_size}, max_nodes={config.extraction.max_nodes}"
        )

        return config

    except yaml.YAMLError as e:
        raise LLMConfigError(f"Failed to parse YAML: {e}") from e
    except Exception as e:
        raise LLMConfigError(f"Failed to load config from {config_path}: {e}") from e
