"""
Configuration for NoteCoach.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """Completion provider configuration."""

    provider: str = "ollama"  # ollama, openai
    model: str = "llama3.1:8b"
    base_url: str = "http://localhost:11434"
    api_key: str | None = None
    temperature: float = 0.7
    timeout: float = 120.0


class EmbedderConfig(BaseModel):
    """Embedder configuration."""

    provider: str = "ollama"  # ollama, openai
    model: str = "nomic-embed-text"
    base_url: str = "http://localhost:11434"
    api_key: str | None = None
    timeout: float = 120.0
    # Optional: embedding dimension (fallback to auto-detect)
    dimension: int | None = None


class CoachConfig(BaseModel):
    """Writing coach behaviour."""

    similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    similar_context_size: int = Field(default=3, ge=0)
    recent_context_size: int = Field(default=3, ge=0)
    debounce_seconds: float = Field(default=3.0, gt=0.0)
    max_tokens: int = 50
    search_limit: int = 5
    embedding_cache_size: int = 256
    fallback_response: str = "What happened next?"
    opening_fallback: str = "What caught your eye today?"
    system_prompt: str = (
        "You're a curious writing coach. Ask an engaging question based on this context, "
        "avoiding known details:"
    )
    opening_prompt: str = (
        "You're a curious writing coach. Generate an engaging opening question to start a "
        "conversation about the user's day or thoughts. Keep it casual and inviting."
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    embedder: EmbedderConfig = Field(default_factory=EmbedderConfig)
    coach: CoachConfig = Field(default_factory=CoachConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables:
            NOTECOACH_LLM_PROVIDER: Completion provider (ollama, openai)
            NOTECOACH_LLM_MODEL: Completion model name
            NOTECOACH_LLM_BASE_URL: Completion base URL
            NOTECOACH_LLM_API_KEY: Completion API key (for OpenAI)
            NOTECOACH_EMBEDDER_PROVIDER: Embedder provider
            NOTECOACH_EMBEDDER_MODEL: Embedder model name
            NOTECOACH_EMBEDDER_API_KEY: Embedder API key (for OpenAI)
            NOTECOACH_EMBEDDER_DIMENSION: Embedding dimension (optional)
            NOTECOACH_SIMILARITY_THRESHOLD: Minimum cosine similarity for a link
            NOTECOACH_DEBOUNCE_SECONDS: Quiescence before a typed block is submitted
            NOTECOACH_LOG_LEVEL: Log level
        """
        # Load .env file if provided or exists
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            # If value is empty string, return default
            if value == "":
                return default
            # Convert boolean strings
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            # Convert numeric strings
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        coach_defaults = CoachConfig()

        return cls(
            llm=LLMConfig(
                provider=get_env("NOTECOACH_LLM_PROVIDER", "ollama"),
                model=get_env("NOTECOACH_LLM_MODEL", "llama3.1:8b"),
                base_url=get_env("NOTECOACH_LLM_BASE_URL", "http://localhost:11434"),
                api_key=get_env("NOTECOACH_LLM_API_KEY"),
                temperature=get_env("NOTECOACH_LLM_TEMPERATURE", 0.7),
                timeout=get_env("NOTECOACH_LLM_TIMEOUT", 120.0),
            ),
            embedder=EmbedderConfig(
                provider=get_env("NOTECOACH_EMBEDDER_PROVIDER", "ollama"),
                model=get_env("NOTECOACH_EMBEDDER_MODEL", "nomic-embed-text"),
                base_url=get_env("NOTECOACH_EMBEDDER_BASE_URL", "http://localhost:11434"),
                api_key=get_env("NOTECOACH_EMBEDDER_API_KEY"),
                timeout=get_env("NOTECOACH_EMBEDDER_TIMEOUT", 120.0),
                dimension=get_env("NOTECOACH_EMBEDDER_DIMENSION", 0) or None,
            ),
            coach=CoachConfig(
                similarity_threshold=get_env(
                    "NOTECOACH_SIMILARITY_THRESHOLD", coach_defaults.similarity_threshold
                ),
                similar_context_size=get_env(
                    "NOTECOACH_SIMILAR_CONTEXT_SIZE", coach_defaults.similar_context_size
                ),
                recent_context_size=get_env(
                    "NOTECOACH_RECENT_CONTEXT_SIZE", coach_defaults.recent_context_size
                ),
                debounce_seconds=get_env(
                    "NOTECOACH_DEBOUNCE_SECONDS", coach_defaults.debounce_seconds
                ),
                max_tokens=get_env("NOTECOACH_MAX_TOKENS", coach_defaults.max_tokens),
                search_limit=get_env("NOTECOACH_SEARCH_LIMIT", coach_defaults.search_limit),
            ),
            logging=LoggingConfig(
                level=get_env("NOTECOACH_LOG_LEVEL", "INFO"),
                log_to_file=get_env("NOTECOACH_LOG_TO_FILE", False),
                log_dir=get_env("NOTECOACH_LOG_DIR", "logs"),
                file_rotation=get_env("NOTECOACH_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("NOTECOACH_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("NOTECOACH_LOG_COMPRESSION", "zip"),
                serialize=get_env("NOTECOACH_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        # Merge: env fields that differ from defaults override YAML fields
        final_dict = {**config_dict}
        default = cls()
        for section in ("llm", "embedder", "coach", "logging"):
            env_values = getattr(env_config, section).model_dump()
            default_values = getattr(default, section).model_dump()
            overrides = {
                key: value for key, value in env_values.items() if value != default_values[key]
            }
            if overrides:
                final_dict[section] = {**(final_dict.get(section) or {}), **overrides}

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
