"""
Configuration management for MoodTune.

Provides centralized configuration loading, validation, and environment variable overrides.
"""

import os
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Optional
from pathlib import Path

MOCK_MODE = "mock"
PROVIDER_MODE = "huggingface"
ADAPTER_MODES = (MOCK_MODE, PROVIDER_MODE)

DEFAULT_CONFIG_PATH = str(Path(__file__).with_name("default_config.yaml"))


@dataclass
class InferenceConfig:
    """External inference provider settings and per-capability adapter modes."""
    api_token: Optional[str] = None
    base_url: str = "https://api-inference.huggingface.co/models"
    face_adapter: str = PROVIDER_MODE
    text_adapter: str = PROVIDER_MODE
    audio_adapter: str = PROVIDER_MODE
    reco_adapter: str = MOCK_MODE
    image_model_id: str = "trpakov/vit-face-expression"
    text_model_id: str = "SamLowe/roberta-base-go_emotions"
    audio_model_id: str = "superb/wav2vec2-base-superb-er"
    embed_model_id: str = "sentence-transformers/all-MiniLM-L6-v2"
    timeout_seconds: float = 30.0
    embedding_workers: int = 4

    @property
    def is_configured(self) -> bool:
        return bool(self.api_token)

    def mode_active(self, mode: str) -> bool:
        """True when an adapter set to `mode` should call the provider."""
        return mode == PROVIDER_MODE and self.is_configured


@dataclass
class RecommendationConfig:
    """Configuration for recommendation engine parameters."""
    default_limit: int = 20
    max_limit: int = 100
    history_window: int = 20
    rank_history_window: int = 10
    journal_lookback: int = 50


@dataclass
class PlaylistConfig:
    """Configuration for playlist generation."""
    default_name: str = "Generated Playlist"
    default_limit: int = 20
    max_items: int = 100
    prefer_local: bool = True
    stream_url_template: str = "/api/v1/songs/stream/{song_id}"


@dataclass
class StorageConfig:
    """Where the JSON song catalog lives."""
    catalog_path: str = "data/songs.json"


@dataclass
class LoggingConfig:
    """Configuration for logging parameters."""
    level: str = "INFO"
    format: str = "json"


@dataclass
class AppConfig:
    """Main application configuration containing all sub-configurations."""
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    recommendation: RecommendationConfig = field(default_factory=RecommendationConfig)
    playlist: PlaylistConfig = field(default_factory=PlaylistConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    version: str = "1.0.0"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


# environment variable -> (section, key, type)
ENV_MAPPINGS = {
    'HF_API_TOKEN': ('inference', 'api_token', str),
    'MOODTUNE_HF_API_TOKEN': ('inference', 'api_token', str),
    'MOODTUNE_HF_BASE_URL': ('inference', 'base_url', str),
    'MOODTUNE_FACE_ADAPTER': ('inference', 'face_adapter', str),
    'MOODTUNE_TEXT_ADAPTER': ('inference', 'text_adapter', str),
    'MOODTUNE_AUDIO_ADAPTER': ('inference', 'audio_adapter', str),
    'MOODTUNE_RECO_ADAPTER': ('inference', 'reco_adapter', str),
    'MOODTUNE_HF_IMAGE_MODEL_ID': ('inference', 'image_model_id', str),
    'MOODTUNE_HF_TEXT_MODEL_ID': ('inference', 'text_model_id', str),
    'MOODTUNE_HF_AUDIO_MODEL_ID': ('inference', 'audio_model_id', str),
    'MOODTUNE_HF_EMBED_MODEL_ID': ('inference', 'embed_model_id', str),
    'MOODTUNE_TIMEOUT_SECONDS': ('inference', 'timeout_seconds', float),
    'MOODTUNE_EMBEDDING_WORKERS': ('inference', 'embedding_workers', int),
    'MOODTUNE_CATALOG_PATH': ('storage', 'catalog_path', str),
    'MOODTUNE_LOG_LEVEL': ('logging', 'level', str),
    'MOODTUNE_LOG_FORMAT': ('logging', 'format', str),
}

SECTIONS = {
    'inference': InferenceConfig,
    'recommendation': RecommendationConfig,
    'playlist': PlaylistConfig,
    'storage': StorageConfig,
    'logging': LoggingConfig,
}


class ConfigManager:
    """Manages application configuration loading, validation, and environment overrides."""

    def __init__(self):
        self._config: Optional[AppConfig] = None

    @property
    def config(self) -> Optional[AppConfig]:
        return self._config

    def load(self, config_path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
        """
        Load configuration from YAML file with environment variable overrides.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            AppConfig: Loaded and validated configuration

        Raises:
            ConfigValidationError: If configuration is invalid
            FileNotFoundError: If config file doesn't exist
        """
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return self._finalize(config_data)

    def from_env(self) -> AppConfig:
        """Build configuration from defaults plus environment overrides only."""
        return self._finalize({})

    def _finalize(self, config_data: Dict[str, Any]) -> AppConfig:
        config_data = self._apply_env_overrides(config_data)
        config = self._create_config_from_dict(config_data)
        self.validate(config)
        self._config = config
        return config

    def _create_config_from_dict(self, config_data: Dict[str, Any]) -> AppConfig:
        """Create AppConfig from dictionary data, unknown keys are rejected."""
        sections = {}
        for name, section_cls in SECTIONS.items():
            section_data = config_data.get(name) or {}
            if not isinstance(section_data, dict):
                raise ConfigValidationError(f"Section '{name}' must be a mapping")
            known = set(section_cls.__dataclass_fields__)
            unknown = set(section_data) - known
            if unknown:
                raise ConfigValidationError(
                    f"Unknown keys in section '{name}': {sorted(unknown)}"
                )
            sections[name] = section_cls(**section_data)

        return AppConfig(version=str(config_data.get('version', AppConfig().version)), **sections)

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration data."""
        for env_var, (section, key, cast) in ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue
            try:
                value = cast(env_value)
            except ValueError as e:
                raise ConfigValidationError(f"Invalid value for {env_var}: {env_value!r}") from e
            current = config_data.get(section)
            if current is None:
                current = config_data[section] = {}
            current[key] = value

        return config_data

    def validate(self, config: AppConfig) -> bool:
        """
        Validate configuration values.

        Raises:
            ConfigValidationError: If validation fails, listing every problem found
        """
        errors: List[str] = []

        inference = config.inference
        for name in ('face_adapter', 'text_adapter', 'audio_adapter', 'reco_adapter'):
            if getattr(inference, name) not in ADAPTER_MODES:
                errors.append(f"Inference {name} must be one of: {list(ADAPTER_MODES)}")

        if not inference.base_url:
            errors.append("Inference base_url cannot be empty")

        if inference.timeout_seconds <= 0:
            errors.append("Inference timeout_seconds must be positive")

        if inference.embedding_workers < 1:
            errors.append("Inference embedding_workers must be at least 1")

        reco = config.recommendation
        if reco.max_limit <= 0:
            errors.append("Recommendation max_limit must be positive")

        if not (0 < reco.default_limit <= reco.max_limit):
            errors.append("Recommendation default_limit must be between 1 and max_limit")

        if reco.history_window <= 0 or reco.rank_history_window < 0:
            errors.append("Recommendation history windows must be positive")

        if reco.journal_lookback < reco.history_window:
            errors.append("Recommendation journal_lookback must cover history_window")

        playlist = config.playlist
        if playlist.max_items <= 0:
            errors.append("Playlist max_items must be positive")

        if not (0 < playlist.default_limit <= playlist.max_items):
            errors.append("Playlist default_limit must be between 1 and max_items")

        if not playlist.default_name:
            errors.append("Playlist default_name cannot be empty")

        if "{song_id}" not in playlist.stream_url_template:
            errors.append("Playlist stream_url_template must contain '{song_id}'")

        if not config.storage.catalog_path:
            errors.append("Storage catalog_path cannot be empty")

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if config.logging.level.upper() not in valid_log_levels:
            errors.append(f"Logging level must be one of: {valid_log_levels}")

        if config.logging.format not in ['json', 'text']:
            errors.append("Logging format must be 'json' or 'text'")

        if not config.version:
            errors.append("Version cannot be empty")

        if errors:
            raise ConfigValidationError(f"Configuration validation failed: {'; '.join(errors)}")

        return True

    def get_with_env_override(self, key: str) -> Any:
        """
        Get configuration value with potential environment variable override.

        Args:
            key: Configuration key in dot notation (e.g., 'inference.text_adapter')

        Returns:
            Configuration value
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")

        env_key = f"MOODTUNE_{key.upper().replace('.', '_')}"
        env_value = os.getenv(env_key)

        if env_value is not None:
            return env_value

        current = self._config
        for k in key.split('.'):
            if hasattr(current, k):
                current = getattr(current, k)
            else:
                raise KeyError(f"Configuration key not found: {key}")

        return current
