"""Configuration loading and validation for the TMX splitter.

This module loads splitter settings from an optional YAML file, applies
environment overrides (a ``.env`` file is honored through python-dotenv),
and validates the result.

Precedence, lowest to highest: built-in defaults, YAML file, environment.
Command-line flags are applied on top by the CLI.

Typical usage example:
    config = Config.load("config/splitter_config.yaml")
    errors = Config.validate(config)
    if errors:
        raise ConfigurationError(f"Configuration invalid: {errors}")
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .error_handlers import ConfigurationError
from .size_utils import parse_size
from .validation_utils import MIN_THRESHOLD_BYTES


DEFAULT_CONFIG: Dict[str, Any] = {
    "splitting": {
        "threshold": "100MB",
        "output_dir": None,
        "record_marker": "</tu>",
        "tail_block_size": "64KB",
        "max_head_size": "16MB",
        "max_tail_size": "16MB",
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    },
}

# Environment variable -> dotted configuration key
ENV_OVERRIDES = {
    "TMX_SPLIT_THRESHOLD": "splitting.threshold",
    "TMX_SPLIT_OUTPUT_DIR": "splitting.output_dir",
    "TMX_SPLIT_LOG_LEVEL": "logging.level",
}

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


class SplitterConfig:
    """Container for splitter configuration parameters.

    Attributes:
        splitting: Dictionary with threshold, output_dir, record_marker,
            tail_block_size, max_head_size and max_tail_size.
        logging: Dictionary with logging level and format.
    """

    def __init__(self, **config_dict: Dict[str, Any]) -> None:
        """Initialize SplitterConfig from configuration dictionary.

        Args:
            **config_dict: Configuration dictionary with required keys:
                splitting, logging.

        Raises:
            KeyError: If any required configuration section is missing.
        """
        required_keys = ["splitting", "logging"]

        missing_keys = [key for key in required_keys if key not in config_dict]
        if missing_keys:
            raise KeyError(f"Missing required configuration sections: {missing_keys}")

        self.splitting: Dict[str, Any] = config_dict["splitting"]
        self.logging: Dict[str, Any] = config_dict["logging"]

    @property
    def threshold_bytes(self) -> int:
        return parse_size(self.splitting["threshold"])

    @property
    def tail_block_size(self) -> int:
        return parse_size(self.splitting["tail_block_size"])

    @property
    def max_head_size(self) -> Optional[int]:
        value = self.splitting.get("max_head_size")
        return None if value is None else parse_size(value)

    @property
    def max_tail_size(self) -> Optional[int]:
        value = self.splitting.get("max_tail_size")
        return None if value is None else parse_size(value)


class Config:
    """Static utility class for loading and validating configuration."""

    @staticmethod
    def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge overrides into a copy of base."""
        merged = copy.deepcopy(base)
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = Config._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    @staticmethod
    def _set_nested(config_dict: Dict[str, Any], key_path: str, value: Any) -> None:
        """Set a value addressed by dot notation (e.g. "splitting.threshold")."""
        keys = key_path.split(".")
        current = config_dict
        for key in keys[:-1]:
            current = current.setdefault(key, {})
        current[keys[-1]] = value

    @staticmethod
    def load(
        config_path: Optional[str] = None, use_env: bool = True
    ) -> SplitterConfig:
        """Load splitter configuration.

        Args:
            config_path: Optional path to a YAML configuration file. When
                None, only defaults and environment overrides apply.
            use_env: Whether to read ``.env`` and TMX_SPLIT_* variables.

        Returns:
            SplitterConfig with defaults, file values and overrides merged.

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML,
                or does not contain a mapping.
        """
        config_dict = copy.deepcopy(DEFAULT_CONFIG)

        if config_path is not None:
            config_file_path = Path(config_path)
            if not config_file_path.exists():
                raise ConfigurationError(
                    f"Configuration file not found: {config_file_path}",
                    config_key="config_path",
                )

            try:
                with open(config_file_path, "r", encoding="utf-8") as f:
                    file_dict = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Failed to parse configuration file: {config_file_path}",
                    config_key="config_path",
                    original_error=e,
                ) from e

            if file_dict is None:
                file_dict = {}
            if not isinstance(file_dict, dict):
                raise ConfigurationError(
                    "Configuration file must contain a YAML dictionary",
                    config_key="config_path",
                )

            config_dict = Config._merge(config_dict, file_dict)

        if use_env:
            load_dotenv()
            for env_name, key_path in ENV_OVERRIDES.items():
                value = os.environ.get(env_name)
                if value:
                    Config._set_nested(config_dict, key_path, value)

        return SplitterConfig(**config_dict)

    @staticmethod
    def validate(config: SplitterConfig) -> List[str]:
        """Validate configuration values.

        Args:
            config: SplitterConfig object to validate.

        Returns:
            List of error messages. Empty list if the configuration is valid.
        """
        errors: List[str] = []

        try:
            if config.threshold_bytes < MIN_THRESHOLD_BYTES:
                errors.append(
                    f"splitting.threshold must be at least {MIN_THRESHOLD_BYTES} bytes"
                )
        except ValueError as e:
            errors.append(f"splitting.threshold: {e}")

        try:
            if config.tail_block_size <= 0:
                errors.append("splitting.tail_block_size must be positive")
        except ValueError as e:
            errors.append(f"splitting.tail_block_size: {e}")

        try:
            max_head = config.max_head_size
            if max_head is not None and max_head <= 0:
                errors.append("splitting.max_head_size must be positive")
        except ValueError as e:
            errors.append(f"splitting.max_head_size: {e}")

        try:
            max_tail = config.max_tail_size
            if max_tail is not None and max_tail <= 0:
                errors.append("splitting.max_tail_size must be positive")
        except ValueError as e:
            errors.append(f"splitting.max_tail_size: {e}")

        if not config.splitting.get("record_marker"):
            errors.append("splitting.record_marker must be a non-empty string")

        output_dir = config.splitting.get("output_dir")
        if output_dir and Path(output_dir).exists() and not Path(output_dir).is_dir():
            errors.append(
                f"Expected directory for splitting.output_dir, "
                f"but found file: {output_dir}"
            )

        level = str(config.logging.get("level", "")).upper()
        if level not in VALID_LOG_LEVELS:
            errors.append(
                f"logging.level must be one of {VALID_LOG_LEVELS}, got {level!r}"
            )

        return errors
