"""Editor config loading and validation.

Settings live in .page-editor/config.yaml. A missing or empty file is
not an error: every setting has a default.

Config file structure:
    autosave_enabled: true
    autosave_debounce_ms: 2000
    image_max_size_mb: 1.0
    image_max_dimension: 1920
    request_timeout: 30
"""

import logging
from typing import Any, Dict

import yaml

from .errors import ConfigError, ConfigFilesystemError
from .models import EditorConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Handles editor config loading and validation."""

    DEFAULT_CONFIG_DIR = '.page-editor'
    DEFAULT_CONFIG_FILE = 'config.yaml'
    DEFAULT_CONFIG_PATH = f"{DEFAULT_CONFIG_DIR}/{DEFAULT_CONFIG_FILE}"

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_PATH) -> EditorConfig:
        """Load and parse editor settings from a YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            EditorConfig with defaults for every missing setting

        Raises:
            ConfigFilesystemError: If the file exists but cannot be read
            ConfigError: If the file is malformed or a setting has the wrong type
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            logger.debug(f"No config at {config_path}, using defaults")
            return EditorConfig()
        except PermissionError:
            raise ConfigFilesystemError(config_path, 'read', 'Permission denied')
        except OSError as e:
            raise ConfigFilesystemError(config_path, 'read', str(e))

        if not content.strip():
            return EditorConfig()

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return EditorConfig()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Config must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> EditorConfig:
        defaults = EditorConfig()

        unknown = set(config_dict) - set(vars(defaults))
        if unknown:
            logger.warning(f"Ignoring unknown config field(s): {', '.join(sorted(unknown))}")

        autosave_enabled = config_dict.get('autosave_enabled', defaults.autosave_enabled)
        if not isinstance(autosave_enabled, bool):
            raise ConfigError(
                f"must be true or false, got {type(autosave_enabled).__name__}",
                'autosave_enabled'
            )

        return EditorConfig(
            autosave_enabled=autosave_enabled,
            autosave_debounce_ms=cls._number(
                config_dict, 'autosave_debounce_ms', defaults.autosave_debounce_ms,
                integer=True, allow_zero=True,
            ),
            image_max_size_mb=cls._number(
                config_dict, 'image_max_size_mb', defaults.image_max_size_mb,
            ),
            image_max_dimension=cls._number(
                config_dict, 'image_max_dimension', defaults.image_max_dimension,
                integer=True,
            ),
            request_timeout=cls._number(
                config_dict, 'request_timeout', defaults.request_timeout,
            ),
        )

    @staticmethod
    def _number(
        config_dict: Dict[str, Any],
        name: str,
        default: Any,
        integer: bool = False,
        allow_zero: bool = False,
    ) -> Any:
        value = config_dict.get(name, default)
        expected = (int,) if integer else (int, float)
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, expected):
            kind = "an integer" if integer else "a number"
            raise ConfigError(f"must be {kind}, got {type(value).__name__}", name)
        if value < 0 or (value == 0 and not allow_zero):
            raise ConfigError(f"must be positive, got {value}", name)
        return value
