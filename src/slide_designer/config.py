"""Configuration management for the slide designer."""

import copy
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from .design_rules import select_color_palette
from .models import ColorPalette

# Values used when the user configuration does not set them
DEFAULT_CONFIG: Dict[str, Any] = {
    'design': {
        'domain': '',
        'theme': None,
        'brand_colors': {},
    },
    'quality': {
        'min_score': 70,
    },
    'markdown': {
        'slide_separator': '---',
    },
    'settings': {
        'logging': {
            'level': 'INFO',
        },
    },
    'paths': {},
}


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents."""
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def merge_dicts(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries, overlay taking precedence."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


class Config:
    """Configuration manager that overlays a user YAML file on the defaults."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration.

        Args:
            config_path: Path to a YAML configuration file. When omitted,
                only the built-in defaults are used and relative paths
                resolve against the current directory.

        Raises:
            FileNotFoundError: If config_path does not exist.
            ValueError: If a configured value is out of range.
        """
        if config_path is None:
            self.config_path = None
            self.config_dir = Path.cwd()
            user_config: Dict[str, Any] = {}
        else:
            self.config_path = Path(config_path)
            self.config_dir = self.config_path.parent
            user_config = load_yaml_file(self.config_path)

        self._config = self._load_configuration(user_config)
        self._setup_logging()

    @classmethod
    def from_dict(cls, user_config: Dict[str, Any], config_dir: Optional[Path] = None) -> "Config":
        """Create Config instance from an already-loaded dictionary.

        Args:
            user_config: Configuration dictionary overlaid on the defaults.
            config_dir: Directory used to resolve relative paths.

        Returns:
            Configured Config instance
        """
        config = cls.__new__(cls)
        config.config_path = None
        config.config_dir = Path(config_dir) if config_dir else Path.cwd()
        config._config = config._load_configuration(user_config)
        config._setup_logging()
        return config

    def _load_configuration(self, user_config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge the user configuration over the defaults and validate it.

        Args:
            user_config: Loaded user configuration dictionary

        Returns:
            Merged configuration dictionary
        """
        if not isinstance(user_config, dict):
            raise ValueError(
                f"Configuration must be a mapping, got {type(user_config).__name__}"
            )
        merged = merge_dicts(copy.deepcopy(DEFAULT_CONFIG), user_config)

        min_score = merged['quality']['min_score']
        if isinstance(min_score, bool) or not isinstance(min_score, (int, float)):
            raise ValueError(f"quality.min_score must be a number, got {min_score!r}")
        if not 0 <= min_score <= 100:
            raise ValueError(f"quality.min_score must be between 0 and 100, got {min_score}")

        logging.debug(f"Loaded config from: {self.config_path or '<defaults>'}")
        return merged

    def _setup_logging(self):
        """Setup logging based on configuration."""
        log_level = self.get('settings.logging.level', 'INFO')
        numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)
        logging.basicConfig(
            level=numeric_level,
            format='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'quality.min_score')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_path(self, key: str) -> Path:
        """Get a path from configuration, resolved relative to the config directory.

        Args:
            key: Path key in config (e.g., 'content', 'output')

        Returns:
            Resolved Path object
        """
        path_str = self.get(f'paths.{key}')
        if path_str is None:
            raise ValueError(f"Path '{key}' not found in configuration")
        path = Path(path_str)
        if not path.is_absolute():
            path = self.config_dir / path
        return path

    def set(self, key_path: str, value: Any) -> None:
        """Set a configuration value using dot notation, creating sections as needed."""
        keys = key_path.split('.')
        section = self._config
        for key in keys[:-1]:
            section = section.setdefault(key, {})
        section[keys[-1]] = value

    @property
    def min_score(self) -> float:
        """Overall quality score needed to pass."""
        return self.get('quality.min_score')

    @property
    def domain(self) -> str:
        return self.get('design.domain') or ''

    @property
    def theme(self) -> Optional[str]:
        return self.get('design.theme')

    def color_palette(self) -> ColorPalette:
        """Resolve the configured domain, theme and brand colours to a palette."""
        return select_color_palette(
            self.domain,
            self.theme,
            self.get('design.brand_colors') or None,
        )
