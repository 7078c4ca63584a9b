"""Simple YAML configuration loader for ReadGrove."""

import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from ..models.settings import GameSettings

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    'audio': {
        'sample_rate': 16000,
        'chunk_size': 2048,
        'channels': 1,
        'ema_alpha': 0.2,
    },
    'game': {
        'tick_interval_ms': 100,
        'calibration_duration_ms': 3000,
        'default_noise_floor_db': -60,
        'target_offset_db': 10,
        'scream_threshold_db': -15,
        'max_tree_height': 100,
        'points_per_second': 10,
    },
    'logging': {
        'level': 'INFO',
        'file_path': 'data/logs/readgrove.log',
        'console_output': True,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ReadGroveConfig:
    """ReadGrove configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, built-in
                        defaults are used.
        """
        if config_path is None:
            self.config_file: Optional[Path] = None
            self.config = copy.deepcopy(DEFAULT_CONFIG)
            logger.info("No configuration file given, using defaults")
            return

        self.config_file = Path(config_path)

        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file over the defaults."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        if not loaded:
            raise ValueError("Configuration file is empty")
        if not isinstance(loaded, dict):
            raise ValueError("Configuration file must contain a mapping")

        config = _merge(DEFAULT_CONFIG, loaded)
        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        if 'logging' in config and 'file_path' in config['logging']:
            log_path = config['logging']['file_path']
            if not os.path.isabs(log_path):
                config['logging']['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'game.target_offset_db').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'game.tick_interval_ms')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        # Navigate to the parent dictionary
        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_game_settings(self) -> GameSettings:
        """Build validated game settings - raises ValueError on bad values."""
        try:
            settings = GameSettings(
                tick_interval_ms=int(self.get('game.tick_interval_ms')),
                calibration_duration_ms=int(self.get('game.calibration_duration_ms')),
                default_noise_floor_db=float(self.get('game.default_noise_floor_db')),
                target_offset_db=float(self.get('game.target_offset_db')),
                scream_threshold_db=float(self.get('game.scream_threshold_db')),
                max_tree_height=float(self.get('game.max_tree_height')),
                points_per_second=float(self.get('game.points_per_second')),
                ema_alpha=float(self.get('audio.ema_alpha')),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid game configuration: {e}")

        logger.debug(f"Game settings: {settings}")
        return settings

    def get_log_file_path(self) -> str:
        """Get log file path."""
        log_path = self.get('logging.file_path', 'data/logs/readgrove.log')
        return str(Path(log_path).absolute())
