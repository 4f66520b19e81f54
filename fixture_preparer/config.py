"""
Configuration management module for the fixture preparer
"""
import copy
import os
import yaml
from typing import Dict, Any, List, Optional

from .core.timecodes import parse_timecode
from .errors import ConfigError


class Config:
    """Application configuration: defaults, YAML file and CLI overrides"""

    DEFAULT_CONFIG = {
        'working_dir': 'tests',
        'source_url': (
            'http://www.archive.org/download/twentythousandleagues_1311_librivox/'
            'twentythousandleagues_00_verne_128kb.mp3'
        ),
        'source_name': 'twentythousand',
        'excerpts': [
            {'name': 't01', 'start': '00:01:09', 'end': '00:02:00'},
            {'name': 't02', 'start': '00:02:00', 'end': '00:03:00'},
        ],
        # None lets pydub discover ffmpeg (or avconv) on PATH
        'transcoder': None,
        'fetch_timeout': None,
        'tool_timeout': None,
        'verify_ssl': True,
        # file name -> expected sha256, only used by --check
        'checksums': {},
        'log_level': 'WARNING',
    }

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize the configuration

        Args:
            config_file: Path to a YAML configuration file (optional)
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file:
            if not os.path.exists(config_file):
                raise ConfigError(f"Configuration file not found: {config_file}")
            self.load_from_file(config_file)

    def load_from_file(self, config_file: str) -> None:
        """
        Load configuration from a YAML file

        Args:
            config_file: Path to the configuration file
        """
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading configuration file: {e}")

        if not file_config:
            return
        if not isinstance(file_config, dict):
            raise ConfigError("Configuration file must contain a mapping")

        for key, value in file_config.items():
            if key == 'checksums' and isinstance(value, dict):
                self._deep_merge(self.config[key], value)
            elif value is not None:
                self.config[key] = value

    def _deep_merge(self, base: dict, update: dict) -> None:
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def update_from_args(self, args: Dict[str, Any]) -> None:
        """
        Update the configuration with CLI arguments.
        CLI arguments take precedence over the configuration file.

        Args:
            args: Dictionary of CLI arguments
        """
        for key, value in args.items():
            if value is not None:
                self.config[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def get_all(self) -> Dict[str, Any]:
        return self.config.copy()

    def excerpts(self) -> List[Dict[str, Any]]:
        """
        Return the configured excerpts after validating them.

        Each excerpt needs a non-empty ``name`` and parseable ``start``/``end``
        timecodes with ``end`` after ``start``.

        Raises:
            ConfigError: on any invalid excerpt
        """
        raw = self.config.get('excerpts') or []
        if not isinstance(raw, list):
            raise ConfigError("'excerpts' must be a list")

        excerpts = []
        for idx, item in enumerate(raw, 1):
            if not isinstance(item, dict):
                raise ConfigError(f"Excerpt {idx} must be a mapping")
            name = str(item.get('name') or '').strip()
            if not name:
                raise ConfigError(f"Excerpt {idx} has no name")
            if os.sep in name or (os.altsep and os.altsep in name):
                raise ConfigError(f"Excerpt name must be a plain file name: {name}")
            try:
                start = parse_timecode(item.get('start'))
                end = parse_timecode(item.get('end'))
            except ValueError as e:
                raise ConfigError(f"Excerpt '{name}': {e}")
            if end <= start:
                raise ConfigError(f"Excerpt '{name}': end must be after start")
            excerpts.append({'name': name, 'start': item.get('start'), 'end': item.get('end')})
        return excerpts

    def checksums(self) -> Dict[str, str]:
        """
        Return the configured file name to sha256 mapping.

        Raises:
            ConfigError: when 'checksums' is not a mapping
        """
        raw = self.config.get('checksums')
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigError("'checksums' must be a mapping")
        return {str(name): str(digest) for name, digest in raw.items() if digest}
