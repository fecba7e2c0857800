"""Configuration loading for the capture engine with proper precedence handling.

Settings are merged from several sources, highest precedence first:
CLI overrides > environment variables > config file > auto-discovered file > defaults
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from ..exceptions import ConfigurationError
from .browser_factory import BrowserEngineType
from .engine import CaptureEngineConfig
from .page_session import WaitStrategy


class CaptureSettings(BaseModel):
    """Complete capture engine settings."""
    debug: bool = Field(default=False, description="Run browser with GUI and slowed down")
    output_dir: Optional[Path] = Field(default=None, description="Directory for output files")
    launch_args: List[str] = Field(default_factory=list, description="Extra browser arguments")
    timeout_ms: int = Field(default=30000, ge=0, description="Navigation and wait timeout")
    viewport: Optional[Union[str, int, Dict[str, Any], List[Any]]] = Field(
        default=None, description="Default session viewport"
    )
    headers: Dict[str, str] = Field(default_factory=dict, description="Extra HTTP headers")
    wait_until: str = Field(default=WaitStrategy.LOAD, description="Load event to wait for")
    engine: str = Field(default=BrowserEngineType.CHROMIUM, description="Browser engine")

    # Metadata
    config_file_path: Optional[Path] = Field(default=None, description="Source config file")
    loaded_from: List[str] = Field(default_factory=list, description="Configuration sources")

    @field_validator('wait_until')
    @classmethod
    def validate_wait_until(cls, v):
        return WaitStrategy.normalize(v)

    @field_validator('engine')
    @classmethod
    def validate_engine(cls, v):
        v = v.lower()
        if v not in BrowserEngineType.ALL:
            raise ValueError(f"engine must be one of: {', '.join(BrowserEngineType.ALL)}")
        return v

    @field_validator('launch_args', mode='before')
    @classmethod
    def split_launch_args(cls, v):
        if isinstance(v, str):
            return v.split()
        return v or []

    def get_engine_config(self, **overrides) -> CaptureEngineConfig:
        """Convert settings to a CaptureEngineConfig."""
        params = {
            'debug': self.debug,
            'output_dir': self.output_dir,
            'launch_args': list(self.launch_args),
            'timeout_ms': self.timeout_ms,
            'viewport': self.viewport,
            'headers': dict(self.headers),
            'wait_until': self.wait_until,
            'browser_engine': self.engine,
        }
        params.update(overrides)
        return CaptureEngineConfig(**params)


class SettingsLoader:
    """Loads and merges settings from multiple sources with proper precedence."""

    # Environment variable prefix
    ENV_PREFIX = "WEBCAPTURE_"

    # Default configuration file names (searched in order)
    DEFAULT_CONFIG_FILES = [
        "webcapture.yaml",
        "webcapture.yml",
        ".webcapture.yaml",
        ".webcapture.yml",
        "webcapture.json",
        ".webcapture.json"
    ]

    BOOLEAN_KEYS = ('debug',)
    INTEGER_KEYS = ('timeout_ms',)

    def __init__(self):
        self.loaded_sources: List[str] = []

    def load_settings(
        self,
        config_file: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        search_paths: Optional[List[Path]] = None
    ) -> CaptureSettings:
        """Load settings with proper precedence.

        Args:
            config_file: Explicitly specified config file
            cli_overrides: CLI flag overrides (None values are ignored)
            search_paths: Paths to search for config files

        Returns:
            Merged settings

        Raises:
            ConfigurationError: If a config file is missing or malformed
        """
        self.loaded_sources = ["defaults"]
        settings_data: Dict[str, Any] = {}

        if not config_file:
            discovered = self._discover_config_file(search_paths or [Path.cwd()])
            if discovered:
                source_file = discovered.pop("_source_file")
                settings_data = self._merge_config(settings_data, discovered)
                self.loaded_sources.append(f"auto-discovered: {source_file}")

        if config_file:
            config_file = Path(config_file)
            if not config_file.exists():
                raise ConfigurationError(
                    f"Configuration file not found: {config_file}",
                    error_code="config_file_not_found",
                    details={'path': str(config_file)}
                )

            settings_data = self._merge_config(settings_data, self._load_config_file(config_file))
            self.loaded_sources.append(f"config file: {config_file}")

        env_config = self._load_environment_variables()
        if env_config:
            settings_data = self._merge_config(settings_data, env_config)
            self.loaded_sources.append("environment variables")

        overrides = {key: value for key, value in (cli_overrides or {}).items() if value is not None}
        if overrides:
            settings_data = self._merge_config(settings_data, overrides)
            self.loaded_sources.append("CLI flags")

        settings_data["loaded_from"] = self.loaded_sources
        if config_file:
            settings_data["config_file_path"] = config_file

        return CaptureSettings(**settings_data)

    def _discover_config_file(self, search_paths: List[Path]) -> Optional[Dict[str, Any]]:
        """Discover configuration file in search paths."""
        for search_path in search_paths:
            for config_filename in self.DEFAULT_CONFIG_FILES:
                config_path = Path(search_path) / config_filename
                if config_path.is_file():
                    config_data = self._load_config_file(config_path)
                    config_data["_source_file"] = str(config_path)
                    return config_data
        return None

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Load settings from a YAML or JSON file."""
        suffix = config_path.suffix.lower()
        if suffix not in ('.yaml', '.yml', '.json'):
            raise ConfigurationError(f"Unsupported config file format: {config_path.suffix}")

        try:
            content = config_path.read_text(encoding='utf-8')
            if suffix == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file {config_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file {config_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error loading config file {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Load settings from environment variables."""
        config = {}

        env_mapping = {
            f"{self.ENV_PREFIX}DEBUG": "debug",
            f"{self.ENV_PREFIX}OUTPUT_DIR": "output_dir",
            f"{self.ENV_PREFIX}LAUNCH_ARGS": "launch_args",
            f"{self.ENV_PREFIX}TIMEOUT": "timeout_ms",
            f"{self.ENV_PREFIX}VIEWPORT": "viewport",
            f"{self.ENV_PREFIX}WAIT_UNTIL": "wait_until",
            f"{self.ENV_PREFIX}ENGINE": "engine",
        }

        for env_var, key in env_mapping.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                config[key] = self._convert_env_value(env_value, key)

        return config

    def _convert_env_value(self, value: str, key: str) -> Any:
        """Convert environment variable string to appropriate type."""
        if key in self.BOOLEAN_KEYS:
            return value.lower() in ('true', '1', 'yes', 'on')

        if key in self.INTEGER_KEYS:
            try:
                return int(value)
            except ValueError as e:
                raise ConfigurationError(f"Invalid integer for {key}: {value!r}") from e

        if key == 'output_dir':
            return Path(value) if value else None

        return value

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge configuration dictionaries, with override taking precedence."""
        if not override:
            return base

        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value

        return result


def load_settings(
    config_file: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    search_paths: Optional[List[Path]] = None
) -> CaptureSettings:
    """Convenience function to load settings."""
    loader = SettingsLoader()
    return loader.load_settings(config_file, cli_overrides, search_paths)


def print_settings(settings: CaptureSettings, format: str = "yaml") -> str:
    """Render settings in the given format (yaml or json) for debugging."""
    settings_dict = settings.model_dump(
        mode="json",
        exclude={'loaded_from', 'config_file_path'},
    )

    if format.lower() == "json":
        return json.dumps(settings_dict, indent=2, default=str)
    return yaml.safe_dump(settings_dict, default_flow_style=False, sort_keys=True)
