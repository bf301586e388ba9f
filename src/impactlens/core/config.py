"""Configuration management for ImpactLens."""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from impactlens.core.logging import get_logger

logger = get_logger("impactlens.config")

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.7
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


class Config:
    """Configuration manager with hierarchy: CLI args > config file > project config > user config > defaults."""

    def __init__(self):
        """Initialize configuration with default values."""
        self.api_key: Optional[str] = None
        self.model: str = DEFAULT_MODEL
        self.temperature: float = DEFAULT_TEMPERATURE
        self.language: str = "en"
        self.prompt_version: str = "v1.1"
        self.viewer: str = "recruiter"
        self.output_format: str = "markdown"
        self.output_dir: Optional[str] = None

    @classmethod
    def load(
        cls,
        cli_args: Optional[dict[str, Any]] = None,
        config_file: Optional[Path] = None,
    ) -> "Config":
        """
        Load configuration from the hierarchy.

        Args:
            cli_args: Dictionary of CLI arguments to override config
            config_file: Explicit config file, applied over project and user config

        Returns:
            Config instance with loaded values
        """
        config = cls()

        user_config_path = Path.home() / ".impactlens" / "config.yaml"
        if user_config_path.exists():
            config._load_file(user_config_path)

        project_config_path = Path.cwd() / ".impactlens.yaml"
        if project_config_path.exists():
            config._load_file(project_config_path)

        if config_file is not None:
            config._load_file(config_file)

        if cli_args:
            for key, value in cli_args.items():
                if value is not None:
                    setattr(config, key, value)

        return config

    def _load_file(self, config_path: Path) -> None:
        """Load configuration from a YAML or JSON file."""
        try:
            content = config_path.read_text(encoding="utf-8")
            if config_path.suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(content)
            elif config_path.suffix == ".json":
                data = json.loads(content)
            else:
                logger.warning(f"Ignoring config file with unknown format: {config_path}")
                return
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read config file {config_path}: {e}")
            return

        if not isinstance(data, dict):
            return

        for key, value in data.items():
            if hasattr(self, key) and value is not None:
                setattr(self, key, value)

    def resolve_api_key(self) -> Optional[str]:
        """Return the configured API key, falling back to the environment."""
        if self.api_key:
            return self.api_key
        for env_var in API_KEY_ENV_VARS:
            value = os.getenv(env_var)
            if value:
                return value
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "api_key": self.api_key,
            "model": self.model,
            "temperature": self.temperature,
            "language": self.language,
            "prompt_version": self.prompt_version,
            "viewer": self.viewer,
            "output_format": self.output_format,
            "output_dir": self.output_dir,
        }

    def save(self, path: Path, format: str = "yaml") -> None:
        """
        Save configuration to file.

        The API key is never written out.

        Args:
            path: Path to save config file
            format: Format to save as ('yaml' or 'json')
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {k: v for k, v in self.to_dict().items() if v is not None and k != "api_key"}

        if format == "yaml":
            content = yaml.dump(data, default_flow_style=False, sort_keys=False)
        else:
            content = json.dumps(data, indent=2)

        path.write_text(content, encoding="utf-8")

    def get_output_dir(self) -> Path:
        """Get output directory, creating it if needed."""
        dir_path = Path(self.output_dir) if self.output_dir else Path.cwd()
        dir_path.mkdir(parents=True, exist_ok=True)
        return dir_path
