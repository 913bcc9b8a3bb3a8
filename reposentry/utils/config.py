"""Configuration management for RepoSentry."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import toml

from reposentry.core.backend import DEFAULT_MODEL, BackendSettings

logger = logging.getLogger(__name__)

CONFIG_FILE = ".reposentry.toml"
DEFAULT_OUTPUT_DIR = ".reposentry"


@dataclass
class ProjectConfig:
    """Configuration loaded from .reposentry.toml or pyproject.toml [tool.reposentry]."""

    output: str = DEFAULT_OUTPUT_DIR
    format: str = "markdown"
    ignore: list[str] = field(default_factory=list)
    model: str = DEFAULT_MODEL
    max_retries: int = 2
    retry_delay: float = 3.0
    timeout: float = 180.0
    batch_delay: float = 1.0
    max_prompt_length: int = 6000
    weights: dict[str, float] = field(default_factory=dict)

    @classmethod
    def load(cls, project_path: Path) -> "ProjectConfig":
        """Load configuration for a project, falling back to defaults.

        ``.reposentry.toml`` takes precedence over the ``[tool.reposentry]``
        table of ``pyproject.toml``.
        """
        config = cls()

        section = cls._read_section(project_path)
        if not section:
            return config

        try:
            for key in ("output", "format", "model"):
                if key in section:
                    setattr(config, key, str(section[key]))
            if "ignore" in section:
                config.ignore = [str(p) for p in section["ignore"]]
            for key in ("max_retries", "max_prompt_length"):
                if key in section:
                    setattr(config, key, int(section[key]))
            for key in ("retry_delay", "timeout", "batch_delay"):
                if key in section:
                    setattr(config, key, float(section[key]))
            if "weights" in section:
                config.weights = {str(k): float(v) for k, v in section["weights"].items()}
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring invalid RepoSentry configuration: {e}")
            return cls()

        return config

    @staticmethod
    def _read_section(project_path: Path) -> dict[str, Any]:
        dedicated = project_path / CONFIG_FILE
        pyproject = project_path / "pyproject.toml"

        try:
            if dedicated.exists():
                return dict(toml.load(dedicated))
            if pyproject.exists():
                data = toml.load(pyproject)
                return dict(data.get("tool", {}).get("reposentry", {}))
        except (OSError, toml.TomlDecodeError, TypeError, ValueError) as e:
            # If we can't parse the config, use defaults
            logger.warning(f"Ignoring invalid RepoSentry configuration: {e}")
        return {}

    def backend_settings(self, project_path: Path) -> BackendSettings:
        """Build backend settings rooted at the analyzed project."""
        return BackendSettings(
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
            timeout=self.timeout,
            max_prompt_length=self.max_prompt_length,
            batch_delay=self.batch_delay,
            model=self.model,
            project_dir=project_path,
        )
