"""Utility functions and classes for RepoSentry."""

from reposentry.utils.config import CONFIG_FILE, ProjectConfig
from reposentry.utils.path_safety import validate_file_within_directory

__all__ = [
    "CONFIG_FILE",
    "ProjectConfig",
    "validate_file_within_directory",
]
