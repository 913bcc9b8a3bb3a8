"""Output directory management and multi-format export."""

from reposentry.output.store import (
    ArtifactStore,
    ArtifactStoreError,
    OutputDirectoryNotEmptyError,
    OutputFormat,
    normalize_artifact,
)

__all__ = [
    "ArtifactStore",
    "ArtifactStoreError",
    "OutputDirectoryNotEmptyError",
    "OutputFormat",
    "normalize_artifact",
]
