"""Path validation utilities to keep generated artifacts inside the output directory."""

from pathlib import Path


def validate_file_within_directory(file_path: Path, base_dir: Path) -> Path:
    """Ensure a file path resolves to within a base directory.

    Args:
        file_path: The file path to validate (relative paths are joined to base_dir).
        base_dir: The directory the file must stay inside.

    Returns:
        The resolved, validated file path.

    Raises:
        ValueError: If the file path resolves to outside the base directory.
    """
    base_resolved = base_dir.resolve()
    candidate = file_path if file_path.is_absolute() else base_resolved / file_path
    resolved = candidate.resolve()

    if resolved == base_resolved or not resolved.is_relative_to(base_resolved):
        raise ValueError(
            f"Artifact path '{file_path}' resolves to outside the output directory. "
            f"Expected paths within '{base_resolved}'."
        )

    return resolved
