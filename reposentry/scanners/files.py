"""Repository file walking and directory-tree rendering."""

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_IGNORE = [
    "node_modules",
    ".git",
    "dist",
    "build",
    ".reposentry",
    "__pycache__",
    ".venv",
    "venv",
    "vendor",
    "target",
    ".mypy_cache",
    ".pytest_cache",
]

BINARY_EXTENSIONS = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".ico", ".svg", ".webp",
        ".woff", ".woff2", ".ttf", ".eot", ".otf",
        ".zip", ".tar", ".gz", ".rar", ".7z",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx",
        ".exe", ".dll", ".so", ".dylib",
        ".mp3", ".mp4", ".avi", ".mov", ".wav",
        ".lock", ".pyc",
    }
)  # fmt: skip

# Dot-directories that still carry signal for the config detectors
_VISIBLE_DOT_DIRS = frozenset({".github", ".circleci", ".gitlab"})


@dataclass
class ScanResult:
    """Files found in a repository (paths relative to the root, forward slashes)."""

    files: list[str] = field(default_factory=list)
    total_files: int = 0
    directories: set[str] = field(default_factory=set)


def _is_ignored(rel_path: str, patterns: list[str]) -> bool:
    # Patterns with a slash match the root-relative path, bare names match at any depth
    name = rel_path.rsplit("/", 1)[-1]
    for pattern in patterns:
        target = rel_path if "/" in pattern else name
        if target == pattern or fnmatch.fnmatch(target, pattern):
            return True
    return False


def scan_files(root: Path, ignore: list[str] | None = None, max_depth: int = 10) -> ScanResult:
    """Walk a repository and collect its text files.

    Args:
        root: Repository root
        ignore: Extra names or glob patterns to skip; entries containing a slash
            match the path relative to the root rather than a bare name
        max_depth: Maximum directory depth to descend

    Returns:
        ScanResult with source files and the top-level directories
    """
    patterns = DEFAULT_IGNORE + list(ignore or [])
    all_files: list[str] = []

    for current, dirnames, filenames in os.walk(root, onerror=lambda e: logger.debug(f"Skipping: {e}")):
        rel_dir = Path(current).relative_to(root)
        depth = len(rel_dir.parts)
        dirnames[:] = sorted(
            d
            for d in dirnames
            if depth < max_depth
            and not _is_ignored((rel_dir / d).as_posix(), patterns)
            and (not d.startswith(".") or d in _VISIBLE_DOT_DIRS)
        )
        for filename in sorted(filenames):
            rel_path = (rel_dir / filename).as_posix()
            if _is_ignored(rel_path, patterns):
                continue
            all_files.append(rel_path)

    result = ScanResult(total_files=len(all_files))
    for rel_path in all_files:
        if Path(rel_path).suffix.lower() in BINARY_EXTENSIONS:
            continue
        result.files.append(rel_path)
        parts = rel_path.split("/")
        if len(parts) > 1:
            result.directories.add(parts[0])

    return result


def build_directory_tree(files: list[str], max_depth: int = 3) -> str:
    """Render file paths as an indented tree, truncated at ``max_depth`` levels."""
    tree: dict[str, set[str]] = {}
    for file in files:
        parts = file.split("/")
        current = ""
        for part in parts[:max_depth]:
            parent = current
            current = f"{current}/{part}" if current else part
            tree.setdefault(parent, set()).add(part)

    def render(prefix: str, indent: str) -> list[str]:
        children = sorted(tree.get(prefix, ()))
        lines: list[str] = []
        for idx, child in enumerate(children):
            is_last = idx == len(children) - 1
            full_path = f"{prefix}/{child}" if prefix else child
            lines.append(f"{indent}{'└── ' if is_last else '├── '}{child}")
            if full_path in tree:
                lines.extend(render(full_path, indent + ("    " if is_last else "│   ")))
        return lines

    return "\n".join(render("", ""))


def read_text(root: Path, relative_path: str, max_chars: int | None = None) -> str | None:
    """Read a repository file, returning None when it cannot be read."""
    try:
        content = (root / relative_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Failed to read {relative_path}: {e}")
        return None
    if max_chars is not None and len(content) > max_chars:
        return content[:max_chars] + "\n... (truncated)"
    return content
