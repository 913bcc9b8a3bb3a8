"""Output directory management for generated artifacts."""

import json
import logging
import re
import shutil
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path, PurePosixPath

from reposentry import __version__
from reposentry.health.history import HISTORY_FILE
from reposentry.output.html import (
    render_index,
    render_markdown,
    render_mermaid,
    render_preformatted,
    wrap_page,
)
from reposentry.utils.path_safety import validate_file_within_directory

logger = logging.getLogger(__name__)

# Files that must survive a forced wipe of the output directory
PRESERVED_FILES = (HISTORY_FILE,)
IGNORED_ENTRIES = frozenset({".DS_Store"})

BUNDLE_FILE = "bundle.json"
HTML_DIR = "html"

# Non-prose file types where markdown fences from the backend are stripped
RAW_EXTENSIONS = frozenset(
    {
        ".yml",
        ".yaml",
        ".json",
        ".toml",
        ".ini",
        ".cfg",
        ".conf",
        ".env",
        ".sh",
        ".bash",
        ".ps1",
        ".bat",
        ".cmd",
        ".tf",
        ".hcl",
        ".dockerfile",
        ".mmd",
    }
)

_FENCED_BLOCK = re.compile(r"^```[\w.-]*[ \t]*\n([\s\S]*?)^```[ \t]*$", re.M)
_FENCE_MARKER = re.compile(r"^```[\w.-]*[ \t]*$", re.M)
_LEADING_TITLE = re.compile(r"\A\s*#\s+[A-Z].*\n+")


class OutputFormat(str, Enum):
    """Export format for a run."""

    MARKDOWN = "markdown"
    HTML = "html"
    JSON = "json"


class ArtifactStoreError(Exception):
    """Raised when the output directory cannot be prepared or written."""

    pass


class OutputDirectoryNotEmptyError(ArtifactStoreError):
    """Raised when the output directory already holds files and force is off."""

    pass


def is_raw_artifact(relative_path: str) -> bool:
    """Check whether an artifact is a raw (non-prose) file type."""
    path = PurePosixPath(relative_path)
    name = path.name.lower()
    return (
        path.suffix.lower() in RAW_EXTENSIONS
        or name.startswith("dockerfile")
        or name == ".env.example"
        or name.endswith(".suggested")
    )


def normalize_artifact(relative_path: str, content: str) -> str:
    """Prepare backend output for a given artifact path.

    Raw file types often come back wrapped in markdown fences, sometimes with
    small explanatory blocks around the real payload. The largest fenced
    block is kept, leftover fences are dropped and, for YAML and
    Dockerfile-like files, a leading markdown title is removed.

    Args:
        relative_path: Artifact path inside the output directory
        content: Content as produced by an engine

    Returns:
        The content to persist (prose files are returned unchanged)
    """
    if not is_raw_artifact(relative_path):
        return content

    result = content
    blocks = _FENCED_BLOCK.findall(result)
    if blocks:
        result = max(blocks, key=len)

    result = _FENCE_MARKER.sub("", result)

    path = PurePosixPath(relative_path)
    name = path.name.lower()
    if path.suffix.lower() in (".yml", ".yaml") or name.startswith("dockerfile") or name == ".env.example":
        result = _LEADING_TITLE.sub("", result, count=1)

    return result.strip() + "\n"


class ArtifactStore:
    """Owns the output directory for one run.

    Every artifact is written exactly once per run; the store remembers the
    normalized content so it can be exported as HTML or a JSON bundle when
    the run finishes.
    """

    def __init__(
        self,
        base_dir: Path,
        output_format: OutputFormat | str = OutputFormat.MARKDOWN,
        force: bool = False,
    ) -> None:
        self.base_dir = Path(base_dir)
        self.output_format = OutputFormat(output_format)
        self.force = force
        self._contents: dict[str, str] = {}

    @property
    def files_written(self) -> list[str]:
        """Artifact paths in the order they were written."""
        return list(self._contents)

    @property
    def file_count(self) -> int:
        return len(self._contents)

    def initialize(self) -> None:
        """Prepare the output directory.

        Raises:
            OutputDirectoryNotEmptyError: If the directory has files and force is off
            ArtifactStoreError: If the directory cannot be created or cleared
        """
        if self.base_dir.exists():
            if not self.base_dir.is_dir():
                raise ArtifactStoreError(f"Output path is not a directory: {self.base_dir}")

            entries = [p for p in self.base_dir.iterdir() if p.name not in IGNORED_ENTRIES]
            if entries and not self.force:
                raise OutputDirectoryNotEmptyError(
                    f"Output directory is not empty: {self.base_dir}. "
                    "Use --force or choose a different --output directory."
                )
            if entries:
                self._wipe()

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactStoreError(f"Could not create output directory {self.base_dir}: {e}") from e

    def write(self, relative_path: str, content: str) -> Path:
        """Normalize and persist one artifact.

        Args:
            relative_path: Path inside the output directory (forward slashes)
            content: Raw content produced by an engine

        Returns:
            The absolute path written

        Raises:
            ArtifactStoreError: If the path was already written in this run
            ValueError: If the path escapes the output directory
            OSError: If the file cannot be written
        """
        key = PurePosixPath(relative_path.replace("\\", "/")).as_posix()
        if key in self._contents:
            raise ArtifactStoreError(f"Artifact already written in this run: {key}")

        target = validate_file_within_directory(Path(key), self.base_dir)
        cleaned = normalize_artifact(key, content)

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(cleaned, encoding="utf-8")

        # Only record the artifact once it is safely on disk
        self._contents[key] = cleaned
        logger.debug(f"Written: {key}")
        return target

    def write_to_subdir(self, subdir: str, filename: str, content: str) -> Path:
        return self.write(f"{subdir}/{filename}", content)

    def read(self, relative_path: str) -> str | None:
        """Return the normalized content written for a path in this run."""
        return self._contents.get(relative_path)

    def finalize(self) -> Path | None:
        """Run the format-specific export step.

        Returns:
            Path of the bundle (JSON) or index page (HTML), None for markdown
        """
        if self.output_format is OutputFormat.JSON:
            return self._write_bundle()
        if self.output_format is OutputFormat.HTML:
            return self._write_html_export()
        return None

    def _wipe(self) -> None:
        backups: dict[str, bytes] = {}
        for name in PRESERVED_FILES:
            path = self.base_dir / name
            if path.is_file():
                try:
                    backups[name] = path.read_bytes()
                except OSError as e:
                    logger.warning(f"Could not back up {path}: {e}")

        try:
            shutil.rmtree(self.base_dir)
        except OSError as e:
            raise ArtifactStoreError(f"Could not clear output directory {self.base_dir}: {e}") from e
        finally:
            if backups:
                self.base_dir.mkdir(parents=True, exist_ok=True)
                for name, data in backups.items():
                    (self.base_dir / name).write_bytes(data)

        logger.debug(f"Cleared {self.base_dir} (preserved: {', '.join(backups) or 'nothing'})")

    def _write_bundle(self) -> Path:
        bundle = {
            "tool": "reposentry",
            "version": __version__,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "files": [{"path": path, "content": content} for path, content in self._contents.items()],
        }
        target = self.base_dir / BUNDLE_FILE
        target.write_text(json.dumps(bundle, indent=2), encoding="utf-8")
        return target

    def _write_html_export(self) -> Path:
        html_root = self.base_dir / HTML_DIR
        pages: list[tuple[str, str]] = []

        for path, content in self._contents.items():
            source = PurePosixPath(path)
            suffix = source.suffix.lower()
            if suffix == ".md":
                html_path = source.with_suffix(".html").as_posix()
                body = render_markdown(content)
            elif suffix == ".mmd":
                html_path = source.with_suffix(".html").as_posix()
                body = render_mermaid(content)
            else:
                html_path = f"{path}.html"
                body = render_preformatted(content)

            target = html_root / html_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(wrap_page(path, body), encoding="utf-8")
            pages.append((path, html_path))

        index = html_root / "index.html"
        index.parent.mkdir(parents=True, exist_ok=True)
        index.write_text(render_index(pages), encoding="utf-8")
        return index
