"""Repository detectors: files, languages, configs, routes, models, imports, git."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from reposentry.scanners.configs import ConfigInfo, detect_configs
from reposentry.scanners.files import ScanResult, build_directory_tree, scan_files
from reposentry.scanners.git import GitAnalysis, analyze_git_history, repo_name
from reposentry.scanners.imports import ImportInfo, parse_imports
from reposentry.scanners.languages import LanguageInfo, detect_languages
from reposentry.scanners.models import ModelInfo, detect_models
from reposentry.scanners.routes import RouteInfo, detect_routes

logger = logging.getLogger(__name__)

__all__ = [
    "ConfigInfo",
    "GitAnalysis",
    "ImportInfo",
    "LanguageInfo",
    "ModelInfo",
    "ProjectFindings",
    "RouteInfo",
    "ScanResult",
    "build_directory_tree",
    "repo_name",
    "scan_project",
]

_TEST_FILE_MARKERS = (".test.", ".spec.", "_test.", "/test_", "/tests/", "/__tests__/")


@dataclass
class ProjectFindings:
    """Everything the detectors learned about a project."""

    scan: ScanResult = field(default_factory=ScanResult)
    languages: LanguageInfo = field(default_factory=LanguageInfo)
    configs: ConfigInfo = field(default_factory=ConfigInfo)
    routes: list[RouteInfo] = field(default_factory=list)
    models: list[ModelInfo] = field(default_factory=list)
    imports: list[ImportInfo] = field(default_factory=list)
    git: GitAnalysis = field(default_factory=GitAnalysis)

    @property
    def test_files(self) -> list[str]:
        """Files that look like tests."""
        return [f for f in self.scan.files if any(m in f"/{f}" for m in _TEST_FILE_MARKERS)]

    def code_files(self, suffixes: tuple[str, ...]) -> list[str]:
        """Scanned files with one of the given suffixes."""
        return [f for f in self.scan.files if f.endswith(suffixes)]


def scan_project(root: Path, ignore: list[str] | None = None) -> ProjectFindings:
    """Run every detector against a project.

    Args:
        root: Project root
        ignore: Extra names or glob patterns to skip while scanning

    Returns:
        ProjectFindings bundle
    """
    scan = scan_files(root, ignore)
    logger.debug(f"Scanned {scan.total_files} files ({len(scan.files)} text files) in {root}")

    return ProjectFindings(
        scan=scan,
        languages=detect_languages(root, scan.files),
        configs=detect_configs(root, scan.files),
        routes=detect_routes(root, scan.files),
        models=detect_models(root, scan.files),
        imports=parse_imports(root, scan.files),
        git=analyze_git_history(root),
    )
