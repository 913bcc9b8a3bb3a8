"""Presence checks for CI, container, environment and collaboration files."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ConfigInfo:
    """Which well-known configuration files a project carries."""

    has_dockerfile: bool = False
    has_docker_compose: bool = False
    has_ci_config: bool = False
    ci_provider: str = ""
    has_env_file: bool = False
    has_env_example: bool = False
    has_gitignore: bool = False
    has_license: bool = False
    has_readme: bool = False
    has_contributing: bool = False
    has_changelog: bool = False
    has_pr_template: bool = False
    has_issue_templates: bool = False
    has_codeowners: bool = False
    has_editorconfig: bool = False
    has_terraform: bool = False
    has_kubernetes: bool = False
    config_files: list[str] = field(default_factory=list)


CI_PROVIDERS = [
    ("GitLab CI", [".gitlab-ci.yml"]),
    ("CircleCI", [".circleci/config.yml"]),
    ("Jenkins", ["Jenkinsfile"]),
    ("Travis CI", [".travis.yml"]),
]


def detect_configs(root: Path, files: list[str]) -> ConfigInfo:
    """Check a project for well-known configuration files.

    Args:
        root: Project root
        files: Scanned file paths relative to the root

    Returns:
        ConfigInfo with a flag per file family and the files that were found
    """
    found: list[str] = []

    def check_any(*paths: str) -> bool:
        hits = [p for p in paths if (root / p).is_file()]
        found.extend(hits)
        return bool(hits)

    ci_provider = ""
    if any(f.startswith(".github/workflows/") for f in files) or check_any(
        ".github/workflows/ci.yml", ".github/workflows/ci.yaml"
    ):
        ci_provider = "GitHub Actions"
    else:
        for provider, paths in CI_PROVIDERS:
            if check_any(*paths):
                ci_provider = provider
                break

    return ConfigInfo(
        has_dockerfile=check_any("Dockerfile", "dockerfile"),
        has_docker_compose=check_any(
            "docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml"
        ),
        has_ci_config=bool(ci_provider),
        ci_provider=ci_provider,
        has_env_file=check_any(".env"),
        has_env_example=check_any(".env.example", ".env.sample", ".env.template"),
        has_gitignore=check_any(".gitignore"),
        has_license=check_any("LICENSE", "LICENSE.md", "LICENSE.txt"),
        has_readme=check_any("README.md", "readme.md", "README.rst", "README"),
        has_contributing=check_any("CONTRIBUTING.md", "contributing.md"),
        has_changelog=check_any("CHANGELOG.md", "changelog.md", "HISTORY.md"),
        has_pr_template=check_any(
            ".github/pull_request_template.md", ".github/PULL_REQUEST_TEMPLATE.md"
        ),
        has_issue_templates=any(".github/ISSUE_TEMPLATE" in f for f in files),
        has_codeowners=check_any("CODEOWNERS", ".github/CODEOWNERS", "docs/CODEOWNERS"),
        has_editorconfig=check_any(".editorconfig"),
        has_terraform=any(f.endswith(".tf") for f in files),
        has_kubernetes=any("k8s" in f or "kubernetes" in f or "helm" in f for f in files),
        config_files=found,
    )
