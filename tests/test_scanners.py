"""Tests for the repository detectors."""

from pathlib import Path
from unittest.mock import patch

from reposentry.scanners import ProjectFindings, ScanResult, scan_project
from reposentry.scanners.configs import detect_configs
from reposentry.scanners.files import build_directory_tree, read_text, scan_files
from reposentry.scanners.git import _parse_shortlog, analyze_git_history, repo_name
from reposentry.scanners.imports import dependency_graph, external_dependencies, parse_imports
from reposentry.scanners.languages import detect_languages
from reposentry.scanners.models import detect_models
from reposentry.scanners.routes import detect_routes


def write(root: Path, relative: str, content: str = "") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


# ==============================================================================
# File Scanning Tests
# ==============================================================================


class TestScanFiles:
    """Tests for scan_files."""

    def test_skips_ignored_and_binary(self, tmp_path: Path) -> None:
        """Test default ignores, hidden directories and binary files."""
        write(tmp_path, "src/app.py", "print(1)")
        write(tmp_path, "node_modules/pkg/index.js")
        write(tmp_path, ".idea/workspace.xml")
        write(tmp_path, ".github/workflows/ci.yml", "name: CI")
        (tmp_path / "logo.png").write_bytes(b"\x89PNG")

        result = scan_files(tmp_path)

        assert result.files == [".github/workflows/ci.yml", "src/app.py"]
        assert result.total_files == 3
        assert result.directories == {".github", "src"}

    def test_extra_ignore_patterns(self, tmp_path: Path) -> None:
        """Test user-supplied names and globs."""
        write(tmp_path, "src/app.py")
        write(tmp_path, "generated/out.py")
        write(tmp_path, "src/app.min.js")

        result = scan_files(tmp_path, ["generated", "*.min.js"])

        assert result.files == ["src/app.py"]

    def test_path_ignore_matches_only_that_path(self, tmp_path: Path) -> None:
        """Test that an ignore entry with a slash skips one directory, not every same-named one."""
        write(tmp_path, "src/app.py")
        write(tmp_path, "src/reports/HEALTH_REPORT.md")
        write(tmp_path, "lib/reports/keep.py")

        result = scan_files(tmp_path, ["src/reports"])

        assert result.files == ["lib/reports/keep.py", "src/app.py"]

    def test_directory_tree(self) -> None:
        """Test tree rendering with depth truncation."""
        tree = build_directory_tree(["README.md", "src/app.py", "src/deep/a/b/c.py"], max_depth=3)
        assert tree.splitlines() == [
            "├── README.md",
            "└── src",
            "    ├── app.py",
            "    └── deep",
            "        └── a",
        ]

    def test_read_text(self, tmp_path: Path) -> None:
        """Test truncation and unreadable files."""
        write(tmp_path, "big.txt", "x" * 50)
        assert read_text(tmp_path, "big.txt", 10) == "x" * 10 + "\n... (truncated)"
        assert read_text(tmp_path, "missing.txt") is None


# ==============================================================================
# Detector Tests
# ==============================================================================


class TestLanguages:
    """Tests for detect_languages."""

    def test_node_project(self, tmp_path: Path) -> None:
        """Test manifest, framework and lockfile detection."""
        write(tmp_path, "package.json", '{"dependencies": {"express": "^4.0.0"}, "devDependencies": {"jest": "^29"}}')
        write(tmp_path, "pnpm-lock.yaml")
        write(tmp_path, "src/index.ts")

        info = detect_languages(tmp_path, ["package.json", "src/index.ts"])

        assert "TypeScript" in info.languages
        assert "JavaScript/TypeScript" in info.languages
        assert "Express.js" in info.frameworks
        assert info.test_framework == "Jest"
        assert info.package_manager == "pnpm"
        assert info.runtime == "Node.js"

    def test_python_project(self, temp_project: Path) -> None:
        """Test Python framework detection from requirements.txt."""
        info = detect_languages(temp_project, scan_files(temp_project).files)

        assert info.languages[0] == "Python"
        assert "FastAPI" in info.frameworks
        assert "SQLAlchemy" in info.frameworks
        assert info.test_framework == "pytest"

    def test_csproj(self, tmp_path: Path) -> None:
        """Test C# detection from a root-level project file."""
        write(tmp_path, "App.csproj")
        info = detect_languages(tmp_path, ["App.csproj"])
        assert "C#" in info.languages
        assert info.package_manager == "NuGet"


class TestConfigs:
    """Tests for detect_configs."""

    def test_detects_files(self, tmp_path: Path) -> None:
        """Test the presence flags."""
        write(tmp_path, "Dockerfile", "FROM python:3.12")
        write(tmp_path, ".env", "SECRET=1")
        write(tmp_path, ".github/workflows/test.yml")
        write(tmp_path, ".github/ISSUE_TEMPLATE/bug.md")
        write(tmp_path, ".github/CODEOWNERS")
        files = scan_files(tmp_path).files

        info = detect_configs(tmp_path, files)

        assert info.has_dockerfile
        assert info.has_env_file
        assert not info.has_env_example
        assert info.has_ci_config
        assert info.ci_provider == "GitHub Actions"
        assert info.has_issue_templates
        assert info.has_codeowners
        assert not info.has_readme
        assert "Dockerfile" in info.config_files

    def test_empty_project(self, tmp_path: Path) -> None:
        """Test that an empty directory has no configs."""
        info = detect_configs(tmp_path, [])
        assert not info.has_ci_config
        assert info.ci_provider == ""
        assert info.config_files == []


class TestRoutes:
    """Tests for detect_routes."""

    def test_fastapi_routes(self, temp_project: Path) -> None:
        """Test decorator-based routes."""
        routes = detect_routes(temp_project, ["app/main.py"])
        assert [(r.method, r.path) for r in routes] == [("GET", "/users"), ("POST", "/users")]

    def test_express_and_django(self, tmp_path: Path) -> None:
        """Test method capture, path-only patterns and the leading slash."""
        write(tmp_path, "server.js", "router.get('/health', h)\napp.use('/api', api)\n")
        write(tmp_path, "urls.py", "urlpatterns = [path('users/', views.users)]\n")

        routes = detect_routes(tmp_path, ["server.js", "urls.py"])

        assert ("GET", "/health") in [(r.method, r.path) for r in routes]
        assert ("ANY", "/api") in [(r.method, r.path) for r in routes]
        assert ("ANY", "/users/") in [(r.method, r.path) for r in routes]


class TestModels:
    """Tests for detect_models."""

    def test_sqlalchemy_models(self, temp_project: Path) -> None:
        """Test class-based ORM models."""
        models = detect_models(temp_project, ["app/models.py"])
        assert "User" in [m.name for m in models]
        assert all(m.orm == "SQLAlchemy" for m in models)

    def test_prisma_fields(self, tmp_path: Path) -> None:
        """Test field extraction from a Prisma schema."""
        write(tmp_path, "schema.prisma", "model Post {\n  id Int @id\n  title String\n}\n")

        models = detect_models(tmp_path, ["schema.prisma"])

        assert models[0].name == "Post"
        assert models[0].fields == ("id Int @id", "title String")


class TestImports:
    """Tests for import parsing."""

    def test_parse_and_summarize(self, tmp_path: Path) -> None:
        """Test ES, CommonJS and Python imports."""
        write(tmp_path, "web/app.ts", "import express from 'express'\nimport { x } from './util'\n")
        write(tmp_path, "web/cfg.js", "const s = require('@scope/pkg/sub')\n")
        write(tmp_path, "svc.py", "import os\nfrom app.models import User\n")

        infos = parse_imports(tmp_path, ["web/app.ts", "web/cfg.js", "svc.py"])

        assert infos[0].imports == ("express", "./util")
        assert infos[2].imports == ("os", "app.models")
        assert external_dependencies(infos) == ["@scope/pkg", "app.models", "express", "os"]
        assert dependency_graph(infos) == {"web/app.ts": ["./util"]}


# ==============================================================================
# Git Tests
# ==============================================================================


class TestGit:
    """Tests for git history helpers."""

    def test_parse_shortlog(self) -> None:
        """Test contributor parsing."""
        contributors = _parse_shortlog("    12\tAda Lovelace\n     3\tAlan Turing\n")
        assert [(c.name, c.commits) for c in contributors] == [("Ada Lovelace", 12), ("Alan Turing", 3)]

    def test_not_a_repository(self, tmp_path: Path) -> None:
        """Test that git failures yield empty data."""
        with patch("reposentry.scanners.git.git_command", return_value=""):
            analysis = analyze_git_history(tmp_path)
        assert analysis.contributors == []
        assert analysis.total_commits == 0

    def test_repo_name_from_remote(self, tmp_path: Path) -> None:
        """Test deriving the name from the origin URL."""
        with patch("reposentry.scanners.git.git_command", return_value="git@github.com:acme/widgets.git"):
            assert repo_name(tmp_path) == "widgets"

    def test_repo_name_from_directory(self, tmp_path: Path) -> None:
        """Test falling back to the directory name."""
        with patch("reposentry.scanners.git.git_command", return_value=""):
            assert repo_name(tmp_path) == tmp_path.name


# ==============================================================================
# Aggregate Tests
# ==============================================================================


class TestScanProject:
    """Tests for scan_project."""

    def test_findings(self, temp_project: Path) -> None:
        """Test that every detector contributes."""
        with patch("reposentry.scanners.analyze_git_history") as mock_git:
            mock_git.return_value.contributors = []
            findings = scan_project(temp_project)

        assert "app/main.py" in findings.scan.files
        assert findings.configs.has_readme
        assert len(findings.routes) == 2
        assert findings.test_files == ["tests/test_users.py"]
        assert findings.code_files((".py",)) == ["app/main.py", "app/models.py", "tests/test_users.py"]

    def test_default_findings(self) -> None:
        """Test the empty findings bundle."""
        findings = ProjectFindings()
        assert findings.scan == ScanResult()
        assert findings.test_files == []
