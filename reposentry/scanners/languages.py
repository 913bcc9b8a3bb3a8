"""Language, framework and toolchain detection."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from reposentry.scanners.files import read_text

logger = logging.getLogger(__name__)

EXTENSION_LANGUAGES = {
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".py": "Python",
    ".go": "Go",
    ".rs": "Rust",
    ".java": "Java",
    ".kt": "Kotlin",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".swift": "Swift",
    ".sql": "SQL",
    ".yml": "YAML",
    ".yaml": "YAML",
}


@dataclass
class ManifestRule:
    """What the presence (and content) of a manifest file tells us."""

    file: str
    language: str = ""
    package_manager: str = ""
    runtime: str = ""
    frameworks: dict[str, str] = field(default_factory=dict)
    test_frameworks: dict[str, str] = field(default_factory=dict)
    build_tools: dict[str, str] = field(default_factory=dict)


MANIFEST_RULES = [
    ManifestRule(
        file="package.json",
        language="JavaScript/TypeScript",
        runtime="Node.js",
        frameworks={
            r'"typescript"': "TypeScript",
            r'"react"': "React",
            r'"next"': "Next.js",
            r'"vue"': "Vue.js",
            r'"angular"': "Angular",
            r'"express"': "Express.js",
            r'"fastify"': "Fastify",
            r'"@nestjs/core"': "NestJS",
            r'"hono"': "Hono",
            r'"prisma"': "Prisma",
            r'"mongoose"': "Mongoose",
            r'"sequelize"': "Sequelize",
            r'"typeorm"': "TypeORM",
        },
        test_frameworks={r'"jest"': "Jest", r'"vitest"': "Vitest", r'"mocha"': "Mocha"},
        build_tools={r'"webpack"': "Webpack", r'"vite"': "Vite", r'"esbuild"': "esbuild", r'"tsup"': "tsup"},
    ),
    ManifestRule(
        file="requirements.txt",
        language="Python",
        package_manager="pip",
        runtime="Python",
        frameworks={
            r"(?im)^django\b": "Django",
            r"(?im)^flask\b": "Flask",
            r"(?im)^fastapi\b": "FastAPI",
            r"(?im)^sqlalchemy\b": "SQLAlchemy",
        },
        test_frameworks={r"(?im)^pytest\b": "pytest"},
    ),
    ManifestRule(
        file="pyproject.toml",
        language="Python",
        package_manager="pip/poetry",
        runtime="Python",
        frameworks={
            r"(?i)\bdjango\b": "Django",
            r"(?i)\bflask\b": "Flask",
            r"(?i)\bfastapi\b": "FastAPI",
            r"(?i)\bsqlalchemy\b": "SQLAlchemy",
        },
        test_frameworks={r"(?i)\bpytest\b": "pytest"},
    ),
    ManifestRule(file="setup.py", language="Python", runtime="Python"),
    ManifestRule(file="go.mod", language="Go", package_manager="go mod", runtime="Go"),
    ManifestRule(file="Cargo.toml", language="Rust", package_manager="Cargo", runtime="Rust"),
    ManifestRule(file="pom.xml", language="Java", package_manager="Maven", runtime="JVM"),
    ManifestRule(file="build.gradle", language="Java", package_manager="Gradle", runtime="JVM"),
    ManifestRule(file="Gemfile", language="Ruby", package_manager="Bundler", runtime="Ruby"),
    ManifestRule(file="composer.json", language="PHP", package_manager="Composer", runtime="PHP"),
]

LOCKFILE_MANAGERS = [
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
    ("bun.lockb", "bun"),
    ("poetry.lock", "poetry"),
    ("uv.lock", "uv"),
]


@dataclass
class LanguageInfo:
    """Detected languages and toolchain for a project."""

    languages: list[str] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)
    package_manager: str = ""
    test_framework: str = ""
    build_tool: str = ""
    runtime: str = ""


def _add(items: list[str], value: str) -> None:
    if value and value not in items:
        items.append(value)


def detect_languages(root: Path, files: list[str]) -> LanguageInfo:
    """Detect languages from file extensions and well-known manifests."""
    info = LanguageInfo()

    for file in files:
        _add(info.languages, EXTENSION_LANGUAGES.get(Path(file).suffix.lower(), ""))

    for rule in MANIFEST_RULES:
        if not (root / rule.file).is_file():
            continue

        _add(info.languages, rule.language)
        info.package_manager = info.package_manager or rule.package_manager
        info.runtime = info.runtime or rule.runtime

        if not (rule.frameworks or rule.test_frameworks or rule.build_tools):
            continue
        content = read_text(root, rule.file)
        if content is None:
            continue
        for pattern, name in rule.frameworks.items():
            if re.search(pattern, content):
                _add(info.frameworks, name)
        for pattern, name in rule.test_frameworks.items():
            if not info.test_framework and re.search(pattern, content):
                info.test_framework = name
        for pattern, name in rule.build_tools.items():
            if not info.build_tool and re.search(pattern, content):
                info.build_tool = name

    # C# projects are identified by any *.csproj at the root
    if any("/" not in f and f.endswith(".csproj") for f in files):
        _add(info.languages, "C#")
        info.package_manager = info.package_manager or "NuGet"
        info.runtime = info.runtime or ".NET"

    if not info.package_manager or info.package_manager == "pip/poetry":
        for lockfile, manager in LOCKFILE_MANAGERS:
            if (root / lockfile).is_file():
                info.package_manager = manager
                break

    logger.debug(f"Detected languages: {info.languages}, frameworks: {info.frameworks}")
    return info
