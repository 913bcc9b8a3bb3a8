"""Regex-based HTTP route detection for common web frameworks."""

import re
from dataclasses import dataclass
from pathlib import Path

from reposentry.scanners.files import read_text

MAX_FILES = 200


@dataclass(frozen=True)
class RouteInfo:
    method: str
    path: str
    file: str


# (framework, file suffixes, patterns). Patterns with two groups capture
# (method, path); single-group patterns capture only the path.
FRAMEWORK_PATTERNS: list[tuple[str, tuple[str, ...], list[re.Pattern[str]]]] = [
    (
        "Express.js",
        (".ts", ".js"),
        [
            re.compile(r"(?:app|router)\.(get|post|put|patch|delete|all)\s*\(\s*['\"`]([^'\"`]+)['\"`]"),
            re.compile(r"(?:app|router)\.use\s*\(\s*['\"`]([^'\"`]+)['\"`]"),
        ],
    ),
    (
        "Fastify",
        (".ts", ".js"),
        [re.compile(r"fastify\.(get|post|put|patch|delete)\s*\(\s*['\"`]([^'\"`]+)['\"`]")],
    ),
    (
        "NestJS",
        (".ts", ".js"),
        [re.compile(r"@(Get|Post|Put|Patch|Delete)\s*\(\s*['\"`]?([^'\"`)\s]*)['\"`]?\s*\)")],
    ),
    (
        "FastAPI/Flask",
        (".py",),
        [
            re.compile(r"@(?:app|router|bp|blueprint)\.(get|post|put|patch|delete)\s*\(\s*['\"]([^'\"]+)['\"]"),
            re.compile(r"@(?:app|bp|blueprint)\.route\s*\(\s*['\"]([^'\"]+)['\"]"),
        ],
    ),
    (
        "Django",
        (".py",),
        [re.compile(r"\bpath\s*\(\s*['\"]([^'\"]*)['\"]")],
    ),
    (
        "Spring Boot",
        (".java",),
        [
            re.compile(
                r"@(Get|Post|Put|Patch|Delete)Mapping\s*\(\s*(?:value\s*=\s*)?['\"]([^'\"]+)['\"]"
            ),
            re.compile(r"@RequestMapping\s*\(\s*(?:value\s*=\s*)?['\"]([^'\"]+)['\"]"),
        ],
    ),
    (
        "Gin",
        (".go",),
        [re.compile(r"\.(GET|POST|PUT|PATCH|DELETE)\s*\(\s*\"([^\"]+)\"")],
    ),
]


def detect_routes(root: Path, files: list[str]) -> list[RouteInfo]:
    """Find HTTP routes declared in source files."""
    routes: list[RouteInfo] = []

    for file in files[:MAX_FILES]:
        candidates = [patterns for _, suffixes, patterns in FRAMEWORK_PATTERNS if file.endswith(suffixes)]
        if not candidates:
            continue
        content = read_text(root, file)
        if content is None:
            continue

        for patterns in candidates:
            for pattern in patterns:
                for match in pattern.finditer(content):
                    if pattern.groups >= 2:
                        method, path = match.group(1).upper(), match.group(2)
                    else:
                        method, path = "ANY", match.group(1)
                    routes.append(
                        RouteInfo(method=method, path=path if path.startswith("/") else f"/{path}", file=file)
                    )

    return routes
