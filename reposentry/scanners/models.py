"""Regex-based database model detection."""

import re
from dataclasses import dataclass, field
from pathlib import Path

from reposentry.scanners.files import read_text

MAX_FILES = 200
MAX_FIELDS = 20


@dataclass(frozen=True)
class ModelInfo:
    name: str
    file: str
    orm: str
    fields: tuple[str, ...] = field(default=())


ORM_PATTERNS: list[tuple[str, tuple[str, ...], re.Pattern[str]]] = [
    ("Prisma", (".prisma",), re.compile(r"model\s+(\w+)\s*\{([^}]+)\}")),
    ("Mongoose", (".ts", ".js"), re.compile(r"mongoose\.model\s*\(\s*['\"`](\w+)['\"`]")),
    (
        "Sequelize",
        (".ts", ".js"),
        re.compile(r"(?:sequelize\.define|Model\.init)\s*\(\s*['\"`](\w+)['\"`]\s*,\s*\{([^}]+)\}"),
    ),
    ("TypeORM", (".ts", ".js"), re.compile(r"@Entity\s*\([^)]*\)\s*(?:export\s+)?class\s+(\w+)")),
    ("Django ORM", (".py",), re.compile(r"class\s+(\w+)\s*\(\s*(?:models\.)?Model\s*\)\s*:")),
    ("SQLAlchemy", (".py",), re.compile(r"class\s+(\w+)\s*\(\s*(?:Base|db\.Model|DeclarativeBase)\s*\)\s*:")),
    ("GORM", (".go",), re.compile(r"type\s+(\w+)\s+struct\s*\{[^}]*gorm")),
    ("ActiveRecord", (".rb",), re.compile(r"class\s+(\w+)\s*<\s*(?:ApplicationRecord|ActiveRecord::Base)")),
]


def _parse_fields(body: str) -> tuple[str, ...]:
    fields = [f.strip() for f in re.split(r"[,\n]", body)]
    return tuple(f for f in fields if f and not f.startswith(("//", "#")))[:MAX_FIELDS]


def detect_models(root: Path, files: list[str]) -> list[ModelInfo]:
    """Find ORM model declarations in source files."""
    models: list[ModelInfo] = []

    for file in files[:MAX_FILES]:
        candidates = [(orm, pattern) for orm, suffixes, pattern in ORM_PATTERNS if file.endswith(suffixes)]
        if not candidates:
            continue
        content = read_text(root, file)
        if content is None:
            continue

        for orm, pattern in candidates:
            for match in pattern.finditer(content):
                body = match.group(2) if pattern.groups >= 2 else ""
                models.append(ModelInfo(name=match.group(1), file=file, orm=orm, fields=_parse_fields(body)))

    return models
