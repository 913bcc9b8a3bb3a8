"""Import statement extraction and dependency summaries."""

import re
from dataclasses import dataclass
from pathlib import Path

from reposentry.scanners.files import read_text

MAX_FILES = 100

SOURCE_SUFFIXES = (".ts", ".tsx", ".js", ".jsx", ".py", ".go")

_ES_IMPORT = re.compile(r"import\s+(?:[\w*{}\s,]+\s+from\s+)?['\"]([^'\"]+)['\"]")
_CJS_REQUIRE = re.compile(r"require\s*\(\s*['\"]([^'\"]+)['\"]\s*\)")
_PY_IMPORT = re.compile(r"^\s*(?:from\s+([\w.]+)\s+import|import\s+([\w.]+))", re.M)
_GO_IMPORT = re.compile(r"import\s+(?:\(\s*([\s\S]*?)\s*\)|\"([^\"]+)\")")
_GO_PATH = re.compile(r"\"([^\"]+)\"")


@dataclass(frozen=True)
class ImportInfo:
    file: str
    imports: tuple[str, ...]


def _extract(file: str, content: str) -> list[str]:
    if file.endswith(".py"):
        return [m.group(1) or m.group(2) for m in _PY_IMPORT.finditer(content)]
    if file.endswith(".go"):
        found: list[str] = []
        for match in _GO_IMPORT.finditer(content):
            if match.group(2):
                found.append(match.group(2))
            elif match.group(1):
                found.extend(_GO_PATH.findall(match.group(1)))
        return found
    return _ES_IMPORT.findall(content) + _CJS_REQUIRE.findall(content)


def parse_imports(root: Path, files: list[str]) -> list[ImportInfo]:
    """Collect the imports of up to MAX_FILES source files."""
    results: list[ImportInfo] = []
    sources = [f for f in files if f.endswith(SOURCE_SUFFIXES)]

    for file in sources[:MAX_FILES]:
        content = read_text(root, file)
        if content is None:
            continue
        imports = _extract(file, content)
        if imports:
            results.append(ImportInfo(file=file, imports=tuple(imports)))

    return results


def external_dependencies(import_infos: list[ImportInfo]) -> list[str]:
    """Get the sorted set of third-party package names that are imported."""
    deps: set[str] = set()
    for info in import_infos:
        for name in info.imports:
            if name.startswith((".", "/", "node:")):
                continue
            parts = name.split("/")
            deps.add(f"{parts[0]}/{parts[1]}" if name.startswith("@") and len(parts) > 1 else parts[0])
    return sorted(deps)


def dependency_graph(import_infos: list[ImportInfo]) -> dict[str, list[str]]:
    """Map each file to the relative modules it imports."""
    graph: dict[str, list[str]] = {}
    for info in import_infos:
        local = [name for name in info.imports if name.startswith(".")]
        if local:
            graph[info.file] = local
    return graph
