"""Architecture engine: mermaid diagrams and an architecture document."""

from reposentry import prompts
from reposentry.engines import BaseEngine, EngineInput
from reposentry.health.models import CategoryResult
from reposentry.output.store import ArtifactStore

DIAGRAMS = [
    ("diagrams/architecture.mmd", "System Architecture", prompts.SYSTEM_ARCHITECTURE),
    ("diagrams/data-flow.mmd", "Data Flow", prompts.DATA_FLOW),
    ("diagrams/dependency-graph.mmd", "Dependency Graph", prompts.DEPENDENCY_GRAPH),
    ("diagrams/database-schema.mmd", "Database Schema", prompts.ER_DIAGRAM),
    ("diagrams/api-flow.mmd", "API Request Flow", prompts.API_FLOW),
]

MAX_IMPORT_LINES = 30


def embed_mermaid(title: str, diagram: str) -> str:
    """Embed a diagram in a markdown section."""
    return f"## {title}\n\n```mermaid\n{diagram.strip()}\n```\n"


class ArchitectureEngine(BaseEngine):
    """Generates architecture diagrams and ARCHITECTURE.md.

    Score based on structure signals:
    - Base 30, +15 imports, +15 models, +15 routes
    - +10 for 3+ top-level directories, +5 more for 5+
    - -10 when there are neither imports nor routes
    """

    @property
    def key(self) -> str:
        return "architecture"

    @property
    def category(self) -> str:
        return "Architecture"

    def run(self, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        findings = engine_input.findings
        imports = findings.imports
        models = findings.models
        routes = findings.routes
        top_dirs = len(findings.scan.directories)

        ctx = engine_input.context
        if imports:
            ctx = ctx.with_context(
                "Import graph:\n"
                + "\n".join(f"{i.file} -> {', '.join(i.imports)}" for i in imports[:MAX_IMPORT_LINES])
            )
        if models:
            ctx = ctx.with_context(
                "Database models:\n"
                + "\n".join(f"{m.name} ({m.orm}) in {m.file}: {', '.join(m.fields[:5])}" for m in models)
            )
        if routes:
            ctx = ctx.with_context("API routes:\n" + "\n".join(f"{r.method} {r.path}" for r in routes))

        sections = []
        for path, title, task in DIAGRAMS:
            diagram = self._generate(store, path, task, ctx, "mermaid")
            sections.append(embed_mermaid(title, diagram))

        doc = self.generator.generate(prompts.build_prompt(prompts.ARCHITECTURE_DOC, ctx))
        store.write("ARCHITECTURE.md", doc + "\n\n---\n\n" + "\n---\n\n".join(sections))

        score = 30
        if imports:
            score += 15
        if models:
            score += 15
        if routes:
            score += 15
        if top_dirs >= 3:
            score += 10
        if top_dirs >= 5:
            score += 5
        if not imports and not routes:
            score -= 10

        return self._result(
            score,
            f"{len(imports)} files with imports, {len(models)} models, {len(routes)} routes, "
            f"{top_dirs} top-level directories",
        )
