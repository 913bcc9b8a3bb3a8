"""Documentation engine: README, API, setup and contributor docs."""

from reposentry import prompts
from reposentry.engines import BaseEngine, EngineInput
from reposentry.health.models import CategoryResult
from reposentry.output.store import ArtifactStore
from reposentry.prompts import build_prompt

DOCUMENTS = [
    ("README.md", prompts.README),
    ("API.md", prompts.API_DOCS),
    ("SETUP.md", prompts.SETUP),
    ("CONTRIBUTING.md", prompts.CONTRIBUTING),
    ("CHANGELOG.md", prompts.CHANGELOG),
    ("FAQ.md", prompts.FAQ),
]


class DocsEngine(BaseEngine):
    """Generates project documentation.

    Score based on what the project already has:
    - Base 20, +25 README, +10 API routes
    - +10 more than 3 recent commits, +15 version tags
    - -10 no README, -5 no commits
    """

    @property
    def key(self) -> str:
        return "docs"

    @property
    def category(self) -> str:
        return "Documentation"

    def run(self, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        findings = engine_input.findings
        routes = findings.routes
        commits = findings.git.recent_commits
        tags = findings.git.tags
        has_readme = findings.configs.has_readme

        ctx = engine_input.context
        if routes:
            ctx = ctx.with_context(
                "Detected API routes:\n" + "\n".join(f"{r.method} {r.path} ({r.file})" for r in routes)
            )
        if commits:
            ctx = ctx.with_context("Recent commits:\n" + "\n".join(commits))
        if tags:
            ctx = ctx.with_context(f"Version tags: {', '.join(tags)}")

        # Sequential with a pause between calls to respect backend rate limits
        results = self.generator.batch_generate(
            [(path, build_prompt(task, ctx)) for path, task in DOCUMENTS]
        )
        for path, _ in DOCUMENTS:
            store.write(path, results[path])

        score = 20
        if has_readme:
            score += 25
        if routes:
            score += 10
        if len(commits) > 3:
            score += 10
        if tags:
            score += 15
        if not has_readme:
            score -= 10
        if not commits:
            score -= 5

        return self._result(
            score,
            f"README: {'yes' if has_readme else 'missing'}, {len(routes)} routes, "
            f"{len(tags)} tags, {len(commits)} recent commits",
        )
