"""Collaboration engine: contribution templates and a CODEOWNERS suggestion."""

from reposentry import prompts
from reposentry.engines import BaseEngine, EngineInput
from reposentry.health.models import CategoryResult
from reposentry.output.store import ArtifactStore
from reposentry.scanners.git import GitAnalysis

TEMPLATES = [
    ("team/PULL_REQUEST_TEMPLATE.md", prompts.PR_TEMPLATE),
    ("team/ISSUE_TEMPLATE/bug_report.md", prompts.BUG_REPORT),
    ("team/ISSUE_TEMPLATE/feature_request.md", prompts.FEATURE_REQUEST),
    ("team/CODE_REVIEW_CHECKLIST.md", prompts.CODE_REVIEW_CHECKLIST),
    ("team/ONBOARDING.md", prompts.ONBOARDING),
    ("team/DEVELOPMENT_WORKFLOW.md", prompts.DEVELOPMENT_WORKFLOW),
]


def build_codeowners(git: GitAnalysis) -> str:
    """Suggest CODEOWNERS rules from per-directory commit ownership.

    Owners are git author names, so the file is a starting point to be
    mapped onto real handles before use.
    """
    lines = [
        "# Suggested CODEOWNERS generated from git history.",
        "# Replace author names with GitHub handles or team names before use.",
        "",
    ]
    if git.contributors:
        lines.append(f"* {_owner(git.contributors[0].name)}")
    for directory, owner in sorted(git.directory_ownership.items()):
        lines.append(f"/{directory}/ {_owner(owner)}")
    if len(lines) == 3:
        lines.append("# No git history available to derive owners.")
    return "\n".join(lines)


def _owner(name: str) -> str:
    return "@" + "-".join(name.split())


class TeamEngine(BaseEngine):
    """Generates collaboration templates and scores team process.

    Score: base 15, +25 PR template, +20 issue templates, +20 CODEOWNERS,
    +10 more than one contributor, +10 more than three.
    """

    @property
    def key(self) -> str:
        return "team"

    @property
    def category(self) -> str:
        return "Collaboration"

    @property
    def label(self) -> str:
        return "Team Engine"

    def run(self, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        configs = engine_input.findings.configs
        git = engine_input.findings.git
        contributors = len(git.contributors)

        ctx = engine_input.context
        if git.contributors:
            ctx = ctx.with_context(
                "Contributors:\n" + "\n".join(f"{c.name} ({c.commits} commits)" for c in git.contributors)
            )

        for path, task in TEMPLATES:
            self._generate(store, path, task, ctx)

        store.write("team/CODEOWNERS.suggested", build_codeowners(git))

        score = 15
        if configs.has_pr_template:
            score += 25
        if configs.has_issue_templates:
            score += 20
        if configs.has_codeowners:
            score += 20
        if contributors > 1:
            score += 10
        if contributors > 3:
            score += 10

        return self._result(
            score,
            f"PR template: {'yes' if configs.has_pr_template else 'no'}, "
            f"issue templates: {'yes' if configs.has_issue_templates else 'no'}, "
            f"CODEOWNERS: {'yes' if configs.has_codeowners else 'no'}, {contributors} contributors",
        )
