"""CI/CD engine: pipeline, container and deployment artifacts."""

from reposentry import prompts
from reposentry.engines import BaseEngine, EngineInput
from reposentry.health.models import CategoryResult
from reposentry.output.store import ArtifactStore
from reposentry.scanners.files import read_text

SUBDIR = "infrastructure"
MAX_DOCKERFILE_CHARS = 8000


class CIEngine(BaseEngine):
    """Audits or generates CI/CD infrastructure.

    Only what is missing gets generated. Score: base 15, +35 CI config,
    +20 Dockerfile, +15 .env example, +15 docker-compose.
    """

    @property
    def key(self) -> str:
        return "ci"

    @property
    def category(self) -> str:
        return "CI/CD"

    def run(self, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        configs = engine_input.findings.configs
        ctx = engine_input.context

        if not configs.has_ci_config:
            self._generate(store, f"{SUBDIR}/ci.yml", prompts.CI_PIPELINE, ctx)

        if configs.has_dockerfile:
            dockerfile = read_text(engine_input.root_dir, "Dockerfile", MAX_DOCKERFILE_CHARS)
            if dockerfile is not None:
                audit_ctx = ctx.with_code(dockerfile)
                self._generate(store, f"{SUBDIR}/DOCKER_AUDIT.md", prompts.DOCKERFILE_AUDIT, audit_ctx)
        else:
            self._generate(store, f"{SUBDIR}/Dockerfile.suggested", prompts.DOCKERFILE_GENERATE, ctx)

        if not configs.has_docker_compose:
            self._generate(store, f"{SUBDIR}/docker-compose.suggested.yml", prompts.DOCKER_COMPOSE, ctx)

        if not configs.has_env_example:
            self._generate(store, f"{SUBDIR}/.env.example", prompts.ENV_EXAMPLE, ctx)

        self._generate(store, f"{SUBDIR}/take-it-to-prod.md", prompts.TAKE_IT_TO_PROD, ctx)

        score = 15
        if configs.has_ci_config:
            score += 35
        if configs.has_dockerfile:
            score += 20
        if configs.has_env_example:
            score += 15
        if configs.has_docker_compose:
            score += 15

        missing = [
            label
            for label, present in [
                ("CI pipeline", configs.has_ci_config),
                ("Dockerfile", configs.has_dockerfile),
                (".env.example", configs.has_env_example),
                ("docker-compose", configs.has_docker_compose),
            ]
            if not present
        ]
        details = f"Missing: {', '.join(missing)}" if missing else "All CI/CD infrastructure present"
        return self._result(score, details)
