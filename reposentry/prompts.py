"""Prompt construction for the generation backend.

Each engine pairs a task string from this module with the shared
AnalysisContext through ``build_prompt``. The wording can change freely;
only the output-format hints matter to the backend adapter, which sniffs
them to pick its own format prefix.
"""

from typing import Literal

from reposentry.health.models import AnalysisContext

OutputKind = Literal["markdown", "json", "mermaid"]

FORMAT_HINTS: dict[str, str] = {
    "mermaid": "Output ONLY valid Mermaid diagram syntax. No markdown fences, no explanation.",
    "json": "Output ONLY valid JSON. No markdown fences, no explanation.",
    "markdown": "Output in well-formatted Markdown.",
}


def build_prompt(task: str, context: AnalysisContext, fmt: OutputKind = "markdown") -> str:
    """Combine a task with the project context.

    Args:
        task: What the backend should produce
        context: Shared project description
        fmt: Expected output kind

    Returns:
        Prompt text
    """
    languages = "/".join(context.languages) or "software"
    parts = [f'You are analyzing a {languages} project called "{context.project_name}".']

    if context.frameworks:
        parts.append(f"Frameworks/libraries: {', '.join(context.frameworks)}.")
    if context.package_manager:
        parts.append(f"Package manager: {context.package_manager}.")
    if context.file_tree:
        parts.append(f"Project structure:\n{context.file_tree}")
    if context.code_context:
        parts.append(f"Relevant code:\n{context.code_context}")
    if context.additional_context.strip():
        parts.append(context.additional_context.strip())

    parts.append(f"Task: {task}")
    parts.append(FORMAT_HINTS[fmt])
    return "\n\n".join(parts)


# Documentation
README = (
    "Generate a complete README.md for this project. Include: project description, features, "
    "installation instructions, usage examples, configuration options, and contributing section."
)
API_DOCS = (
    "Generate API documentation (API.md). For each detected endpoint, document: method, path, "
    "parameters, request body, response format, and an example request."
)
SETUP = (
    "Generate a SETUP.md development environment setup guide covering prerequisites, dependency "
    "installation, environment variables, database setup (if applicable) and running locally."
)
CONTRIBUTING = (
    "Generate a CONTRIBUTING.md guide: fork and clone, branch naming, commit message format, "
    "code style, PR process, testing requirements and review expectations."
)
CHANGELOG = (
    "Generate a CHANGELOG.md from the git commit history provided. Group changes by version tag "
    "or date and categorize entries using the Keep a Changelog format."
)
FAQ = (
    "Generate an FAQ.md inferred from the codebase: TODO/FIXME comments, complex setup "
    "requirements, common pitfalls and configuration options, with clear answers."
)

# Architecture
SYSTEM_ARCHITECTURE = (
    "Generate a Mermaid flowchart diagram of the system architecture: main components, "
    "external services, data stores and how they connect."
)
DATA_FLOW = "Generate a Mermaid flowchart diagram showing how data flows through the system."
DEPENDENCY_GRAPH = "Generate a Mermaid graph diagram of the module dependencies from the import graph provided."
ER_DIAGRAM = (
    "Generate a Mermaid erDiagram diagram of the database schema from the models provided. "
    "If no models were detected, show the main domain entities instead."
)
API_FLOW = "Generate a Mermaid sequenceDiagram diagram of a typical API request through the system."
ARCHITECTURE_DOC = (
    "Generate an ARCHITECTURE.md document: overview, components and responsibilities, "
    "data flow, key design decisions and extension points."
)

# Security
SECURITY_AUDIT = (
    "Perform a security audit of this codebase. For each finding give severity, OWASP category, "
    "description, location and recommended fix. Check for hardcoded secrets, injection, XSS, "
    "path traversal, insecure crypto, authentication and authorization gaps."
)
VULNERABILITY_REPORT = (
    "Generate a vulnerability report covering dependency vulnerabilities (based on package "
    "versions) and code-level issues, with severity, affected component and remediation."
)
SECRETS_SCAN = (
    "Scan for hardcoded secrets: API keys, passwords, tokens, private keys and connection "
    "strings. For each finding give the file, pattern, type of secret and risk level."
)
THREAT_MODEL = (
    "Generate a Mermaid threat model diagram with trust boundaries as subgraphs, data flows "
    "across boundaries, attack surfaces, threat actors and data stores."
)
REMEDIATION = (
    "Generate a step-by-step remediation guide for the security issues found: the problem, "
    "why it matters, the fix with code examples, and how to verify it. Prioritize by severity."
)

# CI/CD
CI_PIPELINE = (
    "Generate a GitHub Actions CI workflow (ci.yml) for this project: install dependencies, "
    "lint, test and build, with dependency caching."
)
DOCKERFILE_AUDIT = (
    "Audit the Dockerfile shown as relevant code. Report issues with base images, layer "
    "caching, image size, running as root and secrets handling, with concrete fixes."
)
DOCKERFILE_GENERATE = "Generate a production-ready multi-stage Dockerfile for this project."
DOCKER_COMPOSE = "Generate a docker-compose.yml for local development with the services this project needs."
ENV_EXAMPLE = (
    "Generate a .env.example file listing the environment variables this project reads, "
    "with placeholder values and a short comment for each."
)
TAKE_IT_TO_PROD = (
    "Generate a take-it-to-prod.md production readiness guide: deployment options, "
    "configuration, observability, scaling, security hardening and a launch checklist."
)

# Testing
API_TESTS = "Generate API_TESTS.md describing test cases for each detected endpoint, including edge cases."
API_COLLECTION = "Generate a Postman collection (v2.1) for the detected API endpoints."
SHELL_TESTS = "Generate a bash script using curl that smoke-tests each detected API endpoint."
TEST_COVERAGE = (
    "Generate TEST_COVERAGE_REPORT.md estimating which parts of the codebase are covered by "
    "the existing test files and which are not."
)
MISSING_TESTS = "Generate MISSING_TESTS.md listing the most valuable tests that are missing, with examples."

# Performance
PERFORMANCE_AUDIT = (
    "Perform a performance audit: blocking I/O, inefficient queries, N+1 patterns, missing "
    "caching, heavy serialization and hot-path logging, with concrete fixes."
)
PERFORMANCE_SCORE = (
    "Produce performance scores (0-100) for: io, database, caching, concurrency and payloads, "
    "plus an overall score and the top three recommendations."
)

# Collaboration
PR_TEMPLATE = (
    "Generate a PULL_REQUEST_TEMPLATE.md tailored to this project: description, type of "
    "change, stack-specific checklist and related issues."
)
BUG_REPORT = "Generate a GitHub issue template for bug reports (bug_report.md) with YAML frontmatter."
FEATURE_REQUEST = "Generate a GitHub issue template for feature requests (feature_request.md) with YAML frontmatter."
CODE_REVIEW_CHECKLIST = "Generate a CODE_REVIEW_CHECKLIST.md specific to this project's stack."
ONBOARDING = (
    "Generate an ONBOARDING.md guide for new contributors: architecture overview, key files, "
    "how to run and test locally, conventions and a first-contribution path."
)
DEVELOPMENT_WORKFLOW = (
    "Generate a DEVELOPMENT_WORKFLOW.md: branching strategy, commit conventions, PR process, "
    "release process and hotfix procedure."
)

# Health
HEALTH_SUMMARY = (
    "Generate a concise health summary based on the analysis results provided: strengths, "
    "weaknesses, and the top 3 priority actions."
)
