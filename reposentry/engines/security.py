"""Security engine: pattern scan plus generated audit artifacts."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from reposentry import prompts
from reposentry.engines import BaseEngine, EngineInput
from reposentry.health.models import CategoryResult
from reposentry.output.store import ArtifactStore
from reposentry.prompts import OutputKind
from reposentry.scanners.files import read_text

logger = logging.getLogger(__name__)

MAX_SCANNED_FILES = 100
CODE_SUFFIXES = (".ts", ".js", ".py", ".go", ".java", ".rb")

SEVERITY_PENALTIES = {"High": 20, "Medium": 10, "Low": 3}

SECURITY_PATTERNS: list[tuple[str, re.Pattern[str], str]] = [
    ("Hardcoded password", re.compile(r"(?:password|passwd|pwd)\s*[:=]\s*['\"][^'\"]{3,}['\"]", re.I), "High"),
    ("Hardcoded API key", re.compile(r"(?:api[_-]?key|apikey)\s*[:=]\s*['\"][^'\"]{8,}['\"]", re.I), "High"),
    ("Hardcoded token", re.compile(r"(?:token|secret)\s*[:=]\s*['\"][^'\"]{8,}['\"]", re.I), "High"),
    ("SQL injection risk", re.compile(r"(?:query|execute)\s*\(\s*(?:f['\"]|['\"`].*?\$\{)", re.I), "High"),
    ("exec() with interpolated string", re.compile(r"\bexec(?:Sync)?\s*\(\s*['\"`].*?\$\{", re.I), "High"),
    ("Disabled SSL verification", re.compile(r"rejectUnauthorized\s*:\s*false|verify\s*=\s*False"), "High"),
    ("eval() usage", re.compile(r"\beval\s*\("), "Medium"),
    ("MD5 usage", re.compile(r"\bmd5\b", re.I), "Medium"),
    ("CORS wildcard", re.compile(r"cors\s*\(\s*\{[^}]*origin\s*:\s*['\"]\*['\"]", re.I), "Medium"),
    ("Debug logging left in code", re.compile(r"console\.log\s*\("), "Low"),
]

ARTIFACTS: list[tuple[str, str, OutputKind]] = [
    ("security/SECURITY_AUDIT.md", prompts.SECURITY_AUDIT, "markdown"),
    ("security/VULNERABILITY_REPORT.md", prompts.VULNERABILITY_REPORT, "markdown"),
    ("security/secrets-scan.json", prompts.SECRETS_SCAN, "json"),
    ("security/threat-model.mmd", prompts.THREAT_MODEL, "mermaid"),
    ("security/REMEDIATION.md", prompts.REMEDIATION, "markdown"),
]


@dataclass(frozen=True)
class SecurityFinding:
    severity: str
    name: str
    file: str

    def __str__(self) -> str:
        return f"[{self.severity}] {self.name} in {self.file}"


def scan_security_patterns(root: Path, files: list[str]) -> list[SecurityFinding]:
    """Match known-risky patterns in up to MAX_SCANNED_FILES code files.

    Each pattern is reported at most once per file; unreadable files are skipped.
    """
    findings: list[SecurityFinding] = []
    code_files = [f for f in files if f.endswith(CODE_SUFFIXES)][:MAX_SCANNED_FILES]

    for file in code_files:
        content = read_text(root, file)
        if content is None:
            continue
        for name, pattern, severity in SECURITY_PATTERNS:
            if pattern.search(content):
                findings.append(SecurityFinding(severity=severity, name=name, file=file))

    return findings


class SecurityEngine(BaseEngine):
    """Runs a security pattern scan and generates audit artifacts.

    Score starts at 100 and loses 20/10/3 per High/Medium/Low finding,
    15 without a .gitignore and 10 when a .env file is committed.
    """

    @property
    def key(self) -> str:
        return "security"

    @property
    def category(self) -> str:
        return "Security"

    def run(self, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        findings = engine_input.findings
        scan = scan_security_patterns(engine_input.root_dir, findings.scan.files)
        logger.debug(f"Security scan: {len(scan)} findings")

        ctx = engine_input.context
        if scan:
            ctx = ctx.with_context("Quick security scan findings:\n" + "\n".join(str(f) for f in scan))

        for path, task, fmt in ARTIFACTS:
            self._generate(store, path, task, ctx, fmt)

        counts = {severity: sum(1 for f in scan if f.severity == severity) for severity in SEVERITY_PENALTIES}
        score = 100 - sum(SEVERITY_PENALTIES[s] * n for s, n in counts.items())
        if not findings.configs.has_gitignore:
            score -= 15
        if findings.configs.has_env_file:
            score -= 10

        return self._result(
            score,
            f"{len(scan)} pattern findings ({counts['High']}H/{counts['Medium']}M/{counts['Low']}L) | "
            f".gitignore: {'yes' if findings.configs.has_gitignore else 'NO'} | "
            f".env committed: {'YES' if findings.configs.has_env_file else 'no'}",
        )
