"""Git history summaries. Every git failure yields empty data."""

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 15
MAX_OWNED_DIRS = 15

_SHORTLOG_LINE = re.compile(r"^\s*(\d+)\s+(.+)$")


@dataclass(frozen=True)
class Contributor:
    name: str
    commits: int


@dataclass
class GitAnalysis:
    """Summary of a repository's git history."""

    contributors: list[Contributor] = field(default_factory=list)
    recent_commits: list[str] = field(default_factory=list)
    total_commits: int = 0
    tags: list[str] = field(default_factory=list)
    first_commit_date: str = ""
    last_commit_date: str = ""
    directory_ownership: dict[str, str] = field(default_factory=dict)


def git_command(args: list[str], cwd: Path) -> str:
    """Run a git command, returning its stripped stdout or "" on any failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=GIT_TIMEOUT,
            stdin=subprocess.DEVNULL,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"git {' '.join(args)} failed: {e}")
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def _parse_shortlog(output: str) -> list[Contributor]:
    contributors = []
    for line in output.splitlines():
        match = _SHORTLOG_LINE.match(line)
        if match:
            contributors.append(Contributor(name=match.group(2).strip(), commits=int(match.group(1))))
    return contributors


def analyze_git_history(root: Path, recent: int = 30) -> GitAnalysis:
    """Summarize contributors, recent commits, tags and directory ownership."""
    if git_command(["rev-parse", "--is-inside-work-tree"], root) != "true":
        return GitAnalysis()

    log = git_command(["log", "--oneline", f"-{recent}", "--no-merges"], root)
    tags = git_command(["tag", "--sort=-v:refname"], root)
    total = git_command(["rev-list", "--count", "HEAD"], root)

    ownership: dict[str, str] = {}
    top_dirs = git_command(["ls-tree", "-d", "--name-only", "HEAD"], root).splitlines()
    for directory in [d for d in top_dirs if d][:MAX_OWNED_DIRS]:
        owners = _parse_shortlog(git_command(["shortlog", "-sn", "--no-merges", "HEAD", "--", directory], root))
        if owners:
            ownership[directory] = owners[0].name

    return GitAnalysis(
        contributors=_parse_shortlog(git_command(["shortlog", "-sn", "--no-merges", "HEAD"], root))[:10],
        recent_commits=log.splitlines() if log else [],
        total_commits=int(total) if total.isdigit() else 0,
        tags=[t for t in tags.splitlines() if t],
        first_commit_date=next(iter(git_command(["log", "--reverse", "--format=%ci"], root).splitlines()), ""),
        last_commit_date=git_command(["log", "-1", "--format=%ci"], root),
        directory_ownership=ownership,
    )


_REMOTE_NAME = re.compile(r"[/:]([^/:]+?)(?:\.git)?/?$")


def repo_name(root: Path) -> str:
    """Name of the repository: the origin remote's name, else the directory name."""
    remote = git_command(["remote", "get-url", "origin"], root)
    match = _REMOTE_NAME.search(remote) if remote else None
    if match:
        return match.group(1)
    return root.resolve().name or "unknown"
