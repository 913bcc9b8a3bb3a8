"""Adapter around the external text-generation CLI.

All report prose, diagrams and suggested config files come from an external
agentic CLI (the GitHub Copilot CLI, or the legacy ``gh copilot``
extension). The process is slow and sometimes unavailable, so the adapter
retries with exponential backoff and never raises: failures are turned into
bracketed placeholder strings that end up inside the generated artifacts.
"""

import logging
import re
import subprocess
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from reposentry.core.sanitize import DEFAULT_MAX_PROMPT_LENGTH, clean_output, prepare_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4.5"
PROBE_TIMEOUT = 10.0

UNAVAILABLE_MESSAGE = (
    "[Generation unavailable: no Copilot CLI found. Install via: npm i -g @github/copilot]"
)
FAILURE_TEMPLATE = "[Generation unavailable: {error}]"
MAX_ERROR_LENGTH = 150

Runner = Callable[..., subprocess.CompletedProcess]


class TextGenerator(Protocol):
    """Anything that can turn a prompt into text without raising."""

    def generate(self, prompt: str) -> str: ...

    def batch_generate(
        self,
        requests: Sequence[tuple[str, str]],
        delay: float | None = None,
    ) -> dict[str, str]: ...


class BackendKind(Enum):
    """External CLIs that can serve generation requests, in probe order."""

    COPILOT_CLI = "copilot-cli"
    GH_COPILOT = "gh-copilot"
    NONE = "none"

    @property
    def command(self) -> list[str]:
        """Base command used to invoke this backend."""
        commands = {
            BackendKind.COPILOT_CLI: ["copilot"],
            BackendKind.GH_COPILOT: ["gh", "copilot"],
        }
        return list(commands.get(self, []))

    @property
    def display_name(self) -> str:
        """Human-friendly backend name."""
        names = {
            BackendKind.COPILOT_CLI: "GitHub Copilot CLI",
            BackendKind.GH_COPILOT: "gh copilot extension (legacy)",
        }
        return names.get(self, "none")


PROBE_ORDER = [BackendKind.COPILOT_CLI, BackendKind.GH_COPILOT]


class BackendCallError(Exception):
    """Raised internally when a single backend attempt fails."""

    pass


@dataclass
class BackendSettings:
    """Retry, timeout and prompt limits for backend calls."""

    max_retries: int = 2
    retry_delay: float = 3.0  # seconds, doubled after every failed attempt
    timeout: float = 180.0
    max_prompt_length: int = DEFAULT_MAX_PROMPT_LENGTH
    batch_delay: float = 1.0
    model: str = DEFAULT_MODEL
    project_dir: Path | None = None


class GenerationBackend:
    """Generation adapter backed by an external CLI process.

    One instance is created per run and handed to every engine. Backend
    discovery happens lazily on first use and is cached on the instance.
    """

    def __init__(
        self,
        settings: BackendSettings | None = None,
        runner: Runner = subprocess.run,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the adapter.

        Args:
            settings: Retry/timeout configuration. Defaults to BackendSettings().
            runner: Callable with the ``subprocess.run`` signature.
            sleep: Callable used for backoff and batch delays.
        """
        self.settings = settings or BackendSettings()
        self.model = self.settings.model
        self._runner = runner
        self._sleep = sleep
        self._backend: BackendKind | None = None

    @property
    def backend(self) -> BackendKind:
        """The detected backend (probed once, then cached)."""
        if self._backend is None:
            self._backend = self._detect_backend()
            logger.debug(f"Generation backend: {self._backend.value}")
        return self._backend

    @property
    def is_available(self) -> bool:
        """Check if any backend CLI is installed."""
        return self.backend is not BackendKind.NONE

    @property
    def backend_name(self) -> str:
        return self.backend.display_name

    def set_model(self, model: str) -> None:
        """Set the model used for all subsequent calls."""
        self.model = model

    def available_models(self) -> list[str]:
        """List model identifiers advertised by the backend's help output."""
        if not self.is_available:
            return []

        try:
            result = self._runner(
                [*self.backend.command, "-h"],
                capture_output=True,
                text=True,
                timeout=PROBE_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"Failed to read backend help: {e}")
            return []

        output = (result.stdout or "") + (result.stderr or "")
        section = re.search(r"--model[\s\S]*?\(choices:\s*([\s\S]*?)\)", output)
        if not section:
            return []
        return re.findall(r'"([^"]+)"', section.group(1))

    def generate(self, prompt: str) -> str:
        """Generate text for a prompt.

        Args:
            prompt: The request text

        Returns:
            Cleaned backend output, or a bracketed placeholder when no backend
            is installed or every attempt failed
        """
        backend = self.backend
        if backend is BackendKind.NONE:
            return UNAVAILABLE_MESSAGE

        shaped = prepare_prompt(prompt, self.settings.max_prompt_length)
        attempts = max(1, self.settings.max_retries)
        last_error = "command failed"

        for attempt in range(1, attempts + 1):
            logger.debug(f"Generation attempt {attempt}/{attempts} via {backend.value}")
            try:
                return self._invoke(backend, shaped)
            except subprocess.TimeoutExpired:
                last_error = f"{backend.display_name} timed out after {self.settings.timeout:g}s"
            except (OSError, subprocess.SubprocessError, BackendCallError) as e:
                last_error = str(e) or e.__class__.__name__

            if attempt < attempts:
                delay = self.settings.retry_delay * 2 ** (attempt - 1)
                logger.debug(f"Retrying in {delay:g}s...")
                self._sleep(delay)

        logger.error(f"Generation failed after {attempts} attempts")
        logger.debug(last_error[:200])
        return FAILURE_TEMPLATE.format(error=last_error[:MAX_ERROR_LENGTH])

    def batch_generate(
        self,
        requests: Sequence[tuple[str, str]],
        delay: float | None = None,
    ) -> dict[str, str]:
        """Run several prompts one after another with a pause between calls.

        Args:
            requests: (key, prompt) pairs
            delay: Seconds to wait between calls (default: settings.batch_delay)

        Returns:
            Mapping of key to generated text
        """
        pause = self.settings.batch_delay if delay is None else delay
        results: dict[str, str] = {}
        for i, (key, prompt) in enumerate(requests):
            results[key] = self.generate(prompt)
            if i < len(requests) - 1 and pause > 0:
                self._sleep(pause)
        return results

    def _detect_backend(self) -> BackendKind:
        for kind in PROBE_ORDER:
            try:
                result = self._runner(
                    [*kind.command, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=PROBE_TIMEOUT,
                )
            except (OSError, subprocess.SubprocessError) as e:
                logger.debug(f"{kind.display_name} not available: {e}")
                continue
            if result.returncode == 0:
                return kind
        return BackendKind.NONE

    def _build_command(self, backend: BackendKind, prompt: str) -> list[str]:
        if backend is BackendKind.COPILOT_CLI:
            # -s prints only the response; the write tool stays excluded so the
            # backend can read the project but never modify it
            return [
                "copilot",
                "-p",
                prompt,
                "-s",
                "--allow-all-tools",
                "--excluded-tools",
                "write",
                "--no-ask-user",
                "--model",
                self.model,
            ]
        return ["gh", "copilot", "-p", prompt]

    def _invoke(self, backend: BackendKind, prompt: str) -> str:
        kwargs: dict[str, Any] = {
            "capture_output": True,
            "text": True,
            "encoding": "utf-8",
            "errors": "replace",
            "timeout": self.settings.timeout,
            "cwd": str(self.settings.project_dir or Path.cwd()),
            "stdin": subprocess.DEVNULL,
        }
        result = self._runner(self._build_command(backend, prompt), **kwargs)
        stdout = result.stdout or ""
        if result.returncode != 0 and not stdout.strip():
            stderr = (result.stderr or "").strip()
            raise BackendCallError(
                stderr or f"{' '.join(backend.command)} exited with code {result.returncode}"
            )

        cleaned = clean_output(stdout)
        if not cleaned:
            raise BackendCallError("Empty response from backend")
        return cleaned
