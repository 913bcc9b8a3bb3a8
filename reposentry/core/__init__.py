"""Generation backend adapter and output sanitization."""

from reposentry.core.backend import (
    UNAVAILABLE_MESSAGE,
    BackendKind,
    BackendSettings,
    GenerationBackend,
    TextGenerator,
)

__all__ = [
    "UNAVAILABLE_MESSAGE",
    "BackendKind",
    "BackendSettings",
    "GenerationBackend",
    "TextGenerator",
]
