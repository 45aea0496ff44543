"""Custom exceptions for the Runtime Compilation Service."""

from rcs.domain.exceptions import ArtifactLoadError, RuntimeCompilationError
from rcs.domain.model_types import FailureKind

__all__ = [
    "RuntimeCompilationError",
    "ConfigurationError",
    "BackendFaultError",
    "ArtifactLoadError",
    "ResolutionError",
]


class ConfigurationError(RuntimeCompilationError):
    """Raised when a build request cannot be satisfied.

    This never reaches the backend: e.g. there is neither a source file
    nor any source text to compile.
    """


class BackendFaultError(RuntimeCompilationError):
    """Raised when the compiler backend fails before producing diagnostics."""


class ResolutionError(RuntimeCompilationError):
    """Raised when a type or member cannot be resolved or called as addressed."""

    def __init__(self, kind: FailureKind, message: str):
        super().__init__(message)
        self.kind = kind
