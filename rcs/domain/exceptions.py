"""Exceptions raised by domain objects."""


class RuntimeCompilationError(Exception):
    """Base class for errors raised inside the service."""


class ArtifactLoadError(RuntimeCompilationError):
    """Raised when the body of a compiled module fails while it is loaded."""
