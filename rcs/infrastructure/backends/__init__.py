"""Compiler backends the orchestrator can delegate to."""

from rcs.infrastructure.backends.base import (
    BackendResults,
    CompilerBackend,
    CompilerError,
)
from rcs.infrastructure.backends.python_backend import PythonCompilerBackend

__all__ = [
    "BackendResults",
    "CompilerBackend",
    "CompilerError",
    "PythonCompilerBackend",
]
