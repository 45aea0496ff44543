"""
Runtime Compilation Service (RCS): compiles source code at runtime and invokes members of the compiled artifacts by name.
"""

from rcs.application.services.compilation_orchestrator import CompilationOrchestrator
from rcs.application.services.invocation_resolver import InvocationResolver
from rcs.config import Settings, get_settings
from rcs.domain.artifact import ArtifactHandle
from rcs.domain.model_types import FailureKind, MemberKind, OutputMode
from rcs.domain.models import (
    BuildRequest,
    CompileResult,
    Diagnostic,
    InvocationRequest,
    InvocationResult,
    MemberInfo,
)
from rcs.infrastructure.loader import open_artifact

__version__ = "0.1.0"

__all__ = [
    "CompilationOrchestrator",
    "InvocationResolver",
    "Settings",
    "get_settings",
    "ArtifactHandle",
    "FailureKind",
    "MemberKind",
    "OutputMode",
    "BuildRequest",
    "CompileResult",
    "Diagnostic",
    "InvocationRequest",
    "InvocationResult",
    "MemberInfo",
    "open_artifact",
]
