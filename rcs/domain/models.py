"""Core domain models for the Runtime Compilation Service."""

from pathlib import Path
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from rcs.domain.artifact import ArtifactHandle
from rcs.domain.model_types import FailureKind, MemberKind, OutputMode


class BuildRequest(BaseModel):
    """Immutable input to a single compilation.

    The output mode is never given directly: it follows from which output
    path was supplied, with an executable path taking priority over a
    library path.
    """

    model_config = ConfigDict(frozen=True)

    source_text: Optional[str] = None
    source_file: Optional[Path] = None
    executable_path: Optional[Path] = None
    library_path: Optional[Path] = None
    embedded_resources: Tuple[Path, ...] = ()
    referenced_dependencies: Tuple[str, ...] = ()
    module_name: Optional[str] = None

    @property
    def output_mode(self) -> OutputMode:
        if self.executable_path is not None:
            return OutputMode.ON_DISK_EXECUTABLE
        if self.library_path is not None:
            return OutputMode.ON_DISK_LIBRARY
        return OutputMode.IN_MEMORY_LIBRARY

    @property
    def output_path(self) -> Optional[Path]:
        if self.executable_path is not None:
            return self.executable_path
        return self.library_path


class CompilerParameters(BaseModel):
    """Backend configuration translated from a BuildRequest."""

    model_config = ConfigDict(frozen=True)

    module_name: str
    output_mode: OutputMode = OutputMode.IN_MEMORY_LIBRARY
    output_path: Optional[Path] = None
    include_debug_information: bool = True
    warning_level: int = 2
    treat_warnings_as_errors: bool = False
    optimize: bool = True
    embedded_resources: Tuple[Path, ...] = ()
    referenced_dependencies: Tuple[str, ...] = ()

    @property
    def generate_executable(self) -> bool:
        return self.output_mode is OutputMode.ON_DISK_EXECUTABLE

    @property
    def generate_in_memory(self) -> bool:
        return self.output_mode is OutputMode.IN_MEMORY_LIBRARY


class Diagnostic(BaseModel):
    """One error reported by the compiler backend."""

    model_config = ConfigDict(frozen=True)

    line: int
    column: int
    code: str
    message: str


class CompileResult(BaseModel):
    """Output of one compilation.

    A successful result always carries an artifact and never diagnostics;
    a failed one carries either diagnostics or a failure message.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    diagnostics: Tuple[Diagnostic, ...] = ()
    artifact: Optional[ArtifactHandle] = None
    failure_message: Optional[str] = None

    @model_validator(mode="after")
    def _check_consistency(self) -> "CompileResult":
        if self.success:
            if self.diagnostics or self.failure_message is not None:
                raise ValueError("A successful compilation cannot report errors")
            if self.artifact is None:
                raise ValueError("A successful compilation must produce an artifact")
        elif self.artifact is not None:
            raise ValueError("A failed compilation cannot produce an artifact")
        return self

    @classmethod
    def succeeded(cls, artifact: ArtifactHandle) -> "CompileResult":
        return cls(success=True, artifact=artifact)

    @classmethod
    def failed(cls, diagnostics: Tuple[Diagnostic, ...]) -> "CompileResult":
        return cls(success=False, diagnostics=tuple(diagnostics))

    @classmethod
    def faulted(cls, message: str) -> "CompileResult":
        return cls(success=False, failure_message=message)


class InvocationRequest(BaseModel):
    """Address of a member inside an artifact plus the call arguments.

    ``target`` is the receiver used for instance members and is ignored
    for static ones.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type_name: str
    member_name: str
    is_static: bool = True
    arguments: Tuple[Any, ...] = ()
    target: Optional[Any] = None


class InvocationResult(BaseModel):
    """Outcome of one invocation."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    value: Optional[Any] = None
    failure_kind: Optional[FailureKind] = None
    failure_detail: Optional[str] = None

    @classmethod
    def returned(cls, value: Any) -> "InvocationResult":
        return cls(success=True, value=value)

    @classmethod
    def failure(cls, kind: FailureKind, detail: str) -> "InvocationResult":
        return cls(success=False, failure_kind=kind, failure_detail=detail)


class MemberInfo(BaseModel):
    """Description of a discoverable member of an exported type."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: MemberKind
    is_static: bool
    is_public: bool
