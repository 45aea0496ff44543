"""Interface for the compilation service."""

from abc import ABC, abstractmethod

from rcs.domain.models import BuildRequest, CompileResult


class ICompilationService(ABC):
    """Interface for compilation service."""

    @abstractmethod
    def compile(self, request: BuildRequest) -> CompileResult:
        """Compile the source a request points at.

        Args:
            request: What to compile and where the artifact goes

        Returns:
            CompileResult with success=True and an artifact,
            or success=False with diagnostics or a failure message.
        """
        pass
