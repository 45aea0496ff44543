"""Base class for compiler backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from rcs.domain.artifact import ArtifactHandle
from rcs.domain.models import CompilerParameters


@dataclass
class CompilerError:
    """One problem reported by a backend.

    Attributes:
        line: The line number where the problem occurred (1-based)
        column: The column where the problem occurred (1-based, 0 if unknown)
        error_code: Backend specific code of the problem
        error_text: The message
        is_warning: Whether the problem is only a warning
    """

    line: int
    column: int
    error_code: str
    error_text: str
    is_warning: bool = False


@dataclass
class BackendResults:
    """Raw outcome of one backend compilation."""

    errors: List[CompilerError] = field(default_factory=list)
    artifact: Optional[ArtifactHandle] = None


class CompilerBackend(ABC):
    """Abstract base class for compiler backends.

    Each backend must implement:
    - compile_from_source: For source passed as a string
    - compile_from_file: For source read from a file
    Both may raise when compilation cannot even be attempted.
    """

    @abstractmethod
    def compile_from_source(
        self, parameters: CompilerParameters, source: str
    ) -> BackendResults:
        """Compile source text.

        Args:
            parameters: Backend configuration
            source: Source code

        Returns:
            Errors and warnings reported, plus the artifact when there are no errors
        """
        pass

    @abstractmethod
    def compile_from_file(
        self, parameters: CompilerParameters, path: Path
    ) -> BackendResults:
        """Compile the content of a source file.

        Args:
            parameters: Backend configuration
            path: Existing source file

        Returns:
            Errors and warnings reported, plus the artifact when there are no errors
        """
        pass
