"""Compiler backend built on the interpreter's own compiler."""

import importlib.util
import logging
import threading
import warnings
from pathlib import Path
from types import CodeType
from typing import Dict, List, Sequence

from rcs.application.services.exceptions import BackendFaultError
from rcs.domain.artifact import ArtifactHandle
from rcs.domain.models import CompilerParameters
from rcs.infrastructure.archive import write_archive
from rcs.infrastructure.backends.base import (
    BackendResults,
    CompilerBackend,
    CompilerError,
)
from rcs.infrastructure.loader import register_source, resolve_dependencies


logger = logging.getLogger(__name__)

DEFAULT_INTERPRETER = "/usr/bin/env python3"

# Lowest warning level at which a category is reported.
_WARNING_LEVELS = {
    SyntaxWarning: 1,
    DeprecationWarning: 3,
}
_OTHER_WARNINGS_LEVEL = 4

# catch_warnings swaps the process-wide filters; one compile at a time holds them.
_WARNINGS_LOCK = threading.Lock()


class PythonCompilerBackend(CompilerBackend):
    """Compiles Python source in-process.

    Referenced dependencies are resolved and embedded resources read before
    the source is compiled, so a reference that cannot be imported or a
    missing resource file raises instead of producing diagnostics. Compile
    errors stop at the first one, as the interpreter's compiler does.
    """

    def __init__(self, interpreter: str = DEFAULT_INTERPRETER):
        """Initialize the backend.

        Args:
            interpreter: Command written on the ``#!`` line of executables
        """
        self.interpreter = interpreter

    def compile_from_source(
        self, parameters: CompilerParameters, source: str
    ) -> BackendResults:
        return self._compile(parameters, source, f"<{parameters.module_name}>")

    def compile_from_file(
        self, parameters: CompilerParameters, path: Path
    ) -> BackendResults:
        # decode_source honours PEP 263 coding declarations
        source = importlib.util.decode_source(Path(path).read_bytes())
        return self._compile(parameters, source, str(path))

    def _compile(
        self, parameters: CompilerParameters, source: str, filename: str
    ) -> BackendResults:
        dependencies = resolve_dependencies(parameters.referenced_dependencies)
        resources = self._read_resources(parameters.embedded_resources)

        errors: List[CompilerError] = []
        code = None
        with _WARNINGS_LOCK, warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter(
                "error" if parameters.treat_warnings_as_errors else "always"
            )
            try:
                code = compile(
                    source,
                    filename,
                    "exec",
                    dont_inherit=True,
                    optimize=1 if parameters.optimize else 0,
                )
            except SyntaxError as e:
                errors.append(self._syntax_error(e))
        errors.extend(self._reported_warnings(caught, parameters.warning_level))

        if code is None or any(not error.is_warning for error in errors):
            logger.info(
                "Compilation of %s failed with %d error(s)",
                parameters.module_name,
                sum(1 for error in errors if not error.is_warning),
            )
            return BackendResults(errors=errors)

        if parameters.include_debug_information and filename.startswith("<"):
            register_source(filename, source)

        artifact = self._emit(parameters, code, source, resources, dependencies)
        return BackendResults(errors=errors, artifact=artifact)

    def _emit(
        self,
        parameters: CompilerParameters,
        code: CodeType,
        source: str,
        resources: Dict[str, bytes],
        dependencies: Dict,
    ) -> ArtifactHandle:
        if parameters.generate_in_memory:
            return ArtifactHandle(
                module_name=parameters.module_name,
                code=code,
                resources=resources,
                dependencies=dependencies,
            )

        if parameters.output_path is None:
            raise BackendFaultError(
                f"Output mode {parameters.output_mode.value} requires an output path"
            )
        path = write_archive(
            parameters.output_path,
            parameters.module_name,
            code,
            source if parameters.include_debug_information else None,
            resources,
            references=parameters.referenced_dependencies,
            executable=parameters.generate_executable,
            interpreter=self.interpreter,
        )
        return ArtifactHandle(
            module_name=parameters.module_name,
            code=code,
            path=path,
            executable=parameters.generate_executable,
            resources=resources,
            dependencies=dependencies,
        )

    def _read_resources(self, paths: Sequence[Path]) -> Dict[str, bytes]:
        resources: Dict[str, bytes] = {}
        for path in paths:
            resources[Path(path).name] = Path(path).read_bytes()
        return resources

    def _syntax_error(self, error: SyntaxError) -> CompilerError:
        return CompilerError(
            line=error.lineno or 0,
            column=error.offset or 0,
            error_code=type(error).__name__,
            error_text=error.msg or str(error),
        )

    def _reported_warnings(
        self, caught: Sequence[warnings.WarningMessage], warning_level: int
    ) -> List[CompilerError]:
        reported = []
        for warning in caught:
            level = _WARNING_LEVELS.get(warning.category, _OTHER_WARNINGS_LEVEL)
            if level > warning_level:
                logger.debug("Suppressed %s: %s", warning.category.__name__, warning.message)
                continue
            reported.append(
                CompilerError(
                    line=warning.lineno or 0,
                    column=0,
                    error_code=warning.category.__name__,
                    error_text=str(warning.message),
                    is_warning=True,
                )
            )
        return reported
