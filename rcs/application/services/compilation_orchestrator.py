"""Service turning build requests into compiled artifacts."""

import logging
import re
import uuid
from pathlib import Path
from typing import List, Optional

from rcs.application.interfaces.icompilation_service import ICompilationService
from rcs.application.services.exceptions import BackendFaultError, ConfigurationError
from rcs.config import Settings, get_settings
from rcs.domain.models import (
    BuildRequest,
    CompileResult,
    CompilerParameters,
    Diagnostic,
)
from rcs.infrastructure.backends.base import (
    BackendResults,
    CompilerBackend,
    CompilerError,
)
from rcs.infrastructure.backends.python_backend import PythonCompilerBackend


class CompilationOrchestrator(ICompilationService):
    """Service for compiling source code into loadable artifacts.

    This service:
    - Translates a BuildRequest into backend CompilerParameters
    - Picks the source file or the source text
    - Delegates to the compiler backend
    - Normalizes backend errors into diagnostics and backend faults into
      a failure message

    It keeps no state between calls: every compilation is independent and
    nothing is cached.
    """

    def __init__(
        self,
        backend: Optional[CompilerBackend] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the orchestrator.

        Args:
            backend: Compiler backend to delegate to, the in-process Python
                compiler by default
            settings: Settings to use, the cached application settings by default
        """
        self.settings = settings or get_settings()
        self.backend = backend or PythonCompilerBackend(
            interpreter=self.settings.PYTHON_INTERPRETER
        )
        self.logger = logging.getLogger(__name__)

    def compile(self, request: BuildRequest) -> CompileResult:
        """Compile the source a request points at.

        The source file is used when it is set and exists at call time,
        otherwise the source text is compiled.

        Args:
            request: What to compile and where the artifact goes

        Returns:
            Compilation result; never raises for configuration problems,
            compile errors or backend faults
        """
        source_file = request.source_file
        use_file = source_file is not None and source_file.is_file()

        try:
            parameters = self.build_parameters(request, source_file if use_file else None)
            self.logger.debug("Compiler parameters: %s", parameters)
            if use_file:
                results = self.backend.compile_from_file(parameters, source_file)
            else:
                if not request.source_text:
                    raise ConfigurationError(
                        "No source to compile: source file "
                        f"{source_file or '(none)'} does not exist and source text is empty"
                    )
                results = self.backend.compile_from_source(parameters, request.source_text)
        except ConfigurationError as e:
            self.logger.warning("Invalid build request: %s", e)
            return CompileResult.faulted(str(e))
        except Exception as e:
            self.logger.warning("Compiler backend failed: %s: %s", type(e).__name__, e)
            return CompileResult.faulted(str(e) or type(e).__name__)

        result = self._normalize(results)
        self.logger.info(
            "Compiled %s (%s): %s",
            parameters.module_name,
            parameters.output_mode.value,
            "success" if result.success else f"{len(result.diagnostics)} error(s)",
        )
        return result

    def build_parameters(
        self, request: BuildRequest, source_file: Optional[Path] = None
    ) -> CompilerParameters:
        """Translate a request into backend configuration.

        Args:
            request: Request to translate
            source_file: Source file that will be compiled, if any

        Returns:
            Compiler parameters

        Raises:
            ConfigurationError: If the request cannot be satisfied
        """
        resource_names = [path.name for path in request.embedded_resources]
        duplicates = sorted({name for name in resource_names if resource_names.count(name) > 1})
        if duplicates:
            raise ConfigurationError(
                f"Duplicate embedded resource names: {', '.join(duplicates)}"
            )

        return CompilerParameters(
            module_name=self._module_name(request, source_file),
            output_mode=request.output_mode,
            output_path=request.output_path,
            include_debug_information=True,
            warning_level=self.settings.WARNING_LEVEL,
            treat_warnings_as_errors=False,
            optimize=True,
            embedded_resources=request.embedded_resources,
            referenced_dependencies=request.referenced_dependencies,
        )

    def _module_name(self, request: BuildRequest, source_file: Optional[Path]) -> str:
        if request.module_name is not None:
            if not all(part.isidentifier() for part in request.module_name.split(".")):
                raise ConfigurationError(f"Invalid module name: {request.module_name!r}")
            return request.module_name

        named_after = request.output_path or source_file
        if named_after is None:
            return f"artifact_{uuid.uuid4().hex}"
        name = re.sub(r"\W", "_", named_after.stem)
        if not name or name[0].isdigit():
            name = "_" + name
        return name

    def _normalize(self, results: BackendResults) -> CompileResult:
        errors: List[CompilerError] = []
        for error in results.errors:
            if error.is_warning:
                self.logger.debug(
                    "Ignoring warning %s at line %d: %s",
                    error.error_code,
                    error.line,
                    error.error_text,
                )
            else:
                errors.append(error)

        if errors:
            return CompileResult.failed(
                tuple(
                    Diagnostic(
                        line=error.line,
                        column=error.column,
                        code=error.error_code,
                        message=error.error_text,
                    )
                    for error in errors
                )
            )

        if results.artifact is None:
            fault = BackendFaultError("Compiler backend reported no errors but produced no artifact")
            self.logger.warning(str(fault))
            return CompileResult.faulted(str(fault))

        return CompileResult.succeeded(results.artifact)
