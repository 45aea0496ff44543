"""
Pytest configuration shared by all RCS tests.
"""

from pathlib import Path

import pytest

from rcs.application.services.compilation_orchestrator import CompilationOrchestrator
from rcs.application.services.invocation_resolver import InvocationResolver
from rcs.config import Settings
from rcs.domain.artifact import ArtifactHandle
from rcs.domain.models import BuildRequest
from rcs.infrastructure.backends.python_backend import PythonCompilerBackend
from rcs.test.fixtures import CALCULATOR_SOURCE, FOO_BAR_SOURCE


@pytest.fixture
def settings() -> Settings:
    """Provide settings that do not depend on the environment."""
    return Settings(
        LOG_LEVEL="DEBUG",
        WARNING_LEVEL=2,
        PYTHON_INTERPRETER="/usr/bin/env python3",
    )


@pytest.fixture
def backend() -> PythonCompilerBackend:
    """Provide the in-process Python compiler backend."""
    return PythonCompilerBackend()


@pytest.fixture
def orchestrator(backend: PythonCompilerBackend, settings: Settings) -> CompilationOrchestrator:
    """Provide an orchestrator over the real backend."""
    return CompilationOrchestrator(backend=backend, settings=settings)


@pytest.fixture
def resolver() -> InvocationResolver:
    """Provide an invocation resolver."""
    return InvocationResolver()


@pytest.fixture
def calculator_artifact(orchestrator: CompilationOrchestrator) -> ArtifactHandle:
    """Compile the calculator sample in memory."""
    result = orchestrator.compile(
        BuildRequest(source_text=CALCULATOR_SOURCE, module_name="calculator")
    )
    assert result.success, result.diagnostics
    return result.artifact


@pytest.fixture
def foo_bar_artifact(orchestrator: CompilationOrchestrator) -> ArtifactHandle:
    """Compile the Foo/Bar sample in memory."""
    result = orchestrator.compile(BuildRequest(source_text=FOO_BAR_SOURCE))
    assert result.success, result.diagnostics
    return result.artifact


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """Create a source file on disk."""
    path = tmp_path / "greeter.py"
    path.write_text(
        "class Greeter:\n"
        "    @staticmethod\n"
        "    def greet(name):\n"
        "        return f'Hello, {name}!'\n",
        encoding="utf-8",
    )
    return path
