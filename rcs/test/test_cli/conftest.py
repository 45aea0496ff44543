"""
Pytest configuration for CLI tests.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Generator

import pytest

from rcs.config import get_settings
from rcs.test.fixtures import CALCULATOR_SOURCE, MISSING_COLON_SOURCE, PROGRAM_SOURCE


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch) -> Generator[None, None, None]:
    """Run each command without ambient settings or leftover log handlers."""
    original_env: Dict[str, str] = dict(os.environ)
    for var in ["LOG_LEVEL", "LOG_FILE", "WARNING_LEVEL", "PYTHON_INTERPRETER"]:
        os.environ.pop(var, None)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    handlers = list(logging.getLogger().handlers)
    level = logging.getLogger().level

    yield

    logging.getLogger().handlers = handlers
    logging.getLogger().setLevel(level)
    get_settings.cache_clear()
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def program_file(tmp_path: Path) -> Path:
    """Create a source file with a nested Program type."""
    path = tmp_path / "program.py"
    path.write_text(PROGRAM_SOURCE)
    return path


@pytest.fixture
def calculator_file(tmp_path: Path) -> Path:
    """Create the calculator source file."""
    path = tmp_path / "calculator.py"
    path.write_text(CALCULATOR_SOURCE)
    return path


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    """Create a source file that does not compile."""
    path = tmp_path / "broken.py"
    path.write_text(MISSING_COLON_SOURCE)
    return path


@pytest.fixture
def test_env_file(tmp_path: Path) -> Path:
    """Create a test environment file."""
    env_file = tmp_path / "test.env"
    env_content = """
    LOG_LEVEL=INFO
    WARNING_LEVEL=3
    LOG_FILE=logs/test.log
    """
    env_file.write_text(env_content.strip())
    return env_file
