"""
Configuration validation module.
"""

import shlex
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional


@dataclass
class ValidationResult:
    """Result of a configuration validation."""

    is_valid: bool
    message: str


def validate_log_level(level: str) -> ValidationResult:
    """Validate log level."""
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if level.upper() in valid_levels:
        return ValidationResult(True, "Valid log level")
    return ValidationResult(
        False, f"Invalid log level. Must be one of: {', '.join(valid_levels)}"
    )


def validate_log_file(path: str) -> ValidationResult:
    """Validate log file path."""
    log_dir = Path(path).parent
    if not log_dir.exists():
        return ValidationResult(False, f"Log directory does not exist: {log_dir}")
    return ValidationResult(True, "Valid log file path")


def validate_warning_level(level: str) -> ValidationResult:
    """Validate compiler warning level."""
    try:
        value = int(level)
    except ValueError:
        return ValidationResult(False, f"Warning level must be an integer: {level}")
    if not 0 <= value <= 4:
        return ValidationResult(False, "Invalid warning level. Must be between 0 and 4")
    return ValidationResult(True, "Valid warning level")


def validate_interpreter(command: str) -> ValidationResult:
    """Validate the interpreter written on the first line of executables."""
    try:
        parts = shlex.split(command)
    except ValueError as e:
        return ValidationResult(False, f"Invalid interpreter command: {str(e)}")
    if not parts:
        return ValidationResult(False, "Interpreter command is empty")
    program = parts[-1] if Path(parts[0]).name == "env" and len(parts) > 1 else parts[0]
    if shutil.which(program) is None:
        return ValidationResult(False, f"Interpreter not found: {program}")
    return ValidationResult(True, "Valid interpreter")


VALIDATORS = {
    "LOG_LEVEL": validate_log_level,
    "LOG_FILE": validate_log_file,
    "WARNING_LEVEL": validate_warning_level,
    "PYTHON_INTERPRETER": validate_interpreter,
}


def validate_config(config: Dict[str, Optional[str]]) -> Dict[str, ValidationResult]:
    """Validate all configuration settings.

    Unset values are skipped; unknown keys are reported as invalid.
    """
    results = {}

    for key, value in config.items():
        if key not in VALIDATORS:
            results[key] = ValidationResult(False, f"Invalid configuration key: {key}")
        elif value is not None:
            results[key] = VALIDATORS[key](value)

    return results
