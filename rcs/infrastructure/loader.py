"""Resolution of referenced dependencies and reopening of written artifacts."""

import importlib
import importlib.util
import linecache
import logging
import sys
import threading
import zipfile
from contextlib import contextmanager
from pathlib import Path
from types import ModuleType
from typing import Dict, Iterator, Sequence, Tuple

from rcs.domain.artifact import ArtifactHandle
from rcs.infrastructure.archive import read_archive


logger = logging.getLogger(__name__)

_IMPORT_LOCK = threading.Lock()


def register_source(filename: str, source: str) -> None:
    """Make source lines of a code object without a real file visible to tracebacks."""
    linecache.cache[filename] = (
        len(source),
        None,
        source.splitlines(True),
        filename,
    )


def resolve_dependency(reference: str) -> Tuple[str, ModuleType]:
    """Resolve one referenced dependency.

    A reference is either a path to a ``.py`` file, a path to an artifact
    archive, or an importable module name. Dotted module names are bound
    under their top-level package, like an ``import`` statement does.

    Returns:
        The name to bind the module under and the module itself

    Raises:
        ImportError: If the reference cannot be resolved
    """
    candidate = Path(reference)
    if candidate.suffix == ".py" and candidate.is_file():
        return candidate.stem, load_source_file(candidate)

    if candidate.is_file() and zipfile.is_zipfile(candidate):
        handle = open_artifact(candidate)
        return handle.module_name, handle.module

    with _no_bytecode_cache():
        importlib.import_module(reference)
        top_level = reference.partition(".")[0]
        return top_level, importlib.import_module(top_level)


def load_source_file(path: Path) -> ModuleType:
    """Execute a .py file into a fresh module without touching __pycache__."""
    source = importlib.util.decode_source(path.read_bytes())
    code = compile(source, str(path), "exec", dont_inherit=True)
    module = ModuleType(path.stem)
    module.__file__ = str(path)
    exec(code, module.__dict__)
    return module


@contextmanager
def _no_bytecode_cache() -> Iterator[None]:
    # Imports of source modules would otherwise write .pyc files
    with _IMPORT_LOCK:
        previous = sys.dont_write_bytecode
        sys.dont_write_bytecode = True
        try:
            yield
        finally:
            sys.dont_write_bytecode = previous


def resolve_dependencies(references: Sequence[str]) -> Dict[str, ModuleType]:
    """Resolve every reference in order.

    Raises:
        ImportError: On the first reference that cannot be resolved
    """
    resolved: Dict[str, ModuleType] = {}
    for reference in references:
        name, module = resolve_dependency(reference)
        logger.debug("Resolved reference %s as %s", reference, name)
        resolved[name] = module
    return resolved


def open_artifact(path: Path) -> ArtifactHandle:
    """Reopen an artifact previously written to disk.

    Referenced dependencies recorded in the archive are resolved again.
    """
    contents = read_archive(path)
    if contents.source is not None and contents.code.co_filename.startswith("<"):
        register_source(contents.code.co_filename, contents.source)
    return ArtifactHandle(
        module_name=contents.module_name,
        code=contents.code,
        path=Path(path),
        executable=contents.executable,
        resources=contents.resources,
        dependencies=resolve_dependencies(contents.references),
    )
