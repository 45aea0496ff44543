"""Reading and writing on-disk artifact archives.

An artifact archive is a zip file holding the compiled module as an
unchecked hash-based ``.pyc``, its source next to it for tracebacks,
embedded resources under ``resources/`` and an ``ARTIFACT.json`` manifest.
Executable archives store the module as ``__main__`` and start with a
``#!`` interpreter line, so both ``python archive`` and running the file
directly work.
"""

import contextlib
import importlib.util
import json
import logging
import marshal
import os
import stat
import tempfile
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from types import CodeType
from typing import Dict, Mapping, Optional, Sequence, Tuple

from rcs.application.services.exceptions import BackendFaultError


logger = logging.getLogger(__name__)

MANIFEST_NAME = "ARTIFACT.json"
RESOURCE_PREFIX = "resources/"
EXECUTABLE_ENTRY = "__main__"

# Flags word of a hash-based pyc whose source is never re-checked.
_UNCHECKED_HASH_FLAGS = 0b01
_PYC_HEADER_SIZE = 16
_ARCHIVE_MODE = 0o644


@dataclass
class ArchiveContents:
    """Everything read back from an artifact archive."""

    module_name: str
    code: CodeType
    executable: bool
    source: Optional[str] = None
    resources: Dict[str, bytes] = field(default_factory=dict)
    references: Tuple[str, ...] = ()


def code_to_pyc(code: CodeType, source: str) -> bytes:
    """Serialize a code object the way the import system expects a .pyc."""
    data = bytearray(importlib.util.MAGIC_NUMBER)
    data.extend(_UNCHECKED_HASH_FLAGS.to_bytes(4, "little"))
    data.extend(importlib.util.source_hash(source.encode("utf-8")))
    data.extend(marshal.dumps(code))
    return bytes(data)


def pyc_to_code(data: bytes, name: str) -> CodeType:
    """Load the code object back from .pyc bytes.

    Raises:
        BackendFaultError: If the bytecode was written by another interpreter
    """
    if data[:4] != importlib.util.MAGIC_NUMBER:
        raise BackendFaultError(f"Bad magic number in {name}")
    return marshal.loads(data[_PYC_HEADER_SIZE:])


def write_archive(
    path: Path,
    module_name: str,
    code: CodeType,
    source: Optional[str],
    resources: Mapping[str, bytes],
    references: Sequence[str] = (),
    executable: bool = False,
    interpreter: str = "/usr/bin/env python3",
) -> Path:
    """Write an artifact archive to path, replacing any existing file.

    Args:
        path: Destination file
        module_name: Name the module is loaded under in-process
        code: Compiled module body
        source: Source text stored for debugging, None to omit it
        resources: Embedded resources keyed by name
        references: Referenced dependencies to resolve when reopened
        executable: Whether to write a runnable archive
        interpreter: Interpreter named on the ``#!`` line of executables

    Returns:
        The path written
    """
    entry = EXECUTABLE_ENTRY if executable else module_name
    manifest = {
        "module": module_name,
        "entry": entry,
        "executable": executable,
        "resources": list(resources),
        "references": list(references),
    }
    source_text = source if source is not None else ""

    path = Path(path)
    # Written next to the destination so the final rename stays on one filesystem
    handle, temp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(handle, "wb") as fd:
            if executable:
                fd.write(b"#!" + interpreter.encode("utf-8") + b"\n")
            with zipfile.ZipFile(fd, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                archive.writestr(entry + ".pyc", code_to_pyc(code, source_text))
                if source is not None:
                    archive.writestr(entry + ".py", source)
                for name, data in resources.items():
                    archive.writestr(RESOURCE_PREFIX + name, data)
                archive.writestr(MANIFEST_NAME, json.dumps(manifest, indent=2))

        mode = _ARCHIVE_MODE
        if executable:
            mode |= stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
        os.chmod(temp_name, mode)
        os.replace(temp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(temp_name)
        raise

    logger.debug("Wrote archive %s (entry=%s, resources=%d)", path, entry, len(resources))
    return path


def read_archive(path: Path) -> ArchiveContents:
    """Read an artifact archive written by write_archive.

    Raises:
        BackendFaultError: If the file is not an artifact archive
    """
    if not zipfile.is_zipfile(path):
        raise BackendFaultError(f"Not an artifact archive: {path}")

    with zipfile.ZipFile(path) as archive:
        names = set(archive.namelist())
        if MANIFEST_NAME not in names:
            raise BackendFaultError(f"Archive {path} has no {MANIFEST_NAME}")
        manifest = json.loads(archive.read(MANIFEST_NAME).decode("utf-8"))
        entry = manifest["entry"]
        code = pyc_to_code(archive.read(entry + ".pyc"), f"{path}:{entry}.pyc")
        source = None
        if entry + ".py" in names:
            source = archive.read(entry + ".py").decode("utf-8")
        resources = {
            name: archive.read(RESOURCE_PREFIX + name) for name in manifest["resources"]
        }

    return ArchiveContents(
        module_name=manifest["module"],
        code=code,
        executable=bool(manifest["executable"]),
        source=source,
        resources=resources,
        references=tuple(manifest["references"]),
    )
