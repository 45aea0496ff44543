"""Loadable handle over compiled code."""

import logging
import threading
from pathlib import Path
from types import CodeType, ModuleType
from typing import Dict, List, Mapping, Optional, Tuple

from rcs.domain.exceptions import ArtifactLoadError


logger = logging.getLogger(__name__)


class ArtifactHandle:
    """A compiled, in-process loadable unit of code.

    The handle owns the code object produced by one compilation. The module
    body is executed the first time the module is needed and the resulting
    module is kept for the lifetime of the handle; there is no unload.

    Attributes:
        module_name: Name the compiled module is executed under
        code: Compiled module body
        path: Archive the artifact was written to, None for in-memory artifacts
        executable: Whether the archive on disk is runnable
    """

    def __init__(
        self,
        module_name: str,
        code: CodeType,
        path: Optional[Path] = None,
        executable: bool = False,
        resources: Optional[Mapping[str, bytes]] = None,
        dependencies: Optional[Mapping[str, ModuleType]] = None,
    ):
        """Initialize the handle.

        Args:
            module_name: Name for the compiled module
            code: Code object of the module body
            path: Archive path when the artifact lives on disk
            executable: Whether the archive is an executable
            resources: Embedded resources keyed by name, in embedding order
            dependencies: Resolved referenced modules keyed by the name they
                are bound to in the module namespace
        """
        self.module_name = module_name
        self.code = code
        self.path = path
        self.executable = executable
        self._resources: Dict[str, bytes] = dict(resources or {})
        self._dependencies: Dict[str, ModuleType] = dict(dependencies or {})
        self._module: Optional[ModuleType] = None
        self._lock = threading.Lock()

    @property
    def in_memory(self) -> bool:
        return self.path is None

    @property
    def resource_names(self) -> Tuple[str, ...]:
        return tuple(self._resources)

    @property
    def dependency_names(self) -> Tuple[str, ...]:
        return tuple(self._dependencies)

    def read_resource(self, name: str) -> bytes:
        """Return the content of an embedded resource.

        Raises:
            KeyError: If no resource with that name was embedded
        """
        return self._resources[name]

    @property
    def module(self) -> ModuleType:
        """The loaded module, executing its body on first access.

        Raises:
            ArtifactLoadError: If the module body raises
        """
        with self._lock:
            if self._module is None:
                self._module = self._load()
            return self._module

    def _load(self) -> ModuleType:
        module = ModuleType(self.module_name)
        module.__file__ = self.code.co_filename
        namespace = module.__dict__
        namespace.update(self._dependencies)
        logger.debug("Loading module %s from %s", self.module_name, self.code.co_filename)
        try:
            exec(self.code, namespace)
        except (Exception, SystemExit) as e:
            raise ArtifactLoadError(
                f"Loading module {self.module_name} failed: {type(e).__name__}: {e}"
            ) from e
        return module

    def exported_types(self) -> Dict[str, type]:
        """Map qualified names to the classes the module defines.

        Nested classes are included under their dotted qualified name.
        """
        module = self.module
        types: Dict[str, type] = {}
        pending: List[type] = [
            value
            for value in vars(module).values()
            if isinstance(value, type) and value.__module__ == module.__name__
        ]
        while pending:
            cls = pending.pop(0)
            if cls.__qualname__ in types:
                continue
            types[cls.__qualname__] = cls
            for value in vars(cls).values():
                if (
                    isinstance(value, type)
                    and value.__module__ == module.__name__
                    and value.__qualname__.startswith(cls.__qualname__ + ".")
                ):
                    pending.append(value)
        return types

    def list_types(self) -> List[str]:
        return list(self.exported_types())

    def get_type(self, type_name: str) -> Optional[type]:
        return self.exported_types().get(type_name)

    def __repr__(self) -> str:
        location = str(self.path) if self.path else "memory"
        return f"ArtifactHandle(module_name='{self.module_name}', location='{location}')"
