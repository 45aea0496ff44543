from enum import Enum


class OutputMode(Enum):
    """
    Enumeration of the artifact kinds a compilation can produce.

    - IN_MEMORY_LIBRARY: The compiled module only lives in the current process.
    - ON_DISK_LIBRARY: An importable archive is written to the output path.
    - ON_DISK_EXECUTABLE: A runnable archive is written to the output path.
    """

    IN_MEMORY_LIBRARY = "in_memory_library"
    ON_DISK_LIBRARY = "on_disk_library"
    ON_DISK_EXECUTABLE = "on_disk_executable"


class FailureKind(Enum):
    """Reasons an invocation can fail."""

    TYPE_NOT_FOUND = "type_not_found"
    MEMBER_NOT_FOUND = "member_not_found"
    ARITY_MISMATCH = "arity_mismatch"
    INVOCATION_THREW = "invocation_threw"


class MemberKind(Enum):
    """Shapes of a member the resolver knows how to call."""

    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
