"""Interface for the invocation service."""

from abc import ABC, abstractmethod
from typing import List

from rcs.domain.artifact import ArtifactHandle
from rcs.domain.models import InvocationRequest, InvocationResult, MemberInfo


class IInvocationService(ABC):
    """Interface for calling members of compiled artifacts by name."""

    @abstractmethod
    def invoke(
        self, artifact: ArtifactHandle, request: InvocationRequest
    ) -> InvocationResult:
        """Resolve the addressed member and call it.

        Args:
            artifact: Artifact produced by a compilation
            request: Type, member, static flag and arguments

        Returns:
            InvocationResult with the returned value,
            or success=False with the failure kind and detail.
        """
        pass

    @abstractmethod
    def list_members(
        self, artifact: ArtifactHandle, type_name: str, is_static: bool
    ) -> List[MemberInfo]:
        """List the members of a type the resolver can address."""
        pass
