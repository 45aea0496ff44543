"""Service resolving members of compiled artifacts by name and calling them."""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

from rcs.application.interfaces.iinvocation_service import IInvocationService
from rcs.application.services.exceptions import ArtifactLoadError, ResolutionError
from rcs.domain.artifact import ArtifactHandle
from rcs.domain.model_types import FailureKind, MemberKind
from rcs.domain.models import InvocationRequest, InvocationResult, MemberInfo


@dataclass
class ResolvedMember:
    """A member located on a type, before it is called."""

    owner: type
    name: str
    kind: MemberKind
    is_static: bool
    raw: Any
    on_metaclass: bool = False


class InvocationResolver(IInvocationService):
    """Calls members of compiled code addressed by type and member name.

    Resolution is a single pass: find the type among the classes the
    artifact defines, find the member on it (static and instance members are
    looked up separately, private and name-mangled ones included), then call
    it. Every failure, including exceptions raised by the invoked code, is
    returned as an InvocationResult.

    Invoked code runs in this process with no timeout.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def invoke(
        self, artifact: ArtifactHandle, request: InvocationRequest
    ) -> InvocationResult:
        """Resolve the addressed member and call it.

        Args:
            artifact: Artifact produced by a compilation
            request: Type, member, static flag, arguments and optional target

        Returns:
            The returned or fetched value, or the failure kind and detail
        """
        try:
            cls = self._resolve_type(artifact, request.type_name)
            member = self._resolve_member(cls, request)
            call, arguments = self._prepare_call(cls, member, request)
        except ArtifactLoadError as e:
            self.logger.info("Artifact %s could not be loaded: %s", artifact.module_name, e)
            return InvocationResult.failure(FailureKind.INVOCATION_THREW, str(e))
        except ResolutionError as e:
            self.logger.info("Cannot invoke %s.%s: %s", request.type_name, request.member_name, e)
            return InvocationResult.failure(e.kind, str(e))

        self.logger.debug("Invoking %s.%s", request.type_name, member.name)
        try:
            value = call(*arguments)
        except (Exception, SystemExit) as e:
            detail = f"{type(e).__name__}: {e}"
            self.logger.info(
                "Invocation of %s.%s raised %s", request.type_name, member.name, detail
            )
            return InvocationResult.failure(FailureKind.INVOCATION_THREW, detail)
        return InvocationResult.returned(value)

    def list_members(
        self, artifact: ArtifactHandle, type_name: str, is_static: bool
    ) -> List[MemberInfo]:
        """List the members of a type that invoke can address.

        Members inherited from ``object`` and special attributes such as
        ``__module__`` are left out.

        Raises:
            ResolutionError: If the type does not exist
            ArtifactLoadError: If the module body raises while loading
        """
        cls = self._resolve_type(artifact, type_name)
        members: List[MemberInfo] = []
        seen = set()

        def collect(namespaces: Sequence[type], from_metaclass: bool) -> None:
            for klass in namespaces:
                if klass is object or klass is type:
                    continue
                for name, raw in vars(klass).items():
                    if name in seen:
                        continue
                    shape = self._classify(raw)
                    if from_metaclass:
                        shape = (MemberKind.PROPERTY, True) if isinstance(raw, property) else None
                    if shape is None or shape[1] != is_static:
                        continue
                    if _is_special(name) and shape[0] is not MemberKind.METHOD:
                        continue
                    seen.add(name)
                    members.append(
                        MemberInfo(
                            name=name,
                            kind=shape[0],
                            is_static=shape[1],
                            is_public=_is_public(name),
                        )
                    )

        collect(cls.__mro__, from_metaclass=False)
        if is_static:
            collect(type(cls).__mro__, from_metaclass=True)
        return members

    def _resolve_type(self, artifact: ArtifactHandle, type_name: str) -> type:
        cls = artifact.get_type(type_name)
        if cls is None:
            raise ResolutionError(
                FailureKind.TYPE_NOT_FOUND,
                f"Type '{type_name}' not found in {artifact.module_name}",
            )
        return cls

    def _resolve_member(self, cls: type, request: InvocationRequest) -> ResolvedMember:
        name = request.member_name
        found = self._lookup(cls, name)
        shape = self._classify(found[2]) if found is not None else None

        if request.is_static:
            if found is not None and shape is not None and shape[1]:
                return ResolvedMember(found[0], found[1], shape[0], True, found[2])
            on_meta = self._lookup(type(cls), name)
            if on_meta is not None and isinstance(on_meta[2], property):
                return ResolvedMember(
                    on_meta[0], on_meta[1], MemberKind.PROPERTY, True, on_meta[2], True
                )
        else:
            instance_kind = found is not None and shape is not None and not shape[1]
            # Data descriptors take precedence over the instance dictionary
            if instance_kind and _is_data_descriptor(found[2]):
                return ResolvedMember(found[0], found[1], shape[0], False, found[2])
            target = request.target
            if isinstance(target, cls):
                state = getattr(target, "__dict__", None)
                if isinstance(state, dict):
                    for candidate in _candidate_names(cls, name):
                        if candidate in state:
                            return ResolvedMember(
                                cls, candidate, MemberKind.FIELD, False, state[candidate]
                            )
            if instance_kind:
                return ResolvedMember(found[0], found[1], shape[0], False, found[2])

        scope = "static" if request.is_static else "instance"
        raise ResolutionError(
            FailureKind.MEMBER_NOT_FOUND,
            f"No {scope} member '{name}' on type '{cls.__qualname__}'",
        )

    def _prepare_call(
        self, cls: type, member: ResolvedMember, request: InvocationRequest
    ) -> Tuple[Callable[..., Any], Tuple[Any, ...]]:
        target = request.target
        if not member.is_static:
            if target is None:
                raise ResolutionError(
                    FailureKind.ARITY_MISMATCH,
                    f"Instance member '{member.name}' of '{cls.__qualname__}' requires a target",
                )
            if not isinstance(target, cls):
                raise ResolutionError(
                    FailureKind.ARITY_MISMATCH,
                    f"Target of type '{type(target).__qualname__}' is not an instance "
                    f"of '{cls.__qualname__}'",
                )

        if member.kind is not MemberKind.METHOD:
            # Accessors take no arguments; whatever was supplied is ignored
            return self._getter(cls, member, target), ()

        method = self._bind(cls, member, target)
        self._check_arguments(member.name, method, request.arguments)
        return method, tuple(request.arguments)

    def _getter(
        self, cls: type, member: ResolvedMember, target: Any
    ) -> Callable[[], Any]:
        raw = member.raw
        if member.on_metaclass:
            return lambda: raw.__get__(cls, type(cls))
        if member.kind is MemberKind.FIELD:
            return lambda: raw
        return lambda: raw.__get__(target, cls)

    def _bind(self, cls: type, member: ResolvedMember, target: Any) -> Callable[..., Any]:
        raw = member.raw
        if isinstance(raw, staticmethod):
            return raw.__func__
        if isinstance(raw, classmethod):
            return raw.__get__(None, cls)
        return raw.__get__(target, cls)

    def _check_arguments(
        self, name: str, method: Callable[..., Any], arguments: Sequence[Any]
    ) -> None:
        try:
            signature = inspect.signature(method)
        except (TypeError, ValueError):
            # No introspectable signature, the call itself will complain
            return

        try:
            bound = signature.bind(*arguments)
        except TypeError as e:
            raise ResolutionError(FailureKind.ARITY_MISMATCH, f"{name}: {e}") from e

        for parameter_name, value in bound.arguments.items():
            parameter = signature.parameters[parameter_name]
            if parameter.kind is inspect.Parameter.VAR_KEYWORD:
                continue
            values = value if parameter.kind is inspect.Parameter.VAR_POSITIONAL else (value,)
            for item in values:
                if not _accepts(parameter.annotation, item):
                    raise ResolutionError(
                        FailureKind.ARITY_MISMATCH,
                        f"{name}: argument '{parameter_name}' expects "
                        f"{parameter.annotation.__name__}, got {type(item).__name__}",
                    )

    def _lookup(self, cls: type, name: str) -> Optional[Tuple[type, str, Any]]:
        for klass in cls.__mro__:
            namespace = vars(klass)
            for candidate in _candidate_names(klass, name):
                if candidate in namespace:
                    return klass, candidate, namespace[candidate]
        return None

    def _classify(self, raw: Any) -> Optional[Tuple[MemberKind, bool]]:
        """Return the member kind and whether it is static, None for nested types."""
        if isinstance(raw, (staticmethod, classmethod)):
            return MemberKind.METHOD, True
        if isinstance(raw, type):
            return None
        if inspect.isfunction(raw):
            return MemberKind.METHOD, False
        if hasattr(type(raw), "__get__"):
            return (MemberKind.METHOD if callable(raw) else MemberKind.PROPERTY), False
        return MemberKind.FIELD, True


def _candidate_names(klass: type, name: str) -> Iterator[str]:
    yield name
    if name.startswith("__") and not name.endswith("__"):
        yield f"_{klass.__name__.lstrip('_')}{name}"


def _is_special(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_public(name: str) -> bool:
    return not name.startswith("_") or _is_special(name)


def _is_data_descriptor(raw: Any) -> bool:
    return hasattr(type(raw), "__set__") or hasattr(type(raw), "__delete__")


def _accepts(annotation: Any, value: Any) -> bool:
    if annotation is inspect.Parameter.empty or value is None:
        return True
    if not isinstance(annotation, type):
        return True
    try:
        if isinstance(value, annotation):
            return True
    except TypeError:
        return True
    if annotation is float:
        return isinstance(value, int)
    if annotation is complex:
        return isinstance(value, (int, float))
    return False
