import pytest

from rcs.application.services.compilation_orchestrator import CompilationOrchestrator
from rcs.application.services.exceptions import ResolutionError
from rcs.application.services.invocation_resolver import InvocationResolver
from rcs.domain.artifact import ArtifactHandle
from rcs.domain.model_types import FailureKind, MemberKind
from rcs.domain.models import BuildRequest, InvocationRequest
from rcs.test.fixtures import FAILING_MODULE_SOURCE


def _static(type_name: str, member_name: str, *arguments) -> InvocationRequest:
    return InvocationRequest(
        type_name=type_name, member_name=member_name, is_static=True, arguments=arguments
    )


def _instance(target, member_name: str, *arguments) -> InvocationRequest:
    return InvocationRequest(
        type_name="Calculator",
        member_name=member_name,
        is_static=False,
        arguments=arguments,
        target=target,
    )


@pytest.fixture
def calculator(resolver: InvocationResolver, calculator_artifact: ArtifactHandle):
    """Create a Calculator instance through its class method."""
    result = resolver.invoke(calculator_artifact, _static("Calculator", "create", 0))
    assert result.success, result.failure_detail
    return result.value


def test_static_property_then_instance_property(
    resolver: InvocationResolver, foo_bar_artifact: ArtifactHandle
):
    foo = resolver.invoke(foo_bar_artifact, _static("Bar", "MyFoo"))
    assert foo.success is True
    assert type(foo.value).__name__ == "Foo"

    result = resolver.invoke(
        foo_bar_artifact,
        InvocationRequest(
            type_name="Foo", member_name="MyProperty", is_static=False, target=foo.value
        ),
    )
    assert result.success is True
    assert result.value == 42


def test_missing_member_is_reported(
    resolver: InvocationResolver, foo_bar_artifact: ArtifactHandle
):
    result = resolver.invoke(foo_bar_artifact, _static("Bar", "DoesNotExist"))
    assert result.success is False
    assert result.failure_kind is FailureKind.MEMBER_NOT_FOUND
    assert "DoesNotExist" in result.failure_detail
    assert result.value is None


def test_missing_type_is_reported(
    resolver: InvocationResolver, calculator_artifact: ArtifactHandle
):
    result = resolver.invoke(calculator_artifact, _static("calculator", "create", 1))
    assert result.failure_kind is FailureKind.TYPE_NOT_FOUND


def test_static_method(resolver: InvocationResolver, calculator_artifact: ArtifactHandle):
    result = resolver.invoke(calculator_artifact, _static("Calculator", "square_root", 16))
    assert result.success is True
    assert result.value == 4.0


def test_static_field(resolver: InvocationResolver, calculator_artifact: ArtifactHandle):
    result = resolver.invoke(calculator_artifact, _static("Calculator", "precision"))
    assert result.value == 2


def test_private_static_method_is_reachable(
    resolver: InvocationResolver, calculator_artifact: ArtifactHandle
):
    result = resolver.invoke(calculator_artifact, _static("Calculator", "_hidden_static"))
    assert result.value == "hidden static"


def test_instance_method(resolver: InvocationResolver, calculator_artifact, calculator):
    result = resolver.invoke(calculator_artifact, _instance(calculator, "add", 2, 3))
    assert result.success is True
    assert result.value == 5


def test_instance_members_see_target_state(
    resolver: InvocationResolver, calculator_artifact: ArtifactHandle
):
    created = resolver.invoke(calculator_artifact, _static("Calculator", "create", 10))
    target = created.value

    assert resolver.invoke(calculator_artifact, _instance(target, "add", 1, 2)).value == 13
    assert resolver.invoke(calculator_artifact, _instance(target, "offset")).value == 10
    assert (
        resolver.invoke(calculator_artifact, _instance(target, "description")).value
        == "Calculator(offset=10)"
    )


def test_void_method_returns_none(resolver: InvocationResolver, calculator_artifact):
    target = resolver.invoke(calculator_artifact, _static("Calculator", "create", 4)).value
    result = resolver.invoke(calculator_artifact, _instance(target, "reset"))
    assert result.success is True
    assert result.value is None
    assert target.offset == 0


def test_private_and_mangled_instance_members(
    resolver: InvocationResolver, calculator_artifact, calculator
):
    assert resolver.invoke(calculator_artifact, _instance(calculator, "_internal")).value == "internal"
    assert resolver.invoke(calculator_artifact, _instance(calculator, "__mangled")).value == "mangled"
    assert resolver.invoke(calculator_artifact, _instance(calculator, "__secret")).value == "hidden"


def test_property_ignores_arguments(resolver: InvocationResolver, calculator_artifact, calculator):
    result = resolver.invoke(calculator_artifact, _instance(calculator, "description", 1, 2))
    assert result.success is True
    assert result.value == "Calculator(offset=0)"


def test_static_flag_must_match_member(
    resolver: InvocationResolver, calculator_artifact, calculator
):
    as_static = resolver.invoke(calculator_artifact, _static("Calculator", "add", 1, 2))
    assert as_static.failure_kind is FailureKind.MEMBER_NOT_FOUND

    as_instance = resolver.invoke(calculator_artifact, _instance(calculator, "square_root", 4))
    assert as_instance.failure_kind is FailureKind.MEMBER_NOT_FOUND


def test_wrong_argument_count(resolver: InvocationResolver, calculator_artifact, calculator):
    result = resolver.invoke(calculator_artifact, _instance(calculator, "add", 1))
    assert result.success is False
    assert result.failure_kind is FailureKind.ARITY_MISMATCH


def test_wrong_argument_type(resolver: InvocationResolver, calculator_artifact, calculator):
    result = resolver.invoke(calculator_artifact, _instance(calculator, "add", "1", 2))
    assert result.failure_kind is FailureKind.ARITY_MISMATCH
    assert "expects int" in result.failure_detail


def test_variadic_arguments_are_checked(
    resolver: InvocationResolver, calculator_artifact, calculator
):
    assert resolver.invoke(calculator_artifact, _instance(calculator, "total", 1, 2, 3)).value == 6
    result = resolver.invoke(calculator_artifact, _instance(calculator, "total", 1, "x"))
    assert result.failure_kind is FailureKind.ARITY_MISMATCH


def test_int_is_accepted_for_float(resolver: InvocationResolver, calculator_artifact, calculator):
    result = resolver.invoke(calculator_artifact, _instance(calculator, "scale", 3))
    assert result.value == 6.0


def test_none_passes_argument_checks(
    resolver: InvocationResolver, calculator_artifact, calculator
):
    result = resolver.invoke(calculator_artifact, _instance(calculator, "scale", 3, None))
    assert result.failure_kind is FailureKind.INVOCATION_THREW
    assert result.failure_detail.startswith("TypeError:")


def test_instance_member_without_target(
    resolver: InvocationResolver, calculator_artifact: ArtifactHandle
):
    result = resolver.invoke(calculator_artifact, _instance(None, "add", 1, 2))
    assert result.failure_kind is FailureKind.ARITY_MISMATCH
    assert "requires a target" in result.failure_detail


def test_instance_member_with_foreign_target(
    resolver: InvocationResolver, calculator_artifact: ArtifactHandle
):
    result = resolver.invoke(calculator_artifact, _instance(object(), "add", 1, 2))
    assert result.failure_kind is FailureKind.ARITY_MISMATCH


def test_exception_is_captured_and_resolver_keeps_working(
    resolver: InvocationResolver, calculator_artifact, calculator
):
    failed = resolver.invoke(calculator_artifact, _instance(calculator, "fail"))
    assert failed.success is False
    assert failed.failure_kind is FailureKind.INVOCATION_THREW
    assert failed.failure_detail == "ValueError: boom"

    after = resolver.invoke(calculator_artifact, _instance(calculator, "add", 1, 1))
    assert after.value == 2


def test_system_exit_is_captured(resolver: InvocationResolver, calculator_artifact, calculator):
    result = resolver.invoke(calculator_artifact, _instance(calculator, "leave"))
    assert result.failure_kind is FailureKind.INVOCATION_THREW
    assert result.failure_detail == "SystemExit: 3"


def test_module_body_failure_is_an_invocation_failure(
    orchestrator: CompilationOrchestrator, resolver: InvocationResolver
):
    compiled = orchestrator.compile(BuildRequest(source_text=FAILING_MODULE_SOURCE))
    assert compiled.success is True

    result = resolver.invoke(compiled.artifact, _static("Never", "anything"))
    assert result.failure_kind is FailureKind.INVOCATION_THREW
    assert "module body failed" in result.failure_detail


def test_list_static_members(resolver: InvocationResolver, calculator_artifact: ArtifactHandle):
    members = {
        member.name: member
        for member in resolver.list_members(calculator_artifact, "Calculator", is_static=True)
    }
    assert {"precision", "square_root", "create", "_hidden_static"} <= set(members)
    assert "add" not in members
    assert "__module__" not in members
    assert members["precision"].kind is MemberKind.FIELD
    assert members["create"].kind is MemberKind.METHOD
    assert members["_hidden_static"].is_public is False


def test_list_instance_members(resolver: InvocationResolver, calculator_artifact: ArtifactHandle):
    members = {
        member.name: member
        for member in resolver.list_members(calculator_artifact, "Calculator", is_static=False)
    }
    assert {"add", "scale", "description", "_internal", "_Calculator__mangled"} <= set(members)
    assert "square_root" not in members
    assert members["description"].kind is MemberKind.PROPERTY
    assert members["add"].is_public is True
    assert members["_internal"].is_public is False
    assert all(not member.is_static for member in members.values())


def test_list_members_includes_metaclass_properties(
    resolver: InvocationResolver, foo_bar_artifact: ArtifactHandle
):
    names = [member.name for member in resolver.list_members(foo_bar_artifact, "Bar", True)]
    assert "MyFoo" in names


def test_list_members_of_unknown_type(
    resolver: InvocationResolver, calculator_artifact: ArtifactHandle
):
    with pytest.raises(ResolutionError) as info:
        resolver.list_members(calculator_artifact, "Nope", is_static=True)
    assert info.value.kind is FailureKind.TYPE_NOT_FOUND
