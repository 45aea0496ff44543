"""
Main CLI module for RCS.
"""

from pathlib import Path
from typing import Optional, Tuple

import click

from rcs import __version__
from rcs.application.services.compilation_orchestrator import CompilationOrchestrator
from rcs.application.services.exceptions import ArtifactLoadError, ResolutionError
from rcs.application.services.invocation_resolver import InvocationResolver
from rcs.cli.config_cmd import config
from rcs.cli.validate_cmd import validate
from rcs.config import get_settings
from rcs.domain.models import BuildRequest, CompileResult, Diagnostic, InvocationRequest
from rcs.infrastructure.logging_config import configure_logging


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Render a diagnostic the way the editor console shows it."""
    return (
        f"Line number {diagnostic.line}, Column number {diagnostic.column}, "
        f"Error Number: {diagnostic.code}, '{diagnostic.message};"
    )


def report_failure(result: CompileResult) -> None:
    click.echo("Error occurred during compilation :")
    if result.failure_message is not None:
        click.echo(result.failure_message)
    for diagnostic in result.diagnostics:
        click.echo(format_diagnostic(diagnostic))


def compile_in_memory(source: str) -> CompileResult:
    return CompilationOrchestrator().compile(BuildRequest(source_file=Path(source)))


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level: Optional[str]) -> None:
    """Runtime Compilation Service (RCS) command line interface."""
    settings = get_settings()
    configure_logging(log_level or settings.LOG_LEVEL, settings.LOG_FILE)


cli.add_command(validate, name="validate")
cli.add_command(config, name="config")


@cli.command()
def version() -> None:
    """Show RCS version information."""
    click.echo(f"RCS version {__version__}")


@cli.command(name="compile")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--exe", "exe_file", type=click.Path(dir_okay=False), help="Write a runnable archive")
@click.option("--lib", "library_file", type=click.Path(dir_okay=False), help="Write a library archive")
@click.option("--resource", "resources", multiple=True, type=click.Path(), help="Embed a resource file")
@click.option("--reference", "references", multiple=True, help="Referenced module or path")
@click.option("--module-name", default=None, help="Name of the compiled module")
def compile_command(
    source: str,
    exe_file: Optional[str],
    library_file: Optional[str],
    resources: Tuple[str, ...],
    references: Tuple[str, ...],
    module_name: Optional[str],
) -> None:
    """Compile a source file."""
    request = BuildRequest(
        source_file=Path(source),
        executable_path=Path(exe_file) if exe_file else None,
        library_path=Path(library_file) if library_file else None,
        embedded_resources=tuple(Path(resource) for resource in resources),
        referenced_dependencies=references,
        module_name=module_name,
    )
    result = CompilationOrchestrator().compile(request)
    if not result.success:
        report_failure(result)
        raise SystemExit(1)

    click.echo("Code compiled successfully")
    if result.artifact.path is not None:
        click.echo(f"Artifact written to {result.artifact.path}")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
def types(source: str) -> None:
    """List the types a source file defines."""
    result = compile_in_memory(source)
    if not result.success:
        report_failure(result)
        raise SystemExit(1)

    try:
        names = result.artifact.list_types()
    except ArtifactLoadError as e:
        click.echo(f"❌ {e}")
        raise SystemExit(1)
    for name in names:
        click.echo(name)


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.argument("type_name")
@click.option("--static/--instance", "is_static", default=True, help="Member scope to list")
def members(source: str, type_name: str, is_static: bool) -> None:
    """List the members of a type defined in a source file."""
    result = compile_in_memory(source)
    if not result.success:
        report_failure(result)
        raise SystemExit(1)

    try:
        found = InvocationResolver().list_members(result.artifact, type_name, is_static)
    except (ArtifactLoadError, ResolutionError) as e:
        click.echo(f"❌ {e}")
        raise SystemExit(1)
    for member in found:
        visibility = "public" if member.is_public else "non-public"
        click.echo(f"{member.name} ({member.kind.value}, {visibility})")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.argument("type_name")
@click.argument("member_name")
@click.argument("arguments", nargs=-1)
def run(source: str, type_name: str, member_name: str, arguments: Tuple[str, ...]) -> None:
    """Compile a source file and invoke a static member of one of its types.

    Extra arguments are passed to the member as strings.
    """
    result = compile_in_memory(source)
    if not result.success:
        report_failure(result)
        raise SystemExit(1)

    click.echo("Code compiled successfully")
    click.echo(f"Invoking {member_name}")
    outcome = InvocationResolver().invoke(
        result.artifact,
        InvocationRequest(
            type_name=type_name,
            member_name=member_name,
            is_static=True,
            arguments=arguments,
        ),
    )
    if not outcome.success:
        click.echo(f"❌ {outcome.failure_kind.value}: {outcome.failure_detail}")
        raise SystemExit(1)
    if outcome.value is not None:
        click.echo(repr(outcome.value))


if __name__ == "__main__":
    cli()
