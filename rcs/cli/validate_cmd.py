"""
Configuration validation command.
"""

import os

import click
from dotenv import dotenv_values

from rcs.config.validation import ValidationResult, validate_config


def print_validation_result(key: str, result: ValidationResult) -> None:
    """Print validation result with appropriate formatting."""
    if result.is_valid:
        click.echo(f"✅ {key}: {result.message}")
    else:
        click.echo(f"❌ {key}: {result.message}")


@click.command()
@click.option("--env-file", default=".env", help="Path to .env file")
def validate(env_file: str) -> None:
    """Validate RCS configuration."""
    if not os.path.exists(env_file):
        click.echo(f"❌ Environment file not found: {env_file}")
        return

    results = validate_config(dict(dotenv_values(env_file)))

    click.echo("\nValidating configuration...")
    click.echo("=" * 40)

    all_valid = True
    for key, result in results.items():
        print_validation_result(key, result)
        if not result.is_valid:
            all_valid = False

    click.echo("=" * 40)
    if all_valid:
        click.echo("\n✨ All configuration settings are valid!")
    else:
        click.echo("\n⚠️  Some configuration settings need attention.")
        click.echo("Please check the messages above and fix any issues.")


if __name__ == "__main__":
    validate()
