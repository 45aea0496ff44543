"""
Configuration management commands.
"""

from pathlib import Path
from typing import Optional

import click
from dotenv import dotenv_values, set_key

from rcs.config.validation import validate_config


@click.group()
def config() -> None:
    """Manage RCS configuration."""
    pass


@config.command()
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--env-file", default=".env", help="Path to .env file")
def set(key: Optional[str], value: Optional[str], env_file: str) -> None:
    """Set configuration value."""
    if not key or not value:
        click.echo("Usage: rcs config set KEY VALUE")
        return

    validation = validate_config({key: value})[key]
    if not validation.is_valid:
        click.echo(f"❌ Invalid value for {key}: {validation.message}")
        return

    try:
        Path(env_file).touch(exist_ok=True)
        set_key(env_file, key, value)
        click.echo(f"✅ Successfully set {key}")
    except OSError as e:
        click.echo(f"❌ Error setting {key}: {str(e)}")


@config.command()
@click.argument("key", required=False)
@click.option("--env-file", default=".env", help="Path to .env file")
def get(key: Optional[str], env_file: str) -> None:
    """Get configuration value(s)."""
    if not Path(env_file).exists():
        click.echo("❌ Environment file not found")
        return

    config_values = dotenv_values(env_file)
    if not config_values:
        click.echo("No configuration values found")
        return

    if key:
        if key not in config_values:
            click.echo("Key not found")
            return
        click.echo(f"{key}={config_values[key]}")
    else:
        for k, v in config_values.items():
            click.echo(f"{k}={v}")


if __name__ == "__main__":
    config()
