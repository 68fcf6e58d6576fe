"""
CLI commands for holen configuration.

Thin wrappers over ``holen.core.config.loader.ConfigClient``.
"""

from __future__ import annotations

import json
import sys

import click

from holen.core.errors import HolenError


def _client():
    from holen.core.config.loader import ConfigClient

    return ConfigClient.default()


@click.group()
def config() -> None:
    """Configuration — get, set, unset and list settings."""


@config.command("get")
@click.argument("key")
def config_get(key: str) -> None:
    """Print the value of KEY (section.key)."""
    try:
        value = _client().get(key)
    except HolenError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(value)


@config.command("set")
@click.option("--system", "system", is_flag=True, help="Write the system-wide config.")
@click.argument("key")
@click.argument("value")
def config_set(system: bool, key: str, value: str) -> None:
    """Set KEY (section.key) to VALUE."""
    try:
        _client().set(key, value, system=system)
    except HolenError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


@config.command("unset")
@click.option("--system", "system", is_flag=True, help="Write the system-wide config.")
@click.argument("key")
def config_unset(system: bool, key: str) -> None:
    """Remove KEY (section.key)."""
    try:
        _client().unset(key, system=system)
    except HolenError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


@config.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def config_list(as_json: bool) -> None:
    """Show every setting from the system and user config."""
    try:
        values = _client().get_all()
    except HolenError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(values, indent=2, sort_keys=True))
        return

    for key in sorted(values):
        click.echo(f"{key} = {values[key]}")
