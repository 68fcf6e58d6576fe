"""
CLI commands for git sources — vendored checkouts of a repository.

Thin wrappers over ``holen.adapters.vcs.git.GitSource``. Checkouts
land in ``<data_path>/sources`` unless ``--base-dir`` says otherwise.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from holen.core.errors import HolenError


def _git_source(name: str, spec: str):
    from holen.adapters.shell.runner import DefaultRunner
    from holen.adapters.system import DefaultSystem
    from holen.adapters.vcs.git import GitSource

    return GitSource(DefaultSystem(), DefaultRunner(), name, spec)


def _base_dir(base_dir: str | None) -> Path:
    if base_dir:
        return Path(base_dir)

    from holen.adapters.system import DefaultSystem

    return DefaultSystem().data_path() / "sources"


@click.group()
def source() -> None:
    """Git sources — clone, update and remove checkouts."""


@source.command()
@click.argument("name")
@click.argument("spec")
@click.option("--base-dir", default=None, help="Directory holding checkouts.")
def update(name: str, spec: str, base_dir: str | None) -> None:
    """Clone SPEC as NAME, or pull it if already cloned.

    SPEC is owner/repo (GitHub), host/owner/repo, or a path/URL.
    """
    try:
        gs = _git_source(name, spec)
        target = _base_dir(base_dir)
        target.mkdir(parents=True, exist_ok=True)
        gs.update(target)
    except (HolenError, OSError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    click.secho(f"✅ {name} up to date in {gs.checkout_path(target)}", fg="green")


@source.command()
@click.argument("name")
@click.option("--base-dir", default=None, help="Directory holding checkouts.")
def delete(name: str, base_dir: str | None) -> None:
    """Remove the checkout of NAME."""
    try:
        # removal only needs the name
        _git_source(name, name).delete(_base_dir(base_dir))
    except HolenError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


@source.command()
@click.argument("name")
@click.argument("spec")
def info(name: str, spec: str) -> None:
    """Show where SPEC would be cloned from."""
    click.echo(_git_source(name, spec).info())
