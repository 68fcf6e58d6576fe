"""
holen — CLI entrypoint.

Invoked as ``holen`` or ``hln`` this is a management CLI:

    holen --help
    holen run jq --version
    holen list
    holen config get strategy.priority

Invoked under any other name (typically a symlink such as ``jq`` →
``holen``) the basename is the utility to run and every argument is
forwarded to it untouched.
"""

from __future__ import annotations

import json
import os
import sys

import click

from holen import __version__
from holen.core.errors import HolenError
from holen.core.observability.logging_config import setup_logging

MANAGEMENT_NAMES = ("holen", "hln")


def _setup_logging_from_env() -> None:
    setup_logging(
        level=os.environ.get("HOLEN_LOG_LEVEL", "WARNING"),
        log_file=os.environ.get("HOLEN_LOG_FILE"),
        log_file_level=os.environ.get("HOLEN_LOG_FILE_LEVEL"),
        json_format=bool(os.environ.get("HOLEN_LOG_JSON")),
    )


@click.group()
@click.version_option(version=__version__, prog_name="holen")
@click.option("--verbose", "-v", is_flag=True, help="Show verbose information.")
@click.option("--quiet", "-q", is_flag=True, help="Show as little information as possible.")
@click.option("--debug", is_flag=True, help="Show debug information (very verbose).")
@click.option("--log-json", "-j", is_flag=True, help="Log in JSON format.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    log_json: bool,
) -> None:
    """holen — fetch and run utilities described by manifests."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("HOLEN_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("HOLEN_LOG_FILE"),
        log_file_level=os.environ.get("HOLEN_LOG_FILE_LEVEL"),
        json_format=log_json or bool(os.environ.get("HOLEN_LOG_JSON")),
        quiet_third_party=not debug,
    )


@cli.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
@click.option(
    "--utility-version",
    "-V",
    "version",
    default=None,
    help="Run this version instead of the manifest's first one.",
)
@click.argument("name")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def run(version: str | None, name: str, args: tuple[str, ...]) -> None:
    """Run utility NAME, forwarding ARGS to it.

    Examples:

        holen run jq --version

        holen run -V 1.5 jq .foo data.json
    """
    from holen.core.use_cases.run import run_utility

    try:
        run_utility(name, list(args), version=version)
    except HolenError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


@cli.command("list")
@click.option("--source", "-s", default=None, help="Only look for manifests in this source.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_utilities(ctx: click.Context, source: str | None, as_json: bool) -> None:
    """List utilities."""
    from holen.core.config.manifest_loader import ManifestFinder
    from holen.core.use_cases.run import default_context

    try:
        context = default_context()
        finder = ManifestFinder.from_config(context.config, context.system)
        names = finder.list(source)
    except HolenError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({"utilities": names}, indent=2))
        return

    if not names:
        if not ctx.obj.get("quiet"):
            click.secho("No utilities found.", fg="yellow")
        return

    for name in names:
        click.echo(name)


cli.add_command(list_utilities, name="ls")


# ── Register sub-command groups from holen/ui/cli/ ────────────────

from holen.ui.cli.config import config
from holen.ui.cli.source import source

cli.add_command(config)
cli.add_command(source)


# ── Process entrypoint ────────────────────────────────────────────


def utility_name(argv0: str) -> str:
    """The utility name encoded in the invoking binary's path."""
    name = os.path.basename(argv0)
    if name.lower().endswith(".exe"):
        name = name[:-4]
    return name


def dispatch(name: str, args: list[str]) -> None:
    """Run utility ``name`` directly, outside the management CLI."""
    from holen.core.use_cases.run import run_utility

    _setup_logging_from_env()
    try:
        run_utility(name, args)
    except HolenError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """Console-script entrypoint: management CLI or utility dispatch."""
    argv = list(sys.argv if argv is None else argv)
    name = utility_name(argv[0])

    if name in MANAGEMENT_NAMES:
        cli.main(args=argv[1:], prog_name=name)
    else:
        dispatch(name, argv[1:])


if __name__ == "__main__":
    cli()
