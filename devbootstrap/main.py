"""
devbootstrap — CLI entrypoint.

Usage:
    devbootstrap                 # full bootstrap (same as: devbootstrap run)
    devbootstrap run --skip vscode
    devbootstrap plan
    devbootstrap sanity
    devbootstrap config show

Behaviour is configured through environment variables (ANDROID_API,
BUILD_TOOLS, NDK_VERSION, ANDROID_SDK_DIR, LOG_FILE, ...) or a YAML
settings file passed with --config.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

import click
import yaml

from devbootstrap import __version__
from devbootstrap.core.observability.logging_config import setup_logging

logger = logging.getLogger("devbootstrap")


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="devbootstrap")
@click.option("--verbose", "-v", is_flag=True, help="Show progress output (default).")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="YAML settings file (default: $DEVBOOTSTRAP_CONFIG).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """devbootstrap — provision a game/native development environment."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (console only until a run opens its log file) ──
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "WARNING"
    else:
        level = os.environ.get("DEVBOOTSTRAP_LOG_LEVEL", "INFO")
    ctx.obj["log_level"] = level
    setup_logging(level=level)

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


def _load_settings(ctx: click.Context):
    """Resolve settings, exiting with status 1 on invalid configuration."""
    from devbootstrap.core.config.loader import load_settings
    from devbootstrap.core.errors import ConfigError

    try:
        return load_settings(
            config_path=ctx.obj.get("config_path"),
            environ=ctx.obj.get("environ"),
        )
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _build_context(ctx: click.Context, settings):
    from devbootstrap.core.context import build_context

    return build_context(settings, runner=ctx.obj.get("runner"))


def _tasks(ctx: click.Context):
    from devbootstrap.core.services.tasks import default_tasks

    return ctx.obj.get("tasks") or default_tasks()


def _log_fatal(step: str, command: str, exit_code: int, error: str, log_file: Path) -> None:
    logger.error(
        "[FATAL] step %s: command '%s' (exit=%d)", step, command or "-", exit_code
    )
    if error:
        logger.error("[FATAL] %s", error)
    logger.error("[FATAL] Log: %s", log_file)


# ── run ─────────────────────────────────────────────────────────────


@cli.command()
@click.option("--only", multiple=True, metavar="TASK", help="Run only these tasks.")
@click.option("--skip", multiple=True, metavar="TASK", help="Skip these tasks.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output report as JSON.")
@click.pass_context
def run(ctx: click.Context, only: tuple[str, ...], skip: tuple[str, ...], as_json: bool) -> None:
    """Install everything that is missing (the default command)."""
    from devbootstrap.core.engine.executor import run_tasks
    from devbootstrap.core.errors import ProvisionError
    from devbootstrap.core.services.sanity import sanity_report

    settings = _load_settings(ctx)
    setup_logging(
        level=ctx.obj["log_level"],
        log_file=settings.log_file,
        log_file_level=os.environ.get("DEVBOOTSTRAP_LOG_FILE_LEVEL"),
    )
    logger.info("Bootstrap started. Log: %s", settings.log_file)

    pctx = _build_context(ctx, settings)
    try:
        pctx.runner.ensure_sudo()
        report = run_tasks(_tasks(ctx), pctx, only=only, skip=skip)
    except ProvisionError as e:
        _log_fatal("setup", e.command, e.exit_code, str(e), settings.log_file)
        sys.exit(e.exit_code)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))

    if report.fatal is not None:
        fatal = report.fatal
        _log_fatal(
            fatal.task, fatal.command or "", report.exit_code, fatal.error or "", settings.log_file
        )
        sys.exit(report.exit_code)

    if not as_json:
        click.echo()
        click.secho("Sanity:", bold=True)
        for entry in sanity_report(pctx.runner):
            color = "yellow" if entry.missing else None
            click.secho(f"  {entry.tool}: {entry.value}", fg=color)
        click.echo(f"  LOG: {settings.log_file}")

    if report.failed:
        logger.warning(
            "Best-effort task(s) failed: %s",
            ", ".join(r.task for r in report.results if r.status == "failed"),
        )
    logger.info(
        "Done. Reopen the terminal (or: source %s). If Docker was installed, "
        "log in again for the docker group to apply.",
        settings.profile_file,
    )


# ── plan ────────────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, as_json: bool) -> None:
    """Show which tasks are already satisfied (installs nothing)."""
    from devbootstrap.core.engine.executor import plan_tasks

    settings = _load_settings(ctx)
    entries = plan_tasks(_tasks(ctx), _build_context(ctx, settings))

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    click.secho("\n📋 Provisioning plan", fg="cyan", bold=True)
    for n, entry in enumerate(entries, start=1):
        marker = "✓" if entry.present else "•"
        state = "present" if entry.present else "to install"
        note = " (best effort)" if entry.best_effort else ""
        click.secho(
            f"   {marker} {n}) {entry.task:<9} {entry.title}{note} — {state}",
            fg="green" if entry.present else "yellow",
        )
    click.echo()


# ── sanity ──────────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def sanity(ctx: click.Context, as_json: bool) -> None:
    """Print the version of every provisioned tool."""
    from devbootstrap.adapters.shell.command import CommandRunner
    from devbootstrap.core.services.sanity import sanity_report

    runner = ctx.obj.get("runner") or CommandRunner()
    entries = sanity_report(runner)

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    for entry in entries:
        click.secho(f"{entry.tool}: {entry.value}", fg="yellow" if entry.missing else None)


# ── config ──────────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Settings commands."""


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Print the resolved settings (defaults < YAML file < environment)."""
    settings = _load_settings(ctx)
    data = settings.to_dict()

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return
    click.echo(yaml.safe_dump(data, sort_keys=False), nl=False)


if __name__ == "__main__":
    cli()
