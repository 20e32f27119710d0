"""
wikisync — CLI entrypoint.

Usage:
    python -m wikisync.main --help
    python -m wikisync.main publish
    python -m wikisync.main rewrite wiki/ --repository owner/repo
    python -m wikisync.main config check
"""

from __future__ import annotations

import json
import os
import signal
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from wikisync import __version__
from wikisync.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="wikisync")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to wikisync.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """wikisync — publish a markdown docs tree as a GitHub Wiki."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("WIKISYNC_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("WIKISYNC_LOG_FILE"),
        log_file_level=os.environ.get("WIKISYNC_LOG_FILE_LEVEL"),
        github_annotations=os.environ.get("GITHUB_ACTIONS") == "true",
    )


def _load(ctx: click.Context, base_url: str | None = None, fail_fast: bool = False):
    """Load config (or exit 1) and apply command-line overrides."""
    from wikisync.core.config.loader import ConfigError, find_config_file, load_config

    config_path: Path | None = ctx.obj.get("config_path")
    if config_path is None:
        config_path = find_config_file()

    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    updates: dict = {}
    if base_url:
        updates["base_url"] = base_url
    if fail_fast:
        updates["fail_fast"] = True
    if updates:
        config = config.model_copy(update=updates)

    return config, config_path


@contextmanager
def _stop_on_signals() -> Iterator[threading.Event]:
    """Set the yielded event on SIGINT/SIGTERM instead of dying mid-write."""
    stop = threading.Event()

    if threading.current_thread() is not threading.main_thread():
        yield stop
        return

    def _handler(signum, frame) -> None:
        click.secho(
            f"\n⚠️  {signal.Signals(signum).name} received, stopping after current file",
            fg="yellow",
            err=True,
        )
        stop.set()

    previous = {sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield stop
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _print_result(ctx: click.Context, result, title: str) -> None:
    """Pretty output shared by publish / stage / rewrite."""
    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        return

    quiet = ctx.obj.get("quiet", False)

    if not quiet:
        click.secho(f"\n📚 {title}", fg="cyan", bold=True)
        if result.source:
            click.echo(f"   Source:  {result.source}")
        if result.wiki_dir:
            click.echo(f"   Wiki:    {result.wiki_dir}")
        if result.base_url:
            click.echo(f"   Images:  {result.base_url}")
        if result.files_copied:
            click.echo(f"   Staged:  {result.files_copied} file(s)")
        click.echo()

    report = result.report
    if report is None:
        return

    for outcome in report.outcomes:
        if outcome.failed:
            click.secho(f"   ✗ {outcome.path}", fg="red", nl=False)
            click.echo(f"  {outcome.error}")
        elif outcome.changed and ctx.obj.get("verbose"):
            click.secho(f"   ✓ {outcome.path}", fg="green")

    if report.cancelled:
        click.secho("   ⊘ Cancelled before all pages were rewritten", fg="yellow")

    color = "green" if report.ok else "yellow" if report.rewritten else "red"
    click.secho(
        f"   Result: {report.rewritten} rewritten, {report.unchanged} unchanged, "
        f"{report.failed} failed",
        fg=color,
        bold=True,
    )
    click.echo()


def _finish(ctx: click.Context, result, as_json: bool, title: str) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(ctx, result, title)

    if not result.ok:
        sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--repository", "-r", default=None, help="Repository as owner/name.")
@click.option("--base-url", default=None, help="Override the wiki image base URL.")
@click.option("--fail-fast", is_flag=True, help="Stop at the first file that fails.")
@click.pass_context
def publish(
    ctx: click.Context,
    as_json: bool,
    repository: str | None,
    base_url: str | None,
    fail_fast: bool,
) -> None:
    """Stage the docs into the wiki directory and rewrite them.

    Examples:

        wikisync publish

        wikisync publish --repository owner/repo --json
    """
    from wikisync.core.use_cases.publish import run_publish

    config, config_path = _load(ctx, base_url=base_url, fail_fast=fail_fast)

    with _stop_on_signals() as stop:
        result = run_publish(config, config_path, repository=repository, stop_event=stop)

    _finish(ctx, result, as_json, "Publish")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def stage(ctx: click.Context, as_json: bool) -> None:
    """Clear the wiki directory (keeping .git) and copy the docs in."""
    from wikisync.core.use_cases.publish import run_stage

    config, config_path = _load(ctx)
    result = run_stage(config, config_path)

    _finish(ctx, result, as_json, "Stage")


@cli.command()
@click.argument("directory", required=False, type=click.Path(file_okay=False))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--repository", "-r", default=None, help="Repository as owner/name.")
@click.option("--base-url", default=None, help="Override the wiki image base URL.")
@click.option("--fail-fast", is_flag=True, help="Stop at the first file that fails.")
@click.pass_context
def rewrite(
    ctx: click.Context,
    directory: str | None,
    as_json: bool,
    repository: str | None,
    base_url: str | None,
    fail_fast: bool,
) -> None:
    """Rewrite images and links of an already staged tree, in place.

    DIRECTORY defaults to the configured wiki directory.
    """
    from wikisync.core.use_cases.publish import run_rewrite

    config, config_path = _load(ctx, base_url=base_url, fail_fast=fail_fast)

    with _stop_on_signals() as stop:
        result = run_rewrite(
            config,
            config_path,
            directory=Path(directory) if directory else None,
            repository=repository,
            stop_event=stop,
        )

    _finish(ctx, result, as_json, "Rewrite")


@cli.group()
def config() -> None:
    """Wiki configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate wikisync.yml and show the effective settings."""
    from wikisync.core.config.loader import (
        ConfigError,
        config_root,
        find_config_file,
        load_config,
        resolve_path,
        resolve_repository,
    )

    config_path: Path | None = ctx.obj.get("config_path") or find_config_file()

    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "errors": [str(e)]}, indent=2))
        else:
            click.secho("❌ Configuration errors:", fg="red", bold=True)
            click.echo(f"   • {e}")
        sys.exit(1)

    repository = resolve_repository(cfg)
    root = config_root(config_path)
    data = {
        "valid": True,
        "config_path": str(config_path) if config_path else None,
        "source": str(resolve_path(root, cfg.source)),
        "wiki_dir": str(resolve_path(root, cfg.wiki_dir)),
        "repository": repository,
        "base_url": cfg.image_base_url(repository),
        "exclude": cfg.excluded_names(),
        "keep": cfg.keep,
        "fail_fast": cfg.fail_fast,
    }

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    if not config_path:
        click.echo("   (no wikisync.yml found, using defaults)")
    click.echo(f"   Source:     {data['source']}")
    click.echo(f"   Wiki:       {data['wiki_dir']}")
    click.echo(f"   Repository: {data['repository']}")
    click.echo(f"   Images:     {data['base_url']}")
    click.echo(f"   Exclude:    {', '.join(data['exclude'])}")
    click.echo()


if __name__ == "__main__":
    cli()
