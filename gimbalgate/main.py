"""
gimbal-gate — CLI entrypoint.

Usage:
    gimbal-gate --help
    gimbal-gate audit dist --mode production
    gimbal-gate config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from gimbalgate import __version__
from gimbalgate.core.observability.logging_config import configure_cli_logging


@click.group()
@click.version_option(version=__version__, prog_name="gimbal-gate")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to gimbal-gate.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """gimbal-gate — performance quality gate for production builds."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    configure_cli_logging(debug=debug, verbose=verbose, quiet=quiet)


@cli.command()
@click.argument("build_dir", type=click.Path(file_okay=False))
@click.option(
    "--results",
    "results_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Replay a saved audit results JSON instead of running the audit.",
)
@click.option(
    "--stats",
    "stats_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Build stats JSON for the optimization bailout report.",
)
@click.option("--mode", default=None, help="Build mode (default: GIMBAL_GATE_MODE / NODE_ENV).")
@click.option("--bail/--no-bail", default=None, help="Report failures as errors (overrides config).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def audit(
    ctx: click.Context,
    build_dir: str,
    results_path: str | None,
    stats_path: str | None,
    mode: str | None,
    bail: bool | None,
    as_json: bool,
) -> None:
    """Audit a finished build and report failed thresholds.

    Exits with status 1 when any failure was reported as an error.

    Examples:

        gimbal-gate audit dist --mode production

        gimbal-gate audit dist --results gimbal.json --stats stats.json --bail
    """
    from gimbalgate.core.use_cases.gate import run_gate

    quiet = ctx.obj.get("quiet", False)

    def _progress(fraction: float, message: str) -> None:
        if not quiet and not as_json:
            click.secho(f"   [{int(fraction * 100):3d}%] {message}", fg="white", err=True)

    result = run_gate(
        Path(build_dir),
        config_path=ctx.obj.get("config_path"),
        results_path=Path(results_path) if results_path else None,
        stats_path=Path(stats_path) if stats_path else None,
        mode=mode,
        overrides={"bail": bail} if bail is not None else None,
        progress=_progress,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.failed else 0)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if result.skipped:
        if not quiet:
            click.secho(f"⊘ Not a production build (mode: {result.mode or 'unset'}); audits skipped", fg="yellow")
    else:
        for msg in result.errors:
            click.secho(f"   ✗ {msg}", fg="red")
        for msg in result.warnings:
            click.secho(f"   ⚠ {msg}", fg="yellow")
        if not result.errors and not result.warnings:
            click.secho("✅ All audits within thresholds", fg="green", bold=True)

    if result.bailout_report is not None and not quiet:
        click.secho(
            f"💾 Bailout report: {result.bailout_report} ({result.bailouts_written} module(s))",
            fg="cyan",
        )

    if result.failed:
        click.echo()
        click.secho(f"❌ {len(result.errors)} threshold failure(s)", fg="red", bold=True)
        sys.exit(1)


@cli.group()
def config() -> None:
    """Gate configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate gimbal-gate.yml."""
    from gimbalgate.core.config.loader import ConfigError, load_config, locate_config

    config_path = locate_config(ctx.obj.get("config_path")).path
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
        return

    if as_json:
        click.echo(
            json.dumps(
                {
                    "valid": True,
                    "path": str(config_path) if config_path else None,
                    "config": cfg.model_dump(mode="json", by_alias=True),
                },
                indent=2,
            )
        )
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   File: {config_path or '(defaults)'}")
    click.echo(f"   Policy: {'errors (bail)' if cfg.bail else 'warnings'}")
    click.echo(f"   Audits: {', '.join(cfg.options.enabled_audits()) or 'none'}")
    if cfg.bailout_report_enabled:
        click.echo(f"   Bailout report: {cfg.bailout_report_name}")
    click.echo()


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the merged configuration as YAML."""
    import yaml

    from gimbalgate.core.config.loader import ConfigError, load_config

    try:
        cfg = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.echo(yaml.safe_dump(cfg.model_dump(mode="json", by_alias=True), sort_keys=False), nl=False)


# ── Register sub-command groups from gimbalgate/ui/cli/ ───────────

from gimbalgate.ui.cli.bailouts import bailouts  # noqa: E402

cli.add_command(bailouts)


if __name__ == "__main__":
    cli()
