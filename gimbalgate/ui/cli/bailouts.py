"""
CLI commands for optimization bailout reports.

Thin wrappers over ``gimbalgate.core.services.bailouts``.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click


def _load_records(stats_file: str):
    """Load a stats file and return the filtered bailout records."""
    from gimbalgate.core.config.loader import ConfigError
    from gimbalgate.core.services.bailouts import collect_bailouts
    from gimbalgate.core.use_cases.gate import load_stats

    try:
        stats = load_stats(Path(stats_file))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    return collect_bailouts(stats)


@click.group()
def bailouts() -> None:
    """Bailouts — modules the build tool could not optimize."""


@bailouts.command("list")
@click.argument("stats_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_bailouts(stats_file: str, as_json: bool) -> None:
    """Show the filtered bailouts found in a stats file."""
    records = _load_records(stats_file)

    if as_json:
        click.echo(json.dumps([r.as_triple() for r in records], indent=2))
        return

    if not records:
        click.secho("✅ No unexpected optimization bailouts", fg="green")
        return

    click.secho(f"🔍 Optimization bailouts: {len(records)} module(s)", fg="cyan", bold=True)
    for record in records:
        click.echo(f"\n   • {record.name}")
        for reason in record.reasons:
            click.echo(f"     │ {reason}")
    click.echo()


@bailouts.command("write")
@click.argument("stats_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    default=None,
    help="Report file (default: optimizationBailout from config, else optimization-bailouts.json).",
)
@click.pass_context
def write_bailouts(ctx: click.Context, stats_file: str, output: str | None) -> None:
    """Write the filtered bailout report for a stats file."""
    from gimbalgate.core.config.loader import ConfigError, load_config, locate_config
    from gimbalgate.core.models.config import DEFAULT_BAILOUT_REPORT
    from gimbalgate.core.persistence.bailout_report import BailoutReportWriter
    from gimbalgate.core.services.bailouts import resolve_report_path

    if output is None:
        # configured names are relative to the project, like in `audit`
        source = locate_config(ctx.obj.get("config_path"))
        try:
            config = load_config(source.path)
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)
        report = resolve_report_path(config.bailout_report_name or DEFAULT_BAILOUT_REPORT, source.project_dir)
    else:
        report = Path(output)

    records = _load_records(stats_file)
    writer = BailoutReportWriter(report)
    try:
        path = asyncio.run(writer.write(records))
    except OSError as e:
        click.secho(f"❌ Cannot write {writer.path}: {e}", fg="red")
        sys.exit(1)

    click.secho(f"💾 {len(records)} module(s) written to {path}", fg="cyan")
