"""
nativebuild — CLI entrypoint.

Usage:
    nativebuild build              # what `npm run build-maplibre` runs
    nativebuild resolve --json
    nativebuild prepack / postpack
    python -m nativebuild.main --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from nativebuild import __version__
from nativebuild.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="nativebuild")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to nativebuild.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """nativebuild — build maplibre-native for the host platform."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get("NBUILD_LOG_FILE"),
        log_file_level=os.environ.get("NBUILD_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve(ctx: click.Context, as_json: bool) -> None:
    """Show the preset, generator and build directory for this host."""
    from nativebuild.core.use_cases.resolve import run_resolve

    result = run_resolve(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    res = result.resolution
    assert res is not None

    click.secho(f"\n🧭 {res.platform}", fg="cyan", bold=True)
    click.echo(f"   Preset:    {res.preset}")
    click.echo(f"   Generator: {res.generator.value}")
    click.echo(f"   Source:    {res.source_dir}")
    origin = "from CMakePresets.json" if res.build_dir_source == "manifest" else "fallback"
    click.echo(f"   Build dir: {res.build_dir} ({origin})")
    if res.build_type:
        click.echo(f"   Config:    {res.build_type}")
    if res.cmake_args:
        click.echo(f"   Args:      {' '.join(res.cmake_args)}")

    if res.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in res.warnings:
            click.echo(f"   • {warn}")

    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--dry-run", is_flag=True, help="Plan but don't execute.")
@click.option("--mock", is_flag=True, help="Use mock adapter (no real execution).")
@click.pass_context
def build(ctx: click.Context, as_json: bool, dry_run: bool, mock: bool) -> None:
    """Clean, configure and build maplibre-native.

    Exits with the failing tool's exit code.

    Examples:

        nativebuild build

        nativebuild build --dry-run
    """
    from nativebuild.core.errors import ExternalToolFailure
    from nativebuild.core.use_cases.build import run_build

    result = run_build(
        config_path=ctx.obj.get("config_path"),
        dry_run=dry_run,
        mock_mode=mock,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        click.secho(f"❌ Error building maplibre-native: {result.error}", fg="red")
        sys.exit(result.exit_code)

    report = result.report
    res = result.resolution
    assert report is not None and res is not None

    if not ctx.obj.get("quiet"):
        mode_label = "[dry-run] " if dry_run else "[mock] " if mock else ""
        click.secho(f"\n🔨 {mode_label}{res.preset} — {res.generator.value}", fg="cyan", bold=True)
        click.echo(f"   Build dir: {res.build_dir}")
        for warn in res.warnings:
            click.secho(f"   ⚠️  {warn}", fg="yellow")
        click.echo()

        for receipt in report.receipts:
            timing = f" ({receipt.duration_ms}ms)" if receipt.duration_ms else ""
            if receipt.ok:
                click.secho(f"   ✓ {receipt.action_id}", fg="green", nl=False)
                click.echo(timing)
            elif receipt.failed:
                click.secho(f"   ✗ {receipt.action_id}", fg="red", nl=False)
                click.echo(timing)
                if receipt.error:
                    for line in receipt.error.split("\n")[:5]:
                        click.echo(f"     │ {line}")
            else:
                click.secho(f"   ⊘ {receipt.action_id} ", fg="yellow", nl=False)
                click.echo(f"({receipt.output})")

        click.echo()

    if report.all_ok:
        if not ctx.obj.get("quiet"):
            click.secho("   maplibre-native build successful!", fg="green", bold=True)
            click.echo()
        return

    try:
        report.raise_for_status()
    except ExternalToolFailure as e:
        click.secho(
            f"   Build failed at '{e.step}' (exit code {e.return_code})",
            fg="red",
            bold=True,
        )
        if e.command:
            click.echo(f"   Command: {' '.join(e.command)}")
        sys.exit(e.return_code)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def presets(ctx: click.Context, as_json: bool) -> None:
    """List the configure presets declared in CMakePresets.json."""
    from nativebuild.core.use_cases.resolve import list_presets

    result = list_presets(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho(f"\n📋 {result.manifest_path}", fg="cyan", bold=True)
    for preset in result.presets:
        binary_dir = preset["binary_dir"] or "(no binaryDir)"
        click.echo(f"   • {preset['name']}  → {binary_dir}")
    click.echo()


def _report_pack(result, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    receipt = result.receipt
    if receipt.failed:
        click.secho(f"❌ {receipt.error}", fg="red")
        sys.exit(1)
    if receipt.ok:
        click.secho(f"✓ {receipt.output}", fg="green")
    else:
        click.echo(f"⊘ {receipt.output}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def prepack(ctx: click.Context, as_json: bool) -> None:
    """Temporarily move maplibre-native/.npmignore aside."""
    from nativebuild.core.use_cases.pack import run_prepack

    _report_pack(run_prepack(config_path=ctx.obj.get("config_path")), as_json)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def postpack(ctx: click.Context, as_json: bool) -> None:
    """Restore maplibre-native/.npmignore."""
    from nativebuild.core.use_cases.pack import run_postpack

    _report_pack(run_postpack(config_path=ctx.obj.get("config_path")), as_json)


if __name__ == "__main__":
    cli()
