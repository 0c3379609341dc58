"""
appmodel CLI — ``appmodel inspect``, ``appmodel verify``,
``appmodel descriptor``.

Commands:
    inspect     - Summarise an encoded application model
    verify      - Decode a model and check its integrity digest
    descriptor  - Show what an extension descriptor contributes
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .builder import ApplicationModelBuilder
from .config import ModelSettings, SettingsLoader
from .descriptor import ExtensionDescriptor, read_contribution
from .faults import Fault
from .model import ApplicationModel


def _load_model(ctx: click.Context, file: str, *, verify: Optional[bool] = None) -> ApplicationModel:
    settings: ModelSettings = ctx.obj["settings"]
    check = settings.verify_integrity if verify is None else verify
    try:
        return ApplicationModel.from_bytes(Path(file).read_bytes(), verify=check)
    except Fault as fault:
        click.echo(click.style(f"✗ {fault}", fg="red"), err=True)
        sys.exit(1)


@click.group("appmodel")
@click.version_option(__version__, prog_name="appmodel")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              default=None, help="Settings file (YAML or JSON)")
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]):
    """Inspect and verify application dependency models."""
    overrides = {"log_level": log_level} if log_level else None
    try:
        settings = SettingsLoader.load(config_path, overrides=overrides)
    except Fault as fault:
        raise click.UsageError(str(fault))

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# ── inspect ──────────────────────────────────────────────────────────────


@cli.command("inspect")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
@click.pass_context
def inspect_model(ctx: click.Context, file: str, json_output: bool):
    """
    Summarise an encoded model.

    Examples:
      appmodel inspect build/app.appmodel.json
      appmodel inspect build/app.appmodel.json -j
    """
    model = _load_model(ctx, file)

    if json_output:
        click.echo(json.dumps(model.payload(), indent=ctx.obj["settings"].json_indent))
        return

    click.echo(click.style(f"Application  {model.app_artifact}", fg="cyan", bold=True))
    click.echo(f"Digest       {model.digest}")
    click.echo("─" * 72)

    for label, deps in (
        ("Runtime", model.runtime_deps),
        ("Deployment", model.deployment_deps),
        ("Full deployment", model.full_deployment_deps),
    ):
        click.echo(click.style(f"{label} dependencies ({len(deps)})", fg="green"))
        for dep in deps:
            click.echo(f"  {dep}")

    for label, keys in (
        ("Parent-first", model.parent_first_artifacts),
        ("Runner parent-first", model.runner_parent_first_artifacts),
        ("Lesser-priority", model.lesser_priority_artifacts),
        ("Local project", model.local_project_artifacts),
    ):
        click.echo(click.style(f"{label} ({len(keys)})", fg="green"))
        for key in sorted(keys, key=lambda k: k.sort_key):
            click.echo(f"  {key}")

    if model.platform_properties:
        click.echo(click.style(f"Platform properties ({len(model.platform_properties)})", fg="green"))
        for key in sorted(model.platform_properties):
            click.echo(f"  {key} = {model.platform_properties[key]}")


# ── verify ───────────────────────────────────────────────────────────────


@cli.command("verify")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def verify_model(ctx: click.Context, file: str):
    """
    Decode a model and check its integrity digest.

    Exits with status 1 when the file is not an intact model.
    """
    model = _load_model(ctx, file, verify=True)
    problems = model.check_invariants()
    for problem in problems:
        click.echo(click.style(f"! {problem}", fg="yellow"))
    click.echo(click.style(f"✓ {model.app_artifact} {model.digest}", fg="green"))


# ── descriptor ───────────────────────────────────────────────────────────


@cli.command("descriptor")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--extension", "-e", default=None, help="Extension name (defaults to file stem)")
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
@click.pass_context
def descriptor_cmd(ctx: click.Context, file: str, extension: Optional[str], json_output: bool):
    """
    Show the classification an extension descriptor contributes.

    Examples:
      appmodel descriptor META-INF/quarkus-extension.properties -e quarkus-arc
    """
    path = Path(file)
    descriptor = ExtensionDescriptor.from_properties_text(
        extension or path.stem, path.read_text(encoding="utf-8")
    )

    builder = ApplicationModelBuilder(ctx.obj["settings"])
    contribution, _ = read_contribution(descriptor.properties, descriptor.name)
    try:
        applied = builder.merge_extension_descriptor(descriptor)
    except Fault as fault:
        click.echo(click.style(f"✗ {fault}", fg="red"), err=True)
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(
            {
                "extension": descriptor.name,
                "applied": applied,
                "contribution": contribution.to_dict() if applied else None,
                "diagnostics": builder.diagnostics.to_dict(),
            },
            indent=ctx.obj["settings"].json_indent,
        ))
    elif applied:
        click.echo(click.style(f"Extension {descriptor.name}", fg="cyan", bold=True))
        for key, tokens in contribution.to_dict().items():
            if tokens:
                click.echo(f"  {key}: {', '.join(tokens)}")
        if contribution.is_empty():
            click.echo(click.style("  (no classification entries)", dim=True))
    else:
        click.echo(click.style(builder.diagnostics.format_report(), fg="red"), err=True)

    if not applied:
        sys.exit(1)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
