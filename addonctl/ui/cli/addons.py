"""
CLI commands for add-ons.

Thin wrappers over ``addonctl.core.services.addon_ops``.
"""

from __future__ import annotations

import json
import sys

import click

from addonctl.core.models.settings import Settings
from addonctl.core.services.k8s_cluster import ClusterFacade


def _load_settings(ctx: click.Context) -> Settings:
    """Load settings from --config / auto-detect; exit 1 when invalid."""
    from addonctl.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", bold=True)
        sys.exit(1)


def _resolve_profile(ctx: click.Context, settings: Settings) -> str:
    """--profile wins over addonctl.yml."""
    return ctx.obj.get("profile") or settings.profile


def _make_cluster(settings: Settings) -> ClusterFacade:
    from addonctl.core.services.k8s_cluster import KubectlCluster

    return KubectlCluster(timeout=settings.kubectl_timeout)


@click.group()
def addons() -> None:
    """Add-ons — enable, disable, validate and configure."""


@addons.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_addons(as_json: bool) -> None:
    """List registered add-ons."""
    from addonctl.core.services.addon_ops import ADDONS

    if as_json:
        click.echo(json.dumps([
            {"name": a.name, "description": a.description, "configurable": a.configure is not None}
            for a in ADDONS.values()
        ], indent=2))
        return

    for addon in ADDONS.values():
        marker = " (configurable)" if addon.configure is not None else ""
        click.echo(f"   • {addon.name}{marker} — {addon.description}")


@addons.command("enable")
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def enable(ctx: click.Context, names: tuple[str, ...]) -> None:
    """Enable one or more add-ons; add-ons missing credentials are skipped."""
    from addonctl.core.errors import AddonctlError
    from addonctl.core.services.addon_ops import enable_addons

    settings = _load_settings(ctx)
    profile = _resolve_profile(ctx, settings)

    try:
        batch = enable_addons(
            profile, list(names), cluster=_make_cluster(settings), settings=settings,
        )
    except AddonctlError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    for name, directive in batch.skipped.items():
        click.secho(f"⏭  {name}: {directive}", fg="yellow")
    for name in batch.enabled:
        click.secho(f"✅ The '{name}' addon is enabled", fg="green")


@addons.command("disable")
@click.argument("name")
@click.pass_context
def disable(ctx: click.Context, name: str) -> None:
    """Disable an add-on (credentials are kept)."""
    from addonctl.core.errors import AddonctlError
    from addonctl.core.services.addon_ops import enable_or_disable

    settings = _load_settings(ctx)
    profile = _resolve_profile(ctx, settings)

    try:
        enable_or_disable(
            profile, name, "false", cluster=_make_cluster(settings), settings=settings,
        )
    except AddonctlError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    click.secho(f"🌑 The '{name}' addon is disabled", fg="cyan")


@addons.command("validate")
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def validate(ctx: click.Context, name: str, as_json: bool) -> None:
    """Check whether an add-on may be enabled right now."""
    from addonctl.core.errors import AddonctlError
    from addonctl.core.services.addon_ops import validate_before_enable

    settings = _load_settings(ctx)
    profile = _resolve_profile(ctx, settings)

    try:
        result = validate_before_enable(
            profile, name, cluster=_make_cluster(settings), settings=settings,
        )
    except AddonctlError as e:
        if as_json:
            click.echo(json.dumps({"addon": name, "error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({"addon": name, **result.model_dump(mode="json")}, indent=2))
        return

    if result.allowed:
        click.secho(f"✅ {name} may be enabled on profile {profile}", fg="green")
    else:
        click.secho(f"🚀 {result.message}", fg="yellow")


@addons.command("configure")
@click.argument("name")
@click.pass_context
def configure(ctx: click.Context, name: str) -> None:
    """Interactively configure an add-on (credentials, ingress mappings)."""
    from addonctl.core.errors import AddonctlError
    from addonctl.core.services.addon_ops import configure_addon
    from addonctl.core.services.prompts import ClickPrompter

    settings = _load_settings(ctx)
    profile = _resolve_profile(ctx, settings)

    try:
        result = configure_addon(
            profile,
            name,
            cluster=_make_cluster(settings),
            prompter=ClickPrompter(),
            settings=settings,
        )
    except AddonctlError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if result.failures and not ctx.obj.get("quiet"):
        click.secho(f"⚠️  {len(result.failures)} step(s) failed:", fg="yellow")
        for failure in result.failures:
            click.echo(f"   • {failure}")

    click.secho(f"✅ {name} was successfully configured", fg="green", bold=True)
