"""
addonctl — CLI entrypoint.

Usage:
    python -m addonctl.main --help
    addonctl addons configure ngrok
    addonctl -p dev addons enable ngrok
    addonctl config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from addonctl.core.observability.logging_config import setup_logging

from addonctl import __version__


@click.group()
@click.version_option(version=__version__, prog_name="addonctl")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (includes kubectl commands).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to addonctl.yml (default: auto-detect).",
)
@click.option(
    "--profile",
    "-p",
    default=None,
    help="Cluster profile (kube context) to act on (default: from addonctl.yml, else minikube).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    profile: str | None,
) -> None:
    """addonctl — configure and gate add-ons on a local Kubernetes cluster."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["profile"] = profile

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("ADDONCTL_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("ADDONCTL_LOG_FILE"),
        log_file_level=os.environ.get("ADDONCTL_LOG_FILE_LEVEL"),
        trace_kubectl=debug,
    )


@cli.group()
def config() -> None:
    """addonctl configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate addonctl.yml and show the resolved settings."""
    from addonctl.core.config.loader import ConfigError, find_settings_file, load_settings
    from addonctl.core.services.k8s_common import _kubectl_available

    config_path: Path | None = ctx.obj.get("config_path")
    source = config_path or find_settings_file()

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", bold=True)
        sys.exit(1)

    kubectl = _kubectl_available()

    if as_json:
        click.echo(json.dumps({
            "valid": True,
            "source": str(source) if source else None,
            "settings": settings.model_dump(),
            "kubectl": kubectl,
        }, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   Source:  {source if source else '(defaults)'}")
    click.echo(f"   Profile: {ctx.obj.get('profile') or settings.profile}")
    click.echo(f"   ngrok:   {settings.ngrok.namespace}/{settings.ngrok.secret_name}")
    if kubectl.get("available"):
        click.secho(f"   🔧 kubectl: {kubectl.get('version', '?')}", fg="green")
    else:
        click.secho("   🔧 kubectl: not available", fg="yellow")
    click.echo()


# ── Register sub-command groups from addonctl/ui/cli/ ───────────

from addonctl.ui.cli.addons import addons

cli.add_command(addons)


if __name__ == "__main__":
    cli()
