"""
Add-on operations — the registry and the activation pipeline.

Exposed to the CLI:

    enable_or_disable()       flip one add-on on or off ("true" / "false")
    validate_before_enable()  ALLOW or SKIP one add-on before activation
    enable_addons()           batch activation: SKIPs are collected, errors abort
    configure_addon()         run an add-on's interactive configuration

Only ``ngrok`` is registered.  Controller deployment itself (manifests,
images) is outside this package; enabling here means "every
precondition holds and the add-on's enable hook ran".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from addonctl.core.errors import AddonError
from addonctl.core.models.ngrok import WizardResult
from addonctl.core.models.settings import Settings
from addonctl.core.services.addon_gate import (
    GateResult,
    Verdict,
    can_activate,
    configure_command,
    validate_ngrok,
)
from addonctl.core.services.k8s_cluster import ClusterFacade
from addonctl.core.services.ngrok_wizard import run_configuration_wizard
from addonctl.core.services.prompts import PromptProvider

logger = logging.getLogger(__name__)

Validator = Callable[[str, ClusterFacade, Settings], GateResult]
Toggle = Callable[[str, ClusterFacade, Settings], None]
Configure = Callable[[str, ClusterFacade, PromptProvider, Settings], WizardResult]


# ═══════════════════════════════════════════════════════════════════
#  ngrok hooks
# ═══════════════════════════════════════════════════════════════════


def _validate_ngrok(profile: str, cluster: ClusterFacade, settings: Settings) -> GateResult:
    return validate_ngrok(profile, cluster, settings.ngrok)


def _enable_ngrok(profile: str, cluster: ClusterFacade, settings: Settings) -> None:
    ngrok = settings.ngrok
    if not can_activate(cluster, profile, ngrok.namespace, ngrok.secret_name):
        raise AddonError(
            f"please run `{configure_command(profile, 'ngrok')}` to create "
            "your credentials before enabling"
        )
    logger.info("ngrok credentials present on profile %s", profile)


def _disable_ngrok(profile: str, cluster: ClusterFacade, settings: Settings) -> None:
    # Credentials survive a disable so re-enabling needs no reconfiguration.
    logger.info(
        "Disabling ngrok on profile %s leaves secret %s/%s in place",
        profile, settings.ngrok.namespace, settings.ngrok.secret_name,
    )


def _configure_ngrok(
    profile: str,
    cluster: ClusterFacade,
    prompter: PromptProvider,
    settings: Settings,
) -> WizardResult:
    return run_configuration_wizard(
        profile, cluster=cluster, prompter=prompter, settings=settings.ngrok,
    )


# ═══════════════════════════════════════════════════════════════════
#  Registry
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Addon:
    """A registered add-on and its lifecycle hooks."""

    name: str
    description: str
    enable: Toggle
    disable: Toggle
    validators: tuple[Validator, ...] = field(default_factory=tuple)
    configure: Configure | None = None


ADDONS: dict[str, Addon] = {
    "ngrok": Addon(
        name="ngrok",
        description="ngrok ingress controller (requires ngrok credentials)",
        enable=_enable_ngrok,
        disable=_disable_ngrok,
        validators=(_validate_ngrok,),
        configure=_configure_ngrok,
    ),
}


def get_addon(name: str) -> Addon:
    try:
        return ADDONS[name]
    except KeyError:
        raise AddonError(f"{name} is not a valid addon") from None


# ═══════════════════════════════════════════════════════════════════
#  Operations
# ═══════════════════════════════════════════════════════════════════


_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(value: str) -> bool:
    """Parse a boolean flag value ("true", "f", "1", ...).

    Raises:
        ValueError: ``value`` is not a recognised boolean spelling.
    """
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"invalid boolean: {value!r}")


def enable_or_disable(
    profile: str,
    addon_name: str,
    value: str,
    *,
    cluster: ClusterFacade,
    settings: Settings,
) -> None:
    """Run the add-on's enable or disable hook.

    Raises:
        AddonError: Unknown add-on, unparsable value, or missing credentials.
        ClusterError: The cluster could not be queried.
    """
    addon = get_addon(addon_name)
    try:
        enable = parse_bool(value)
    except ValueError as e:
        raise AddonError(f"parsing bool: {addon_name}: {e}") from e

    if enable:
        addon.enable(profile, cluster, settings)
    else:
        addon.disable(profile, cluster, settings)


def validate_before_enable(
    profile: str,
    addon_name: str,
    *,
    cluster: ClusterFacade,
    settings: Settings,
) -> GateResult:
    """Run every validator of the add-on; the first SKIP wins.

    Raises:
        AddonError: Unknown add-on.
        ClusterError: A validator could not reach the cluster.
    """
    addon = get_addon(addon_name)
    for validator in addon.validators:
        result = validator(profile, cluster, settings)
        if result.verdict == Verdict.SKIP:
            return result
    return GateResult(verdict=Verdict.ALLOW)


@dataclass
class BatchResult:
    """Outcome of ``enable_addons``."""

    enabled: list[str] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)   # name → directive


def enable_addons(
    profile: str,
    names: list[str],
    *,
    cluster: ClusterFacade,
    settings: Settings,
) -> BatchResult:
    """Enable each add-on in order.

    An add-on whose precondition is missing is skipped with its directive
    and the batch goes on.  Any error aborts the batch; add-ons enabled
    before it stay enabled.
    """
    batch = BatchResult()
    for name in names:
        gate = validate_before_enable(profile, name, cluster=cluster, settings=settings)
        if gate.verdict == Verdict.SKIP:
            batch.skipped[name] = gate.message
            continue
        enable_or_disable(profile, name, "true", cluster=cluster, settings=settings)
        batch.enabled.append(name)
        logger.info("Enabled addon %s on profile %s", name, profile)
    return batch


def configure_addon(
    profile: str,
    addon_name: str,
    *,
    cluster: ClusterFacade,
    prompter: PromptProvider,
    settings: Settings,
) -> WizardResult:
    """Run the add-on's interactive configuration.

    Raises:
        AddonError: Unknown add-on, or one without configuration options.
        WizardError: A fatal setup step of the wizard failed.
    """
    addon = ADDONS.get(addon_name)
    if addon is None or addon.configure is None:
        raise AddonError(f"{addon_name} has no available configuration options")
    return addon.configure(profile, cluster, prompter, settings)
