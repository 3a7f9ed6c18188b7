"""
Credential gate — may an add-on be activated on this cluster?

Two layers:

    can_activate()            pure decision: does the credential secret exist
    validate_ngrok()          activation-pipeline form: ALLOW, or SKIP with
                              the command that fixes it

A missing secret is an expected outcome, never an exception.  Only a
failed existence check (the cluster could not be asked) raises, as
``ClusterError``.  Neither function writes to the cluster.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from pydantic import BaseModel

from addonctl.core.models.settings import DEFAULT_PROFILE, NgrokSettings
from addonctl.core.services.k8s_cluster import ClusterFacade

logger = logging.getLogger(__name__)


class Verdict(StrEnum):
    """Outcome of a pre-activation check."""

    ALLOW = "allow"
    SKIP = "skip"   # precondition missing; other add-ons in the batch go on


class GateResult(BaseModel):
    """A verdict plus the operator-facing reason when it is not ALLOW."""

    verdict: Verdict
    message: str = ""

    @property
    def allowed(self) -> bool:
        return self.verdict == Verdict.ALLOW


def can_activate(
    cluster: ClusterFacade,
    profile: str,
    namespace: str,
    secret_name: str,
) -> bool:
    """True iff ``secret_name`` exists in ``namespace``.

    Raises:
        ClusterError: The existence check itself failed.
    """
    return cluster.secret_exists(profile, namespace, secret_name)


def configure_command(profile: str, addon: str) -> str:
    """The command that creates ``addon``'s credentials on ``profile``."""
    profile_arg = f" -p {profile}" if profile != DEFAULT_PROFILE else ""
    return f"addonctl{profile_arg} addons configure {addon}"


def validate_ngrok(
    profile: str,
    cluster: ClusterFacade,
    settings: NgrokSettings,
) -> GateResult:
    """Pre-activation check for the ngrok add-on."""
    if can_activate(cluster, profile, settings.namespace, settings.secret_name):
        return GateResult(verdict=Verdict.ALLOW)

    message = (
        f"Please run `{configure_command(profile, 'ngrok')}` to create your "
        "credentials before enabling the ngrok ingress addon"
    )
    logger.warning("ngrok credentials missing on profile %s; skipping activation", profile)
    return GateResult(verdict=Verdict.SKIP, message=message)
