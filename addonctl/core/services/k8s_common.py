"""
K8s shared constants and low-level kubectl helpers.

Imported by the cluster facade.  Must NOT import from any other
addonctl service module to avoid circular imports.
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any

import yaml

from addonctl.core.observability.logging_config import KUBECTL_LOGGER

logger = logging.getLogger(__name__)
_trace = logging.getLogger(KUBECTL_LOGGER)


# ═══════════════════════════════════════════════════════════════════
#  Constants
# ═══════════════════════════════════════════════════════════════════


INGRESS_API_VERSION = "networking.k8s.io/v1"

# Written to every object addonctl creates
MANAGED_BY_LABEL = {"app.kubernetes.io/managed-by": "addonctl"}


# ═══════════════════════════════════════════════════════════════════
#  Shared Helpers
# ═══════════════════════════════════════════════════════════════════


def _run_kubectl(
    *args: str,
    context: str | None = None,
    stdin: str | None = None,
    timeout: int = 15,
) -> subprocess.CompletedProcess[str]:
    """Run a kubectl command against ``context`` and return the result."""
    argv = ["kubectl"]
    if context:
        argv.extend(["--context", context])
    argv.extend(args)
    _trace.debug("$ %s", " ".join(argv))
    return subprocess.run(
        argv,
        input=stdin,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def _kubectl_available() -> dict:
    """Report whether a kubectl client is on PATH, with its version."""
    try:
        result = _run_kubectl("version", "--client", "-o", "json")
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return {"available": False, "version": None}

    if result.returncode != 0:
        return {"available": False, "version": None}

    try:
        version = json.loads(result.stdout).get("clientVersion", {}).get("gitVersion", "")
    except ValueError:
        version = result.stdout.strip()
    return {"available": True, "version": version}


def _to_manifest(resource: dict[str, Any]) -> str:
    """Serialize a resource dict for ``kubectl ... -f -``."""
    return yaml.safe_dump(resource, sort_keys=False)


def _is_already_exists(stderr: str) -> bool:
    """True when kubectl refused a create because the object exists."""
    return "AlreadyExists" in stderr or "already exists" in stderr
