"""
Error taxonomy for add-on activation and configuration.

Raised by core services, rendered by the CLI layer.  A missing
credential at activation time is NOT an error: it is a ``Verdict.SKIP``
returned by the credential gate (see ``addon_gate``).
"""

from __future__ import annotations


class AddonctlError(Exception):
    """Base class for every error raised by addonctl core services."""


class ClusterError(AddonctlError):
    """The cluster could not be queried or a write was rejected.

    Covers kubectl missing, timed out, or exiting non-zero.  The message
    carries kubectl's stderr so the operator sees the underlying cause.
    """


class AddonError(AddonctlError):
    """An add-on request cannot be honoured (unknown name, bad value, no credentials)."""


class WizardError(AddonctlError):
    """A setup step of the configuration wizard failed; the run is aborted."""


# ── Service selection (local to one mapping iteration) ──────────


class SelectionError(AddonctlError):
    """The operator's ``namespace:name:port`` selection could not be used."""


class ServiceNotFoundError(SelectionError):
    """The selection does not exactly match a discovered service port."""


class IngressCollisionError(SelectionError):
    """The generated ingress name is already taken in the target namespace."""
