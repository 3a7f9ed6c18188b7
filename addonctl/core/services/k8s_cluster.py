"""
K8s cluster facade — the only place addonctl talks to a cluster.

Each method is one synchronous kubectl call (two for a secret write)
against the kube context named by the profile.  Failures raise
``ClusterError`` carrying kubectl's stderr; nothing is retried and
nothing is rolled back.

Writes follow a check-then-create pattern so every step can be re-run:

    - namespaces:  an "already exists" answer from the API is success
    - secrets:     ``create`` when absent, ``replace`` when present
                   (a full replacement, never a merge)
    - ingresses:   ``create`` only; an existing object is an error
"""

from __future__ import annotations

import base64
import json
import logging
import subprocess
from typing import Any, Protocol

from addonctl.core.errors import ClusterError
from addonctl.core.services.k8s_common import (
    INGRESS_API_VERSION,
    MANAGED_BY_LABEL,
    _is_already_exists,
    _run_kubectl,
    _to_manifest,
)

logger = logging.getLogger(__name__)


class ClusterFacade(Protocol):
    """Operations the credential gate, wizard and mapper need from a cluster."""

    def namespace_exists(self, profile: str, namespace: str) -> bool: ...

    def create_namespace(self, profile: str, namespace: str) -> None: ...

    def secret_exists(self, profile: str, namespace: str, name: str) -> bool: ...

    def create_secret(
        self,
        profile: str,
        namespace: str,
        name: str,
        data: dict[str, str],
        labels: dict[str, str],
    ) -> None: ...

    def list_services(self, profile: str) -> list[dict[str, Any]]: ...

    def ingress_exists(self, profile: str, namespace: str, name: str) -> bool: ...

    def create_ingress(
        self,
        profile: str,
        namespace: str,
        name: str,
        domain: str,
        service_name: str,
        port: int,
        ingress_class: str,
    ) -> None: ...


class KubectlCluster:
    """``ClusterFacade`` backed by the kubectl binary on PATH."""

    def __init__(self, timeout: int = 15) -> None:
        self.timeout = timeout

    # ── Plumbing ────────────────────────────────────────────────

    def _kubectl(
        self,
        profile: str,
        *args: str,
        stdin: str | None = None,
    ) -> subprocess.CompletedProcess[str]:
        try:
            return _run_kubectl(*args, context=profile, stdin=stdin, timeout=self.timeout)
        except FileNotFoundError as e:
            raise ClusterError("kubectl not available") from e
        except subprocess.TimeoutExpired as e:
            raise ClusterError(
                f"kubectl {args[0]} timed out after {self.timeout}s"
            ) from e

    def _exists(self, profile: str, kind: str, name: str, namespace: str = "") -> bool:
        args = ["get", kind, name, "-o", "name", "--ignore-not-found"]
        if namespace:
            args.extend(["-n", namespace])
        result = self._kubectl(profile, *args)
        if result.returncode != 0:
            raise ClusterError(f"checking {kind} {name}: {result.stderr.strip()}")
        return bool(result.stdout.strip())

    # ── Namespaces ──────────────────────────────────────────────

    def namespace_exists(self, profile: str, namespace: str) -> bool:
        return self._exists(profile, "namespace", namespace)

    def create_namespace(self, profile: str, namespace: str) -> None:
        result = self._kubectl(profile, "create", "namespace", namespace)
        if result.returncode == 0:
            logger.info("Created namespace %s (profile %s)", namespace, profile)
            return
        if _is_already_exists(result.stderr):
            logger.debug("Namespace %s already exists", namespace)
            return
        raise ClusterError(f"creating namespace {namespace}: {result.stderr.strip()}")

    # ── Secrets ─────────────────────────────────────────────────

    def secret_exists(self, profile: str, namespace: str, name: str) -> bool:
        return self._exists(profile, "secret", name, namespace)

    def create_secret(
        self,
        profile: str,
        namespace: str,
        name: str,
        data: dict[str, str],
        labels: dict[str, str],
    ) -> None:
        """Write ``data`` as the complete contents of the secret.

        Keys present in an older version of the secret but absent from
        ``data`` are gone afterwards.
        """
        manifest = {
            "apiVersion": "v1",
            "kind": "Secret",
            "type": "Opaque",
            "metadata": {
                "name": name,
                "namespace": namespace,
                "labels": {**MANAGED_BY_LABEL, **labels},
            },
            "data": {
                key: base64.b64encode(value.encode("utf-8")).decode("ascii")
                for key, value in data.items()
            },
        }
        verb = "replace" if self.secret_exists(profile, namespace, name) else "create"
        result = self._kubectl(profile, verb, "-f", "-", stdin=_to_manifest(manifest))
        if result.returncode != 0:
            raise ClusterError(f"{verb} secret {namespace}/{name}: {result.stderr.strip()}")
        logger.info("Secret %s/%s written (%s, %d keys)", namespace, name, verb, len(data))

    # ── Services ────────────────────────────────────────────────

    def list_services(self, profile: str) -> list[dict[str, Any]]:
        """Every service in every namespace, with its exposed ports.

        Returns:
            [{"namespace": str, "name": str, "ports": [{"port": int}, ...]}, ...]
        """
        result = self._kubectl(profile, "get", "services", "--all-namespaces", "-o", "json")
        if result.returncode != 0:
            raise ClusterError(f"listing services: {result.stderr.strip()}")

        try:
            data = json.loads(result.stdout)
        except ValueError as e:
            raise ClusterError(f"listing services: unreadable kubectl output: {e}") from e

        services: list[dict[str, Any]] = []
        for item in data.get("items", []) or []:
            metadata = item.get("metadata", {})
            spec = item.get("spec", {})
            services.append({
                "namespace": metadata.get("namespace", ""),
                "name": metadata.get("name", ""),
                "ports": [
                    {"port": int(p["port"])}
                    for p in spec.get("ports", []) or []
                    if "port" in p
                ],
            })
        return services

    # ── Ingresses ───────────────────────────────────────────────

    def ingress_exists(self, profile: str, namespace: str, name: str) -> bool:
        return self._exists(profile, "ingress", name, namespace)

    def create_ingress(
        self,
        profile: str,
        namespace: str,
        name: str,
        domain: str,
        service_name: str,
        port: int,
        ingress_class: str,
    ) -> None:
        manifest = {
            "apiVersion": INGRESS_API_VERSION,
            "kind": "Ingress",
            "metadata": {
                "name": name,
                "namespace": namespace,
                "labels": dict(MANAGED_BY_LABEL),
            },
            "spec": {
                "ingressClassName": ingress_class,
                "rules": [{
                    "host": domain,
                    "http": {
                        "paths": [{
                            "path": "/",
                            "pathType": "Prefix",
                            "backend": {
                                "service": {
                                    "name": service_name,
                                    "port": {"number": port},
                                },
                            },
                        }],
                    },
                }],
            },
        }
        result = self._kubectl(profile, "create", "-f", "-", stdin=_to_manifest(manifest))
        if result.returncode != 0:
            raise ClusterError(f"creating ingress {namespace}/{name}: {result.stderr.strip()}")
        logger.info("Created ingress %s/%s → %s:%d (%s)", namespace, name, service_name, port, domain)
