"""
Service mapper — turn an operator's service selection into an Ingress.

One mapper lives for one wizard run:

    resolve()        list every service port once; the listing is what
                     the operator picks from
    build_request()  parse ``namespace:name:port``, match it exactly,
                     pick the domain, name the ingress, refuse collisions
    submit()         create the ingress and claim its name

Ingress names are keyed by ``(namespace, name)``.  A name created
earlier in the run, or already present in the cluster, is rejected
with ``IngressCollisionError`` instead of being overwritten.  Because the
name comes from the service alone, a second port of an already mapped
service is rejected too, and the error says which port holds the name.
"""

from __future__ import annotations

import logging

from addonctl.core.errors import (
    IngressCollisionError,
    SelectionError,
    ServiceNotFoundError,
)
from addonctl.core.models.ngrok import DomainStrategy, IngressRequest, ServiceRef
from addonctl.core.models.settings import NgrokSettings
from addonctl.core.services.k8s_cluster import ClusterFacade
from addonctl.core.services.prompts import PromptProvider

logger = logging.getLogger(__name__)

DOMAIN_PROMPT = "What domain would you like to use?"


def parse_selection(selection: str) -> ServiceRef:
    """Parse ``namespace:name:port``.

    Raises:
        SelectionError: Not exactly three segments, or a non-integer port.
    """
    parts = selection.strip().split(":")
    if len(parts) != 3 or not all(parts):
        raise SelectionError(
            f"Invalid selection '{selection}': use the format namespace:service:port"
        )
    namespace, name, raw_port = parts
    try:
        port = int(raw_port)
    except ValueError as e:
        raise SelectionError(f"Error converting port to int: {raw_port!r}") from e
    return ServiceRef(namespace=namespace, name=name, port=port)


class ServiceMapper:
    """Builds and submits ingress requests for one wizard run."""

    def __init__(
        self,
        cluster: ClusterFacade,
        prompter: PromptProvider,
        settings: NgrokSettings,
    ) -> None:
        self.cluster = cluster
        self.prompter = prompter
        self.settings = settings
        self.services: list[ServiceRef] = []
        # (namespace, ingress name) -> port it was created for
        self._claimed: dict[tuple[str, str], int] = {}

    def resolve(self, profile: str) -> list[ServiceRef]:
        """List every (namespace, service, port) in the cluster, in listing order.

        Raises:
            ClusterError: The services could not be listed.
        """
        refs: list[ServiceRef] = []
        for svc in self.cluster.list_services(profile):
            for port in svc.get("ports", []):
                refs.append(ServiceRef(
                    namespace=svc["namespace"],
                    name=svc["name"],
                    port=port["port"],
                ))
        self.services = refs
        logger.debug("Resolved %d service ports on profile %s", len(refs), profile)
        return refs

    def ingress_name(self, service_name: str) -> str:
        return f"{self.settings.ingress_prefix}-{service_name}"

    def build_request(
        self,
        profile: str,
        selection: str,
        strategy: DomainStrategy,
        shared_domain: str | None,
    ) -> IngressRequest:
        """Turn one selection into an ``IngressRequest``.

        Under ``single`` the shared domain is reused as-is; under
        ``multiple`` the operator is asked for a domain every time.

        Raises:
            SelectionError: Malformed selection.
            ServiceNotFoundError: No exact (namespace, name, port) match.
            IngressCollisionError: The generated name is already taken.
            ClusterError: The collision check could not reach the cluster.
        """
        ref = parse_selection(selection)
        # match the text as listed; "053" or "+53" is not port 53
        typed = selection.strip()
        if typed not in {listed.key for listed in self.services}:
            raise ServiceNotFoundError(f"Service not found: {typed}")

        if strategy == DomainStrategy.SINGLE:
            if not shared_domain:
                raise SelectionError("No shared domain was chosen for the single-domain strategy")
            domain = shared_domain
        else:
            domain = self.prompter.ask(DOMAIN_PROMPT)

        request = IngressRequest(
            namespace=ref.namespace,
            name=self.ingress_name(ref.name),
            domain=domain,
            service_name=ref.name,
            port=ref.port,
            ingress_class=self.settings.ingress_class,
        )
        self._check_collision(profile, request)
        return request

    def _check_collision(self, profile: str, request: IngressRequest) -> None:
        claimed_port = self._claimed.get((request.namespace, request.name))
        if claimed_port is not None:
            message = f"Ingress {request.namespace}/{request.name} was already created in this run"
            if claimed_port != request.port:
                message += (
                    f"; service {request.service_name} is already exposed on port"
                    f" {claimed_port} and gets one ingress, so port {request.port}"
                    " cannot be mapped separately"
                )
            raise IngressCollisionError(message)
        if self.cluster.ingress_exists(profile, request.namespace, request.name):
            raise IngressCollisionError(
                f"Ingress {request.namespace}/{request.name} already exists in the cluster"
            )

    def submit(self, profile: str, request: IngressRequest) -> None:
        """Create the ingress; the name is claimed only once creation succeeds."""
        self.cluster.create_ingress(
            profile,
            request.namespace,
            request.name,
            request.domain,
            request.service_name,
            request.port,
            request.ingress_class,
        )
        self._claimed[(request.namespace, request.name)] = request.port
