"""
ngrok add-on models — credentials, service references, ingress requests.

These are the values the configuration wizard passes between its steps.
None of them are persisted locally: the credential bundle becomes a
Secret and each ``IngressRequest`` becomes an Ingress in the cluster.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class DomainStrategy(StrEnum):
    """How ingress hostnames are allocated during one wizard run."""

    SINGLE = "single"       # one domain, asked once, shared by every mapping
    MULTIPLE = "multiple"   # a fresh domain asked for every mapping


class NgrokCredentials(BaseModel):
    """The ngrok credential bundle — exactly two required values."""

    model_config = ConfigDict(str_strip_whitespace=True)

    authtoken: str = Field(min_length=1)
    api_key: str = Field(min_length=1)

    def to_secret_data(self) -> dict[str, str]:
        """Secret keys as the ingress controller reads them."""
        return {
            "AUTHTOKEN": self.authtoken,
            "API_KEY": self.api_key,
        }


class ServiceRef(BaseModel):
    """One exposed port of a cluster service.

    The ``(namespace, name, port)`` triple is the key: a service with
    two ports yields two references.
    """

    namespace: str
    name: str
    port: int

    @property
    def key(self) -> str:
        """Display / selection form: ``namespace:name:port``."""
        return f"{self.namespace}:{self.name}:{self.port}"


class IngressRequest(BaseModel):
    """An Ingress to create for one selected service port."""

    namespace: str
    name: str                   # "<prefix>-<service name>"
    domain: str
    service_name: str
    port: int
    ingress_class: str


class PolicyModule(BaseModel):
    """A policy module file the operator pointed us at, read eagerly."""

    path: str
    content: str


class WizardResult(BaseModel):
    """What one configuration wizard run did to the cluster."""

    profile: str
    namespace_created: bool = False
    credentials_written: bool = False
    ingress_configured: bool = False
    strategy: DomainStrategy | None = None
    domain: str | None = None
    policy_modules: list[PolicyModule] = Field(default_factory=list)
    ingresses: list[IngressRequest] = Field(default_factory=list)
    failures: list[str] = Field(default_factory=list)
