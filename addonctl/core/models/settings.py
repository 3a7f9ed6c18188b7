"""
Settings model — the operator's addonctl.yml.

Every key is optional.  A missing file yields the defaults below, which
match a stock minikube profile running the ngrok ingress controller.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_PROFILE = "minikube"


def _default_ngrok_labels() -> dict[str, str]:
    return {
        "app": "ngrok",
        "cloud": "ngrok",
        "kubernetes.io/minikube-addons": "ngrok",
    }


class NgrokSettings(BaseModel):
    """Where the ngrok add-on keeps its credentials and how it names ingresses."""

    namespace: str = "ngrok-ingress-controller"
    secret_name: str = "ngrok-ingress-controller-credentials"
    ingress_class: str = "ngrok"
    ingress_prefix: str = "ngrok-ingress"
    sentinel: str = "none"          # answer that ends a prompt loop
    labels: dict[str, str] = Field(default_factory=_default_ngrok_labels)


class Settings(BaseModel):
    """Root settings — loaded from addonctl.yml."""

    profile: str = DEFAULT_PROFILE
    kubectl_timeout: int = Field(default=15, gt=0)
    ngrok: NgrokSettings = Field(default_factory=NgrokSettings)
