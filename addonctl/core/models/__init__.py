"""
Domain models — Pydantic types for addonctl.

All models are re-exported here for convenient access:

    from addonctl.core.models import Settings, NgrokCredentials, IngressRequest
"""

from addonctl.core.models.ngrok import (
    DomainStrategy,
    IngressRequest,
    NgrokCredentials,
    PolicyModule,
    ServiceRef,
    WizardResult,
)
from addonctl.core.models.settings import DEFAULT_PROFILE, NgrokSettings, Settings

__all__ = [
    "DEFAULT_PROFILE",
    # ngrok.py
    "DomainStrategy",
    "IngressRequest",
    "NgrokCredentials",
    # settings.py
    "NgrokSettings",
    "PolicyModule",
    "ServiceRef",
    "Settings",
    "WizardResult",
]
