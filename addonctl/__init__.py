"""addonctl — credential-gated add-on activation for local Kubernetes clusters."""

__version__ = "0.1.0"
