"""
ngrok configuration wizard — credentials first, then optional ingress.

One run walks these steps in order:

    1. ensure namespace          create it when absent
    2. reconcile credentials     "set" or "replace" the credential secret
    3. configure ingress?        "no" ends the run here, successfully
    4. domain strategy           single (ask the domain now) or multiple
    5. policy modules?           read files until the sentinel is entered
    6. map services?             create ingresses until the sentinel is entered

Steps 1 and 2 are fatal on any cluster failure (``WizardError``): every
later step depends on the namespace and credentials being right.
Failures inside steps 5 and 6 are reported and the loop goes on.
Nothing is rolled back; each cluster write stands on its own.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from addonctl.core.errors import ClusterError, SelectionError, WizardError
from addonctl.core.models.ngrok import (
    DomainStrategy,
    NgrokCredentials,
    PolicyModule,
    WizardResult,
)
from addonctl.core.models.settings import NgrokSettings
from addonctl.core.services.k8s_cluster import ClusterFacade
from addonctl.core.services.ngrok_mapper import DOMAIN_PROMPT, ServiceMapper
from addonctl.core.services.prompts import PromptProvider

logger = logging.getLogger(__name__)


def read_policy_module(path: str) -> PolicyModule:
    """Read a policy module file eagerly.

    Raises:
        OSError: The file cannot be read.
    """
    if not path:
        raise FileNotFoundError("no path given")
    try:
        content = Path(path).expanduser().read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise OSError(f"failed to read file '{path}': not UTF-8 text") from e
    return PolicyModule(path=path, content=content)


class NgrokWizard:
    """Run-scoped state and steps of one ``addons configure ngrok``."""

    def __init__(
        self,
        profile: str,
        cluster: ClusterFacade,
        prompter: PromptProvider,
        settings: NgrokSettings,
    ) -> None:
        self.profile = profile
        self.cluster = cluster
        self.prompter = prompter
        self.settings = settings
        self.mapper = ServiceMapper(cluster, prompter, settings)
        self.result = WizardResult(profile=profile)

    # ── Entry point ─────────────────────────────────────────────

    def run(self) -> WizardResult:
        self.ensure_namespace()
        self.reconcile_credentials()

        if not self.prompter.confirm(
            "Would you like to configure ingress for existing services in your minikube cluster?"
        ):
            self.prompter.success("ngrok credentials are configured; skipping ingress setup.")
            return self.result

        self.result.ingress_configured = True
        self.choose_domain_strategy()

        if self.prompter.confirm(
            "Would you like to create a policy module that can be used to secure "
            "ingress to services with authentication?"
        ):
            self.load_policy_modules()

        if self.prompter.confirm("Would you like to create ingress to existing services?"):
            self.map_services()

        self.prompter.success("Congrats, you have configured ingress with ngrok in your minikube cluster.")
        return self.result

    # ── Step 1: namespace ───────────────────────────────────────

    def ensure_namespace(self) -> None:
        namespace = self.settings.namespace
        try:
            exists = self.cluster.namespace_exists(self.profile, namespace)
        except ClusterError as e:
            raise WizardError(f"Error checking for existing `{namespace}` namespace: {e}") from e
        if exists:
            return

        try:
            self.cluster.create_namespace(self.profile, namespace)
        except ClusterError as e:
            raise WizardError(f"Error creating `{namespace}` namespace: {e}") from e
        self.result.namespace_created = True

    # ── Step 2: credentials ─────────────────────────────────────

    def reconcile_credentials(self) -> None:
        namespace, secret = self.settings.namespace, self.settings.secret_name
        try:
            exists = self.cluster.secret_exists(self.profile, namespace, secret)
        except ClusterError as e:
            raise WizardError(f"Error checking for existing `{secret}` secret: {e}") from e

        verb = "replace" if exists else "set"
        if not self.prompter.confirm(f"Would you like to {verb} ngrok credentials?"):
            logger.info("Leaving ngrok credentials untouched (secret exists: %s)", exists)
            return

        try:
            credentials = NgrokCredentials(
                authtoken=self.prompter.ask("-- Enter ngrok authtoken"),
                api_key=self.prompter.ask("-- Enter ngrok apikey"),
            )
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise WizardError(f"Invalid ngrok credentials: {fields} must not be empty") from e
        try:
            self.cluster.create_secret(
                self.profile,
                namespace,
                secret,
                credentials.to_secret_data(),
                dict(self.settings.labels),
            )
        except ClusterError as e:
            raise WizardError(f"Error creating `{secret}` secret: {e}") from e
        self.result.credentials_written = True
        # TODO: restart the ngrok controller pod so replaced credentials take effect

    # ── Step 4: domain strategy ─────────────────────────────────

    def choose_domain_strategy(self) -> None:
        choice = self.prompter.choose(
            "Would you like to use a single domain for all services or a unique "
            "domain for each? Free accounts can only use a single domain.",
            [s.value for s in DomainStrategy],
        )
        self.result.strategy = DomainStrategy(choice)
        if self.result.strategy == DomainStrategy.SINGLE:
            self.result.domain = self.prompter.ask(DOMAIN_PROMPT)

    # ── Step 5: policy modules ──────────────────────────────────

    def load_policy_modules(self) -> None:
        sentinel = self.settings.sentinel
        while True:
            path = self.prompter.ask_optional(
                f"Give path to policy module file (type '{sentinel}' if done)"
            )
            if path == sentinel:
                break
            try:
                module = read_policy_module(path)
            except OSError as e:
                logger.error("Error reading policy module file %r: %s", path, e)
                self.prompter.error(f"Error reading policy module file: {e}")
                continue
            self.result.policy_modules.append(module)
            self.prompter.info(f"Loaded policy module {path} ({len(module.content)} bytes)")

    # ── Step 6: service → ingress mapping ───────────────────────

    def map_services(self) -> None:
        try:
            services = self.mapper.resolve(self.profile)
        except ClusterError as e:
            logger.error("Error listing services: %s", e)
            self.prompter.error(f"Error listing services: {e}")
            self.result.failures.append(f"list services: {e}")
            return

        self.prompter.boxed("Services:", [ref.key for ref in services])

        sentinel = self.settings.sentinel
        while True:
            selection = self.prompter.ask(
                "What service would you like to add ingress for? "
                f"Use the format namespace:service:port (type '{sentinel}' to exit)"
            )
            if selection == sentinel:
                break
            self._map_one(selection)

    def _map_one(self, selection: str) -> None:
        try:
            request = self.mapper.build_request(
                self.profile, selection, self.result.strategy, self.result.domain,
            )
        except (SelectionError, ClusterError) as e:
            logger.warning("Selection %r rejected: %s", selection, e)
            self.prompter.error(str(e))
            self.result.failures.append(f"{selection}: {e}")
            return

        try:
            self.mapper.submit(self.profile, request)
        except ClusterError as e:
            logger.error("Error creating ingress %s/%s: %s", request.namespace, request.name, e)
            self.prompter.error(f"Error creating ingress: {e}")
            self.result.failures.append(f"{selection}: {e}")
            return

        self.result.ingresses.append(request)
        self.prompter.info(
            f"Created ingress {request.namespace}/{request.name} → "
            f"{request.service_name}:{request.port} at {request.domain}"
        )


def run_configuration_wizard(
    profile: str,
    *,
    cluster: ClusterFacade,
    prompter: PromptProvider,
    settings: NgrokSettings | None = None,
) -> WizardResult:
    """Run the ngrok configuration wizard end to end.

    Raises:
        WizardError: The namespace or credential step failed.
    """
    wizard = NgrokWizard(profile, cluster, prompter, settings or NgrokSettings())
    return wizard.run()
