"""
Shared test fixtures: an in-memory cluster and a scripted operator.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import pytest

from addonctl.core.errors import ClusterError
from addonctl.core.models.settings import NgrokSettings, Settings


class FakeCluster:
    """In-memory ``ClusterFacade``.

    ``fail["method_name"] = "reason"`` makes that method raise ClusterError.
    Every call is recorded in ``calls`` as ``(method, args)``.
    """

    def __init__(self) -> None:
        self.namespaces: set[str] = {"default", "kube-system"}
        self.secrets: dict[tuple[str, str], dict[str, Any]] = {}
        self.services: list[dict[str, Any]] = []
        self.ingresses: dict[tuple[str, str], dict[str, Any]] = {}
        self.fail: dict[str, str] = {}
        self.calls: list[tuple[str, tuple]] = []

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.fail:
            raise ClusterError(self.fail[method])

    def called(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]

    def add_service(self, namespace: str, name: str, *ports: int) -> None:
        self.services.append({
            "namespace": namespace,
            "name": name,
            "ports": [{"port": p} for p in ports],
        })

    # ── ClusterFacade ───────────────────────────────────────────

    def namespace_exists(self, profile, namespace):
        self._record("namespace_exists", profile, namespace)
        return namespace in self.namespaces

    def create_namespace(self, profile, namespace):
        self._record("create_namespace", profile, namespace)
        self.namespaces.add(namespace)

    def secret_exists(self, profile, namespace, name):
        self._record("secret_exists", profile, namespace, name)
        return (namespace, name) in self.secrets

    def create_secret(self, profile, namespace, name, data, labels):
        self._record("create_secret", profile, namespace, name, data, labels)
        self.secrets[(namespace, name)] = {"data": dict(data), "labels": dict(labels)}

    def list_services(self, profile):
        self._record("list_services", profile)
        return [dict(svc) for svc in self.services]

    def ingress_exists(self, profile, namespace, name):
        self._record("ingress_exists", profile, namespace, name)
        return (namespace, name) in self.ingresses

    def create_ingress(self, profile, namespace, name, domain, service_name, port, ingress_class):
        self._record(
            "create_ingress", profile, namespace, name, domain, service_name, port, ingress_class,
        )
        if (namespace, name) in self.ingresses:
            raise ClusterError(f'ingresses "{name}" already exists')
        self.ingresses[(namespace, name)] = {
            "domain": domain,
            "service": service_name,
            "port": port,
            "class": ingress_class,
        }


class ScriptedPrompter:
    """``PromptProvider`` that replays a fixed list of answers in order."""

    def __init__(self, answers: Sequence[Any] = ()) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []
        self.infos: list[str] = []
        self.successes: list[str] = []
        self.errors: list[str] = []
        self.boxes: list[tuple[str, list[str]]] = []

    def _next(self, message: str) -> Any:
        self.prompts.append(message)
        if not self.answers:
            raise AssertionError(f"No scripted answer left for prompt: {message}")
        return self.answers.pop(0)

    def confirm(self, message):
        answer = self._next(message)
        assert isinstance(answer, bool), f"expected yes/no for {message!r}, got {answer!r}"
        return answer

    def ask(self, message):
        return self._next(message)

    def ask_optional(self, message):
        return self._next(message)

    def choose(self, message, choices):
        answer = self._next(message)
        assert answer in choices, f"{answer!r} not in {choices!r}"
        return answer

    def info(self, message):
        self.infos.append(message)

    def success(self, message):
        self.successes.append(message)

    def error(self, message):
        self.errors.append(message)

    def boxed(self, title, lines):
        self.boxes.append((title, list(lines)))


@pytest.fixture
def cluster() -> FakeCluster:
    """An empty cluster with only the default namespaces."""
    return FakeCluster()


@pytest.fixture
def scripted():
    """Factory: ``scripted(True, "token", ...)`` → ScriptedPrompter."""
    def _make(*answers: Any) -> ScriptedPrompter:
        return ScriptedPrompter(answers)
    return _make


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def ngrok_settings() -> NgrokSettings:
    return NgrokSettings()


@pytest.fixture
def credentials_present(cluster: FakeCluster, ngrok_settings: NgrokSettings) -> FakeCluster:
    """The cluster with the ngrok namespace and credential secret already in place."""
    cluster.namespaces.add(ngrok_settings.namespace)
    cluster.secrets[(ngrok_settings.namespace, ngrok_settings.secret_name)] = {
        "data": {"AUTHTOKEN": "old-token", "API_KEY": "old-key"},
        "labels": dict(ngrok_settings.labels),
    }
    return cluster


@pytest.fixture
def policy_file(tmp_path: Path) -> Path:
    path = tmp_path / "policy.yml"
    path.write_text("on_http_request:\n  - actions:\n      - type: oauth\n")
    return path
