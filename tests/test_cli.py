"""
Tests for CLI commands — addons, config check, and global options.
"""

import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from addonctl.main import cli

MAKE_CLUSTER = "addonctl.ui.cli.addons._make_cluster"


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch):
    """Run every CLI test where no addonctl.yml can be found."""
    monkeypatch.chdir(tmp_path)


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "addonctl" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestConfigCheck:
    def test_defaults(self):
        result = CliRunner().invoke(cli, ["config", "check"])
        assert result.exit_code == 0
        assert "(defaults)" in result.output
        assert "minikube" in result.output

    def test_json(self, tmp_path: Path):
        path = tmp_path / "addonctl.yml"
        path.write_text("profile: dev\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "check", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["settings"]["profile"] == "dev"

    def test_invalid(self, tmp_path: Path):
        path = tmp_path / "addonctl.yml"
        path.write_text("kubectl_timeout: -1\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "check"])
        assert result.exit_code == 1
        assert "Invalid addonctl configuration" in result.output


class TestAddonsList:
    def test_lists_ngrok(self):
        result = CliRunner().invoke(cli, ["addons", "list", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == [{
            "name": "ngrok",
            "description": "ngrok ingress controller (requires ngrok credentials)",
            "configurable": True,
        }]


class TestAddonsEnable:
    def test_skip_without_credentials(self, cluster):
        with patch(MAKE_CLUSTER, return_value=cluster):
            result = CliRunner().invoke(cli, ["-p", "dev", "addons", "enable", "ngrok"])
        assert result.exit_code == 0
        assert "addonctl -p dev addons configure ngrok" in result.output
        assert "is enabled" not in result.output

    def test_enabled_with_credentials(self, credentials_present):
        with patch(MAKE_CLUSTER, return_value=credentials_present):
            result = CliRunner().invoke(cli, ["addons", "enable", "ngrok"])
        assert result.exit_code == 0
        assert "The 'ngrok' addon is enabled" in result.output

    def test_cluster_failure_exits_1(self, cluster):
        cluster.fail["secret_exists"] = "Unable to connect to the server"
        with patch(MAKE_CLUSTER, return_value=cluster):
            result = CliRunner().invoke(cli, ["addons", "enable", "ngrok"])
        assert result.exit_code == 1
        assert "Unable to connect" in result.output

    def test_profile_from_config(self, cluster, tmp_path: Path):
        (tmp_path / "addonctl.yml").write_text("profile: staging\n")
        with patch(MAKE_CLUSTER, return_value=cluster):
            result = CliRunner().invoke(cli, ["addons", "enable", "ngrok"])
        assert result.exit_code == 0
        assert cluster.called("secret_exists")[0][0] == "staging"
        assert "-p staging" in result.output


class TestAddonsDisable:
    def test_keeps_credentials(self, credentials_present):
        before = dict(credentials_present.secrets)
        with patch(MAKE_CLUSTER, return_value=credentials_present):
            result = CliRunner().invoke(cli, ["addons", "disable", "ngrok"])
        assert result.exit_code == 0
        assert "disabled" in result.output
        assert credentials_present.secrets == before


class TestAddonsValidate:
    def test_json_skip(self, cluster):
        with patch(MAKE_CLUSTER, return_value=cluster):
            result = CliRunner().invoke(cli, ["-q", "addons", "validate", "ngrok", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["verdict"] == "skip"
        assert "addons configure ngrok" in data["message"]

    def test_allow(self, credentials_present):
        with patch(MAKE_CLUSTER, return_value=credentials_present):
            result = CliRunner().invoke(cli, ["addons", "validate", "ngrok"])
        assert result.exit_code == 0
        assert "may be enabled" in result.output


class TestAddonsConfigure:
    def test_credentials_only(self, cluster):
        answers = "y\ntok\nkey\nn\n"
        with patch(MAKE_CLUSTER, return_value=cluster):
            result = CliRunner().invoke(cli, ["addons", "configure", "ngrok"], input=answers)
        assert result.exit_code == 0, result.output
        assert "Would you like to set ngrok credentials?" in result.output
        assert "ngrok was successfully configured" in result.output
        stored = cluster.secrets[("ngrok-ingress-controller", "ngrok-ingress-controller-credentials")]
        assert stored["data"] == {"AUTHTOKEN": "tok", "API_KEY": "key"}

    def test_blank_credential_is_asked_again(self, cluster):
        answers = "y\n   \ntok\nkey\nn\n"
        with patch(MAKE_CLUSTER, return_value=cluster):
            result = CliRunner().invoke(cli, ["addons", "configure", "ngrok"], input=answers)
        assert result.exit_code == 0, result.output
        assert result.output.count("-- Enter ngrok authtoken") == 2
        stored = cluster.secrets[("ngrok-ingress-controller", "ngrok-ingress-controller-credentials")]
        assert stored["data"] == {"AUTHTOKEN": "tok", "API_KEY": "key"}

    def test_full_single_domain_flow(self, cluster):
        cluster.add_service("default", "web", 80)
        answers = textwrap.dedent("""\
            n
            y
            single
            foo.ngrok.app
            n
            y
            default:web:8080
            default:web:80
            none
        """)
        with patch(MAKE_CLUSTER, return_value=cluster):
            result = CliRunner().invoke(cli, ["addons", "configure", "ngrok"], input=answers)
        assert result.exit_code == 0, result.output
        assert "default:web:80" in result.output
        assert "Service not found: default:web:8080" in result.output
        assert "Congrats, you have configured ingress with ngrok" in result.output
        assert "1 step(s) failed" in result.output
        assert cluster.ingresses[("default", "ngrok-ingress-web")]["domain"] == "foo.ngrok.app"

    def test_fatal_setup_failure(self, cluster):
        cluster.fail["create_namespace"] = "forbidden"
        with patch(MAKE_CLUSTER, return_value=cluster):
            result = CliRunner().invoke(cli, ["addons", "configure", "ngrok"])
        assert result.exit_code == 1
        assert "Error creating `ngrok-ingress-controller` namespace: forbidden" in result.output

    def test_unknown_addon(self, cluster):
        with patch(MAKE_CLUSTER, return_value=cluster):
            result = CliRunner().invoke(cli, ["addons", "configure", "registry-creds"])
        assert result.exit_code == 1
        assert "registry-creds has no available configuration options" in result.output
