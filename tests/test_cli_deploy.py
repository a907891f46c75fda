"""Tests for the nxdeploy deploy and render commands."""
import subprocess

import pytest

typer = pytest.importorskip("typer")
from typer.testing import CliRunner  # type: ignore

from nxdeploy.cli import app

runner = CliRunner()


@pytest.fixture
def proxy_env(tmp_path, monkeypatch):
    """Environment for a proxy run rooted in tmp_path."""
    monkeypatch.setenv("NXDEPLOY_NGINX_ROOT", str(tmp_path / "nginx"))
    monkeypatch.setenv("NXDEPLOY_NGINX_OS", "ubuntu")
    monkeypatch.setenv("NXDEPLOY_UPSTREAM_NAME", "core")
    monkeypatch.setenv("NXDEPLOY_UPSTREAM_COUNT", "2")
    monkeypatch.setenv("NXDEPLOY_CONTROLLER_IP_1", "10.0.0.1")
    monkeypatch.setenv("NXDEPLOY_CONTROLLER_IP_2", "10.0.0.2")
    monkeypatch.setenv("NXDEPLOY_API_DOMAIN", "api.example.com")
    monkeypatch.setenv("NXDEPLOY_CONFIG_REPO_PATH", str(tmp_path / "config-repo"))
    for key in ("NXDEPLOY_CONFIG_REPO_OWNER", "NXDEPLOY_CONFIG_REPO_NAME", "NXDEPLOY_SITE_DOMAIN", "NXDEPLOY_MOCK"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path / "nginx"


def test_deploy_proxy_writes_files(proxy_env):
    result = runner.invoke(app, ["deploy", "--type", "proxy"])
    assert result.exit_code == 0, result.output

    upstream = (proxy_env / "conf.d" / "upstream.conf").read_text()
    assert upstream == "upstream core {\n  server 10.0.0.1:4000;\n  server 10.0.0.2:4000;\n}\n"
    assert "proxy_pass http://core;" in (proxy_env / "sites-enabled" / "api.conf").read_text()
    assert not (proxy_env / "sites-enabled" / "site.conf").exists()


def test_deploy_unknown_type_exits_non_zero(proxy_env):
    result = runner.invoke(app, ["deploy", "-T", "nginx"])
    assert result.exit_code == 1
    assert "Unsupported deployment type" in result.output
    assert not proxy_env.exists()


def test_deploy_dry_run_writes_nothing(proxy_env):
    result = runner.invoke(app, ["deploy", "-T", "proxy", "--dry-run"])
    assert result.exit_code == 0, result.output
    assert "server 10.0.0.1:4000;" in result.output
    assert not proxy_env.exists()


def test_deploy_fetch_failure_exits_non_zero(proxy_env, monkeypatch):
    monkeypatch.setenv("NXDEPLOY_CONFIG_REPO_OWNER", "acme")
    monkeypatch.setenv("NXDEPLOY_CONFIG_REPO_NAME", "proxy-config")

    def failing_run(cmd, **kwargs):
        raise subprocess.CalledProcessError(128, cmd, stderr="repository not found")

    monkeypatch.setattr("nxdeploy.services.git_fetcher.subprocess.run", failing_run)

    result = runner.invoke(app, ["deploy", "-T", "proxy"])

    assert result.exit_code == 1
    assert not proxy_env.exists()


def test_render_api(proxy_env, monkeypatch):
    monkeypatch.setenv("NXDEPLOY_HTTPS_API", "true")
    monkeypatch.setenv("NXDEPLOY_HTTP_API_REDIRECT", "true")

    result = runner.invoke(app, ["render", "api"])

    assert result.exit_code == 0, result.output
    assert result.output.startswith("server {\n  listen       80;\n")
    assert "  listen       443 ssl;\n" in result.output
    assert not proxy_env.exists()


def test_render_site_without_domain(proxy_env):
    result = runner.invoke(app, ["render", "site"])
    assert result.exit_code == 0
    assert "No site domain configured" in result.output


def test_render_unknown_target(proxy_env):
    result = runner.invoke(app, ["render", "dockerfile"])
    assert result.exit_code == 1


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "nxdeploy v" in result.output


def test_deploy_empty_upstream_name_reports_error(proxy_env, monkeypatch):
    monkeypatch.setenv("NXDEPLOY_UPSTREAM_NAME", "")

    result = runner.invoke(app, ["deploy", "-T", "proxy"])

    assert result.exit_code == 1
    assert "✗" in result.output
    assert "Upstream name must not be empty" in result.output
    assert not proxy_env.exists()


def test_deploy_empty_site_path_reports_error(proxy_env, monkeypatch):
    monkeypatch.setenv("NXDEPLOY_SITE_DOMAIN", "www.example.com")
    monkeypatch.setenv("NXDEPLOY_SITE_PATH", "")

    result = runner.invoke(app, ["deploy", "-T", "proxy"])

    assert result.exit_code == 1
    assert "Site path must not be empty" in result.output
    assert not proxy_env.exists()
