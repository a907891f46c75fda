"""Tests for environment-derived configuration."""
import pytest

from nxdeploy.core.config import (
    CommandSettings,
    DeployerConfig,
    ProxySettings,
    build_upstream_spec,
    get_config,
    set_config,
)
from nxdeploy.core.errors import ConfigurationError
from nxdeploy.models.deployment import GitProvider
from nxdeploy.models.overlay import CommandOverlay, ProxyOverlay


class TestFromEnv:
    """Test DeployerConfig.from_env."""

    def test_defaults(self):
        config = DeployerConfig.from_env({})

        assert config.proxy.nginx_root == "/etc/nginx"
        assert config.proxy.os_name == "ubuntu"
        assert config.proxy.api_conf == "api.conf"
        assert config.proxy.site_domain is None
        assert config.proxy.https_api is False
        assert config.proxy.upstream.name == "nxdeploy.controller"
        assert config.proxy.upstream.expected_count == 1
        assert config.remote_config.provider == GitProvider.GITHUB
        assert config.remote_config.is_configured is False
        assert config.fetch_timeout == 300
        assert config.service.command == []

    def test_reads_proxy_settings(self):
        config = DeployerConfig.from_env({
            "NXDEPLOY_NGINX_ROOT": "/usr/local/etc/nginx",
            "NXDEPLOY_NGINX_OS": "mac",
            "NXDEPLOY_API_DOMAIN": "api.example.com",
            "NXDEPLOY_SITE_DOMAIN": "www.example.com",
            "NXDEPLOY_HTTPS_API": "true",
            "NXDEPLOY_HTTP_API_REDIRECT": "1",
            "NXDEPLOY_HTTPS_SITE": "no",
            "NXDEPLOY_SSL_CUSTOM_CERTS": "yes",
            "NXDEPLOY_SSL_CUSTOM_CERTS_PATH": "/certs",
        })

        assert config.proxy.nginx_root == "/usr/local/etc/nginx"
        assert config.proxy.os_name == "mac"
        assert config.proxy.api_domain == "api.example.com"
        assert config.proxy.site_domain == "www.example.com"
        assert config.proxy.https_api is True
        assert config.proxy.http_api_redirect is True
        assert config.proxy.https_site is False
        assert config.proxy.custom_certs is True
        assert config.proxy.custom_certs_path == "/certs"

    def test_upstream_members_from_indexed_variables(self):
        config = DeployerConfig.from_env({
            "NXDEPLOY_UPSTREAM_NAME": "core",
            "NXDEPLOY_UPSTREAM_COUNT": "3",
            "NXDEPLOY_UPSTREAM_PORT": "4100",
            "NXDEPLOY_CONTROLLER_IP_1": "10.0.0.1",
            "NXDEPLOY_CONTROLLER_IP_3": "10.0.0.3",
        })

        members = config.proxy.upstream.members
        assert [m.host for m in members] == ["10.0.0.1", None, "10.0.0.3"]
        assert [m.binding for m in members] == [
            "NXDEPLOY_CONTROLLER_IP_1",
            "NXDEPLOY_CONTROLLER_IP_2",
            "NXDEPLOY_CONTROLLER_IP_3",
        ]
        assert all(m.port == 4100 for m in members)

    def test_remote_config_request(self):
        config = DeployerConfig.from_env({
            "NXDEPLOY_CONFIG_REPO_PROVIDER": "Bitbucket",
            "NXDEPLOY_CONFIG_REPO_OWNER": "acme",
            "NXDEPLOY_CONFIG_REPO_NAME": "proxy-config",
            "NXDEPLOY_CONFIG_REPO_BRANCH": "prod",
            "NXDEPLOY_CONFIG_REPO_DOMAIN": "bitbucket.org",
            "NXDEPLOY_CONFIG_REPO_TOKEN": "secret",
        })

        request = config.remote_config
        assert request.provider == GitProvider.BITBUCKET
        assert request.slug == "acme/proxy-config"
        assert request.branch == "prod"
        assert request.token == "secret"
        assert request.is_configured is True

    def test_unknown_provider_rejected_when_repo_configured(self):
        with pytest.raises(ConfigurationError, match="Unsupported git provider"):
            DeployerConfig.from_env({
                "NXDEPLOY_CONFIG_REPO_PROVIDER": "gitlab",
                "NXDEPLOY_CONFIG_REPO_OWNER": "acme",
                "NXDEPLOY_CONFIG_REPO_NAME": "proxy-config",
            })

    def test_unknown_provider_ignored_without_repo(self):
        config = DeployerConfig.from_env({"NXDEPLOY_CONFIG_REPO_PROVIDER": "gitlab"})
        assert config.remote_config.provider == GitProvider.GITHUB

    def test_invalid_integer(self):
        with pytest.raises(ConfigurationError, match="NXDEPLOY_UPSTREAM_COUNT"):
            DeployerConfig.from_env({"NXDEPLOY_UPSTREAM_COUNT": "three"})

    def test_commands_are_split(self):
        config = DeployerConfig.from_env({
            "NXDEPLOY_SERVICE_COMMAND": "node index.js --port 4000",
            "NXDEPLOY_SERVICE_WORKDIR": "/opt/app",
        })
        assert config.service.command == ["node", "index.js", "--port", "4000"]
        assert config.service.workdir == "/opt/app"

    def test_get_config_reads_environment_once(self, monkeypatch):
        monkeypatch.setenv("NXDEPLOY_API_DOMAIN", "first.example.com")
        first = get_config()
        monkeypatch.setenv("NXDEPLOY_API_DOMAIN", "second.example.com")

        assert get_config() is first
        assert first.proxy.api_domain == "first.example.com"

        set_config(None)
        assert get_config().proxy.api_domain == "second.example.com"


class TestUpstreamSpec:
    """Test upstream member declaration."""

    def test_host_prefix_generates_padded_names(self):
        spec = build_upstream_spec(
            name="core", count=3, port=4000, ip_env_name="IGNORED_", environ={}, host_prefix="controllerProxy"
        )
        assert [m.host for m in spec.members] == ["controllerProxy01", "controllerProxy02", "controllerProxy03"]

    def test_zero_members(self):
        spec = build_upstream_spec(name="core", count=0, port=4000, ip_env_name="IP_", environ={})
        assert spec.members == []

    def test_negative_count_rejected(self):
        with pytest.raises(ConfigurationError):
            build_upstream_spec(name="core", count=-1, port=4000, ip_env_name="IP_", environ={})


class TestOverlays:
    """Test applying configuration bundle overrides."""

    def test_proxy_overlay_only_changes_set_fields(self):
        settings = ProxySettings(api_domain="api.example.com", https_api=False)
        updated = settings.with_overlay(ProxyOverlay(site_domain="www.example.com", https_api=True))

        assert updated.api_domain == "api.example.com"
        assert updated.site_domain == "www.example.com"
        assert updated.https_api is True
        assert settings.site_domain is None

    def test_command_overlay_merges_env(self):
        settings = CommandSettings(command=["run"], workdir="/opt/app", env={"A": "1"})
        updated = settings.with_overlay(CommandOverlay(command="npm start", env={"B": "2"}))

        assert updated.command == ["npm", "start"]
        assert updated.workdir == "/opt/app"
        assert updated.env == {"A": "1", "B": "2"}

    def test_overlay_cannot_blank_api_domain(self):
        with pytest.raises(ConfigurationError, match="API domain"):
            ProxySettings().with_overlay(ProxyOverlay(api_domain=""))


class TestProxyValidation:
    """Test rejection of empty proxy names, domains and paths."""

    def test_empty_upstream_name(self):
        with pytest.raises(ConfigurationError, match="NXDEPLOY_UPSTREAM_NAME"):
            DeployerConfig.from_env({"NXDEPLOY_UPSTREAM_NAME": ""})

    def test_blank_api_domain(self):
        with pytest.raises(ConfigurationError, match="NXDEPLOY_API_DOMAIN"):
            DeployerConfig.from_env({"NXDEPLOY_API_DOMAIN": "  "})

    def test_empty_site_path_with_site_domain(self):
        with pytest.raises(ConfigurationError, match="www.example.com"):
            DeployerConfig.from_env({
                "NXDEPLOY_SITE_DOMAIN": "www.example.com",
                "NXDEPLOY_SITE_PATH": "",
            })

    def test_empty_site_path_ignored_without_site_domain(self):
        """No site block is written, so the path is never used."""
        config = DeployerConfig.from_env({"NXDEPLOY_SITE_PATH": ""})
        assert config.proxy.site_path == ""
        assert config.proxy.site_domain is None
