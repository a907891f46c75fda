"""nxdeploy runtime configuration, read once from the environment."""
import dataclasses
import os
import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from nxdeploy.core.errors import ConfigurationError
from nxdeploy.models.deployment import GitProvider, RemoteConfigRequest
from nxdeploy.models.nginx import UpstreamMember, UpstreamSpec
from nxdeploy.models.overlay import CommandOverlay, ProxyOverlay

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class ProxySettings:
    """Settings for the proxy tier deployment.

    Attributes:
        nginx_root: Install root of the proxy, also the output root
        os_name: Layout discriminator ("mac", "ubuntu", anything else)
        upstream: Upstream pool with its members already resolved
        site_domain: Site block is only written when this is set
        custom_certs_path: Used instead of <nginx_root>/ssl when custom_certs is on
    """

    nginx_root: str = "/etc/nginx"
    os_name: str = "ubuntu"
    upstream: UpstreamSpec = field(default_factory=lambda: UpstreamSpec(name="nxdeploy.controller"))

    api_conf: str = "api.conf"
    api_domain: str = "api.example.com"
    site_conf: str = "site.conf"
    site_domain: Optional[str] = None
    site_path: str = "/opt/nxdeploy/site"

    https_api: bool = False
    http_api_redirect: bool = False
    https_site: bool = False
    http_site_redirect: bool = False

    custom_certs: bool = False
    custom_certs_path: Optional[str] = None

    def with_overlay(self, overlay: Optional[ProxyOverlay]) -> "ProxySettings":
        """Return a copy with the bundle's proxy overrides applied."""
        if overlay is None:
            return self
        return dataclasses.replace(self, **overlay.overrides()).validate()

    def validate(self) -> "ProxySettings":
        """Reject values that would render an unusable proxy config.

        Raises:
            ConfigurationError: If a name, domain or path the blocks need is empty
        """
        if not self.upstream.name.strip():
            raise ConfigurationError("Upstream name must not be empty (NXDEPLOY_UPSTREAM_NAME)")
        if not self.api_domain.strip():
            raise ConfigurationError("API domain must not be empty (NXDEPLOY_API_DOMAIN)")
        if self.site_domain and not self.site_path.strip():
            raise ConfigurationError(
                f"Site path must not be empty when a site domain is set ({self.site_domain})"
            )
        return self


@dataclass
class CommandSettings:
    """Process launch settings for service and node deployments."""

    command: List[str] = field(default_factory=list)
    workdir: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)

    def with_overlay(self, overlay: Optional[CommandOverlay]) -> "CommandSettings":
        if overlay is None:
            return self
        command = self.command
        if overlay.command:
            command = _split_command(overlay.command)
        return CommandSettings(
            command=command,
            workdir=overlay.workdir or self.workdir,
            env={**self.env, **overlay.env},
        )


@dataclass
class DeployerConfig:
    """Everything the deployer reads from its environment.

    Built once at startup and passed down; inner components never consult
    the environment themselves.
    """

    proxy: ProxySettings = field(default_factory=ProxySettings)
    service: CommandSettings = field(default_factory=CommandSettings)
    node: CommandSettings = field(default_factory=CommandSettings)
    remote_config: RemoteConfigRequest = field(default_factory=RemoteConfigRequest)
    config_repo_path: str = "/opt/nxdeploy/config-repo"
    fetch_timeout: int = 300  # 5 minutes for the config repo clone

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DeployerConfig":
        """Create config from environment variables.

        Environment variables:
            NXDEPLOY_NGINX_ROOT, NXDEPLOY_NGINX_OS: proxy install root and layout
            NXDEPLOY_UPSTREAM_*: upstream pool name, member source, count, port
            NXDEPLOY_API_*, NXDEPLOY_SITE_*: server block names and domains
            NXDEPLOY_HTTPS_*, NXDEPLOY_HTTP_*_REDIRECT, NXDEPLOY_SSL_*: TLS switches
            NXDEPLOY_CONFIG_REPO_*: configuration repository to clone
            NXDEPLOY_SERVICE_*, NXDEPLOY_NODE_*: launch commands
            NXDEPLOY_FETCH_TIMEOUT: clone timeout in seconds

        Raises:
            ConfigurationError: On malformed numbers, empty proxy names or an unknown git provider
        """
        env = os.environ if environ is None else environ

        upstream = build_upstream_spec(
            name=env.get("NXDEPLOY_UPSTREAM_NAME", "nxdeploy.controller"),
            count=_env_int(env, "NXDEPLOY_UPSTREAM_COUNT", 1),
            port=_env_int(env, "NXDEPLOY_UPSTREAM_PORT", 4000),
            ip_env_name=env.get("NXDEPLOY_UPSTREAM_IP_ENV", "NXDEPLOY_CONTROLLER_IP_"),
            host_prefix=env.get("NXDEPLOY_UPSTREAM_HOST_PREFIX") or None,
            environ=env,
        )

        proxy = ProxySettings(
            nginx_root=env.get("NXDEPLOY_NGINX_ROOT", "/etc/nginx"),
            os_name=env.get("NXDEPLOY_NGINX_OS", "ubuntu"),
            upstream=upstream,
            api_conf=env.get("NXDEPLOY_API_CONF", "api.conf"),
            api_domain=env.get("NXDEPLOY_API_DOMAIN", "api.example.com"),
            site_conf=env.get("NXDEPLOY_SITE_CONF", "site.conf"),
            site_domain=env.get("NXDEPLOY_SITE_DOMAIN") or None,
            site_path=env.get("NXDEPLOY_SITE_PATH", "/opt/nxdeploy/site"),
            https_api=_env_bool(env, "NXDEPLOY_HTTPS_API"),
            http_api_redirect=_env_bool(env, "NXDEPLOY_HTTP_API_REDIRECT"),
            https_site=_env_bool(env, "NXDEPLOY_HTTPS_SITE"),
            http_site_redirect=_env_bool(env, "NXDEPLOY_HTTP_SITE_REDIRECT"),
            custom_certs=_env_bool(env, "NXDEPLOY_SSL_CUSTOM_CERTS"),
            custom_certs_path=env.get("NXDEPLOY_SSL_CUSTOM_CERTS_PATH") or None,
        ).validate()

        remote_config = RemoteConfigRequest(
            provider=_env_provider(env),
            owner=env.get("NXDEPLOY_CONFIG_REPO_OWNER") or None,
            repo=env.get("NXDEPLOY_CONFIG_REPO_NAME") or None,
            branch=env.get("NXDEPLOY_CONFIG_REPO_BRANCH", "master"),
            domain=env.get("NXDEPLOY_CONFIG_REPO_DOMAIN", "github.com"),
            token=env.get("NXDEPLOY_CONFIG_REPO_TOKEN") or None,
        )

        return cls(
            proxy=proxy,
            service=CommandSettings(
                command=_split_command(env.get("NXDEPLOY_SERVICE_COMMAND", "")),
                workdir=env.get("NXDEPLOY_SERVICE_WORKDIR") or None,
            ),
            node=CommandSettings(
                command=_split_command(env.get("NXDEPLOY_NODE_COMMAND", "")),
                workdir=env.get("NXDEPLOY_NODE_WORKDIR") or None,
            ),
            remote_config=remote_config,
            config_repo_path=env.get("NXDEPLOY_CONFIG_REPO_PATH", "/opt/nxdeploy/config-repo"),
            fetch_timeout=_env_int(env, "NXDEPLOY_FETCH_TIMEOUT", 300),
        )


def build_upstream_spec(
    name: str,
    count: int,
    port: int,
    ip_env_name: str,
    environ: Mapping[str, str],
    host_prefix: Optional[str] = None,
) -> UpstreamSpec:
    """Declare ``count`` members for the upstream pool.

    Hosts come from ``<ip_env_name><index>`` (index starting at 1). When
    ``host_prefix`` is given, hosts are ``<host_prefix><index:02d>`` instead.
    Members whose variable is unset keep ``host=None``.
    """
    if count < 0:
        raise ConfigurationError(f"Upstream member count must not be negative, got {count}")

    members = []
    for index in range(1, count + 1):
        if host_prefix:
            members.append(UpstreamMember(host=f"{host_prefix}{index:02d}", port=port))
            continue
        binding = f"{ip_env_name}{index}"
        members.append(UpstreamMember(host=environ.get(binding) or None, port=port, binding=binding))

    return UpstreamSpec(name=name, members=members)


def _env_bool(env: Mapping[str, str], key: str, default: bool = False) -> bool:
    value = env.get(key)
    if value is None or value == "":
        return default
    return value.strip().lower() in TRUE_VALUES


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    value = env.get(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got '{value}'") from None


def _env_provider(env: Mapping[str, str]) -> GitProvider:
    value = env.get("NXDEPLOY_CONFIG_REPO_PROVIDER") or GitProvider.GITHUB.value
    configured = env.get("NXDEPLOY_CONFIG_REPO_OWNER") and env.get("NXDEPLOY_CONFIG_REPO_NAME")
    try:
        return GitProvider(value.strip().lower())
    except ValueError:
        if not configured:
            return GitProvider.GITHUB
        choices = ", ".join(provider.value for provider in GitProvider)
        raise ConfigurationError(
            f"Unsupported git provider '{value}'. Choose one of: {choices}"
        ) from None


def _split_command(command) -> List[str]:
    if isinstance(command, list):
        return list(command)
    return shlex.split(command) if command else []


# Global config instance (can be overridden)
_config: Optional[DeployerConfig] = None


def get_config() -> DeployerConfig:
    """Get the process-wide configuration, reading the environment on first use."""
    global _config
    if _config is None:
        _config = DeployerConfig.from_env()
    return _config


def set_config(config: Optional[DeployerConfig]):
    """Replace the process-wide configuration (None forces a re-read)."""
    global _config
    _config = config
