"""Shared test fixtures for nxdeploy tests."""
import pytest

from nxdeploy.core.config import DeployerConfig, ProxySettings, set_config
from nxdeploy.core.sink import MemoryArtifactSink
from nxdeploy.models.nginx import CertLocation, UpstreamMember, UpstreamSpec


@pytest.fixture(autouse=True)
def reset_config():
    """Make every test start from a fresh environment read."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def sink():
    """In-memory artifact sink."""
    return MemoryArtifactSink()


@pytest.fixture
def cert_location():
    """Default certificate layout under /etc/nginx."""
    return CertLocation(
        cert_path="/etc/nginx/ssl/tls.crt",
        key_path="/etc/nginx/ssl/tls.key",
        params_path="/etc/nginx/ssl/ssl.conf",
    )


@pytest.fixture
def upstream():
    """Two resolved controller members."""
    return UpstreamSpec(
        name="core",
        members=[
            UpstreamMember(host="10.0.0.1", port=4000, binding="CTRL_IP_1"),
            UpstreamMember(host="10.0.0.2", port=4000, binding="CTRL_IP_2"),
        ],
    )


@pytest.fixture
def proxy_config(tmp_path, upstream):
    """Deployer config writing the proxy tier under tmp_path."""
    return DeployerConfig(
        proxy=ProxySettings(
            nginx_root=str(tmp_path / "nginx"),
            os_name="ubuntu",
            upstream=upstream,
            api_domain="api.example.com",
        ),
        config_repo_path=str(tmp_path / "config-repo"),
    )
