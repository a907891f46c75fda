"""Where generated files go and which certificates they reference."""
import os
from dataclasses import dataclass
from typing import Optional

from nxdeploy.core.errors import ConfigurationError
from nxdeploy.models.nginx import CertLocation

CERT_FILE = "tls.crt"
KEY_FILE = "tls.key"
SSL_PARAMS_FILE = "ssl.conf"


@dataclass
class ConfigLayout:
    """Target directories for upstream and server block files."""
    upstream_dir: str
    sites_dir: str

    @classmethod
    def for_os(cls, nginx_root: str, os_name: str) -> "ConfigLayout":
        """Return the directory convention for ``os_name``.

        mac keeps everything in servers/, ubuntu splits conf.d/ and
        sites-enabled/, any other platform uses nginx/.
        """
        if os_name == "mac":
            servers = os.path.join(nginx_root, "servers")
            return cls(upstream_dir=servers, sites_dir=servers)
        if os_name == "ubuntu":
            return cls(
                upstream_dir=os.path.join(nginx_root, "conf.d"),
                sites_dir=os.path.join(nginx_root, "sites-enabled"),
            )
        fallback = os.path.join(nginx_root, "nginx")
        return cls(upstream_dir=fallback, sites_dir=fallback)


def resolve_cert_location(
    nginx_root: str,
    custom_certs: bool = False,
    custom_certs_path: Optional[str] = None,
) -> CertLocation:
    """Resolve certificate and key paths for HTTPS blocks.

    Certificates live in <nginx_root>/ssl unless custom certificates are
    enabled. The TLS parameter include always stays under <nginx_root>/ssl.
    """
    certs_dir = os.path.join(nginx_root, "ssl")
    if custom_certs:
        if not custom_certs_path:
            raise ConfigurationError("Custom certificates are enabled but no certificate path is configured")
        certs_dir = custom_certs_path

    return CertLocation(
        cert_path=os.path.join(certs_dir, CERT_FILE),
        key_path=os.path.join(certs_dir, KEY_FILE),
        params_path=os.path.join(nginx_root, "ssl", SSL_PARAMS_FILE),
    )
