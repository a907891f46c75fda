"""Proxy configuration generation."""
from nxdeploy.nginx.layout import ConfigLayout, resolve_cert_location
from nxdeploy.nginx.writer import UPSTREAM_FILE, ConfigBlockWriter

__all__ = [
    "ConfigBlockWriter",
    "ConfigLayout",
    "UPSTREAM_FILE",
    "resolve_cert_location",
]
