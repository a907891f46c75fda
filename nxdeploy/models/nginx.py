"""Proxy tier configuration models."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from nxdeploy.core.errors import ConfigurationError


class BodyKind(Enum):
    """What a server block does with matched requests."""
    PROXY = "proxy"      # Forward to an upstream pool
    STATIC = "static"    # Serve files from a root directory


@dataclass
class UpstreamMember:
    """One backend address in an upstream pool.

    ``host`` is None when the binding that should provide it is unset.
    """
    host: Optional[str]
    port: int
    binding: Optional[str] = None  # Env variable the host was read from

    @property
    def resolved(self) -> bool:
        return bool(self.host)


@dataclass
class UpstreamSpec:
    """Named pool of backend members, in declaration order."""
    name: str
    members: List[UpstreamMember] = field(default_factory=list)

    @property
    def expected_count(self) -> int:
        return len(self.members)

    def resolved_members(self) -> List[UpstreamMember]:
        return [member for member in self.members if member.resolved]

    def unresolved_members(self) -> List[UpstreamMember]:
        return [member for member in self.members if not member.resolved]


@dataclass
class LocationBody:
    """Routing body of a server block."""
    kind: BodyKind
    upstream_name: Optional[str] = None
    root_path: Optional[str] = None

    def __post_init__(self):
        if self.kind == BodyKind.PROXY and not self.upstream_name:
            raise ConfigurationError("Proxy body requires an upstream name")
        if self.kind == BodyKind.STATIC and not self.root_path:
            raise ConfigurationError("Static body requires a root path")


@dataclass
class CertLocation:
    """Certificate, key and TLS parameter include used by HTTPS blocks."""
    cert_path: str
    key_path: str
    params_path: str


@dataclass
class ServerBlockSpec:
    """Virtual host definition for one domain."""
    domain: str
    body: LocationBody
    tls: bool = False
    redirect_from_http: bool = False
    listen_port: str = "80"
    tls_listen_port: str = "443 ssl"
    client_max_body_size: str = "100m"

    @property
    def emits_redirect(self) -> bool:
        """Redirect only exists alongside an HTTPS block."""
        return self.tls and self.redirect_from_http
