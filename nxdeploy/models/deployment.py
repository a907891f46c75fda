"""Deployment run models."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from nxdeploy.core.errors import ConfigurationError


class DeploymentType(Enum):
    """Closed set of deployment targets."""
    PROXY = "proxy"
    SERVICE = "service"
    NODE = "node"

    @classmethod
    def parse(cls, value: str) -> "DeploymentType":
        """Return the member for ``value`` or raise ConfigurationError."""
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ConfigurationError(
                f"Unsupported deployment type '{value}'. Choose one of: {choices}"
            ) from None


class GitProvider(Enum):
    """Hosting providers the configuration repository can live on."""
    GITHUB = "github"
    BITBUCKET = "bitbucket"


BITBUCKET_CLOUD_DOMAIN = "bitbucket.org"


@dataclass
class RemoteConfigRequest:
    """Where to clone the configuration repository from."""
    provider: GitProvider = GitProvider.GITHUB
    owner: Optional[str] = None
    repo: Optional[str] = None
    branch: str = "master"
    domain: str = "github.com"
    token: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.owner and self.repo)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class DeploymentPaths:
    """Filesystem roots used during a run."""
    output_root: str
    remote_config_root: str


@dataclass
class DeploymentOptions:
    """Everything a single run needs, built once at startup."""
    type: DeploymentType
    paths: DeploymentPaths
    remote_config: Optional[RemoteConfigRequest] = None
    dry_run: bool = False
