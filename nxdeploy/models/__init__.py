"""Data models for nxdeploy."""
from nxdeploy.models.deployment import (
    DeploymentOptions,
    DeploymentPaths,
    DeploymentType,
    GitProvider,
    RemoteConfigRequest,
)
from nxdeploy.models.nginx import (
    BodyKind,
    CertLocation,
    LocationBody,
    ServerBlockSpec,
    UpstreamMember,
    UpstreamSpec,
)

__all__ = [
    'BodyKind',
    'CertLocation',
    'DeploymentOptions',
    'DeploymentPaths',
    'DeploymentType',
    'GitProvider',
    'LocationBody',
    'RemoteConfigRequest',
    'ServerBlockSpec',
    'UpstreamMember',
    'UpstreamSpec',
]
