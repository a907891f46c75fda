"""Deployment type handlers."""
from nxdeploy.deploy.base import DeploymentHandler
from nxdeploy.deploy.process import NodeDeployment, ServiceDeployment
from nxdeploy.deploy.proxy import ProxyDeployment
from nxdeploy.deploy.registry import get_handler, list_deployment_types

__all__ = [
    "DeploymentHandler",
    "NodeDeployment",
    "ProxyDeployment",
    "ServiceDeployment",
    "get_handler",
    "list_deployment_types",
]
