"""Lookup of deployment handlers by type."""
from typing import Dict, List, Type, Union

from nxdeploy.core.sink import ArtifactSink
from nxdeploy.deploy.base import DeploymentHandler
from nxdeploy.deploy.process import NodeDeployment, ServiceDeployment
from nxdeploy.deploy.proxy import ProxyDeployment
from nxdeploy.models.deployment import DeploymentType

HANDLERS: Dict[DeploymentType, Type[DeploymentHandler]] = {
    DeploymentType.PROXY: ProxyDeployment,
    DeploymentType.SERVICE: ServiceDeployment,
    DeploymentType.NODE: NodeDeployment,
}


def get_handler(
    deployment_type: Union[DeploymentType, str],
    sink: ArtifactSink,
    mock: bool = False,
) -> DeploymentHandler:
    """Instantiate the handler for ``deployment_type``.

    Raises:
        ConfigurationError: If the type is not one of the supported values
    """
    if not isinstance(deployment_type, DeploymentType):
        deployment_type = DeploymentType.parse(deployment_type)
    return HANDLERS[deployment_type](sink, mock=mock)


def list_deployment_types() -> List[str]:
    return [deployment_type.value for deployment_type in HANDLERS]
