"""Common interface for deployment type handlers."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from nxdeploy.core.config import DeployerConfig
from nxdeploy.core.sink import ArtifactSink
from nxdeploy.models.deployment import DeploymentOptions, DeploymentType
from nxdeploy.models.overlay import ConfigOverlay


class DeploymentHandler(ABC):
    """One deployment type.

    Handlers get the run options plus their own settings subtree and signal
    completion by returning; any failure is raised.
    """

    deployment_type: DeploymentType

    def __init__(self, sink: ArtifactSink, mock: bool = False):
        self.sink = sink
        self.mock = mock

    @abstractmethod
    def select_settings(self, config: DeployerConfig, overlay: Optional[ConfigOverlay]) -> Any:
        """Return the settings subtree this handler consumes."""

    @abstractmethod
    def deploy(self, options: DeploymentOptions, settings: Any) -> None:
        """Run the deployment to completion."""
