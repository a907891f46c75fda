"""Service and node deployments: hand a launch command to the host."""
import os
import subprocess
from pathlib import Path
from typing import Optional

from nxdeploy.core.config import CommandSettings, DeployerConfig
from nxdeploy.core.errors import ConfigurationError, DeployerError
from nxdeploy.core.logger import get_logger
from nxdeploy.deploy.base import DeploymentHandler
from nxdeploy.models.deployment import DeploymentOptions, DeploymentType
from nxdeploy.models.overlay import ConfigOverlay

logger = get_logger(__name__)


class ProcessDeployment(DeploymentHandler):
    """Runs the configured command once and waits for it to exit."""

    def select_settings(self, config: DeployerConfig, overlay: Optional[ConfigOverlay]) -> CommandSettings:
        key = self.deployment_type.value
        settings: CommandSettings = getattr(config, key)
        return settings.with_overlay(getattr(overlay, key) if overlay else None)

    def deploy(self, options: DeploymentOptions, settings: CommandSettings) -> None:
        name = self.deployment_type.value
        if not settings.command:
            raise ConfigurationError(
                f"No {name} command configured. Set NXDEPLOY_{name.upper()}_COMMAND "
                f"or '{name}.command' in the configuration repository"
            )

        if settings.workdir and not Path(settings.workdir).is_dir():
            raise ConfigurationError(f"{name} working directory {settings.workdir} does not exist")

        printable = " ".join(settings.command)
        if self.mock or options.dry_run:
            logger.info(f"MOCK: Would run '{printable}' in {settings.workdir or os.getcwd()}")
            return

        env = {**os.environ, **settings.env} if settings.env else None

        try:
            logger.info(f"Starting {name}: {printable}")
            subprocess.run(settings.command, cwd=settings.workdir, env=env, check=True)
        except subprocess.CalledProcessError as e:
            raise DeployerError(f"{name} command '{printable}' exited with code {e.returncode}") from None
        except OSError as e:
            raise DeployerError(f"Unable to start {name} command '{printable}': {e}") from e

        logger.info(f"✓ {name} command finished")


class ServiceDeployment(ProcessDeployment):
    deployment_type = DeploymentType.SERVICE


class NodeDeployment(ProcessDeployment):
    deployment_type = DeploymentType.NODE
