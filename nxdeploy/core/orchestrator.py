"""Deployment run sequencing: fetch, dispatch, generate, done."""
from enum import Enum
from typing import Dict, List, Optional, Set

from nxdeploy.config.loader import load_overlay
from nxdeploy.core.config import DeployerConfig
from nxdeploy.core.logger import get_logger
from nxdeploy.core.sink import ArtifactSink
from nxdeploy.deploy.registry import get_handler
from nxdeploy.models.deployment import DeploymentOptions, DeploymentPaths, DeploymentType
from nxdeploy.models.overlay import ConfigOverlay
from nxdeploy.services.git_fetcher import RepositoryFetcher

logger = get_logger(__name__)


class RunState(Enum):
    """Stages of a single deployment run."""
    INIT = "init"
    FETCHING = "fetching"
    DISPATCHING = "dispatching"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"


TRANSITIONS: Dict[RunState, Set[RunState]] = {
    RunState.INIT: {RunState.FETCHING, RunState.DISPATCHING, RunState.FAILED},
    RunState.FETCHING: {RunState.DISPATCHING, RunState.FAILED},
    RunState.DISPATCHING: {RunState.GENERATING, RunState.FAILED},
    RunState.GENERATING: {RunState.DONE, RunState.FAILED},
    RunState.DONE: set(),
    RunState.FAILED: set(),
}


def build_options(config: DeployerConfig, deployment_type: str, dry_run: bool = False) -> DeploymentOptions:
    """Validate the requested type and assemble the run options.

    Raises:
        ConfigurationError: If ``deployment_type`` is not supported
    """
    return DeploymentOptions(
        type=DeploymentType.parse(deployment_type),
        paths=DeploymentPaths(
            output_root=config.proxy.nginx_root,
            remote_config_root=config.config_repo_path,
        ),
        remote_config=config.remote_config if config.remote_config.is_configured else None,
        dry_run=dry_run,
    )


class DeploymentOrchestrator:
    """Runs one deployment from start to finish.

    States only move forward; a run is never retried and an orchestrator
    instance cannot be reused.
    """

    def __init__(self, config: DeployerConfig, sink: ArtifactSink, fetcher: RepositoryFetcher):
        self.config = config
        self.sink = sink
        self.fetcher = fetcher
        self.state = RunState.INIT
        self.history: List[RunState] = [RunState.INIT]
        self.overlay: Optional[ConfigOverlay] = None

    def run(self, deployment_type: str, dry_run: bool = False) -> DeploymentOptions:
        """Execute the run and return the options it was performed with.

        Raises:
            DeployerError: Any fatal error, after moving to FAILED
        """
        if self.state != RunState.INIT:
            raise RuntimeError(f"Deployment run already {self.state.value}")

        try:
            options = build_options(self.config, deployment_type, dry_run=dry_run)
            logger.info(f"Deploying a new {options.type.value} instance ...")

            logger.info("Looking for configuration repository settings ...")
            if options.remote_config is not None:
                self._transition(RunState.FETCHING)
                self.overlay = self._fetch(options)
            else:
                logger.info("No configuration repository detected, proceeding ...")

            self._transition(RunState.DISPATCHING)
            handler = get_handler(options.type, self.sink, mock=dry_run)
            settings = handler.select_settings(self.config, self.overlay)

            self._transition(RunState.GENERATING)
            handler.deploy(options, settings)

            self._transition(RunState.DONE)
        except Exception as e:
            logger.error(f"Deployment failed during {self.state.value}: {e}")
            self._transition(RunState.FAILED)
            raise

        logger.info(f"✓ {options.type.value} deployment complete")
        return options

    def _fetch(self, options: DeploymentOptions) -> Optional[ConfigOverlay]:
        logger.info("Configuration repository detected, cloning ...")
        fetched = self.fetcher.fetch(options.remote_config, options.paths.remote_config_root)
        if not fetched:
            return None
        return load_overlay(options.paths.remote_config_root)

    def _transition(self, new_state: RunState):
        if new_state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid transition {self.state.value} -> {new_state.value}")
        logger.debug(f"Run state {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)
