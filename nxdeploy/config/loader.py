"""Loader for the configuration bundle inside the cloned repository."""
import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from nxdeploy.core.errors import ConfigurationError
from nxdeploy.core.logger import get_logger
from nxdeploy.models.overlay import ConfigOverlay

logger = get_logger(__name__)

# Checked in order, first match wins
OVERLAY_FILES = ("config.json", "config.yml", "config.yaml")


def find_overlay(root: str) -> Path:
    """Return the first overlay file present under ``root``."""
    base = Path(root)
    for name in OVERLAY_FILES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    raise ConfigurationError(
        f"No {' / '.join(OVERLAY_FILES)} found in configuration repository {base}"
    )


def load_overlay(root: str) -> ConfigOverlay:
    """Parse and validate the configuration bundle.

    Raises:
        ConfigurationError: If the file is missing, unparseable or has the wrong shape
    """
    path = find_overlay(root)
    logger.info(f"Loading configuration overlay from {path}")

    try:
        with open(path) as f:
            if path.suffix == ".json":
                raw = json.load(f)
            else:
                raw = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        logger.error(f"Unable to parse {path.name} from configuration repository")
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path.name} must contain a mapping at the top level")

    try:
        return ConfigOverlay.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path.name}: {e}") from e
