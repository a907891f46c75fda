"""Destinations for generated artifacts."""
from pathlib import Path
from typing import Dict

from nxdeploy.core.errors import WriteError
from nxdeploy.core.logger import get_logger

logger = get_logger(__name__)


class ArtifactSink:
    """Writes one named file per call, replacing any previous content."""

    def write(self, path: str, content: str) -> None:
        raise NotImplementedError


class FileArtifactSink(ArtifactSink):
    """Writes artifacts to the local filesystem."""

    def write(self, path: str, content: str) -> None:
        """Create or truncate ``path`` and write ``content`` in full.

        Raises:
            WriteError: If the directory or file cannot be written
        """
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w") as handle:
                handle.write(content)
        except OSError as exc:
            logger.error(f"Failed to write {target}: {exc}")
            raise WriteError(f"Failed to write {target}: {exc}", path=str(target)) from exc

        logger.debug(f"Wrote {len(content)} bytes to {target}")


class MemoryArtifactSink(ArtifactSink):
    """Keeps artifacts in memory; used for dry runs and rendering previews."""

    def __init__(self):
        self.files: Dict[str, str] = {}

    def write(self, path: str, content: str) -> None:
        logger.info(f"MOCK: Would write {path}")
        self.files[str(path)] = content
