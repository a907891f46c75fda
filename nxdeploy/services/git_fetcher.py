"""Shallow clone of the configuration repository."""
import subprocess
from pathlib import Path
from typing import Optional

from nxdeploy.core.errors import ConfigurationError, FetchError
from nxdeploy.core.logger import get_logger
from nxdeploy.models.deployment import BITBUCKET_CLOUD_DOMAIN, GitProvider, RemoteConfigRequest

logger = get_logger(__name__)


def build_clone_url(request: RemoteConfigRequest) -> str:
    """Return the HTTPS clone URL for ``request``, embedding the token if any.

    Bitbucket Cloud takes the token as ``x-token-auth`` credentials, while
    self-hosted Bitbucket servers expose repositories under ``/scm/``.
    """
    domain, owner, repo, token = request.domain, request.owner, request.repo, request.token

    if not token:
        return f"https://{domain}/{owner}/{repo}"

    if request.provider == GitProvider.GITHUB:
        return f"https://{token}@{domain}/{owner}/{repo}"

    if request.provider == GitProvider.BITBUCKET:
        if domain == BITBUCKET_CLOUD_DOMAIN:
            return f"https://x-token-auth:{token}@{domain}/{owner}/{repo}"
        return f"https://{token}@{domain}/scm/{owner}/{repo}"

    raise ConfigurationError(f"Unsupported git provider: {request.provider}")


def redact(text: str, token: Optional[str]) -> str:
    """Hide the access token in anything that ends up in logs or errors."""
    if not token or not text:
        return text
    return text.replace(token, "****")


class RepositoryFetcher:
    """Clones the configuration repository, exactly once per run."""

    def __init__(self, mock: bool = False, timeout: Optional[int] = 300):
        self.mock = mock
        self.timeout = timeout

    def fetch(self, request: RemoteConfigRequest, destination: str) -> bool:
        """Clone ``request.branch`` at depth 1 into ``destination``.

        Args:
            request: Repository coordinates and optional token
            destination: Directory to create and clone into

        Returns:
            True if a clone was made, False when skipped (nothing configured or mock mode)

        Raises:
            FetchError: If the destination is already populated or git fails
        """
        if not request.is_configured:
            logger.info("Repository information is missing, skipping ...")
            return False

        url = build_clone_url(request)
        visibility = "private" if request.token else "public"
        logger.info(f"Cloning from {request.provider.value} {visibility} repository {request.slug} ...")

        if self.mock:
            logger.info(f"MOCK: Would clone {redact(url, request.token)} ({request.branch}) to {destination}")
            return False

        self._prepare_destination(Path(destination))

        clone_cmd = [
            'git', 'clone',
            '--branch', request.branch,
            '--depth', '1',
            '--single-branch',
            url, str(destination),
        ]

        try:
            result = subprocess.run(
                clone_cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            stderr = redact(e.stderr or "", request.token).strip()
            logger.error(f"Failed to clone repository {request.slug} (exit code {e.returncode})")
            if stderr:
                logger.error(f"Error output: {stderr}")
            raise FetchError(
                f"git clone of {request.slug} exited with code {e.returncode}: {stderr}"
            ) from None
        except subprocess.TimeoutExpired:
            raise FetchError(
                f"git clone of {request.slug} did not finish within {self.timeout}s"
            ) from None
        except OSError as e:
            raise FetchError(f"Unable to run git: {e}") from e

        if result.stdout:
            logger.debug(f"Git output: {redact(result.stdout, request.token)}")
        logger.info(f"✓ Cloned repository {request.slug} ({request.branch}) into {destination}")
        return True

    def _prepare_destination(self, destination: Path):
        if destination.exists() and (not destination.is_dir() or any(destination.iterdir())):
            raise FetchError(f"Clone destination {destination} already exists and is not empty")
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FetchError(f"Unable to create clone destination {destination}: {e}") from e
