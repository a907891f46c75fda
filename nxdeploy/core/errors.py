"""Error types raised by a deployment run."""


class DeployerError(Exception):
    """Base class for fatal deployment errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(DeployerError):
    """Raised for an unknown deployment type or an invalid configuration."""


class FetchError(DeployerError):
    """Raised when the configuration repository cannot be cloned."""


class WriteError(DeployerError):
    """Raised when an artifact cannot be written."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(message)
