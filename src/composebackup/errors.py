"""Domain errors for compose-backup."""


class BackupError(RuntimeError):
    """Raised when the backup run cannot continue safely."""


class ConfigError(BackupError):
    """Configuration could not be loaded or is invalid."""


class RuntimeConnectionError(BackupError):
    """The container runtime could not be reached."""


class RuntimeOperationError(BackupError):
    """A search, pull, inspect, create or start call failed."""


class ProcessError(BackupError):
    """The compose tool could not be executed or its output was unusable."""


class ContainerNotFound(BackupError):
    """No running container matched a configured service."""

    def __init__(self, message: str, service: str, directory: str):
        super().__init__(message)
        self.service = service
        self.directory = directory
