"""Shared domain models for compose-backup."""

from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import DEFAULT_SHELL


@dataclass(frozen=True)
class ProjectConfig:
    """One compose service whose volumes are backed up."""

    service: str
    docker_compose: str
    path: Optional[str] = None
    backup_command: Optional[str] = None


@dataclass(frozen=True)
class RunConfiguration:
    """Settings for a single backup pass, shared read-only by every service."""

    backup_directory: str
    projects: Tuple[ProjectConfig, ...]
    image: Optional[str] = None
    docker_host: Optional[str] = None
    shell: str = DEFAULT_SHELL
    compose_timeout: Optional[float] = None
    continue_on_error: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class ImageReference:
    name: str
    tag: Optional[str] = None

    def __str__(self) -> str:
        if self.tag is None:
            return self.name
        return f"{self.name}:{self.tag}"


@dataclass(frozen=True)
class ProjectResult:
    """Outcome of one project within a run."""

    service: str
    status: str
    container_id: Optional[str] = None
    command: Optional[str] = None
    error: Optional[str] = None
