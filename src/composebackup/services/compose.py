"""Docker Compose lookup services for compose-backup."""

import os
import subprocess
from typing import List, Optional

from composebackup.errors import ContainerNotFound, ProcessError
from composebackup.errors_catalog import actionable_error
from composebackup.models import ProjectConfig


class ComposeService:
    """Maps compose services to the ids of their running containers."""

    def __init__(
        self,
        command_runner,
        logger,
        subprocess_module=subprocess,
        compose_cmd: Optional[List[str]] = None,
        timeout: Optional[float] = None,
    ):
        self.command_runner = command_runner
        self.logger = logger
        self.subprocess = subprocess_module
        self.timeout = timeout
        self._compose_cmd = compose_cmd

    def get_docker_compose_cmd(self) -> List[str]:
        if self._compose_cmd is not None:
            return self._compose_cmd

        try:
            self.subprocess.run(["docker-compose", "--version"], check=True, capture_output=True)
            self._compose_cmd = ["docker-compose"]
        except (self.subprocess.CalledProcessError, OSError):
            try:
                self.subprocess.run(["docker", "compose", "version"], check=True, capture_output=True)
                self._compose_cmd = ["docker", "compose"]
            except (self.subprocess.CalledProcessError, OSError):
                raise ProcessError(actionable_error("compose_unavailable"))

        self.logger.debug("Using compose command: %s", " ".join(self._compose_cmd))
        return self._compose_cmd

    def locate_container(self, project: ProjectConfig) -> str:
        if not os.path.isdir(project.docker_compose):
            raise ProcessError(
                actionable_error(
                    "compose_directory_missing",
                    service=project.service,
                    directory=project.docker_compose,
                )
            )

        cmd = self.get_docker_compose_cmd() + ["ps", "--quiet", project.service]
        result = self.command_runner.run(
            cmd,
            cwd=project.docker_compose,
            capture_output=True,
            timeout=self.timeout,
        )

        container_ids = (result.stdout or "").strip()
        if not container_ids:
            raise ContainerNotFound(
                actionable_error(
                    "container_not_found",
                    service=project.service,
                    directory=project.docker_compose,
                ),
                service=project.service,
                directory=project.docker_compose,
            )

        container_id = container_ids.splitlines()[0].strip()
        self.logger.debug("Service %s runs in container %s", project.service, container_id)
        return container_id
