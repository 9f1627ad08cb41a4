"""Docker runtime services for compose-backup."""

from typing import Any, Dict, Iterator, List, Optional

import docker
import requests

from composebackup.errors import RuntimeConnectionError, RuntimeOperationError
from composebackup.errors_catalog import actionable_error

RUNTIME_ERRORS = (docker.errors.DockerException, requests.exceptions.RequestException)


class DockerRuntimeService:
    """Thin wrapper over the Docker Engine API used by the backup services."""

    def __init__(self, logger, api_client=None, docker_module=docker, base_url: Optional[str] = None):
        self.logger = logger
        self.docker = docker_module
        self.base_url = base_url
        self._api = api_client

    @property
    def api(self):
        if self._api is None:
            self.connect()
        return self._api

    def connect(self):
        """Open the API client if needed and make sure the daemon answers."""
        try:
            if self._api is None:
                if self.base_url:
                    self._api = self.docker.APIClient(base_url=self.base_url)
                else:
                    self._api = self.docker.APIClient(**self.docker.utils.kwargs_from_env())
            self._api.ping()
        except RUNTIME_ERRORS as exc:
            raise RuntimeConnectionError(actionable_error("runtime_unreachable", reason=str(exc))) from exc

        self.logger.debug("Connected to Docker daemon at %s", self.base_url or "environment defaults")

    def search_images(self, term: str) -> List[Dict[str, Any]]:
        try:
            return self.api.search(term)
        except RUNTIME_ERRORS as exc:
            raise RuntimeOperationError(f"Image search for '{term}' failed: {exc}") from exc

    def pull_image(self, name: str, tag: Optional[str] = None):
        label = f"{name}:{tag}" if tag else name
        try:
            stream: Iterator[Dict[str, Any]] = self.api.pull(name, tag=tag, stream=True, decode=True)
            for chunk in stream:
                if "error" in chunk:
                    raise RuntimeOperationError(f"Pull of '{label}' failed: {chunk['error']}")
                status = chunk.get("status")
                if status:
                    self.logger.debug("%s: %s", label, status)
        except RUNTIME_ERRORS as exc:
            raise RuntimeOperationError(f"Pull of '{label}' failed: {exc}") from exc

    def inspect_container(self, container_id: str) -> Dict[str, Any]:
        try:
            return self.api.inspect_container(container_id)
        except RUNTIME_ERRORS as exc:
            raise RuntimeOperationError(f"Could not inspect container {container_id}: {exc}") from exc

    def create_container(
        self,
        name: str,
        image: str,
        command: List[str],
        binds: List[str],
        volumes_from: List[str],
        auto_remove: bool = True,
    ) -> Dict[str, Any]:
        try:
            host_config = self.api.create_host_config(
                binds=binds,
                volumes_from=volumes_from,
                auto_remove=auto_remove,
            )
            return self.api.create_container(
                image=image,
                command=command,
                name=name,
                host_config=host_config,
            )
        except RUNTIME_ERRORS as exc:
            raise RuntimeOperationError(f"Could not create container {name}: {exc}") from exc

    def start_container(self, name: str):
        try:
            self.api.start(name)
        except RUNTIME_ERRORS as exc:
            raise RuntimeOperationError(f"Could not start container {name}: {exc}") from exc
