"""Helper container execution for compose-backup."""

from composebackup.constants import BACKUP_MOUNT_POINT, DEFAULT_SHELL, HELPER_CONTAINER_SUFFIX
from composebackup.models import ImageReference, ProjectConfig


class BackupExecutorService:
    """Creates and starts the short-lived container that writes the archives.

    The container shares the volumes of the service container, gets the host
    backup directory bound at ``/backup`` and removes itself on exit. The
    executor returns as soon as the container is started.
    """

    def __init__(self, runtime, logger, backup_directory: str, shell: str = DEFAULT_SHELL):
        self.runtime = runtime
        self.logger = logger
        self.backup_directory = backup_directory
        self.shell = shell

    @staticmethod
    def container_name(project: ProjectConfig) -> str:
        return f"{project.service}{HELPER_CONTAINER_SUFFIX}"

    def execute(
        self,
        project: ProjectConfig,
        container_id: str,
        reference: ImageReference,
        command: str,
    ) -> str:
        name = self.container_name(project)

        self.runtime.create_container(
            name=name,
            image=str(reference),
            command=[self.shell, "-c", command],
            binds=[f"{self.backup_directory}:{BACKUP_MOUNT_POINT}"],
            volumes_from=[container_id],
            auto_remove=True,
        )
        self.runtime.start_container(name)

        self.logger.debug("Image reference used %s", reference)
        self.logger.debug("Started helper container %s for %s", name, container_id)
        return name
