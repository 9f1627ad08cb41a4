"""Backup command synthesis for compose-backup."""

import shlex
from datetime import datetime, timezone
from typing import Callable, Dict

from composebackup.constants import BACKUP_MOUNT_POINT
from composebackup.models import ProjectConfig


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BackupCommandService:
    """Builds the shell command run by the helper container."""

    def __init__(self, logger, clock: Callable[[], datetime] = utc_now):
        self.logger = logger
        self.clock = clock

    def archive_path(self, service: str, key: str, timestamp: str) -> str:
        return f"{BACKUP_MOUNT_POINT}/{service}_{key}_{timestamp}.tar"

    def synthesize(self, project: ProjectConfig, mounts: Dict[str, str]) -> str:
        timestamp = self.clock().isoformat()

        commands = []
        for key, destination in mounts.items():
            if project.backup_command:
                backup_command = project.backup_command
            else:
                archive = self.archive_path(project.service, key, timestamp)
                backup_command = f"tar cf {shlex.quote(archive)} ."
            commands.append(f"cd {shlex.quote(destination)} && {backup_command}")

        command = " && ".join(commands)
        self.logger.debug("Backup command for %s: %s", project.service, command)
        return command
