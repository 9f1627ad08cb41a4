"""Shared constants for compose-backup."""

DEFAULT_IMAGE = "ubuntu"
DEFAULT_SHELL = "bash"
DEFAULT_CONFIG_FILE = "compose-backup.yml"

BACKUP_MOUNT_POINT = "/backup"
HELPER_CONTAINER_SUFFIX = "-backup"
