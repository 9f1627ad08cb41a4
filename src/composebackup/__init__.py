"""
compose-backup - Volume backups for docker-compose services
"""

__version__ = "0.3.0"

from .core import BackupError, ComposeBackup

__all__ = ["ComposeBackup", "BackupError"]
