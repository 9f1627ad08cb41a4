"""Configuration loader for compose-backup."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from composebackup.constants import DEFAULT_SHELL
from composebackup.errors import ConfigError
from composebackup.errors_catalog import actionable_error
from composebackup.models import ProjectConfig, RunConfiguration


class ConfigLoader:
    """Loads the YAML backup configuration and turns it into a RunConfiguration."""

    SUPPORTED_KEYS = {
        "backup_directory",
        "image",
        "projects",
        "docker_host",
        "shell",
        "compose_timeout",
        "continue_on_error",
        "dry_run",
    }
    PROJECT_KEYS = {"service", "docker_compose", "path", "backup_command"}

    def load(self, config_path: str) -> Dict[str, Any]:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(actionable_error("config_not_found", path=config_path))

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise ConfigError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ConfigError(f"Unknown configuration keys: {unknown_list}")

        return parsed

    def build(self, values: Dict[str, Any], base_dir: Optional[str] = None) -> RunConfiguration:
        """Validate raw values and resolve relative paths against ``base_dir``."""
        backup_directory = self._require_str(values, "backup_directory", "config")

        raw_projects = values.get("projects")
        if not isinstance(raw_projects, list) or not raw_projects:
            raise ConfigError("`projects` must be a non-empty list.")

        projects = []
        for index, raw_project in enumerate(raw_projects):
            label = f"projects[{index}]"
            if not isinstance(raw_project, dict):
                raise ConfigError(f"`{label}` must be a mapping.")

            unknown = sorted(set(raw_project.keys()) - self.PROJECT_KEYS)
            if unknown:
                raise ConfigError(f"Unknown keys in `{label}`: {', '.join(unknown)}")

            docker_compose = self._resolve_path(
                self._require_str(raw_project, "docker_compose", label), base_dir
            )
            path = self._optional_str(raw_project, "path", label)
            projects.append(
                ProjectConfig(
                    service=self._require_str(raw_project, "service", label),
                    docker_compose=docker_compose,
                    path=self._resolve_path(path, base_dir) if path else docker_compose,
                    backup_command=self._optional_str(raw_project, "backup_command", label),
                )
            )

        compose_timeout = values.get("compose_timeout")
        if compose_timeout is not None:
            if isinstance(compose_timeout, bool) or not isinstance(compose_timeout, (int, float)):
                raise ConfigError("`compose_timeout` must be a number of seconds.")
            if compose_timeout <= 0:
                raise ConfigError("`compose_timeout` must be greater than zero.")
            compose_timeout = float(compose_timeout)

        return RunConfiguration(
            backup_directory=self._resolve_path(backup_directory, base_dir),
            projects=tuple(projects),
            image=self._optional_str(values, "image", "config"),
            docker_host=self._optional_str(values, "docker_host", "config"),
            shell=self._optional_str(values, "shell", "config") or DEFAULT_SHELL,
            compose_timeout=compose_timeout,
            continue_on_error=self._optional_bool(values, "continue_on_error"),
            dry_run=self._optional_bool(values, "dry_run"),
        )

    @staticmethod
    def _require_str(values: Dict[str, Any], key: str, label: str) -> str:
        value = values.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"Missing required string `{key}` in {label}.")
        return value

    @staticmethod
    def _optional_str(values: Dict[str, Any], key: str, label: str) -> Optional[str]:
        value = values.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ConfigError(f"`{key}` in {label} must be a string.")
        return value

    @staticmethod
    def _optional_bool(values: Dict[str, Any], key: str) -> bool:
        value = values.get(key, False)
        if value is None:
            return False
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be true or false.")
        return value

    @staticmethod
    def _resolve_path(value: str, base_dir: Optional[str]) -> str:
        expanded = os.path.expanduser(value)
        if not os.path.isabs(expanded) and base_dir:
            expanded = os.path.join(base_dir, expanded)
        return os.path.abspath(expanded)
