"""Actionable error catalog for compose-backup."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "config_not_found": {
        "what": "Config file not found: {path}",
        "next": "Pass `--config` or create `compose-backup.yml` in the current directory.",
    },
    "container_not_found": {
        "what": "Unable to find a running container for service `{service}` in {directory}.",
        "next": "Start the project with `docker-compose up -d` and check the service name.",
    },
    "compose_directory_missing": {
        "what": "Compose directory not found for service `{service}`: {directory}",
        "next": "Fix `docker_compose` in the project configuration.",
    },
    "compose_unavailable": {
        "what": "Docker Compose is not available.",
        "next": "Install `docker-compose` (v1) or the `docker compose` plugin (v2) and try again.",
    },
    "runtime_unreachable": {
        "what": "Cannot connect to the Docker daemon: {reason}",
        "next": "Check that Docker is running and that `--docker-host` or DOCKER_HOST is correct.",
    },
    "no_mounts": {
        "what": "Service `{service}` has no mounted volumes.",
        "next": "Declare volumes for the service or remove it from the backup configuration.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
