import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_CONFIG_FILE
from .core import DEFAULT_LOGGER_NAME, BackupError, ComposeBackup
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to the YAML backup configuration. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Locate containers and print backup commands without starting helper containers.",
)
@click.option(
    "--keep-going",
    is_flag=True,
    default=None,
    help="Continue with the remaining projects when one fails, then report all failures.",
)
@click.option(
    "--docker-host",
    required=False,
    help="Docker daemon URL (default: DOCKER_HOST or the local socket).",
)
@click.option(
    "--compose-timeout",
    required=False,
    type=float,
    default=None,
    help="Timeout in seconds for each docker-compose lookup.",
)
@click.option(
    "--manifest-file",
    required=False,
    type=click.Path(),
    help="Write a JSON manifest of the run to this path.",
)
def main(config, verbose, log_file, dry_run, keep_going, docker_host, compose_timeout, manifest_file):
    """Back up the volumes of docker-compose services into a host directory."""
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)

    resolved_config = config
    if resolved_config is None:
        default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
        if not os.path.exists(default_config_path):
            raise click.ClickException(
                f"Missing option '--config' and no {DEFAULT_CONFIG_FILE} in the current directory."
            )
        resolved_config = default_config_path

    config_loader = ConfigLoader()
    try:
        config_values = config_loader.load(resolved_config)

        config_values["dry_run"] = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))
        config_values["continue_on_error"] = bool(
            _resolve_option(keep_going, config_values, "continue_on_error", default=False)
        )
        config_values["docker_host"] = _resolve_option(docker_host, config_values, "docker_host")
        config_values["compose_timeout"] = _resolve_option(
            compose_timeout, config_values, "compose_timeout"
        )

        run_config = config_loader.build(
            config_values,
            base_dir=os.path.dirname(os.path.abspath(resolved_config)),
        )
    except BackupError as exc:
        raise click.ClickException(str(exc)) from exc

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    backup = ComposeBackup(config=run_config, manifest_file=manifest_file, logger=logger)
    raise SystemExit(backup.run())


if __name__ == "__main__":
    main()
