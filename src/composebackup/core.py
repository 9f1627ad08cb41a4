import logging
import uuid
from typing import Any, Dict, List, Optional

from rich.console import Console

from .errors import BackupError
from .errors_catalog import actionable_error
from .models import ImageReference, ProjectConfig, ProjectResult, RunConfiguration
from .services.backup_command import BackupCommandService
from .services.backup_executor import BackupExecutorService
from .services.command_runner import CommandRunner
from .services.compose import ComposeService
from .services.docker_runtime import DockerRuntimeService
from .services.image import ImageService
from .services.manifest import ManifestService
from .services.mounts import MountService

DEFAULT_LOGGER_NAME = "composebackup"


class ComposeBackup:
    """Runs one backup pass over every configured compose project."""

    def __init__(
        self,
        config: RunConfiguration,
        manifest_file: Optional[str] = None,
        runtime: Optional[DockerRuntimeService] = None,
        compose_cmd: Optional[List[str]] = None,
        logger: Optional[logging.Logger] = None,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.console = console or Console()
        self.run_id = uuid.uuid4().hex[:10]
        self.results: List[ProjectResult] = []

        self.runtime = runtime or DockerRuntimeService(logger=self.logger, base_url=config.docker_host)
        self.command_runner = CommandRunner(logger=self.logger, default_timeout=config.compose_timeout)
        self.compose_service = ComposeService(
            command_runner=self.command_runner,
            logger=self.logger,
            compose_cmd=compose_cmd,
            timeout=config.compose_timeout,
        )
        self.image_service = ImageService(runtime=self.runtime, logger=self.logger)
        self.mount_service = MountService(runtime=self.runtime, logger=self.logger)
        self.backup_command_service = BackupCommandService(logger=self.logger)
        self.backup_executor = BackupExecutorService(
            runtime=self.runtime,
            logger=self.logger,
            backup_directory=config.backup_directory,
            shell=config.shell,
        )
        self.manifest_service = ManifestService(manifest_file=manifest_file, logger=self.logger)

    def _build_manifest_metadata(self) -> Dict[str, Any]:
        return {
            "backup_directory": self.config.backup_directory,
            "image": self.config.image,
            "services": [project.service for project in self.config.projects],
            "continue_on_error": self.config.continue_on_error,
            "dry_run": self.config.dry_run,
        }

    def _record(self, result: ProjectResult):
        self.results.append(result)
        self.manifest_service.project_finished(
            result.service,
            result.status,
            container_id=result.container_id,
            command=result.command,
            error=result.error,
        )

    def prepare_image(self) -> ImageReference:
        reference = self.image_service.resolve_reference(self.config.image)
        self.manifest_service.set_metadata("image_reference", str(reference))

        if self.image_service.needs_pull(reference):
            if self.config.dry_run:
                self.logger.info("Dry run: %s would be pulled.", reference)
            else:
                self.image_service.pull(reference)

        return reference

    def backup_project(self, project: ProjectConfig, reference: ImageReference) -> ProjectResult:
        container_id = self.compose_service.locate_container(project)
        mounts = self.mount_service.mounts(container_id)

        if not mounts:
            self.logger.warning(actionable_error("no_mounts", service=project.service))
            return ProjectResult(service=project.service, status="skipped", container_id=container_id)

        command = self.backup_command_service.synthesize(project, mounts)

        if self.config.dry_run:
            self.logger.info(
                "Dry run: %s would run `%s` in %s",
                self.backup_executor.container_name(project),
                command,
                reference,
            )
            return ProjectResult(
                service=project.service,
                status="planned",
                container_id=container_id,
                command=command,
            )

        self.backup_executor.execute(project, container_id, reference, command)
        self.logger.info(
            "Service %s backup started, archives will be available in %s",
            project.service,
            self.config.backup_directory,
        )
        return ProjectResult(
            service=project.service,
            status="started",
            container_id=container_id,
            command=command,
        )

    def process(self) -> List[ProjectResult]:
        """Back up every project in order; raises on the first failure unless told to keep going."""
        self.results = []
        self.runtime.connect()
        reference = self.prepare_image()

        failures: List[ProjectResult] = []
        for project in self.config.projects:
            self.logger.info("Backing up service %s", project.service)
            self.manifest_service.project_started(project.service)

            try:
                result = self.backup_project(project, reference)
            except BackupError as exc:
                result = ProjectResult(service=project.service, status="failed", error=str(exc))
                self._record(result)
                if not self.config.continue_on_error:
                    raise
                self.logger.error("Backup of service %s failed: %s", project.service, exc)
                failures.append(result)
                continue

            self._record(result)

        if failures:
            summary = "; ".join(f"{result.service}: {result.error}" for result in failures)
            raise BackupError(f"Completed with failures: {summary}")

        return self.results

    def run(self) -> int:
        exit_code = 1
        manifest_status = "failed"
        manifest_error: Optional[str] = None

        try:
            self.logger.info("Starting compose-backup...")
            self.manifest_service.start_run(
                run_id=self.run_id,
                metadata=self._build_manifest_metadata(),
            )

            results = self.process()

            started = [result for result in results if result.status == "started"]
            planned = [result for result in results if result.status == "planned"]
            if planned:
                self.console.print(f"[green]Dry run planned {len(planned)} backup(s).[/green]")
            else:
                self.console.print(
                    f"[green]Started {len(started)} backup(s) into {self.config.backup_directory}.[/green]"
                )
            manifest_status = "success"
            exit_code = 0
            return exit_code

        except KeyboardInterrupt:
            self.console.print("[bold red]Operation cancelled by user.[/bold red]")
            self.logger.info("Operation cancelled by user")
            manifest_status = "aborted"
            manifest_error = "Operation cancelled by user."
            return exit_code
        except BackupError as exc:
            self.console.print(f"[bold red]Error:[/bold red] {exc}")
            self.logger.error(str(exc))
            manifest_error = str(exc)
            return exit_code
        except Exception as exc:
            self.console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            self.logger.exception("Unexpected error")
            manifest_error = str(exc)
            return exit_code
        finally:
            self.manifest_service.finalize(manifest_status, error=manifest_error)
