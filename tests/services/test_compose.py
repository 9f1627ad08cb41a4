import subprocess
import sys

import pytest

from composebackup.errors import ContainerNotFound, ProcessError
from composebackup.models import ProjectConfig
from composebackup.services.command_runner import CommandRunner
from composebackup.services.compose import ComposeService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


class FakeRunner:
    def __init__(self, stdout):
        self.stdout = stdout
        self.calls = []

    def run(self, cmd, cwd=None, check=True, capture_output=False, timeout=None):
        self.calls.append({"cmd": cmd, "cwd": cwd, "timeout": timeout})
        return subprocess.CompletedProcess(cmd, 0, stdout=self.stdout, stderr="")


class FakeSubprocess:
    CalledProcessError = subprocess.CalledProcessError

    def __init__(self, available, not_executable=()):
        self.available = available
        self.not_executable = set(not_executable)
        self.calls = []

    def run(self, cmd, check=False, capture_output=False):
        self.calls.append(cmd)
        if cmd[0] in self.not_executable:
            raise PermissionError(13, "Permission denied", cmd[0])
        if cmd[0] not in self.available:
            raise FileNotFoundError(cmd[0])
        return subprocess.CompletedProcess(cmd, 0)


def test_locate_container_takes_first_line_of_compose_output(tmp_path):
    runner = FakeRunner("abc123\ndef456\n")
    service = ComposeService(runner, DummyLogger(), compose_cmd=["docker-compose"], timeout=5.0)
    project = ProjectConfig(service="db", docker_compose=str(tmp_path))

    assert service.locate_container(project) == "abc123"
    assert runner.calls == [
        {"cmd": ["docker-compose", "ps", "--quiet", "db"], "cwd": str(tmp_path), "timeout": 5.0}
    ]


def test_locate_container_raises_when_service_is_not_running(tmp_path):
    service = ComposeService(FakeRunner("  \n"), DummyLogger(), compose_cmd=["docker-compose"])
    project = ProjectConfig(service="web", docker_compose=str(tmp_path))

    with pytest.raises(ContainerNotFound) as error:
        service.locate_container(project)

    assert error.value.service == "web"
    assert error.value.directory == str(tmp_path)
    assert "web" in str(error.value)
    assert str(tmp_path) in str(error.value)


def test_locate_container_rejects_missing_compose_directory(tmp_path):
    service = ComposeService(FakeRunner("abc123"), DummyLogger(), compose_cmd=["docker-compose"])
    project = ProjectConfig(service="db", docker_compose=str(tmp_path / "missing"))

    with pytest.raises(ProcessError, match="Compose directory not found"):
        service.locate_container(project)


def test_locate_container_runs_real_process_in_compose_directory(tmp_path):
    script = "import os, sys; print('id-' + sys.argv[-1] + '-' + os.path.basename(os.getcwd()))"
    service = ComposeService(
        CommandRunner(logger=DummyLogger()),
        DummyLogger(),
        compose_cmd=[sys.executable, "-c", script],
    )
    project_dir = tmp_path / "proj"
    project_dir.mkdir()

    container_id = service.locate_container(
        ProjectConfig(service="db", docker_compose=str(project_dir))
    )

    assert container_id == "id-db-proj"


def test_compose_detection_prefers_docker_compose_binary():
    fake = FakeSubprocess(available={"docker-compose", "docker"})
    service = ComposeService(FakeRunner(""), DummyLogger(), subprocess_module=fake)

    assert service.get_docker_compose_cmd() == ["docker-compose"]
    assert service.get_docker_compose_cmd() == ["docker-compose"]
    assert len(fake.calls) == 1


def test_compose_detection_falls_back_to_compose_plugin():
    fake = FakeSubprocess(available={"docker"})
    service = ComposeService(FakeRunner(""), DummyLogger(), subprocess_module=fake)

    assert service.get_docker_compose_cmd() == ["docker", "compose"]


def test_compose_detection_fails_without_any_compose():
    service = ComposeService(FakeRunner(""), DummyLogger(), subprocess_module=FakeSubprocess(set()))

    with pytest.raises(ProcessError, match="Docker Compose is not available"):
        service.get_docker_compose_cmd()


def test_compose_detection_skips_binary_that_is_not_executable():
    fake = FakeSubprocess(available={"docker"}, not_executable={"docker-compose"})
    service = ComposeService(FakeRunner(""), DummyLogger(), subprocess_module=fake)

    assert service.get_docker_compose_cmd() == ["docker", "compose"]


def test_compose_detection_reports_permission_errors_as_process_errors():
    fake = FakeSubprocess(available=set(), not_executable={"docker-compose", "docker"})
    service = ComposeService(FakeRunner(""), DummyLogger(), subprocess_module=fake)

    with pytest.raises(ProcessError, match="Docker Compose is not available"):
        service.get_docker_compose_cmd()
