from datetime import datetime, timezone

from composebackup.models import ProjectConfig
from composebackup.services.backup_command import BackupCommandService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


def _fixed_clock():
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_default_command_archives_each_mount_with_tar():
    service = BackupCommandService(logger=DummyLogger(), clock=_fixed_clock)
    project = ProjectConfig(service="db", docker_compose="/proj")

    command = service.synthesize(project, {"dbdata": "/data"})

    assert command == "cd /data && tar cf /backup/db_dbdata_2024-01-01T00:00:00+00:00.tar ."


def test_override_command_runs_once_per_mount():
    service = BackupCommandService(logger=DummyLogger(), clock=_fixed_clock)
    project = ProjectConfig(service="db", docker_compose="/proj", backup_command="echo hi")

    command = service.synthesize(project, {"data": "/data", "config": "/config"})

    assert command == "cd /data && echo hi && cd /config && echo hi"


def test_sub_commands_do_not_depend_on_mount_order():
    service = BackupCommandService(logger=DummyLogger(), clock=_fixed_clock)
    project = ProjectConfig(service="app", docker_compose="/proj")

    forward = service.synthesize(project, {"a": "/a", "b": "/b"})
    backward = service.synthesize(project, {"b": "/b", "a": "/a"})

    def parts(command):
        pieces = command.split(" && ")
        return {(pieces[i], pieces[i + 1]) for i in range(0, len(pieces), 2)}

    assert parts(forward) == parts(backward)
    assert len(parts(forward)) == 2


def test_timestamp_is_captured_once_per_project():
    calls = []

    def counting_clock():
        calls.append(1)
        return datetime(2024, 1, 1, 0, 0, len(calls), tzinfo=timezone.utc)

    service = BackupCommandService(logger=DummyLogger(), clock=counting_clock)
    project = ProjectConfig(service="db", docker_compose="/proj")

    command = service.synthesize(project, {"a": "/a", "b": "/b", "c": "/c"})

    assert len(calls) == 1
    assert command.count("2024-01-01T00:00:01+00:00") == 3


def test_destinations_with_spaces_are_quoted():
    service = BackupCommandService(logger=DummyLogger(), clock=_fixed_clock)
    project = ProjectConfig(service="web", docker_compose="/proj")

    command = service.synthesize(project, {"0": "/srv/my data"})

    assert command.startswith("cd '/srv/my data' && tar cf /backup/web_0_")


def test_no_mounts_yields_empty_command():
    service = BackupCommandService(logger=DummyLogger(), clock=_fixed_clock)

    assert service.synthesize(ProjectConfig(service="db", docker_compose="/proj"), {}) == ""
