"""Subprocess execution service for compose-backup."""

import subprocess
from typing import List, Optional

from composebackup.errors import ProcessError


class CommandRunner:
    """Runs external commands with consistent error handling."""

    def __init__(self, logger, default_timeout: Optional[float] = None):
        self.logger = logger
        self.default_timeout = default_timeout

    def run(
        self,
        cmd: List[str],
        cwd: Optional[str] = None,
        check: bool = True,
        capture_output: bool = False,
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        if cwd:
            self.logger.debug("Executing in %s: %s", cwd, cmd_str)
        else:
            self.logger.debug("Executing: %s", cmd_str)

        effective_timeout = timeout if timeout is not None else self.default_timeout

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                encoding="utf-8",
                capture_output=capture_output,
                timeout=effective_timeout,
            )
        except FileNotFoundError as exc:
            raise ProcessError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ProcessError(f"Command timed out after {effective_timeout}s: {cmd_str}") from exc
        except UnicodeDecodeError as exc:
            raise ProcessError(f"Command produced output that is not valid UTF-8: {cmd_str}") from exc
        except Exception as exc:
            raise ProcessError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip() if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if check:
            raise ProcessError(message)

        self.logger.warning(message)
        return result
