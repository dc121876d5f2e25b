"""Reads default project/region values from the gcloud CLI, if installed."""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, List, Optional, Tuple

from .config import get_settings
from .errors import GcloudError

logger = logging.getLogger(__name__)

# Runs a command and returns (exit code, combined output).
CommandExecutor = Callable[[List[str]], Tuple[int, str]]

UNSET = "(unset)"


def run_command(args: List[str]) -> Tuple[int, str]:
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=15,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        return 127, str(e)
    return result.returncode, (result.stdout + result.stderr).strip()


class GcloudService:
    """Thin wrapper around ``gcloud config get-value``."""

    def __init__(self, executor: Optional[CommandExecutor] = None, binary: Optional[str] = None):
        self.executor = executor or run_command
        self.binary = binary or get_settings().gcloud_binary

    def _execute(self, *args: str) -> Tuple[int, str]:
        command = [self.binary, *args]
        code, output = self.executor(command)
        logger.debug("%s -> exit %d", " ".join(command), code)
        return code, output

    def is_available(self) -> bool:
        code, _ = self._execute("version")
        return code == 0

    def _get_value(self, key: str) -> str:
        code, output = self._execute("config", "get-value", key)
        if code != 0:
            raise GcloudError(f"gcloud config get-value {key} failed: {output}")
        output = output.strip()
        if output == UNSET:
            return ""
        return output

    def get_project_id(self) -> str:
        return self._get_value("project")

    def get_region(self) -> str:
        return self._get_value("compute/region")
