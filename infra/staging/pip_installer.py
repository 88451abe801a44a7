# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Infrastructure adapter installing a manifest with pip."""

import logging
import re
import subprocess
import sys
import time
from pathlib import Path
from typing import List, Optional

from core.staging.entities import InstallReport
from core.staging.exceptions import DependencyResolutionError
from core.staging.repositories import DependencyInstaller

logger = logging.getLogger(__name__)

_STDERR_TAIL_LINES = 20
_INSTALLED_LINE = re.compile(r"^Successfully installed (?P<dists>.+)$", re.MULTILINE)


class PipDependencyInstaller(DependencyInstaller):
    """Runs ``pip install --target`` in a subprocess.

    The package cache is disabled so nothing but installed distributions
    lands in the target directory.
    """

    def __init__(self, python_executable: Optional[str] = None, timeout_seconds: int = 900) -> None:
        """Initialize installer.

        Args:
            python_executable: Interpreter whose pip is used; defaults to
                the running interpreter.
            timeout_seconds: Upper bound for one installation.
        """
        self._python = python_executable or sys.executable
        self._timeout_seconds = timeout_seconds

    def build_command(self, manifest_path: Path, target_dir: Path) -> List[str]:
        """Return the pip command line for an installation."""
        return [
            self._python,
            "-m",
            "pip",
            "install",
            "--no-cache-dir",
            "--disable-pip-version-check",
            "--no-input",
            "--target",
            str(target_dir),
            "-r",
            str(manifest_path),
        ]

    def install(self, manifest_path: Path, target_dir: Path, correlation_id: str) -> InstallReport:
        """Install the manifest into target_dir; any failure is fatal."""
        cmd = self.build_command(manifest_path, target_dir)
        logger.debug("Executing command: %s", " ".join(cmd))

        started = time.monotonic()
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise DependencyResolutionError(
                f"Dependency installation timed out after {self._timeout_seconds} seconds",
                correlation_id=correlation_id,
            ) from exc
        except OSError as exc:
            raise DependencyResolutionError(
                f"Failed to start installer {self._python}: {exc}",
                correlation_id=correlation_id,
            ) from exc
        duration = time.monotonic() - started

        if proc.returncode != 0:
            stderr_tail = "\n".join(proc.stderr.strip().splitlines()[-_STDERR_TAIL_LINES:])
            logger.error(
                "Dependency installation failed: exit_code=%d, correlation_id=%s",
                proc.returncode,
                correlation_id,
            )
            raise DependencyResolutionError(
                f"Dependency installation failed with exit code {proc.returncode}",
                exit_code=proc.returncode,
                stderr_tail=stderr_tail,
                correlation_id=correlation_id,
            )

        installed = self.parse_installed(proc.stdout)
        logger.info(
            "Installed %d distributions in %.1fs, correlation_id=%s",
            len(installed),
            duration,
            correlation_id,
        )
        return InstallReport(installed=installed, duration_seconds=duration)

    @staticmethod
    def parse_installed(stdout: str) -> List[str]:
        """Extract ``name-version`` entries from pip's summary line."""
        match = _INSTALLED_LINE.search(stdout or "")
        if match is None:
            return []
        return match.group("dists").split()

    def describe(self) -> str:
        """Interpreter used for installation."""
        return f"pip:{self._python}"
