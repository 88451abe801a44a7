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

"""Fake dependency installer used by stager and pipeline tests."""

from pathlib import Path
from typing import List, Optional

from core.manifest.parser import load_manifest
from core.staging.entities import InstallReport
from core.staging.exceptions import DependencyResolutionError
from core.staging.repositories import DependencyInstaller


class FakeDependencyInstaller(DependencyInstaller):
    """Writes one package directory per requirement instead of running pip.

    Attributes:
        calls: Manifest paths installed so far.
        fail_with_exit_code: When set, install() fails like pip would.
        leak_paths: Extra files written into the target (e.g. ``bin/gcc``).
    """

    def __init__(
        self,
        fail_with_exit_code: Optional[int] = None,
        leak_paths: Optional[List[str]] = None,
    ) -> None:
        self.calls: List[Path] = []
        self.fail_with_exit_code = fail_with_exit_code
        self.leak_paths = leak_paths or []

    def install(self, manifest_path: Path, target_dir: Path, correlation_id: str) -> InstallReport:
        self.calls.append(manifest_path)
        manifest = load_manifest(manifest_path, correlation_id)
        installed = []
        for requirement in manifest:
            package_dir = target_dir / requirement.normalized_name.replace("-", "_")
            package_dir.mkdir(parents=True, exist_ok=True)
            (package_dir / "__init__.py").write_text(
                f"REQUIREMENT = {str(requirement)!r}\n", encoding="utf-8"
            )
            installed.append(f"{requirement.name}-{requirement.constraint.lstrip('=')}")

        # Partial output before failing mirrors an interrupted pip run
        if self.fail_with_exit_code is not None:
            raise DependencyResolutionError(
                "Dependency installation failed with exit code "
                f"{self.fail_with_exit_code}",
                exit_code=self.fail_with_exit_code,
                stderr_tail="ERROR: No matching distribution found",
                correlation_id=correlation_id,
            )

        for rel in self.leak_paths:
            leak = target_dir / rel
            leak.parent.mkdir(parents=True, exist_ok=True)
            leak.write_bytes(b"\x7fELF")
        return InstallReport(installed=installed, duration_seconds=0.01)

    def describe(self) -> str:
        return "fake-installer"
