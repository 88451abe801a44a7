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

"""Repository interfaces for the Dependency Stager."""

from abc import ABC, abstractmethod
from pathlib import Path

from core.staging.entities import InstallReport


class DependencyInstaller(ABC):
    """Materializes a manifest's package set into a target directory."""

    @abstractmethod
    def install(self, manifest_path: Path, target_dir: Path, correlation_id: str) -> InstallReport:
        """Install every requirement of the manifest into target_dir.

        Args:
            manifest_path: Manifest file to install from.
            target_dir: Empty directory receiving the installed distributions.
            correlation_id: Build identifier for tracing.

        Returns:
            InstallReport describing the installation.

        Raises:
            DependencyResolutionError: If resolution or installation fails.
        """
        ...

    def describe(self) -> str:
        """Identify the installer environment; part of the staging cache key."""
        return type(self).__name__
