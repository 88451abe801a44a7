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

"""Dependency Stager exceptions."""

from typing import List, Optional

from core.exceptions import ImageBuildDomainError


class StagingDomainError(ImageBuildDomainError):
    """Base exception for dependency staging errors."""


class DependencyResolutionError(StagingDomainError):
    """Raised when the installer cannot resolve or install the manifest.

    Fatal: the build aborts and nothing is retried.
    """

    def __init__(
        self,
        message: str,
        exit_code: int = -1,
        stderr_tail: str = "",
        correlation_id: Optional[str] = None,
    ) -> None:
        super().__init__(message, correlation_id)
        self.exit_code = exit_code
        self.stderr_tail = stderr_tail


class BuildToolingLeakError(StagingDomainError):
    """Raised when build-only tooling is found in a stage's output."""

    def __init__(self, paths: List[str], correlation_id: Optional[str] = None) -> None:
        preview = ", ".join(paths[:5])
        more = f" (+{len(paths) - 5} more)" if len(paths) > 5 else ""
        super().__init__(f"Build tooling leaked into stage output: {preview}{more}", correlation_id)
        self.paths = paths
