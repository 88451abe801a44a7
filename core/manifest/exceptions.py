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

"""Dependency Manifest exceptions."""

from typing import Optional

from core.exceptions import ImageBuildDomainError


class ManifestDomainError(ImageBuildDomainError):
    """Base exception for manifest errors."""


class ManifestNotFoundError(ManifestDomainError):
    """Raised when the manifest file is absent from the build context."""

    def __init__(self, path: str, correlation_id: Optional[str] = None) -> None:
        super().__init__(f"Dependency manifest not found: {path}", correlation_id)
        self.path = path


class InvalidManifestError(ManifestDomainError):
    """Raised when a manifest line cannot be parsed."""

    def __init__(
        self,
        message: str,
        line_number: int = 0,
        correlation_id: Optional[str] = None,
    ) -> None:
        if line_number:
            message = f"line {line_number}: {message}"
        super().__init__(message, correlation_id)
        self.line_number = line_number
