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

"""Build Image domain exceptions."""

from typing import Optional

from core.exceptions import ImageBuildDomainError


class AssemblyDomainError(ImageBuildDomainError):
    """Base exception for runtime assembly errors."""


class MissingBuildInputError(AssemblyDomainError):
    """Raised when a required assembly input is absent.

    There is no partial-image fallback.
    """

    def __init__(self, input_name: str, path: str, correlation_id: Optional[str] = None) -> None:
        super().__init__(f"Missing {input_name}: {path}", correlation_id)
        self.input_name = input_name
        self.path = path


class PrivilegedUserError(AssemblyDomainError):
    """Raised when the configured execution identity is root."""


class ExecutionIdentityError(AssemblyDomainError):
    """Raised when the execution identity cannot be created."""


class ImageConfigValidationError(AssemblyDomainError):
    """Raised when the image config document fails schema validation."""


class ImageBuildError(ImageBuildDomainError):
    """Raised when a container engine build fails."""

    def __init__(
        self,
        message: str,
        error_code: str = "IMAGE_BUILD_FAILED",
        correlation_id: Optional[str] = None,
    ) -> None:
        super().__init__(message, correlation_id)
        self.error_code = error_code


class InvalidSourceBundleError(AssemblyDomainError):
    """Raised when the source bundle lists an unsafe or duplicate path."""
