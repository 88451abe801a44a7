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

"""Layer cache exceptions."""

from typing import Optional

from core.exceptions import ImageBuildDomainError


class LayerCacheError(ImageBuildDomainError):
    """Base exception for layer cache errors."""


class LayerNotFoundError(LayerCacheError):
    """Layer does not exist in the store."""

    def __init__(self, key: str, correlation_id: Optional[str] = None) -> None:
        super().__init__(f"Layer not found: {key}", correlation_id=correlation_id)
        self.key = key


class LayerAlreadyExistsError(LayerCacheError):
    """A layer is already stored under the key; stored layers are immutable."""

    def __init__(self, key: str, correlation_id: Optional[str] = None) -> None:
        super().__init__(f"Layer already exists: {key}", correlation_id=correlation_id)
        self.key = key


class LayerStoreError(LayerCacheError):
    """Infrastructure-level layer store failure."""


class LayerValidationError(LayerCacheError):
    """Layer content fails validation (size, entry count, unsafe member)."""
