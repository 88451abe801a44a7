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

"""Port for the layer cache.

Infrastructure implementations must satisfy this protocol.
"""

from pathlib import Path
from typing import Protocol

from .value_objects import LayerHint, LayerKey, LayerRef


class LayerStore(Protocol):
    """Persists immutable directory layers and restores them by key."""

    def generate_key(self, hint: LayerHint) -> LayerKey:
        """Derive the deterministic key for a hint."""
        ...

    def exists(self, key: LayerKey) -> bool:
        """Return True if a layer is stored under key."""
        ...

    def store(self, hint: LayerHint, source_directory: Path) -> LayerRef:
        """Archive source_directory under the key derived from hint.

        Raises:
            LayerAlreadyExistsError: If the key is already taken.
            LayerValidationError: If the archive exceeds configured limits.
            LayerStoreError: If writing fails.
        """
        ...

    def restore(self, key: LayerKey, destination: Path) -> Path:
        """Unpack the layer into destination and return it.

        Raises:
            LayerNotFoundError: If nothing is stored under key.
            LayerStoreError: If unpacking fails.
        """
        ...

    def describe(self, key: LayerKey) -> LayerRef:
        """Return the reference of a stored layer.

        Raises:
            LayerNotFoundError: If nothing is stored under key.
        """
        ...

    def delete(self, key: LayerKey) -> bool:
        """Remove a layer; False if it did not exist."""
        ...
