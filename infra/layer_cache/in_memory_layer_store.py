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

"""In-memory implementation of LayerStore for dev/test."""

import hashlib
from pathlib import Path
from typing import Dict

from core.layer_cache.exceptions import (
    LayerAlreadyExistsError,
    LayerNotFoundError,
    LayerValidationError,
)
from core.layer_cache.value_objects import ContentDigest, LayerHint, LayerKey, LayerRef
from infra.layer_cache.archive import count_entries, pack_directory, unpack_archive


class InMemoryLayerStore:
    """Layer store keeping archives in a dictionary.

    Lives as long as the process; used when ``backend = memory_store``.
    """

    DEFAULT_MAX_LAYER_SIZE: int = 512 * 1024 * 1024  # 512 MB
    DEFAULT_MAX_LAYER_ENTRIES: int = 100000

    def __init__(
        self,
        max_layer_size_bytes: int = DEFAULT_MAX_LAYER_SIZE,
        max_layer_entries: int = DEFAULT_MAX_LAYER_ENTRIES,
    ) -> None:
        self._layers: Dict[str, bytes] = {}
        self._max_layer_size_bytes = max_layer_size_bytes
        self._max_layer_entries = max_layer_entries

    def generate_key(self, hint: LayerHint) -> LayerKey:
        """Same key scheme as the file store."""
        tag_hash = hashlib.sha256(hint.tag_fingerprint().encode()).hexdigest()[:16]
        return LayerKey(f"{hint.namespace}/{tag_hash}/{hint.label}.zip")

    def exists(self, key: LayerKey) -> bool:
        return key.value in self._layers

    def store(self, hint: LayerHint, source_directory: Path) -> LayerRef:
        key = self.generate_key(hint)
        if key.value in self._layers:
            raise LayerAlreadyExistsError(key=key.value)
        raw_bytes, _ = pack_directory(source_directory, self._max_layer_entries)
        if len(raw_bytes) > self._max_layer_size_bytes:
            raise LayerValidationError(
                f"Layer size {len(raw_bytes)} bytes exceeds maximum "
                f"{self._max_layer_size_bytes} bytes"
            )
        self._layers[key.value] = raw_bytes
        return self.describe(key)

    def restore(self, key: LayerKey, destination: Path) -> Path:
        return unpack_archive(self._read(key), destination, self._max_layer_entries)

    def describe(self, key: LayerKey) -> LayerRef:
        raw_bytes = self._read(key)
        return LayerRef(
            key=key,
            digest=ContentDigest(hashlib.sha256(raw_bytes).hexdigest()),
            size_bytes=len(raw_bytes),
            file_count=count_entries(raw_bytes),
            uri=f"memory://{key.value}",
        )

    def delete(self, key: LayerKey) -> bool:
        return self._layers.pop(key.value, None) is not None

    def _read(self, key: LayerKey) -> bytes:
        try:
            return self._layers[key.value]
        except KeyError:
            raise LayerNotFoundError(key=key.value) from None
