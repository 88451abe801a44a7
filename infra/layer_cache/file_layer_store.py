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

"""File-based implementation of LayerStore."""

import hashlib
import logging
import os
import tempfile
from pathlib import Path

from core.layer_cache.exceptions import (
    LayerAlreadyExistsError,
    LayerNotFoundError,
    LayerStoreError,
    LayerValidationError,
)
from core.layer_cache.value_objects import ContentDigest, LayerHint, LayerKey, LayerRef
from infra.layer_cache.archive import count_entries, pack_directory, unpack_archive

logger = logging.getLogger(__name__)


class FileLayerStore:
    """Layer store on a local or network filesystem.

    Layers are written to a temporary file and renamed into place, so a
    key either holds a complete archive or nothing.
    """

    DEFAULT_MAX_LAYER_SIZE: int = 512 * 1024 * 1024  # 512 MB
    DEFAULT_MAX_LAYER_ENTRIES: int = 100000

    def __init__(
        self,
        base_path: Path,
        max_layer_size_bytes: int = DEFAULT_MAX_LAYER_SIZE,
        max_layer_entries: int = DEFAULT_MAX_LAYER_ENTRIES,
    ) -> None:
        """Initialize file-based layer store.

        Args:
            base_path: Base directory for layer archives.
            max_layer_size_bytes: Maximum allowed archive size.
            max_layer_entries: Maximum number of files per layer.

        Raises:
            ValueError: If base_path is not a directory.
        """
        self._base_path = base_path
        self._max_layer_size_bytes = max_layer_size_bytes
        self._max_layer_entries = max_layer_entries

        self._base_path.mkdir(parents=True, exist_ok=True)
        if not self._base_path.is_dir():
            raise ValueError(f"base_path is not a directory: {base_path}")

    @property
    def base_path(self) -> Path:
        """Directory holding the layer archives."""
        return self._base_path

    def generate_key(self, hint: LayerHint) -> LayerKey:
        """Generate a deterministic key.

        Key format: {namespace}/{tag_hash}/{label}.zip where tag_hash is a
        short SHA-256 of the sorted tags.
        """
        tag_hash = hashlib.sha256(hint.tag_fingerprint().encode()).hexdigest()[:16]
        return LayerKey(f"{hint.namespace}/{tag_hash}/{hint.label}.zip")

    def exists(self, key: LayerKey) -> bool:
        """Check if a layer exists."""
        return self._get_layer_path(key).is_file()

    def store(self, hint: LayerHint, source_directory: Path) -> LayerRef:
        """Archive source_directory under the key derived from hint."""
        key = self.generate_key(hint)
        layer_path = self._get_layer_path(key)
        if layer_path.exists():
            raise LayerAlreadyExistsError(key=key.value)

        raw_bytes, file_count = pack_directory(source_directory, self._max_layer_entries)
        self._validate_size(raw_bytes)

        try:
            layer_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=str(layer_path.parent), suffix=".partial")
            with os.fdopen(fd, "wb") as tmp_file:
                tmp_file.write(raw_bytes)
            os.replace(tmp_name, layer_path)
        except OSError as e:
            raise LayerStoreError(f"Failed to write layer to {layer_path}: {e}") from e

        logger.info("Stored layer %s (%d files, %d bytes)", key, file_count, len(raw_bytes))
        return LayerRef(
            key=key,
            digest=ContentDigest(hashlib.sha256(raw_bytes).hexdigest()),
            size_bytes=len(raw_bytes),
            file_count=file_count,
            uri=f"file://{layer_path}",
        )

    def restore(self, key: LayerKey, destination: Path) -> Path:
        """Unpack a stored layer into destination."""
        return unpack_archive(self._read(key), destination, self._max_layer_entries)

    def describe(self, key: LayerKey) -> LayerRef:
        """Return the reference of a stored layer."""
        raw_bytes = self._read(key)
        return LayerRef(
            key=key,
            digest=ContentDigest(hashlib.sha256(raw_bytes).hexdigest()),
            size_bytes=len(raw_bytes),
            file_count=count_entries(raw_bytes),
            uri=f"file://{self._get_layer_path(key)}",
        )

    def delete(self, key: LayerKey) -> bool:
        """Delete a layer; False if it was not stored."""
        layer_path = self._get_layer_path(key)
        if not layer_path.exists():
            return False
        try:
            layer_path.unlink()
        except OSError:
            logger.warning("Failed to delete layer %s", key)
            return False
        self._cleanup_empty_dirs(layer_path.parent)
        return True

    def _read(self, key: LayerKey) -> bytes:
        layer_path = self._get_layer_path(key)
        if not layer_path.is_file():
            raise LayerNotFoundError(key=key.value)
        try:
            return layer_path.read_bytes()
        except OSError as e:
            raise LayerStoreError(f"Failed to read layer from {layer_path}: {e}") from e

    def _get_layer_path(self, key: LayerKey) -> Path:
        return self._base_path / key.value

    def _cleanup_empty_dirs(self, directory: Path) -> None:
        """Remove empty parent directories up to base_path."""
        while directory != self._base_path and directory.is_dir():
            if any(directory.iterdir()):
                break
            directory.rmdir()
            directory = directory.parent

    def _validate_size(self, raw_bytes: bytes) -> None:
        if len(raw_bytes) > self._max_layer_size_bytes:
            raise LayerValidationError(
                f"Layer size {len(raw_bytes)} bytes exceeds maximum "
                f"{self._max_layer_size_bytes} bytes"
            )
