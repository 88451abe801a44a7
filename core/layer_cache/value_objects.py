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

"""Value objects for the layer cache domain.

A cached layer is an archived directory (a staged dependency set) stored
under a key derived deterministically from the inputs that produced it.
"""

import re
from dataclasses import dataclass
from typing import ClassVar, Dict


@dataclass(frozen=True)
class LayerKey:
    """Relative key locating a cached layer inside the store.

    Attributes:
        value: Key string (e.g., "staged-dependencies/3f2a9c1b7d4e/site-packages.zip").

    Raises:
        ValueError: If value is empty, too long, absolute or contains traversal.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 512

    def __post_init__(self) -> None:
        """Validate key format and length."""
        if not self.value or not self.value.strip():
            raise ValueError("LayerKey cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"LayerKey length cannot exceed {self.MAX_LENGTH} characters, "
                f"got {len(self.value)}"
            )
        if ".." in self.value.split("/") or "\\" in self.value:
            raise ValueError(
                f"LayerKey must not contain path traversal or backslash: {self.value}"
            )
        if self.value.startswith("/"):
            raise ValueError(f"LayerKey must not be an absolute path: {self.value}")
        if "\x00" in self.value:
            raise ValueError("LayerKey must not contain null bytes")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class ContentDigest:
    """SHA-256 hex digest.

    Attributes:
        value: 64-character lowercase hex string.

    Raises:
        ValueError: If value does not match SHA-256 pattern.
    """

    value: str

    SHA256_PATTERN: ClassVar[str] = r"^[0-9a-f]{64}$"

    def __post_init__(self) -> None:
        """Validate SHA-256 format."""
        if not re.match(self.SHA256_PATTERN, self.value or ""):
            raise ValueError(
                f"Invalid SHA-256 hex digest: {self.value}. "
                f"Expected 64 lowercase hexadecimal characters."
            )

    @property
    def short(self) -> str:
        """First twelve characters, for log lines and directory names."""
        return self.value[:12]

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class LayerRef:
    """Reference to a stored layer, returned by LayerStore.store().

    Attributes:
        key: Layer key.
        digest: SHA-256 of the archived bytes.
        size_bytes: Archive size in bytes.
        file_count: Number of regular files in the layer.
        uri: Storage-specific location URI.
    """

    key: LayerKey
    digest: ContentDigest
    size_bytes: int
    file_count: int
    uri: str

    def __post_init__(self) -> None:
        """Validate reference fields."""
        if self.size_bytes < 0:
            raise ValueError(f"size_bytes must be non-negative, got {self.size_bytes}")
        if self.file_count < 0:
            raise ValueError(f"file_count must be non-negative, got {self.file_count}")
        if not self.uri:
            raise ValueError("LayerRef URI cannot be empty")


@dataclass(frozen=True)
class LayerHint:
    """Inputs from which a deterministic layer key is derived.

    The namespace groups layers, the label names the layer and the tags
    carry everything that must invalidate the cache when it changes
    (manifest digest, builder image, staging path).

    Attributes:
        namespace: Logical grouping (e.g., "staged-dependencies").
        label: Layer name (e.g., "site-packages").
        tags: Cache-relevant inputs.

    Raises:
        ValueError: If namespace or label is invalid.
    """

    namespace: str
    label: str
    tags: Dict[str, str]

    NAME_PATTERN: ClassVar[str] = r"^[a-zA-Z0-9_\-\.]+$"
    NAME_MAX_LENGTH: ClassVar[int] = 128
    MAX_TAGS: ClassVar[int] = 20

    def __post_init__(self) -> None:
        """Validate hint fields."""
        for field_name in ("namespace", "label"):
            field_value = getattr(self, field_name)
            if not field_value or not field_value.strip():
                raise ValueError(f"LayerHint {field_name} cannot be empty")
            if len(field_value) > self.NAME_MAX_LENGTH:
                raise ValueError(
                    f"LayerHint {field_name} length cannot exceed "
                    f"{self.NAME_MAX_LENGTH} characters, got {len(field_value)}"
                )
            if not re.match(self.NAME_PATTERN, field_value) or field_value in (".", ".."):
                raise ValueError(
                    f"Invalid LayerHint {field_name}: {field_value}. "
                    f"Must contain only alphanumeric characters, dots, underscores, and hyphens."
                )
        if len(self.tags) > self.MAX_TAGS:
            raise ValueError(
                f"LayerHint cannot have more than {self.MAX_TAGS} tags, "
                f"got {len(self.tags)}"
            )

    def tag_fingerprint(self) -> str:
        """Stable string over the sorted tags."""
        return "|".join(f"{k}={v}" for k, v in sorted(self.tags.items()))
