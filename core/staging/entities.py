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

"""Domain entities for the Dependency Stager."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from core.layer_cache.value_objects import ContentDigest, LayerRef


@dataclass(frozen=True)
class InstallReport:
    """Outcome of one successful dependency installation.

    Attributes:
        installed: Distributions reported by the installer as installed
            (``name-version`` strings).
        duration_seconds: Wall-clock time spent resolving and installing.
    """

    installed: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0


@dataclass(frozen=True)
class StagedDependencySet:
    """Filesystem closure produced by resolving a manifest.

    Owned by the stager until handed to the assembler, which copies it.
    Never mutated after creation.

    Attributes:
        path: Directory holding the installed distributions.
        manifest_digest: Digest of the manifest it was resolved from.
        layer: Reference of the cached layer archive.
        from_cache: True when restored from the layer cache instead of
            being resolved.
        requirement_count: Number of requirements in the manifest.
    """

    path: Path
    manifest_digest: ContentDigest
    layer: LayerRef
    from_cache: bool
    requirement_count: int

    @property
    def content_digest(self) -> ContentDigest:
        """Digest of the archived staged content."""
        return self.layer.digest

    def exists(self) -> bool:
        """True when the staged directory is still present."""
        return self.path.is_dir()
