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

"""Domain entities for the Build Image module."""

import hashlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from core.build_image.value_objects import (
    EntryCommand,
    ExecutionUser,
    ExposedPort,
    ImageReference,
    SourceFile,
    validate_absolute_path,
)
from core.layer_cache.value_objects import ContentDigest


@dataclass(frozen=True)
class SourceBundle:
    """Minimal set of application files needed to run the service.

    Copied verbatim into the image working directory, never transformed.

    Attributes:
        context_dir: Build context root.
        files: Files to copy, relative to context_dir.
    """

    context_dir: Path
    files: Tuple[SourceFile, ...]

    def __post_init__(self) -> None:
        """Validate that at least one unique file is listed."""
        if not self.files:
            raise ValueError("Source bundle must list at least one file")
        names = [str(f) for f in self.files]
        if len(set(names)) != len(names):
            raise ValueError(f"Source bundle lists a file twice: {names}")

    @classmethod
    def from_names(cls, context_dir: Path, names: List[str]) -> "SourceBundle":
        """Create a bundle from plain relative file names."""
        return cls(context_dir=context_dir, files=tuple(SourceFile(n) for n in names))

    def resolve(self, source: SourceFile) -> Path:
        """Absolute location of a bundle file in the build context."""
        return self.context_dir / source.value

    def missing(self) -> List[str]:
        """Bundle files absent from the build context."""
        return [str(f) for f in self.files if not self.resolve(f).is_file()]

    def digest(self) -> ContentDigest:
        """SHA-256 over file names and contents, in bundle order."""
        sha = hashlib.sha256()
        for source in self.files:
            sha.update(source.value.encode("utf-8"))
            sha.update(b"\x00")
            sha.update(self.resolve(source).read_bytes())
            sha.update(b"\x00")
        return ContentDigest(sha.hexdigest())


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class RuntimeLayout:
    """Where and how things live in the final image.

    Attributes:
        base_image: Minimal runtime base image.
        workdir: Working directory receiving the source bundle.
        site_packages: Interpreter lookup path receiving staged dependencies.
        user: Execution identity bound as default user.
        port: Port declared as metadata.
        command: Process entry point.
        env: Extra environment for the process.
        labels: Image labels.
    """

    base_image: ImageReference
    workdir: str
    site_packages: str
    user: ExecutionUser
    port: ExposedPort
    command: EntryCommand
    env: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate absolute paths."""
        validate_absolute_path(self.workdir, "workdir")
        validate_absolute_path(self.site_packages, "site_packages")


@dataclass(frozen=True)
class BuildRecipe:
    """Two-stage build description rendered into a Dockerfile.

    Attributes:
        builder_image: Base image of the throwaway builder stage.
        build_packages: OS packages needed only to compile dependencies.
        builder_workdir: Working directory of the builder stage.
        staging_dir: Builder path the dependencies are installed into.
        manifest_name: Manifest file name in the build context.
        runtime: Final stage layout.
        sources: Application files copied into the final stage.
    """

    builder_image: ImageReference
    build_packages: Tuple[str, ...]
    builder_workdir: str
    staging_dir: str
    manifest_name: str
    runtime: RuntimeLayout
    sources: Tuple[SourceFile, ...]

    def __post_init__(self) -> None:
        """Validate paths, the manifest name and the stage C libraries."""
        validate_absolute_path(self.builder_workdir, "builder_workdir")
        validate_absolute_path(self.staging_dir, "staging_dir")
        SourceFile(self.manifest_name)
        if not self.sources:
            raise ValueError("Build recipe must copy at least one source file")
        if self.manifest_name in {str(s) for s in self.sources}:
            raise ValueError(
                f"Manifest {self.manifest_name} must not be part of the source bundle"
            )
        if self.builder_image.libc != self.runtime.base_image.libc:
            raise ValueError(
                f"Builder image {self.builder_image} ({self.builder_image.libc}) and runtime "
                f"image {self.runtime.base_image} ({self.runtime.base_image.libc}) must use "
                f"the same C library"
            )


@dataclass(frozen=True)
class FinalImage:
    """Composed filesystem plus execution metadata.

    Created once per build invocation and replaced wholesale on rebuild.

    Attributes:
        path: Image directory.
        digest: SHA-256 of the written config document.
        config: Image config document.
    """

    path: Path
    digest: ContentDigest
    config: Dict[str, Any]

    ROOTFS_DIR = "rootfs"
    CONFIG_FILE = "config.json"

    @property
    def rootfs(self) -> Path:
        """Root filesystem directory."""
        return self.path / self.ROOTFS_DIR

    @property
    def config_path(self) -> Path:
        """Config document location."""
        return self.path / self.CONFIG_FILE

    @property
    def user(self) -> str:
        """Default runtime user."""
        return self.config["config"]["User"]

    @property
    def created(self) -> str:
        """Creation timestamp (ISO 8601)."""
        return self.config["created"]
