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

"""Repository interfaces for the Build Image module."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from core.build_image.value_objects import ExecutionUser


class ImageFilesystemRepository(ABC):
    """Writes image content into a workspace and publishes it atomically."""

    @abstractmethod
    def create_workspace(self, output_dir: Path) -> Path:
        """Create an empty workspace next to output_dir and return it."""
        ...

    @abstractmethod
    def import_base(self, rootfs: Path, base_rootfs: Optional[Path]) -> None:
        """Populate rootfs from a base filesystem (no-op when None)."""
        ...

    @abstractmethod
    def copy_tree(self, source: Path, rootfs: Path, target: str) -> int:
        """Copy a directory to an absolute in-image path.

        Returns:
            Number of files copied.
        """
        ...

    @abstractmethod
    def copy_file(self, source: Path, rootfs: Path, target: str) -> None:
        """Copy a single file verbatim to an absolute in-image path."""
        ...

    @abstractmethod
    def add_user(self, rootfs: Path, user: ExecutionUser) -> None:
        """Register user and group in the image account databases.

        Raises:
            ExecutionIdentityError: If the user or ids already exist.
        """
        ...

    @abstractmethod
    def write_config(self, workspace: Path, document: Dict[str, Any]) -> bytes:
        """Write the config document and return the bytes written."""
        ...

    @abstractmethod
    def publish(self, workspace: Path, output_dir: Path) -> Path:
        """Replace output_dir wholesale with workspace and return output_dir."""
        ...

    @abstractmethod
    def discard(self, workspace: Path) -> None:
        """Remove an unpublished workspace."""
        ...
