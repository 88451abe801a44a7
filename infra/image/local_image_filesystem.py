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

"""Local filesystem implementation of ImageFilesystemRepository."""

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.build_image.entities import FinalImage
from core.build_image.exceptions import ExecutionIdentityError, MissingBuildInputError
from core.build_image.repositories import ImageFilesystemRepository
from core.build_image.value_objects import ExecutionUser

logger = logging.getLogger(__name__)


def _read_entries(path: Path) -> List[List[str]]:
    """Split a colon separated account database into fields."""
    if not path.is_file():
        return []
    return [
        line.split(":")
        for line in path.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.startswith("#")
    ]


def _append_line(path: Path, line: str) -> None:
    existing = path.read_text(encoding="utf-8") if path.is_file() else ""
    if existing and not existing.endswith("\n"):
        existing += "\n"
    path.write_text(existing + line + "\n", encoding="utf-8")


class LocalImageFilesystem(ImageFilesystemRepository):
    """Assembles image directories on the local filesystem.

    Layout of a published image::

        <output_dir>/
            rootfs/        composed root filesystem
            config.json    execution metadata
    """

    def create_workspace(self, output_dir: Path) -> Path:
        """Create an empty workspace next to output_dir.

        Sibling placement keeps publish() a same-filesystem rename.
        """
        output_dir.parent.mkdir(parents=True, exist_ok=True)
        workspace = Path(tempfile.mkdtemp(prefix=f".{output_dir.name}-", dir=str(output_dir.parent)))
        (workspace / FinalImage.ROOTFS_DIR).mkdir()
        logger.debug("Created image workspace %s", workspace)
        return workspace

    def import_base(self, rootfs: Path, base_rootfs: Optional[Path]) -> None:
        """Copy the base filesystem into rootfs."""
        if base_rootfs is None:
            return
        if not base_rootfs.is_dir():
            raise MissingBuildInputError("base rootfs", str(base_rootfs))
        shutil.copytree(base_rootfs, rootfs, symlinks=True, dirs_exist_ok=True)

    def copy_tree(self, source: Path, rootfs: Path, target: str) -> int:
        """Copy a directory to an in-image path, returning the file count."""
        destination = self._in_image(rootfs, target)
        destination.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
        return sum(1 for p in source.rglob("*") if p.is_file())

    def copy_file(self, source: Path, rootfs: Path, target: str) -> None:
        """Copy one file verbatim, keeping its mode."""
        destination = self._in_image(rootfs, target)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)

    def add_user(self, rootfs: Path, user: ExecutionUser) -> None:
        """Register user and its primary group, then create its home."""
        etc = rootfs / "etc"
        etc.mkdir(parents=True, exist_ok=True)
        passwd = etc / "passwd"
        group = etc / "group"

        for fields in _read_entries(passwd):
            if fields[0] == user.name:
                raise ExecutionIdentityError(f"User already exists: {user.name}")
            if len(fields) > 2 and fields[2] == str(user.uid):
                raise ExecutionIdentityError(f"uid {user.uid} already taken by {fields[0]}")

        group_exists = False
        for fields in _read_entries(group):
            if len(fields) > 2 and fields[2] == str(user.gid):
                if fields[0] != user.name:
                    raise ExecutionIdentityError(f"gid {user.gid} already taken by {fields[0]}")
                group_exists = True
            elif fields[0] == user.name:
                raise ExecutionIdentityError(
                    f"Group {user.name} already exists with a different gid"
                )

        if not group_exists:
            _append_line(group, f"{user.name}:x:{user.gid}:")
        _append_line(
            passwd,
            f"{user.name}:x:{user.uid}:{user.gid}:Linux User,,,:{user.home}:/bin/sh",
        )
        shadow = etc / "shadow"
        if shadow.is_file():
            _append_line(shadow, f"{user.name}:!::0:::::")

        home = self._in_image(rootfs, user.home)
        home.mkdir(parents=True, exist_ok=True)
        home.chmod(0o755)

    def write_config(self, workspace: Path, document: Dict[str, Any]) -> bytes:
        """Write config.json with stable key order."""
        payload = (json.dumps(document, indent=2, sort_keys=True) + "\n").encode("utf-8")
        (workspace / FinalImage.CONFIG_FILE).write_bytes(payload)
        return payload

    def publish(self, workspace: Path, output_dir: Path) -> Path:
        """Remove any previous image and move the workspace into place."""
        if output_dir.is_dir() and not output_dir.is_symlink():
            shutil.rmtree(output_dir)
        elif output_dir.exists() or output_dir.is_symlink():
            output_dir.unlink()
        os.replace(workspace, output_dir)
        logger.info("Published image to %s", output_dir)
        return output_dir

    def discard(self, workspace: Path) -> None:
        """Remove an unpublished workspace."""
        shutil.rmtree(workspace, ignore_errors=True)

    @staticmethod
    def _in_image(rootfs: Path, target: str) -> Path:
        return rootfs / target.lstrip("/")
