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

"""Zip packing helpers shared by the layer store implementations.

File permission bits are kept in the archive so that restored layers keep
executable scripts executable.
"""

import io
import stat
import zipfile
from pathlib import Path, PurePosixPath
from typing import Tuple

from core.layer_cache.exceptions import LayerStoreError, LayerValidationError


def pack_directory(directory: Path, max_entries: int) -> Tuple[bytes, int]:
    """Zip every regular file and every empty directory below directory.

    Args:
        directory: Directory to archive.
        max_entries: Maximum number of archive entries accepted.

    Returns:
        Tuple of archive bytes and number of files archived.

    Raises:
        ValueError: If directory does not exist.
        LayerValidationError: If the directory holds too many entries.
    """
    if not directory.is_dir():
        raise ValueError(f"source_directory does not exist: {directory}")

    paths = sorted(directory.rglob("*"))
    files = [p for p in paths if p.is_file()]
    empty_dirs = [
        p for p in paths if p.is_dir() and not p.is_symlink() and not any(p.iterdir())
    ]
    if len(files) + len(empty_dirs) > max_entries:
        raise LayerValidationError(
            f"Layer has {len(files) + len(empty_dirs)} entries, exceeding maximum {max_entries}"
        )

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for file_path in files:
            info = zipfile.ZipInfo(file_path.relative_to(directory).as_posix())
            info.external_attr = (stat.S_IMODE(file_path.stat().st_mode) | stat.S_IFREG) << 16
            info.compress_type = zipfile.ZIP_DEFLATED
            zf.writestr(info, file_path.read_bytes())
        for dir_path in empty_dirs:
            info = zipfile.ZipInfo(dir_path.relative_to(directory).as_posix() + "/")
            # 0x10 is the MS-DOS directory flag
            mode = stat.S_IMODE(dir_path.stat().st_mode) | stat.S_IFDIR
            info.external_attr = (mode << 16) | 0x10
            zf.writestr(info, b"")
    return buf.getvalue(), len(files)


def count_entries(raw_bytes: bytes) -> int:
    """Number of file members in an archive."""
    try:
        with zipfile.ZipFile(io.BytesIO(raw_bytes), "r") as zf:
            return sum(1 for info in zf.infolist() if not info.is_dir())
    except zipfile.BadZipFile as exc:
        raise LayerStoreError(f"Corrupt layer archive: {exc}") from exc


def unpack_archive(raw_bytes: bytes, destination: Path, max_entries: int) -> Path:
    """Extract an archive produced by :func:`pack_directory`.

    Raises:
        LayerValidationError: If a member is unsafe or there are too many.
        LayerStoreError: If the archive is corrupt or cannot be written.
    """
    destination.mkdir(parents=True, exist_ok=True)
    try:
        with zipfile.ZipFile(io.BytesIO(raw_bytes), "r") as zf:
            members = zf.infolist()
            if len(members) > max_entries:
                raise LayerValidationError(
                    f"Layer archive has {len(members)} entries, exceeding maximum {max_entries}"
                )
            for info in members:
                member = PurePosixPath(info.filename)
                if member.is_absolute() or ".." in member.parts:
                    raise LayerValidationError(f"Unsafe layer archive member: {info.filename}")
            for info in members:
                target = Path(zf.extract(info, str(destination)))
                mode = (info.external_attr >> 16) & 0o7777
                if mode and not info.is_dir():
                    target.chmod(mode)
    except zipfile.BadZipFile as exc:
        raise LayerStoreError(f"Corrupt layer archive: {exc}") from exc
    except OSError as exc:
        raise LayerStoreError(f"Failed to extract layer to {destination}: {exc}") from exc
    return destination
