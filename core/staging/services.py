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

"""Domain services for the Dependency Stager."""

import logging
from pathlib import Path, PurePosixPath
from typing import FrozenSet, List, Tuple

from core.staging.exceptions import BuildToolingLeakError

logger = logging.getLogger(__name__)


class BuildToolingInspector:
    """Detects build-only tooling in a stage's output tree.

    Flags compiler and linker executables in ``bin``-style directories,
    object files, and package-manager caches.
    """

    TOOLING_EXECUTABLES: FrozenSet[str] = frozenset({
        "gcc", "g++", "cc", "c++", "cpp", "clang", "clang++",
        "ld", "as", "make", "cmake",
    })
    EXECUTABLE_DIRS: FrozenSet[str] = frozenset({"bin", "sbin", "libexec"})
    OBJECT_SUFFIXES: Tuple[str, ...] = (".o", ".obj")
    CACHE_DIR_NAMES: FrozenSet[str] = frozenset({".cache", "pip-cache", ".pip-cache"})
    CACHE_PATH_PREFIXES: Tuple[str, ...] = (
        "var/cache/apt",
        "var/lib/apt/lists",
        "root/.cache",
    )

    def find_tooling(self, root: Path) -> List[str]:
        """Return offending paths relative to root, sorted.

        Args:
            root: Directory to inspect.

        Returns:
            Relative POSIX paths of build tooling entries (empty when clean).
        """
        offending: List[str] = []
        if not root.is_dir():
            return offending

        for entry in sorted(root.rglob("*")):
            rel = PurePosixPath(entry.relative_to(root).as_posix())
            if self._is_tooling(rel, entry):
                offending.append(str(rel))
        return offending

    def ensure_clean(self, root: Path, correlation_id: str = "") -> None:
        """Raise if root contains build tooling.

        Raises:
            BuildToolingLeakError: If any tooling entry is found.
        """
        offending = self.find_tooling(root)
        if offending:
            logger.error(
                "Build tooling found in %s: %d entries, correlation_id=%s",
                root,
                len(offending),
                correlation_id,
            )
            raise BuildToolingLeakError(offending, correlation_id)
        logger.debug("No build tooling found in %s", root)

    def _is_tooling(self, rel: PurePosixPath, entry: Path) -> bool:
        rel_str = str(rel)
        if any(rel_str == prefix or rel_str.startswith(prefix + "/")
               for prefix in self.CACHE_PATH_PREFIXES):
            # report the prefix directory itself, not every file below it
            return rel_str in self.CACHE_PATH_PREFIXES
        if any(part in self.CACHE_DIR_NAMES for part in rel.parts[:-1]):
            return False
        if entry.is_dir():
            return rel.name in self.CACHE_DIR_NAMES
        if rel.suffix in self.OBJECT_SUFFIXES:
            return True
        return (
            rel.name in self.TOOLING_EXECUTABLES
            and rel.parent.name in self.EXECUTABLE_DIRS
        )
