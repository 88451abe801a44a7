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

"""Parser for ``name==version`` dependency manifests."""

import logging
import re
from pathlib import Path
from typing import List, Optional

from core.manifest.exceptions import InvalidManifestError, ManifestNotFoundError
from core.manifest.value_objects import DependencyManifest, PackageRequirement

logger = logging.getLogger(__name__)

_REQUIREMENT_LINE = re.compile(
    r"^(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*)"
    r"\s*(?:\[(?P<extras>[^\]]*)\])?"
    r"\s*(?P<constraint>.*)$"
)


def _strip_comment(line: str) -> str:
    """Drop a trailing comment; '#' starts one at line start or after whitespace."""
    if line.lstrip().startswith("#"):
        return ""
    return re.split(r"\s+#", line, maxsplit=1)[0].strip()


def parse_manifest_text(text: str, correlation_id: Optional[str] = None) -> DependencyManifest:
    """Parse manifest content into a DependencyManifest.

    Args:
        text: Manifest file content.
        correlation_id: Build identifier attached to raised errors.

    Returns:
        Parsed manifest preserving line order.

    Raises:
        InvalidManifestError: On option lines, environment markers,
            malformed requirements or duplicates.
    """
    requirements: List[PackageRequirement] = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = _strip_comment(raw_line)
        if not line:
            continue
        if line.startswith("-"):
            raise InvalidManifestError(
                f"pip options are not supported in the manifest: {line}",
                line_number,
                correlation_id,
            )
        if ";" in line or "@" in line:
            raise InvalidManifestError(
                f"environment markers and direct references are not supported: {line}",
                line_number,
                correlation_id,
            )

        match = _REQUIREMENT_LINE.match(line)
        if match is None:
            raise InvalidManifestError(
                f"malformed requirement: {line}", line_number, correlation_id
            )
        extras = tuple(
            extra.strip()
            for extra in (match.group("extras") or "").split(",")
            if extra.strip()
        )
        try:
            requirement = PackageRequirement(
                name=match.group("name"),
                constraint=match.group("constraint").strip(),
                extras=extras,
            )
        except ValueError as exc:
            raise InvalidManifestError(str(exc), line_number, correlation_id) from exc

        if any(r.normalized_name == requirement.normalized_name for r in requirements):
            raise InvalidManifestError(
                f"duplicate requirement: {requirement.name}", line_number, correlation_id
            )
        requirements.append(requirement)

    return DependencyManifest(tuple(requirements))


def load_manifest(path: Path, correlation_id: Optional[str] = None) -> DependencyManifest:
    """Read and parse a manifest file.

    Raises:
        ManifestNotFoundError: If path is not an existing file.
        InvalidManifestError: If the content cannot be parsed.
    """
    if not path.is_file():
        raise ManifestNotFoundError(str(path), correlation_id)

    manifest = parse_manifest_text(path.read_text(encoding="utf-8"), correlation_id)
    unpinned = [r.name for r in manifest if not r.is_pinned]
    if unpinned:
        logger.warning(
            "Manifest %s has unpinned requirements, builds may not be reproducible: %s",
            path,
            ", ".join(unpinned),
        )
    logger.debug("Loaded manifest %s with %d requirements", path, len(manifest))
    return manifest
