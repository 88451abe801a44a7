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

"""Value objects for the Dependency Manifest domain.

All value objects are immutable and defined by their values, not identity.
"""

import hashlib
import re
from dataclasses import dataclass
from typing import ClassVar, Iterator, List, Tuple

from core.layer_cache.value_objects import ContentDigest


def normalize_package_name(name: str) -> str:
    """Return the PEP 503 normalized form of a distribution name."""
    return re.sub(r"[-_.]+", "-", name).lower()


@dataclass(frozen=True)
class PackageRequirement:
    """A single (package name, version constraint) pair.

    Attributes:
        name: Distribution name as written in the manifest.
        constraint: Zero or more comma separated version specifiers
            (e.g. "==3.0.3" or ">=1.0,<2"). Empty means unconstrained.
        extras: Optional extras requested for the distribution.

    Raises:
        ValueError: If the name, extras or constraint are malformed.
    """

    name: str
    constraint: str = ""
    extras: Tuple[str, ...] = ()

    MAX_NAME_LENGTH: ClassVar[int] = 214
    NAME_PATTERN: ClassVar[str] = r"^([A-Za-z0-9]|[A-Za-z0-9][A-Za-z0-9._-]*[A-Za-z0-9])$"
    SPECIFIER_PATTERN: ClassVar[str] = r"^(===|==|!=|~=|>=|<=|>|<)\s*[A-Za-z0-9_.*+!-]+$"

    def __post_init__(self) -> None:
        """Validate name, extras and constraint."""
        if not self.name or not self.name.strip():
            raise ValueError("Package name cannot be empty")
        if len(self.name) > self.MAX_NAME_LENGTH:
            raise ValueError(
                f"Package name length cannot exceed {self.MAX_NAME_LENGTH} "
                f"characters, got {len(self.name)}"
            )
        if not re.match(self.NAME_PATTERN, self.name):
            raise ValueError(f"Invalid package name: {self.name}")
        for extra in self.extras:
            if not re.match(self.NAME_PATTERN, extra):
                raise ValueError(f"Invalid extra for {self.name}: {extra}")
        for specifier in self.specifiers:
            if not re.match(self.SPECIFIER_PATTERN, specifier):
                raise ValueError(
                    f"Invalid version constraint for {self.name}: {self.constraint}"
                )

    @property
    def specifiers(self) -> List[str]:
        """Individual specifiers of the constraint, whitespace removed."""
        if not self.constraint.strip():
            return []
        return [part.replace(" ", "") for part in self.constraint.split(",")]

    @property
    def normalized_name(self) -> str:
        """PEP 503 normalized name used for duplicate detection."""
        return normalize_package_name(self.name)

    @property
    def is_pinned(self) -> bool:
        """True when the constraint selects exactly one version."""
        specifiers = self.specifiers
        return (
            len(specifiers) == 1
            and specifiers[0].startswith("==")
            and "*" not in specifiers[0]
        )

    def __str__(self) -> str:
        """Return the canonical requirement line."""
        extras = f"[{','.join(self.extras)}]" if self.extras else ""
        return f"{self.name}{extras}{','.join(self.specifiers)}"


@dataclass(frozen=True)
class DependencyManifest:
    """Ordered, immutable list of third-party requirements.

    Attributes:
        requirements: Requirements in the order they were authored.

    Raises:
        ValueError: If the same distribution is listed twice.
    """

    requirements: Tuple[PackageRequirement, ...] = ()

    def __post_init__(self) -> None:
        """Reject duplicate distributions."""
        seen = set()
        for requirement in self.requirements:
            if requirement.normalized_name in seen:
                raise ValueError(f"Duplicate requirement: {requirement.name}")
            seen.add(requirement.normalized_name)

    def __iter__(self) -> Iterator[PackageRequirement]:
        return iter(self.requirements)

    def __len__(self) -> int:
        return len(self.requirements)

    @property
    def is_empty(self) -> bool:
        """True when no requirements are listed."""
        return not self.requirements

    def names(self) -> List[str]:
        """Requirement names in manifest order."""
        return [requirement.name for requirement in self.requirements]

    def canonical_text(self) -> str:
        """One canonical requirement per line; comments and spacing dropped."""
        return "".join(f"{requirement}\n" for requirement in self.requirements)

    def digest(self) -> ContentDigest:
        """SHA-256 over the canonical text.

        Editing comments or whitespace leaves the digest (and therefore the
        staging cache key) unchanged.
        """
        return ContentDigest(hashlib.sha256(self.canonical_text().encode("utf-8")).hexdigest())
