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

"""Value objects for the Build Image domain.

All value objects are immutable and defined by their values, not identity.
"""

import json
import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import ClassVar, Optional, Tuple


@dataclass(frozen=True)
class BuildId:
    """Identifier of one build invocation.

    Attributes:
        value: Build identifier (generated UUID or caller supplied name).

    Raises:
        ValueError: If the identifier format is invalid.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 64
    ID_PATTERN: ClassVar[str] = r"^[A-Za-z0-9][A-Za-z0-9_.\-]*$"

    def __post_init__(self) -> None:
        """Validate build id format."""
        if not self.value or not self.value.strip():
            raise ValueError("Build id cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Build id length cannot exceed {self.MAX_LENGTH} "
                f"characters, got {len(self.value)}"
            )
        if not re.match(self.ID_PATTERN, self.value):
            raise ValueError(
                f"Invalid build id format: {self.value}. "
                f"Must contain only alphanumeric characters, dots, underscores, and hyphens."
            )

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class ImageReference:
    """Container image reference such as ``python:3.11-alpine``.

    Attributes:
        value: Reference string, optionally with registry and tag.

    Raises:
        ValueError: If the reference is malformed.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 255
    REFERENCE_PATTERN: ClassVar[str] = (
        r"^(?:[A-Za-z0-9.\-]+(?::[0-9]+)?/)?"
        r"[a-z0-9]+(?:[._\-][a-z0-9]+)*(?:/[a-z0-9]+(?:[._\-][a-z0-9]+)*)*"
        r"(?::[A-Za-z0-9_][A-Za-z0-9_.\-]{0,127})?$"
    )
    PYTHON_TAG_PATTERN: ClassVar[str] = r"^(\d+\.\d+)"

    def __post_init__(self) -> None:
        """Validate reference format."""
        if not self.value or not self.value.strip():
            raise ValueError("Image reference cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Image reference length cannot exceed {self.MAX_LENGTH} "
                f"characters, got {len(self.value)}"
            )
        if not re.match(self.REFERENCE_PATTERN, self.value):
            raise ValueError(f"Invalid image reference: {self.value}")

    @property
    def repository(self) -> str:
        """Reference without its tag."""
        name, _, tag = self.value.rpartition(":")
        if not name or "/" in tag:
            return self.value
        return name

    @property
    def tag(self) -> str:
        """Tag part, ``latest`` when none is given."""
        if self.repository == self.value:
            return "latest"
        return self.value.rpartition(":")[2]

    @property
    def is_alpine(self) -> bool:
        """True for Alpine based images (busybox ``adduser``)."""
        return "alpine" in self.tag or self.repository.endswith("alpine")

    @property
    def libc(self) -> str:
        """C library of the image: ``musl`` on Alpine, ``glibc`` otherwise."""
        return "musl" if self.is_alpine else "glibc"

    @property
    def python_version(self) -> Optional[str]:
        """``major.minor`` of an official python image tag, else None."""
        if self.repository.rsplit("/", 1)[-1] != "python":
            return None
        match = re.match(self.PYTHON_TAG_PATTERN, self.tag)
        return match.group(1) if match else None

    def site_packages_path(self) -> str:
        """Interpreter lookup path for third-party packages in this image.

        Raises:
            ValueError: If the python version cannot be derived from the tag.
        """
        version = self.python_version
        if version is None:
            raise ValueError(
                f"Cannot derive site-packages path from image {self.value}; "
                f"configure it explicitly"
            )
        return f"/usr/local/lib/python{version}/site-packages"

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class ExecutionUser:
    """Identity the final image runs as.

    Attributes:
        name: Login name.
        uid: Numeric user id.
        gid: Numeric group id.

    Raises:
        ValueError: If the name or ids are malformed.
    """

    name: str
    uid: int = 1000
    gid: int = 1000

    NAME_PATTERN: ClassVar[str] = r"^[a-z_][a-z0-9_\-]{0,31}$"
    MAX_ID: ClassVar[int] = 2 ** 31 - 1

    def __post_init__(self) -> None:
        """Validate name and ids."""
        if not self.name or not re.match(self.NAME_PATTERN, self.name):
            raise ValueError(
                f"Invalid user name: {self.name!r}. Must start with a lowercase letter "
                f"or underscore and contain at most 32 characters."
            )
        for label, value in (("uid", self.uid), ("gid", self.gid)):
            if not 0 <= value <= self.MAX_ID:
                raise ValueError(f"{label} out of range: {value}")

    @property
    def is_privileged(self) -> bool:
        """True for root by name or by id."""
        return self.name == "root" or self.uid == 0 or self.gid == 0

    @property
    def home(self) -> str:
        """Home directory created for the user."""
        return f"/home/{self.name}"

    def __str__(self) -> str:
        """Return string representation."""
        return self.name


@dataclass(frozen=True)
class ExposedPort:
    """Listening port declared as image metadata.

    Declaring a port never opens a socket.

    Attributes:
        number: Port number.
        protocol: ``tcp`` or ``udp``.
    """

    number: int
    protocol: str = "tcp"

    SUPPORTED_PROTOCOLS: ClassVar[Tuple[str, ...]] = ("tcp", "udp")

    def __post_init__(self) -> None:
        """Validate port range and protocol."""
        if isinstance(self.number, bool) or not 1 <= self.number <= 65535:
            raise ValueError(f"Port {self.number} is not in valid range 1-65535")
        if self.protocol not in self.SUPPORTED_PROTOCOLS:
            raise ValueError(
                f"Unsupported protocol: {self.protocol}. "
                f"Supported: {', '.join(self.SUPPORTED_PROTOCOLS)}"
            )

    def __str__(self) -> str:
        """Return ``<number>/<protocol>``."""
        return f"{self.number}/{self.protocol}"


@dataclass(frozen=True)
class EntryCommand:
    """Process entry point in exec form.

    Attributes:
        argv: Program and arguments.
    """

    argv: Tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate arguments."""
        if not self.argv:
            raise ValueError("Entry command cannot be empty")
        for arg in self.argv:
            if not arg or "\x00" in arg:
                raise ValueError(f"Invalid entry command argument: {arg!r}")

    def exec_form(self) -> str:
        """JSON array form used by ``CMD``."""
        return json.dumps(list(self.argv))

    def __str__(self) -> str:
        """Return string representation."""
        return " ".join(self.argv)


@dataclass(frozen=True)
class SourceFile:
    """Relative path of one application source file in the build context.

    Attributes:
        value: POSIX path relative to the build context.

    Raises:
        ValueError: If the path is empty, absolute or escapes the context.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 1024

    def __post_init__(self) -> None:
        """Validate path safety."""
        if not self.value or not self.value.strip() or self.value == ".":
            raise ValueError("Source file path cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Source file path length cannot exceed {self.MAX_LENGTH} "
                f"characters, got {len(self.value)}"
            )
        if "\x00" in self.value or "\\" in self.value:
            raise ValueError("Source file path must not contain null bytes or backslashes")
        path = PurePosixPath(self.value)
        if path.is_absolute():
            raise ValueError(f"Source file path must be relative: {self.value}")
        if ".." in path.parts:
            raise ValueError(
                f"Source file path must not contain path traversal component: {self.value}"
            )

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


def validate_absolute_path(value: str, label: str) -> str:
    """Return value if it is an absolute POSIX path without traversal.

    Raises:
        ValueError: Otherwise.
    """
    path = PurePosixPath(value or "")
    if not value or not path.is_absolute():
        raise ValueError(f"{label} must be an absolute path, got {value!r}")
    if ".." in path.parts:
        raise ValueError(f"{label} must not contain path traversal component: {value}")
    return str(path)
