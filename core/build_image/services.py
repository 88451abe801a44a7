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

"""Domain services for the Build Image module."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator, ValidationError

from core.build_image.entities import RuntimeLayout
from core.build_image.exceptions import ImageConfigValidationError, PrivilegedUserError
from core.build_image.value_objects import ExecutionUser

logger = logging.getLogger(__name__)

_RESOURCES_DIR = Path(__file__).resolve().parent / "resources"
DEFAULT_CONFIG_SCHEMA_PATH = _RESOURCES_DIR / "ImageConfigSchema.json"

CONFIG_SCHEMA_VERSION = "1.0"


def ensure_unprivileged(user: ExecutionUser, correlation_id: str = "") -> None:
    """Refuse root as the default runtime identity.

    Raises:
        PrivilegedUserError: If user is root by name, uid or gid.
    """
    if user.is_privileged:
        raise PrivilegedUserError(
            f"Final image must not run as a privileged identity: "
            f"{user.name} (uid={user.uid}, gid={user.gid})",
            correlation_id,
        )


class ImageConfigService:
    """Builds and validates the image config document."""

    def __init__(self, schema_path: Path = DEFAULT_CONFIG_SCHEMA_PATH, architecture: str = "amd64"):
        """Load the JSON schema used to validate config documents."""
        with open(schema_path, "r", encoding="utf-8") as schema_file:
            self._schema = json.load(schema_file)
        self._validator = Draft7Validator(self._schema)
        self._architecture = architecture

    # pylint: disable=too-many-arguments
    def build_document(
        self,
        layout: RuntimeLayout,
        build: Dict[str, Any],
        created: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Compose the config document for a final image.

        Args:
            layout: Runtime layout of the image.
            build: Build provenance (ids, digests, cache flag, sources).
            created: Creation time, defaults to now (UTC).

        Returns:
            Validated config document.

        Raises:
            ImageConfigValidationError: If the document violates the schema.
        """
        created = created or datetime.now(timezone.utc)
        env = [f"{key}={value}" for key, value in sorted(layout.env.items())]
        document = {
            "schema_version": CONFIG_SCHEMA_VERSION,
            "created": created.isoformat(),
            "architecture": self._architecture,
            "os": "linux",
            "config": {
                "User": layout.user.name,
                "WorkingDir": layout.workdir,
                "Cmd": list(layout.command.argv),
                "ExposedPorts": {str(layout.port): {}},
                "Env": env,
                "Labels": dict(layout.labels),
            },
            "build": build,
        }
        self.validate(document)
        return document

    def validate(self, document: Dict[str, Any]) -> None:
        """Validate a config document against the schema.

        Raises:
            ImageConfigValidationError: On the first schema violation.
        """
        errors: List[ValidationError] = sorted(
            self._validator.iter_errors(document), key=lambda e: list(e.absolute_path)
        )
        if not errors:
            return
        first = errors[0]
        message = f"Image config schema validation failed: {first.message}"
        if first.absolute_path:
            message += f" at {'/'.join(str(p) for p in first.absolute_path)}"
        logger.error("%s (%d errors)", message, len(errors))
        raise ImageConfigValidationError(message, build_id_of(document))


def build_id_of(document: Dict[str, Any]) -> str:
    """Build id recorded in a config document, empty if absent."""
    build = document.get("build")
    if isinstance(build, dict):
        return str(build.get("build_id", ""))
    return ""
