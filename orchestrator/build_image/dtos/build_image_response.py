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

"""Build Image response DTO."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class BuildImageResponse:
    """Response DTO for a completed build.

    Attributes:
        build_id: Build identifier.
        image_path: Final image directory.
        image_digest: Digest of the image config document.
        manifest_digest: Digest of the resolved manifest.
        dependencies_digest: Digest of the staged dependency set.
        dependencies_from_cache: True when staging was served from cache.
        user: Default runtime user.
        port: Declared port (``8000/tcp``).
        command: Entry command.
        created: Creation timestamp (ISO 8601).
        log_file: Per-build log file, if one could be created.
    """

    build_id: str
    image_path: str
    image_digest: str
    manifest_digest: str
    dependencies_digest: str
    dependencies_from_cache: bool
    user: str
    port: str
    command: List[str]
    created: str
    log_file: Optional[str] = None
