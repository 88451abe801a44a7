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

"""CreateBuildImage command DTO."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from core.build_image.value_objects import BuildId


@dataclass(frozen=True)
class CreateBuildImageCommand:
    """Command to run the two-stage build.

    Immutable command object representing the intent to turn a build
    context into a final image.

    Attributes:
        build_id: Build identifier, also the correlation id of every error.
        context_dir: Build context root.
        manifest_name: Dependency manifest file name in the context.
        source_files: Application files to copy, relative to the context.
        output_dir: Final image location.
        working_dir: Scratch directory for staging.
        base_rootfs: Optional minimal base filesystem.
    """

    build_id: BuildId
    context_dir: Path
    manifest_name: str
    source_files: List[str]
    output_dir: Path
    working_dir: Path
    base_rootfs: Optional[Path] = None
