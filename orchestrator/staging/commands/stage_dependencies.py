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

"""StageDependencies command DTO."""

from dataclasses import dataclass
from pathlib import Path

from core.build_image.value_objects import BuildId


@dataclass(frozen=True)
class StageDependenciesCommand:
    """Command to resolve a manifest into a staged dependency set.

    Attributes:
        build_id: Build identifier for tracing.
        manifest_path: Manifest file in the build context.
        working_dir: Directory the stager owns for this build.
    """

    build_id: BuildId
    manifest_path: Path
    working_dir: Path
