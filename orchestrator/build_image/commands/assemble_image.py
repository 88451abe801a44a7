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

"""AssembleImage command DTO."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from core.build_image.entities import SourceBundle
from core.build_image.value_objects import BuildId
from core.staging.entities import StagedDependencySet


@dataclass(frozen=True)
class AssembleImageCommand:
    """Command to compose the final runtime image.

    Attributes:
        build_id: Build identifier for tracing.
        staged: Staged dependency set handed over by the stager.
        bundle: Application source bundle.
        output_dir: Final image location, replaced wholesale.
        base_rootfs: Optional minimal base filesystem to start from.
    """

    build_id: BuildId
    staged: StagedDependencySet
    bundle: SourceBundle
    output_dir: Path
    base_rootfs: Optional[Path] = None
