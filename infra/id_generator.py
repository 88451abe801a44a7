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

"""Infrastructure layer for BuildId generation using UUID v4."""

import uuid

from core.build_image.value_objects import BuildId


class BuildIdGenerator:  # pylint: disable=R0903
    """BuildId generator using UUID v4."""

    def generate(self) -> BuildId:
        """Generate a new BuildId.

        Returns:
            BuildId: A new build identifier.
        """
        return BuildId(str(uuid.uuid4()))
