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

"""Build Image domain module.

This module contains domain logic for assembling the runtime image.
"""

from core.build_image.entities import BuildRecipe, FinalImage, RuntimeLayout, SourceBundle
from core.build_image.exceptions import (
    AssemblyDomainError,
    ExecutionIdentityError,
    ImageBuildError,
    ImageConfigValidationError,
    InvalidSourceBundleError,
    MissingBuildInputError,
    PrivilegedUserError,
)
from core.build_image.value_objects import (
    BuildId,
    EntryCommand,
    ExecutionUser,
    ExposedPort,
    ImageReference,
    SourceFile,
)

__all__ = [
    "AssemblyDomainError",
    "BuildId",
    "BuildRecipe",
    "EntryCommand",
    "ExecutionIdentityError",
    "ExecutionUser",
    "ExposedPort",
    "FinalImage",
    "ImageBuildError",
    "ImageConfigValidationError",
    "ImageReference",
    "InvalidSourceBundleError",
    "MissingBuildInputError",
    "PrivilegedUserError",
    "RuntimeLayout",
    "SourceBundle",
    "SourceFile",
]
