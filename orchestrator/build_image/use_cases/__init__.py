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

"""Build Image use cases."""

from orchestrator.build_image.use_cases.assemble_image import AssembleImageUseCase
from orchestrator.build_image.use_cases.create_build_image import CreateBuildImageUseCase

__all__ = ["AssembleImageUseCase", "CreateBuildImageUseCase"]
