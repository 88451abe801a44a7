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

"""CreateBuildImage use case implementation."""

import logging
import shutil
from pathlib import Path
from typing import Optional

from common.logging_utils import create_build_log_file, log_secure_info, remove_build_logger
from core.build_image.entities import FinalImage, SourceBundle
from core.build_image.exceptions import InvalidSourceBundleError
from core.build_image.value_objects import SourceFile
from core.exceptions import ImageBuildDomainError
from core.staging.entities import StagedDependencySet
from orchestrator.build_image.commands import AssembleImageCommand, CreateBuildImageCommand
from orchestrator.build_image.dtos import BuildImageResponse
from orchestrator.build_image.use_cases.assemble_image import AssembleImageUseCase
from orchestrator.staging.commands import StageDependenciesCommand
from orchestrator.staging.use_cases import StageDependenciesUseCase

logger = logging.getLogger(__name__)


class CreateBuildImageUseCase:
    """Use case running the whole two-stage build.

    Stages run strictly in sequence: the stager's output is the
    assembler's input. The first fatal error stops the build, nothing
    is retried and the stager's scratch directory is always removed.

    Attributes:
        stage_use_case: Dependency Stager.
        assemble_use_case: Runtime Assembler.
    """

    def __init__(
        self,
        stage_use_case: StageDependenciesUseCase,
        assemble_use_case: AssembleImageUseCase,
    ) -> None:
        self._stage_use_case = stage_use_case
        self._assemble_use_case = assemble_use_case

    def execute(self, command: CreateBuildImageCommand) -> BuildImageResponse:
        """Execute the build.

        Args:
            command: CreateBuildImage command with build context details.

        Returns:
            BuildImageResponse DTO describing the published image.

        Raises:
            InvalidSourceBundleError: If a source or manifest path is unsafe.
            ImageBuildDomainError: Any fatal stager or assembler error.
        """
        build_id = str(command.build_id)
        log_file = create_build_log_file(build_id)
        log_secure_info(
            "info",
            f"Starting build {build_id}: context={command.context_dir}, "
            f"output={command.output_dir}",
            build_id=build_id,
        )
        try:
            bundle = self._source_bundle(command)
            staged = self._stage_use_case.execute(
                StageDependenciesCommand(
                    build_id=command.build_id,
                    manifest_path=command.context_dir / command.manifest_name,
                    working_dir=command.working_dir,
                )
            )
            image = self._assemble_use_case.execute(
                AssembleImageCommand(
                    build_id=command.build_id,
                    staged=staged,
                    bundle=bundle,
                    output_dir=command.output_dir,
                    base_rootfs=command.base_rootfs,
                )
            )
            log_secure_info(
                "info", f"Build {build_id} completed", build_id=build_id, end_section=True
            )
        except ImageBuildDomainError as exc:
            log_secure_info(
                "error",
                f"Build {build_id} failed: {exc.message}",
                build_id=build_id,
                end_section=True,
            )
            raise
        finally:
            shutil.rmtree(command.working_dir / build_id, ignore_errors=True)
            remove_build_logger(build_id)

        return self._to_response(command, staged, image, log_file)

    @staticmethod
    def _source_bundle(command: CreateBuildImageCommand) -> SourceBundle:
        """Validate source and manifest names into a bundle."""
        build_id = str(command.build_id)
        try:
            SourceFile(command.manifest_name)
            bundle = SourceBundle.from_names(command.context_dir, list(command.source_files))
        except ValueError as exc:
            raise InvalidSourceBundleError(str(exc), build_id) from exc
        if command.manifest_name in {str(source) for source in bundle.files}:
            raise InvalidSourceBundleError(
                f"Manifest {command.manifest_name} must not be part of the source bundle",
                build_id,
            )
        return bundle

    def _to_response(
        self,
        command: CreateBuildImageCommand,
        staged: StagedDependencySet,
        image: FinalImage,
        log_file: Optional[Path],
    ) -> BuildImageResponse:
        layout = self._assemble_use_case.layout
        return BuildImageResponse(
            build_id=str(command.build_id),
            image_path=str(image.path),
            image_digest=image.digest.value,
            manifest_digest=staged.manifest_digest.value,
            dependencies_digest=staged.content_digest.value,
            dependencies_from_cache=staged.from_cache,
            user=image.user,
            port=str(layout.port),
            command=list(layout.command.argv),
            created=image.created,
            log_file=str(log_file) if log_file else None,
        )
