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

"""AssembleImage use case implementation."""

import hashlib
import logging
import posixpath
from pathlib import Path
from typing import Any, Dict

from common.logging_utils import log_secure_info
from core.build_image.entities import FinalImage, RuntimeLayout, SourceBundle
from core.build_image.exceptions import ExecutionIdentityError, MissingBuildInputError
from core.build_image.repositories import ImageFilesystemRepository
from core.build_image.services import ImageConfigService, ensure_unprivileged
from core.layer_cache.value_objects import ContentDigest
from core.staging.services import BuildToolingInspector
from orchestrator.build_image.commands import AssembleImageCommand

logger = logging.getLogger(__name__)


class AssembleImageUseCase:
    """Use case for the Runtime Assembler.

    This use case composes the final image with the following guarantees:
    - Only the staged dependency set and the source bundle are imported
    - The default user is never privileged
    - The image is built in a sibling workspace and published only after
      every step succeeded; a failed assembly leaves the previous output
      untouched and no workspace behind
    - The composed rootfs is checked for build tooling before publishing

    Attributes:
        filesystem: Image filesystem port.
        config_service: Image config document service.
        inspector: Build tooling inspector.
        layout: Runtime layout of the final image.
        builder_image: Builder stage image recorded as provenance.
    """

    def __init__(
        self,
        filesystem: ImageFilesystemRepository,
        config_service: ImageConfigService,
        inspector: BuildToolingInspector,
        layout: RuntimeLayout,
        builder_image: str = "",
    ) -> None:  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self._filesystem = filesystem
        self._config_service = config_service
        self._inspector = inspector
        self._layout = layout
        self._builder_image = builder_image

    @property
    def layout(self) -> RuntimeLayout:
        """Runtime layout applied to every assembled image."""
        return self._layout

    def execute(self, command: AssembleImageCommand) -> FinalImage:
        """Assemble and publish the final image.

        Args:
            command: AssembleImage command.

        Returns:
            FinalImage located at the command's output dir.

        Raises:
            PrivilegedUserError: If the runtime user is root.
            MissingBuildInputError: If an input is absent.
            ExecutionIdentityError: If the user cannot be registered.
            BuildToolingLeakError: If the rootfs contains build tooling.
            ImageConfigValidationError: If the config document is invalid.
        """
        build_id = str(command.build_id)
        ensure_unprivileged(self._layout.user, build_id)
        self._validate_inputs(command)

        workspace = self._filesystem.create_workspace(command.output_dir)
        try:
            rootfs = workspace / FinalImage.ROOTFS_DIR
            self._compose_rootfs(command, rootfs)
            self._inspector.ensure_clean(rootfs, build_id)
            document = self._config_service.build_document(
                self._layout, self._provenance(command)
            )
            payload = self._filesystem.write_config(workspace, document)
            self._filesystem.publish(workspace, command.output_dir)
        except Exception:
            self._filesystem.discard(workspace)
            raise

        image = FinalImage(
            path=command.output_dir,
            digest=ContentDigest(hashlib.sha256(payload).hexdigest()),
            config=document,
        )
        log_secure_info(
            "info",
            f"Assembled image {image.path} as {image.user}, digest={image.digest.short}",
            build_id=build_id,
        )
        return image

    def _validate_inputs(self, command: AssembleImageCommand) -> None:
        build_id = str(command.build_id)
        if not command.staged.exists():
            raise MissingBuildInputError(
                "staged dependency set", str(command.staged.path), build_id
            )
        missing = command.bundle.missing()
        if missing:
            raise MissingBuildInputError(
                "application source",
                ", ".join(str(command.bundle.context_dir / name) for name in missing),
                build_id,
            )
        if command.base_rootfs is not None and not command.base_rootfs.is_dir():
            raise MissingBuildInputError("base rootfs", str(command.base_rootfs), build_id)

    def _compose_rootfs(self, command: AssembleImageCommand, rootfs: Path) -> None:
        build_id = str(command.build_id)
        self._filesystem.import_base(rootfs, command.base_rootfs)

        count = self._filesystem.copy_tree(
            command.staged.path, rootfs, self._layout.site_packages
        )
        logger.info(
            "Copied %d staged files to %s, build_id=%s",
            count,
            self._layout.site_packages,
            build_id,
        )

        for source in command.bundle.files:
            target = posixpath.join(self._layout.workdir, source.value)
            self._filesystem.copy_file(command.bundle.resolve(source), rootfs, target)

        try:
            self._filesystem.add_user(rootfs, self._layout.user)
        except ExecutionIdentityError as exc:
            raise ExecutionIdentityError(exc.message, build_id) from exc

    def _provenance(self, command: AssembleImageCommand) -> Dict[str, Any]:
        staged = command.staged
        return {
            "build_id": str(command.build_id),
            "base_image": str(self._layout.base_image),
            "builder_image": self._builder_image,
            "manifest_digest": staged.manifest_digest.value,
            "dependencies_digest": staged.content_digest.value,
            "dependencies_from_cache": staged.from_cache,
            "source_digest": command.bundle.digest().value,
            "source_files": [str(source) for source in command.bundle.files],
        }
