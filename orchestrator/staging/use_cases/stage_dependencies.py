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

"""StageDependencies use case implementation."""

import logging
import os
import shutil
import tempfile
from pathlib import Path

from common.logging_utils import log_secure_info
from core.build_image.value_objects import ImageReference
from core.layer_cache.exceptions import LayerStoreError
from core.layer_cache.interfaces import LayerStore
from core.layer_cache.value_objects import LayerHint, LayerKey, LayerRef
from core.manifest.parser import load_manifest
from core.manifest.value_objects import DependencyManifest
from core.staging.entities import StagedDependencySet
from core.staging.repositories import DependencyInstaller
from core.staging.services import BuildToolingInspector
from orchestrator.staging.commands import StageDependenciesCommand

logger = logging.getLogger(__name__)

LAYER_NAMESPACE = "staged-dependencies"
LAYER_LABEL = "site-packages"
STAGED_DIR_NAME = "staged"


class StageDependenciesUseCase:
    """Use case for the Dependency Stager.

    Guarantees:
    - Missing or malformed manifests abort the build
    - An unchanged manifest is served from the layer cache without running
      the installer; application source never takes part in the cache key
    - Installation happens in a throwaway builder workspace that is always
      removed, and a failed installation leaves no staged output
    - The staged set is checked for build tooling before it is handed on
    - An unreadable cached layer fails the build and is evicted, so the
      next build resolves the manifest again

    Attributes:
        layer_store: Layer cache port.
        installer: Dependency installer port.
        inspector: Build tooling inspector.
        builder_image: Builder stage image, part of the cache key.
        staging_dir: Builder staging path, part of the cache key.
    """

    def __init__(
        self,
        layer_store: LayerStore,
        installer: DependencyInstaller,
        inspector: BuildToolingInspector,
        builder_image: ImageReference,
        staging_dir: str,
    ) -> None:  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self._layer_store = layer_store
        self._installer = installer
        self._inspector = inspector
        self._builder_image = builder_image
        self._staging_dir = staging_dir

    def execute(self, command: StageDependenciesCommand) -> StagedDependencySet:
        """Resolve the manifest into a staged dependency set.

        Args:
            command: StageDependencies command.

        Returns:
            StagedDependencySet located under the command's working dir.

        Raises:
            ManifestNotFoundError: If the manifest is absent.
            InvalidManifestError: If the manifest cannot be parsed.
            DependencyResolutionError: If installation fails.
            BuildToolingLeakError: If the staged set contains build tooling.
            LayerCacheError: If the layer cache fails.
        """
        build_id = str(command.build_id)
        manifest = load_manifest(command.manifest_path, build_id)
        hint = self._layer_hint(manifest)
        key = self._layer_store.generate_key(hint)
        output_dir = self._prepare_output_dir(command)

        try:
            if self._layer_store.exists(key):
                layer = self._restore_from_cache(key, output_dir, build_id)
                from_cache = True
            else:
                layer = self._install(command, manifest, hint, output_dir)
                from_cache = False
            self._inspector.ensure_clean(output_dir, build_id)
        except Exception:
            shutil.rmtree(output_dir, ignore_errors=True)
            raise

        log_secure_info(
            "info",
            f"Staged {len(manifest)} requirements: manifest={manifest.digest().short}, "
            f"layer={layer.key}, from_cache={from_cache}",
            build_id=build_id,
        )
        return StagedDependencySet(
            path=output_dir,
            manifest_digest=manifest.digest(),
            layer=layer,
            from_cache=from_cache,
            requirement_count=len(manifest),
        )

    def _layer_hint(self, manifest: DependencyManifest) -> LayerHint:
        """Cache key inputs: manifest, builder environment, staging path."""
        return LayerHint(
            namespace=LAYER_NAMESPACE,
            label=LAYER_LABEL,
            tags={
                "manifest": manifest.digest().value,
                "builder_image": str(self._builder_image),
                "staging_dir": self._staging_dir,
                "installer": self._installer.describe(),
            },
        )

    @staticmethod
    def _prepare_output_dir(command: StageDependenciesCommand) -> Path:
        output_dir = command.working_dir / str(command.build_id) / STAGED_DIR_NAME
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.parent.mkdir(parents=True, exist_ok=True)
        return output_dir

    def _restore_from_cache(self, key: LayerKey, output_dir: Path, build_id: str) -> LayerRef:
        """Restore a cached set; an unreadable layer is evicted and the build fails."""
        logger.info("Reusing cached staged dependency set %s, build_id=%s", key, build_id)
        try:
            self._layer_store.restore(key, output_dir)
            return self._layer_store.describe(key)
        except LayerStoreError:
            evicted = self._layer_store.delete(key)
            log_secure_info(
                "error",
                f"Cached layer {key} is unreadable, evicted={evicted}",
                build_id=build_id,
            )
            raise

    def _install(
        self,
        command: StageDependenciesCommand,
        manifest: DependencyManifest,
        hint: LayerHint,
        output_dir: Path,
    ) -> LayerRef:
        """Install into a throwaway builder workspace, cache, then hand over."""
        build_id = str(command.build_id)
        workspace = Path(tempfile.mkdtemp(prefix=f"builder-{build_id}-", dir=str(output_dir.parent)))
        target = workspace / "target"
        target.mkdir()
        try:
            if manifest.is_empty:
                logger.warning("Manifest %s is empty, staging an empty set", command.manifest_path)
            else:
                log_secure_info(
                    "info",
                    f"Resolving {len(manifest)} requirements: {', '.join(manifest.names())}",
                    build_id=build_id,
                )
                report = self._installer.install(command.manifest_path, target, build_id)
                log_secure_info(
                    "info",
                    f"Installed {', '.join(report.installed) or 'no distributions'} "
                    f"in {report.duration_seconds:.1f}s",
                    build_id=build_id,
                )
            self._inspector.ensure_clean(target, build_id)
            layer = self._layer_store.store(hint, target)
            os.replace(target, output_dir)
            return layer
        finally:
            shutil.rmtree(workspace, ignore_errors=True)
