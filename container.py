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

"""Dependency Injector container for the image builder."""
# pylint: disable=c-extension-no-member

import logging
from pathlib import Path

from dependency_injector import containers, providers

from common.config import ImageBuildConfig, load_config
from core.build_image.entities import BuildRecipe, RuntimeLayout
from core.build_image.services import ImageConfigService
from core.build_image.value_objects import (
    EntryCommand,
    ExecutionUser,
    ExposedPort,
    ImageReference,
    SourceFile,
)
from core.staging.services import BuildToolingInspector
from infra.id_generator import BuildIdGenerator
from infra.image.container_engine_builder import ContainerEngineBuilder
from infra.image.dockerfile_renderer import DockerfileRenderer
from infra.image.local_image_filesystem import LocalImageFilesystem
from infra.layer_cache.file_layer_store import FileLayerStore
from infra.layer_cache.in_memory_layer_store import InMemoryLayerStore
from infra.staging.pip_installer import PipDependencyInstaller
from orchestrator.build_image.use_cases import AssembleImageUseCase, CreateBuildImageUseCase
from orchestrator.staging.use_cases import StageDependenciesUseCase

logger = logging.getLogger(__name__)


def _load_build_config() -> ImageBuildConfig:
    """Load configuration, falling back to defaults when absent or invalid."""
    try:
        return load_config()
    except (FileNotFoundError, ValueError) as exc:
        logger.warning("Using default image build configuration: %s", exc)
        return ImageBuildConfig()


def _create_layer_store(config: ImageBuildConfig):
    """Factory function to create the layer cache based on configuration.

    Returns:
        InMemoryLayerStore or FileLayerStore based on config.
    """
    cache = config.layer_cache
    if cache.backend == "memory_store":
        return InMemoryLayerStore(
            max_layer_size_bytes=cache.max_layer_size_bytes,
            max_layer_entries=cache.max_layer_entries,
        )
    base_path = config.file_store.base_path if config.file_store else "/var/cache/image_build/layers"
    return FileLayerStore(
        base_path=Path(base_path),
        max_layer_size_bytes=cache.max_layer_size_bytes,
        max_layer_entries=cache.max_layer_entries,
    )


def runtime_layout_from(config: ImageBuildConfig) -> RuntimeLayout:
    """Build the final stage layout from configuration.

    Raises:
        ValueError: If a runtime setting is invalid.
    """
    runtime = config.runtime
    base_image = ImageReference(runtime.image)
    return RuntimeLayout(
        base_image=base_image,
        workdir=runtime.workdir,
        site_packages=runtime.site_packages or base_image.site_packages_path(),
        user=ExecutionUser(runtime.user, runtime.uid, runtime.gid),
        port=ExposedPort(runtime.port),
        command=EntryCommand(tuple(runtime.command)),
    )


def build_recipe_from(config: ImageBuildConfig) -> BuildRecipe:
    """Build the two-stage recipe from configuration.

    Raises:
        ValueError: If a builder or runtime setting is invalid.
    """
    builder = config.builder
    return BuildRecipe(
        builder_image=ImageReference(builder.image),
        build_packages=tuple(builder.build_packages),
        builder_workdir=builder.workdir,
        staging_dir=builder.staging_dir,
        manifest_name=builder.manifest,
        runtime=runtime_layout_from(config),
        sources=tuple(SourceFile(name) for name in config.runtime.sources),
    )


class BuildContainer(containers.DeclarativeContainer):  # pylint: disable=R0903
    """Image builder container.

    Configuration is read once from IMAGE_BUILD_CONFIG_PATH; override
    ``build_config`` to supply another one.
    """

    build_config = providers.Singleton(_load_build_config)

    build_id_generator = providers.Singleton(BuildIdGenerator)

    # --- Layer cache ---
    layer_store = providers.Singleton(_create_layer_store, config=build_config)

    # --- Build settings ---
    runtime_layout = providers.Singleton(runtime_layout_from, config=build_config)
    build_recipe = providers.Singleton(build_recipe_from, config=build_config)

    # --- Stage adapters and services ---
    dependency_installer = providers.Factory(
        PipDependencyInstaller,
        python_executable=build_config.provided.builder.python,
        timeout_seconds=build_config.provided.builder.install_timeout_seconds,
    )

    tooling_inspector = providers.Singleton(BuildToolingInspector)

    image_filesystem = providers.Singleton(LocalImageFilesystem)

    image_config_service = providers.Singleton(
        ImageConfigService,
        architecture=build_config.provided.runtime.architecture,
    )

    dockerfile_renderer = providers.Singleton(DockerfileRenderer)

    container_engine_builder = providers.Factory(
        ContainerEngineBuilder,
        engine=build_config.provided.engine.provided.name,
        renderer=dockerfile_renderer,
        timeout_minutes=build_config.provided.engine.timeout_minutes,
    )

    # --- Use cases ---
    stage_dependencies_use_case = providers.Factory(
        StageDependenciesUseCase,
        layer_store=layer_store,
        installer=dependency_installer,
        inspector=tooling_inspector,
        builder_image=build_recipe.provided.builder_image,
        staging_dir=build_config.provided.builder.staging_dir,
    )

    assemble_image_use_case = providers.Factory(
        AssembleImageUseCase,
        filesystem=image_filesystem,
        config_service=image_config_service,
        inspector=tooling_inspector,
        layout=runtime_layout,
        builder_image=build_config.provided.builder.image,
    )

    create_build_image_use_case = providers.Factory(
        CreateBuildImageUseCase,
        stage_use_case=stage_dependencies_use_case,
        assemble_use_case=assemble_image_use_case,
    )


container = BuildContainer()
