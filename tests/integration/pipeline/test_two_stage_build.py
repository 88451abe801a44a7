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

"""Integration tests for the two-stage build wired through the container."""

import json
from pathlib import Path

import pytest
from dependency_injector import providers

from common.config import ImageBuildConfig
from container import BuildContainer
from core.build_image.value_objects import BuildId
from core.staging.exceptions import BuildToolingLeakError
from orchestrator.build_image.commands import CreateBuildImageCommand
from tests.mocks.fake_dependency_installer import FakeDependencyInstaller

pytestmark = pytest.mark.integration

SITE_PACKAGES = Path("usr/local/lib/python3.11/site-packages")


@pytest.fixture
def context_dir(tmp_path):
    """Build context matching the demo project."""
    context = tmp_path / "context"
    context.mkdir()
    (context / "requirements.txt").write_text(
        "# demo service\nfastapi==0.115.6\nuvicorn==0.34.0\n", encoding="utf-8"
    )
    (context / "app.py").write_text("print('hello')\n", encoding="utf-8")
    (context / "README.md").write_text("docs\n", encoding="utf-8")
    return context


@pytest.fixture
def build_config(tmp_path):
    """Default configuration with every path under tmp_path."""
    config = ImageBuildConfig()
    config.layer_cache.working_dir = str(tmp_path / "work")
    config.file_store.base_path = str(tmp_path / "layers")
    return config


def _container(build_config, installer):
    build_container = BuildContainer()
    build_container.build_config.override(providers.Object(build_config))
    build_container.dependency_installer.override(providers.Object(installer))
    return build_container


def _build(build_container, build_config, context_dir, output_dir, build_id):
    command = CreateBuildImageCommand(
        build_id=BuildId(build_id),
        context_dir=context_dir,
        manifest_name=build_config.builder.manifest,
        source_files=list(build_config.runtime.sources),
        output_dir=output_dir,
        working_dir=Path(build_config.layer_cache.working_dir),
    )
    return build_container.create_build_image_use_case().execute(command)


class TestPipeline:
    """Integration tests for complete builds."""

    def test_final_image_contents(self, build_config, context_dir, tmp_path):
        """Test the final image holds dependencies, app.py and the user only."""
        installer = FakeDependencyInstaller()
        response = _build(
            _container(build_config, installer), build_config, context_dir,
            tmp_path / "image", "build-1",
        )

        rootfs = tmp_path / "image" / "rootfs"
        assert (rootfs / SITE_PACKAGES / "fastapi" / "__init__.py").is_file()
        assert (rootfs / SITE_PACKAGES / "uvicorn" / "__init__.py").is_file()
        assert sorted(p.name for p in (rootfs / "app").iterdir()) == ["app.py"]
        assert not (rootfs / "app" / "requirements").exists()

        config = json.loads((tmp_path / "image" / "config.json").read_text(encoding="utf-8"))
        assert config["config"]["User"] == "appuser"
        assert config["config"]["WorkingDir"] == "/app"
        assert config["config"]["ExposedPorts"] == {"8000/tcp": {}}
        assert config["config"]["Cmd"] == ["python3", "app.py"]
        assert config["build"]["base_image"] == "python:3.11-alpine"
        assert config["build"]["builder_image"] == "python:3.11-alpine"

        assert response.dependencies_from_cache is False
        assert list((tmp_path / "work").iterdir()) == []
        assert any((tmp_path / "layers").rglob("site-packages.zip"))

    def test_source_change_reuses_dependencies(self, build_config, context_dir, tmp_path):
        """Test that editing app.py does not reinstall dependencies."""
        installer = FakeDependencyInstaller()
        build_container = _container(build_config, installer)
        first = _build(build_container, build_config, context_dir, tmp_path / "image", "build-1")

        (context_dir / "app.py").write_text("print('v2')\n", encoding="utf-8")
        second = _build(build_container, build_config, context_dir, tmp_path / "image", "build-2")

        assert len(installer.calls) == 1
        assert second.dependencies_from_cache is True
        assert second.dependencies_digest == first.dependencies_digest
        rootfs = tmp_path / "image" / "rootfs"
        assert (rootfs / "app" / "app.py").read_text(encoding="utf-8") == "print('v2')\n"

    def test_cache_survives_new_container(self, build_config, context_dir, tmp_path):
        """Test that the file-backed cache is shared across invocations."""
        _build(
            _container(build_config, FakeDependencyInstaller()), build_config, context_dir,
            tmp_path / "image", "build-1",
        )

        installer = FakeDependencyInstaller()
        response = _build(
            _container(build_config, installer), build_config, context_dir,
            tmp_path / "image", "build-2",
        )
        assert installer.calls == []
        assert response.dependencies_from_cache is True

    def test_manifest_change_reinstalls(self, build_config, context_dir, tmp_path):
        """Test that a new pin invalidates the cached dependencies."""
        installer = FakeDependencyInstaller()
        build_container = _container(build_config, installer)
        first = _build(build_container, build_config, context_dir, tmp_path / "image", "build-1")

        (context_dir / "requirements.txt").write_text(
            "fastapi==0.115.6\nuvicorn==0.34.0\nhttpx==0.28.1\n", encoding="utf-8"
        )
        second = _build(build_container, build_config, context_dir, tmp_path / "image", "build-2")

        assert len(installer.calls) == 2
        assert second.dependencies_from_cache is False
        assert second.manifest_digest != first.manifest_digest
        assert (tmp_path / "image" / "rootfs" / SITE_PACKAGES / "httpx").is_dir()

    def test_memory_backend(self, build_config, context_dir, tmp_path):
        """Test the in-memory cache within one container."""
        build_config.layer_cache.backend = "memory_store"
        build_config.file_store = None
        installer = FakeDependencyInstaller()
        build_container = _container(build_config, installer)

        _build(build_container, build_config, context_dir, tmp_path / "image", "build-1")
        second = _build(build_container, build_config, context_dir, tmp_path / "image", "build-2")

        assert len(installer.calls) == 1
        assert second.dependencies_from_cache is True
        assert not (tmp_path / "layers").exists()

    def test_tooling_leak_aborts(self, build_config, context_dir, tmp_path):
        """Test that compiler leftovers never reach the final image."""
        installer = FakeDependencyInstaller(leak_paths=["bin/gcc"])
        with pytest.raises(BuildToolingLeakError):
            _build(
                _container(build_config, installer), build_config, context_dir,
                tmp_path / "image", "build-1",
            )
        assert not (tmp_path / "image").exists()
        assert not any((tmp_path / "layers").rglob("*.zip"))
