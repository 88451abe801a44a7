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

"""Shared fixtures for layer cache infrastructure tests."""

import os

import pytest

from core.layer_cache.value_objects import LayerHint
from infra.layer_cache.file_layer_store import FileLayerStore
from infra.layer_cache.in_memory_layer_store import InMemoryLayerStore


@pytest.fixture
def layer_hint() -> LayerHint:
    """Hint for a staged dependency layer."""
    return LayerHint(
        namespace="staged-dependencies",
        label="site-packages",
        tags={"manifest": "a" * 64, "builder_image": "python:3.11-alpine"},
    )


@pytest.fixture
def staged_tree(tmp_path):
    """A small site-packages like directory with an executable script."""
    root = tmp_path / "staged"
    (root / "flask").mkdir(parents=True)
    (root / "flask" / "__init__.py").write_text("VERSION = '3.0.3'\n", encoding="utf-8")
    (root / "bin").mkdir()
    script = root / "bin" / "flask"
    script.write_text("#!/bin/sh\necho flask\n", encoding="utf-8")
    os.chmod(script, 0o755)
    return root


@pytest.fixture(params=["file", "memory"])
def layer_store(request, tmp_path):
    """Each layer store implementation."""
    if request.param == "file":
        return FileLayerStore(base_path=tmp_path / "layers")
    return InMemoryLayerStore()
