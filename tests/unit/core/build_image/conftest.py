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

"""Shared fixtures for Build Image domain tests."""

import pytest

from core.build_image.entities import BuildRecipe, RuntimeLayout
from core.build_image.value_objects import (
    EntryCommand,
    ExecutionUser,
    ExposedPort,
    ImageReference,
    SourceFile,
)


@pytest.fixture
def runtime_layout() -> RuntimeLayout:
    """Default runtime layout of the demo service."""
    return RuntimeLayout(
        base_image=ImageReference("python:3.11-alpine"),
        workdir="/app",
        site_packages="/usr/local/lib/python3.11/site-packages",
        user=ExecutionUser("appuser"),
        port=ExposedPort(8000),
        command=EntryCommand(("python3", "app.py")),
    )


@pytest.fixture
def build_recipe(runtime_layout) -> BuildRecipe:
    """Default two-stage recipe."""
    return BuildRecipe(
        builder_image=ImageReference("python:3.11-alpine"),
        build_packages=("build-base",),
        builder_workdir="/app",
        staging_dir="/app/requirements",
        manifest_name="requirements.txt",
        runtime=runtime_layout,
        sources=(SourceFile("app.py"),),
    )
