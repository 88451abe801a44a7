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

"""Renders a BuildRecipe as a two-stage Dockerfile."""

import json
import re
from typing import List

from core.build_image.entities import BuildRecipe
from core.build_image.services import ensure_unprivileged
from core.build_image.value_objects import ExecutionUser, ExposedPort, ImageReference

_BARE_VALUE = re.compile(r"^[A-Za-z0-9_./:@+-]*$")
_BANNER = "#" * 45


def _quote(value: str) -> str:
    """Quote a Dockerfile ENV/LABEL value when it is not a bare word."""
    return value if _BARE_VALUE.match(value) else json.dumps(value)


class DockerfileRenderer:
    """Produces the Dockerfile text for a recipe.

    The builder stage copies the manifest before anything else and the
    runtime stage copies each source file by name, so source edits never
    invalidate the dependency layer and the build context is never copied
    wholesale into the final image.
    """

    def render(self, recipe: BuildRecipe) -> str:
        """Render the recipe.

        Raises:
            PrivilegedUserError: If the runtime user is root.
        """
        ensure_unprivileged(recipe.runtime.user)
        lines = self._builder_stage(recipe) + [""] + self._runtime_stage(recipe)
        return "\n".join(lines) + "\n"

    def _builder_stage(self, recipe: BuildRecipe) -> List[str]:
        lines = [
            _BANNER,
            "# Stage 1: Builder",
            "# Installs dependencies in isolation. Build tools and",
            "# caches stay in this stage.",
            _BANNER,
            f"FROM {recipe.builder_image} AS builder",
            "",
            f"WORKDIR {recipe.builder_workdir}",
            "",
        ]
        if recipe.build_packages:
            lines += [self._install_packages(recipe.builder_image, list(recipe.build_packages)), ""]
        lines += [
            "# Manifest first: the dependency layer stays cached across source edits",
            f"COPY {recipe.manifest_name} {recipe.builder_workdir.rstrip('/')}/",
            "",
            f"RUN pip install --no-cache-dir --target={recipe.staging_dir} "
            f"-r {recipe.manifest_name}",
        ]
        return lines

    def _runtime_stage(self, recipe: BuildRecipe) -> List[str]:
        runtime = recipe.runtime
        lines = [
            _BANNER,
            "# Stage 2: Final runtime image",
            "# Python runtime, installed dependencies and",
            "# application source only.",
            _BANNER,
            f"FROM {runtime.base_image}",
            "",
            f"WORKDIR {runtime.workdir}",
            "",
            f"COPY --from=builder {recipe.staging_dir} {runtime.site_packages.rstrip('/')}/",
            "",
        ]
        for source in recipe.sources:
            name = str(source)
            lines.append(f"COPY {name} ." if "/" not in name else f"COPY {name} ./{name}")
        lines.append("")

        for key, value in sorted(runtime.env.items()):
            lines.append(f"ENV {key}={_quote(value)}")
        for key, value in sorted(runtime.labels.items()):
            lines.append(f"LABEL {key}={_quote(value)}")
        if runtime.env or runtime.labels:
            lines.append("")

        lines += [
            f"RUN {self._create_user(runtime.base_image, runtime.user)}",
            "",
            f"USER {runtime.user}",
            "",
            f"EXPOSE {self._port(runtime.port)}",
            "",
            f"CMD {runtime.command.exec_form()}",
        ]
        return lines

    @staticmethod
    def _port(port: ExposedPort) -> str:
        return str(port.number) if port.protocol == "tcp" else str(port)

    @staticmethod
    def _install_packages(image: ImageReference, packages: List[str]) -> str:
        joined = " ".join(packages)
        if image.is_alpine:
            return f"RUN apk add --no-cache {joined}"
        return (
            f"RUN apt-get update && apt-get install -y --no-install-recommends {joined} \\\n"
            f"    && rm -rf /var/lib/apt/lists/*"
        )

    @staticmethod
    def _create_user(image: ImageReference, user: ExecutionUser) -> str:
        if image.is_alpine:
            if user.gid == user.uid:
                return f"adduser -D -u {user.uid} {user.name}"
            return (
                f"addgroup -g {user.gid} {user.name} "
                f"&& adduser -D -u {user.uid} -G {user.name} {user.name}"
            )
        return (
            f"groupadd -g {user.gid} {user.name} "
            f"&& useradd -m -u {user.uid} -g {user.gid} {user.name}"
        )
