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

"""Infrastructure adapter building the recipe with podman or docker."""

import asyncio
import logging
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.build_image.entities import BuildRecipe
from core.build_image.exceptions import ImageBuildError
from infra.image.dockerfile_renderer import DockerfileRenderer

logger = logging.getLogger(__name__)


class ContainerEngineBuilder:
    """Runs ``<engine> build`` for a rendered recipe.

    The recipe is rendered into a temporary Dockerfile outside the build
    context and passed with ``-f``; the context itself is never modified.
    """

    def __init__(
        self,
        engine: str = "podman",
        renderer: Optional[DockerfileRenderer] = None,
        timeout_minutes: int = 60,
    ) -> None:
        """Initialize the builder.

        Args:
            engine: Container engine executable (podman or docker).
            renderer: Recipe renderer.
            timeout_minutes: Build timeout in minutes.
        """
        self.engine = engine
        self._renderer = renderer or DockerfileRenderer()
        self._timeout_minutes = timeout_minutes

    def build_command(self, dockerfile: Path, tag: str, context_dir: Path) -> List[str]:
        """Return the engine build command line."""
        return [self.engine, "build", "-f", str(dockerfile), "-t", tag, str(context_dir)]

    async def build(
        self,
        recipe: BuildRecipe,
        context_dir: Path,
        tag: str,
        build_id: str,
    ) -> Dict[str, Any]:
        """Render and build the image.

        Args:
            recipe: Recipe to render.
            context_dir: Build context directory.
            tag: Image tag to apply.
            build_id: Build identifier for tracing.

        Returns:
            Dictionary describing the build outcome.
        """
        recipe_dir = Path(tempfile.mkdtemp(prefix=f"image-build-{build_id}-"))
        dockerfile = recipe_dir / "Dockerfile"
        dockerfile.write_text(self._renderer.render(recipe), encoding="utf-8")
        try:
            return await self._run_build(
                self.build_command(dockerfile, tag, context_dir), tag, build_id
            )
        finally:
            shutil.rmtree(recipe_dir, ignore_errors=True)

    async def _run_build(self, cmd: List[str], tag: str, build_id: str) -> Dict[str, Any]:
        """Run the build command and collect its result."""
        logger.debug("Executing command: %s", " ".join(cmd))
        started_at = datetime.now(timezone.utc)
        result: Dict[str, Any] = {"build_id": build_id, "tag": tag, "engine": self.engine}

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            try:
                stdout, stderr = await asyncio.wait_for(
                    proc.communicate(), timeout=self._timeout_minutes * 60
                )
            except asyncio.TimeoutError:
                proc.terminate()
                try:
                    await asyncio.wait_for(proc.wait(), timeout=5)
                except asyncio.TimeoutError:
                    proc.kill()
                logger.error(
                    "Image build timed out: build_id=%s, timeout=%dm",
                    build_id,
                    self._timeout_minutes,
                )
                result.update({
                    "status": "failed",
                    "exit_code": -1,
                    "stdout": "",
                    "stderr": f"Image build timed out after {self._timeout_minutes} minutes",
                    "error_code": "IMAGE_BUILD_TIMEOUT",
                })
            else:
                result.update({
                    "status": "success" if proc.returncode == 0 else "failed",
                    "exit_code": proc.returncode,
                    "stdout": stdout.decode(errors="replace"),
                    "stderr": stderr.decode(errors="replace"),
                })
                if proc.returncode != 0:
                    result["error_code"] = "IMAGE_BUILD_FAILED"
        except OSError as exc:
            logger.exception("Failed to start container engine: build_id=%s", build_id)
            result.update({
                "status": "failed",
                "exit_code": -1,
                "stdout": "",
                "stderr": str(exc),
                "error_code": "SYSTEM_ERROR",
            })

        completed_at = datetime.now(timezone.utc)
        result.update({
            "started_at": started_at.isoformat(),
            "completed_at": completed_at.isoformat(),
            "duration_seconds": int((completed_at - started_at).total_seconds()),
        })
        return result

    async def inspect_user(self, tag: str) -> str:
        """Return the default user configured in a built image.

        Raises:
            ImageBuildError: If the image cannot be inspected.
        """
        cmd = [self.engine, "image", "inspect", "--format", "{{.Config.User}}", tag]
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ImageBuildError(f"Failed to inspect {tag}: {exc}", "SYSTEM_ERROR") from exc
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise ImageBuildError(
                f"Failed to inspect {tag}: {stderr.decode(errors='replace').strip()}",
                "IMAGE_INSPECT_FAILED",
            )
        return stdout.decode().strip()

    @staticmethod
    def ensure_success(result: Dict[str, Any]) -> None:
        """Raise if a build result is not successful.

        Raises:
            ImageBuildError: Carrying the result's error code.
        """
        if result.get("status") == "success":
            return
        stderr_tail = "\n".join(str(result.get("stderr", "")).strip().splitlines()[-10:])
        raise ImageBuildError(
            f"Image build {result.get('tag')} failed with exit code "
            f"{result.get('exit_code')}: {stderr_tail}",
            error_code=result.get("error_code", "IMAGE_BUILD_FAILED"),
            correlation_id=result.get("build_id"),
        )
