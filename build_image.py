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

"""Slim image build tool.

Runs the two-stage build locally, renders the Dockerfile, or delegates the
build to podman/docker.

Usage:
    slim-image-build build --context . --output ./image
    slim-image-build dockerfile --write
    slim-image-build engine-build --tag demo:latest
"""

import argparse
import asyncio
import dataclasses
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dependency_injector import providers

from common.config import ImageBuildConfig, load_config
from common.logging_utils import configure_log_base
from container import BuildContainer
from core.build_image.exceptions import PrivilegedUserError
from core.exceptions import ImageBuildDomainError
from orchestrator.build_image.commands import CreateBuildImageCommand

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logger = logging.getLogger(__name__)


def is_privileged_user(user: str) -> bool:
    """True when an image user (``user[:group]``) resolves to root.

    An empty user means the engine default, which is root.
    """
    parts = [part.strip() for part in user.split(":")]
    if not parts[0]:
        return True
    return any(part == "root" or (part.isdigit() and int(part) == 0) for part in parts)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="slim-image-build",
        description="Build a slim two-stage runtime image for a Python service",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="INI configuration file (defaults to IMAGE_BUILD_CONFIG_PATH)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Run the two-stage build locally")
    build.add_argument("--context", default=".", help="Build context directory")
    build.add_argument("--manifest", default=None, help="Manifest file name in the context")
    build.add_argument(
        "--source",
        action="append",
        default=None,
        help="Application source file, relative to the context (repeatable)",
    )
    build.add_argument("--output", default="image", help="Final image directory")
    build.add_argument("--base-rootfs", default=None, help="Minimal base filesystem")

    dockerfile = subparsers.add_parser("dockerfile", help="Render the two-stage Dockerfile")
    dockerfile.add_argument("--context", default=".", help="Build context directory")
    dockerfile.add_argument(
        "--write",
        action="store_true",
        help="Write <context>/Dockerfile instead of printing",
    )

    engine = subparsers.add_parser("engine-build", help="Build with a container engine")
    engine.add_argument("--context", default=".", help="Build context directory")
    engine.add_argument("--engine", choices=("podman", "docker"), default=None)
    engine.add_argument("--tag", default="slim-app:latest", help="Image tag")

    return parser.parse_args(argv)


def _load(args: argparse.Namespace) -> ImageBuildConfig:
    """Explicit --config must exist; the default location may be absent."""
    if args.config:
        return load_config(args.config)
    try:
        return load_config()
    except FileNotFoundError:
        logger.info("No configuration file found, using defaults")
        return ImageBuildConfig()


def _run_build(args: argparse.Namespace, container: BuildContainer) -> int:
    config = container.build_config()
    context_dir = Path(args.context).resolve()
    build_id = container.build_id_generator().generate()
    command = CreateBuildImageCommand(
        build_id=build_id,
        context_dir=context_dir,
        manifest_name=args.manifest or config.builder.manifest,
        source_files=list(config.runtime.sources),
        output_dir=Path(args.output).resolve(),
        working_dir=Path(config.layer_cache.working_dir),
        base_rootfs=Path(args.base_rootfs).resolve() if args.base_rootfs else None,
    )
    response = container.create_build_image_use_case().execute(command)
    print(json.dumps(dataclasses.asdict(response), indent=2))
    return 0


def _run_dockerfile(args: argparse.Namespace, container: BuildContainer) -> int:
    text = container.dockerfile_renderer().render(container.build_recipe())
    if args.write:
        target = Path(args.context) / "Dockerfile"
        target.write_text(text, encoding="utf-8")
        logger.info("Wrote %s", target)
    else:
        sys.stdout.write(text)
    return 0


def _run_engine_build(args: argparse.Namespace, container: BuildContainer) -> int:
    builder = container.container_engine_builder()
    build_id = str(container.build_id_generator().generate())
    result = asyncio.run(
        builder.build(container.build_recipe(), Path(args.context).resolve(), args.tag, build_id)
    )
    builder.ensure_success(result)

    user = asyncio.run(builder.inspect_user(args.tag))
    if is_privileged_user(user):
        raise PrivilegedUserError(
            f"Image {args.tag} runs as a privileged identity: {user or 'root'}", build_id
        )
    logger.info(
        "Built %s with %s in %ss as %s", args.tag, builder.engine, result["duration_seconds"], user
    )
    return 0


_HANDLERS = {
    "build": _run_build,
    "dockerfile": _run_dockerfile,
    "engine-build": _run_engine_build,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of ``slim-image-build``.

    Returns:
        0 on success, 1 on any fatal build error.
    """
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = _parse_args(argv)

    try:
        config = _load(args)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    if getattr(args, "source", None):
        config.runtime.sources = list(args.source)
    if getattr(args, "engine", None):
        config.engine.name = args.engine
    configure_log_base(Path(config.logging.log_dir))

    container = BuildContainer()
    container.build_config.override(providers.Object(config))
    try:
        return _HANDLERS[args.command](args, container)
    except ImageBuildDomainError as exc:
        logger.error("Build failed: %s (build_id=%s)", exc.message, exc.correlation_id)
        return 1
    except ValueError as exc:
        logger.error("Invalid build settings: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
