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

"""Configuration loader for the image builder."""

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import configparser

DEFAULT_CONFIG_PATH = "/etc/image_build/image_build.ini"
SUPPORTED_BACKENDS = ("file_store", "memory_store")
SUPPORTED_ENGINES = ("podman", "docker")


@dataclass
class BuilderConfig:
    """Builder stage configuration."""
    image: str = "python:3.11-alpine"
    build_packages: List[str] = field(default_factory=lambda: ["build-base"])
    workdir: str = "/app"
    staging_dir: str = "/app/requirements"
    manifest: str = "requirements.txt"
    python: str = ""
    install_timeout_seconds: int = 900


@dataclass
# pylint: disable=too-many-instance-attributes
class RuntimeConfig:
    """Runtime stage configuration."""
    image: str = "python:3.11-alpine"
    workdir: str = "/app"
    site_packages: str = ""
    user: str = "appuser"
    uid: int = 1000
    gid: int = 1000
    port: int = 8000
    command: List[str] = field(default_factory=lambda: ["python3", "app.py"])
    sources: List[str] = field(default_factory=lambda: ["app.py"])
    architecture: str = "amd64"


@dataclass
class LayerCacheConfig:
    """Layer cache configuration."""
    backend: str = "file_store"
    working_dir: str = "/tmp/image_build"
    max_layer_size_bytes: int = 536870912  # 512MB
    max_layer_entries: int = 100000


@dataclass
class FileStoreConfig:
    """File store configuration."""
    base_path: str = "/var/cache/image_build/layers"


@dataclass
class EngineConfig:
    """Container engine configuration."""
    name: str = "podman"
    timeout_minutes: int = 60


@dataclass
class LoggingConfig:
    """Build log configuration."""
    log_dir: str = "/var/log/image_build"


@dataclass
class ImageBuildConfig:
    """Image builder configuration."""
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    layer_cache: LayerCacheConfig = field(default_factory=LayerCacheConfig)
    file_store: Optional[FileStoreConfig] = field(default_factory=FileStoreConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _split_list(value: str) -> List[str]:
    """Split a comma and/or whitespace separated option."""
    return [item for item in value.replace(",", " ").split() if item]


def load_config(config_path: Optional[str] = None) -> ImageBuildConfig:
    """Load image builder configuration from an INI file.

    Args:
        config_path: Path to configuration file. If None, uses the
            IMAGE_BUILD_CONFIG_PATH environment variable or the default path.

    Returns:
        ImageBuildConfig instance. Options absent from the file keep their
        defaults.

    Raises:
        FileNotFoundError: If config file not found.
        ValueError: If config is invalid.
    """
    if config_path is None:
        config_path = os.getenv("IMAGE_BUILD_CONFIG_PATH", DEFAULT_CONFIG_PATH)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    parser = configparser.ConfigParser()
    try:
        parser.read(config_file, encoding="utf-8")
    except configparser.Error as exc:
        raise ValueError(f"Invalid configuration file {config_file}: {exc}") from exc

    if not parser.sections():
        raise ValueError(f"Empty configuration file: {config_file}")

    config = ImageBuildConfig()

    # Parse builder config
    section = "builder"
    builder = config.builder
    builder.image = parser.get(section, "image", fallback=builder.image)
    if parser.has_option(section, "build_packages"):
        builder.build_packages = _split_list(parser.get(section, "build_packages"))
    builder.workdir = parser.get(section, "workdir", fallback=builder.workdir)
    builder.staging_dir = parser.get(section, "staging_dir", fallback=builder.staging_dir)
    builder.manifest = parser.get(section, "manifest", fallback=builder.manifest)
    builder.python = parser.get(section, "python", fallback=builder.python)
    if parser.has_option(section, "install_timeout_seconds"):
        builder.install_timeout_seconds = parser.getint(section, "install_timeout_seconds")

    # Parse runtime config
    section = "runtime"
    runtime = config.runtime
    runtime.image = parser.get(section, "image", fallback=runtime.image)
    runtime.workdir = parser.get(section, "workdir", fallback=runtime.workdir)
    runtime.site_packages = parser.get(section, "site_packages", fallback=runtime.site_packages)
    runtime.user = parser.get(section, "user", fallback=runtime.user)
    runtime.architecture = parser.get(section, "architecture", fallback=runtime.architecture)
    for option in ("uid", "gid", "port"):
        if parser.has_option(section, option):
            setattr(runtime, option, parser.getint(section, option))
    if parser.has_option(section, "command"):
        runtime.command = shlex.split(parser.get(section, "command"))
    if parser.has_option(section, "sources"):
        runtime.sources = _split_list(parser.get(section, "sources"))

    # Parse layer_cache config
    section = "layer_cache"
    cache = config.layer_cache
    cache.backend = parser.get(section, "backend", fallback=cache.backend)
    if cache.backend not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unsupported layer_cache backend: {cache.backend}. "
            f"Supported: {', '.join(SUPPORTED_BACKENDS)}"
        )
    cache.working_dir = parser.get(section, "working_dir", fallback=cache.working_dir)
    if parser.has_option(section, "max_layer_size_bytes"):
        cache.max_layer_size_bytes = parser.getint(section, "max_layer_size_bytes")
    if parser.has_option(section, "max_layer_entries"):
        cache.max_layer_entries = parser.getint(section, "max_layer_entries")

    # Parse file_store config only if backend is file_store
    if cache.backend == "file_store":
        if parser.has_section("file_store") and parser.has_option("file_store", "base_path"):
            config.file_store = FileStoreConfig(base_path=parser.get("file_store", "base_path"))
    else:
        config.file_store = None

    # Parse engine config
    section = "engine"
    config.engine.name = parser.get(section, "name", fallback=config.engine.name)
    if config.engine.name not in SUPPORTED_ENGINES:
        raise ValueError(
            f"Unsupported container engine: {config.engine.name}. "
            f"Supported: {', '.join(SUPPORTED_ENGINES)}"
        )
    if parser.has_option(section, "timeout_minutes"):
        config.engine.timeout_minutes = parser.getint(section, "timeout_minutes")

    config.logging.log_dir = parser.get("logging", "log_dir", fallback=config.logging.log_dir)

    return config
