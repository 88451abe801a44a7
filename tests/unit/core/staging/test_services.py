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

"""Unit tests for BuildToolingInspector."""

import pytest

from core.staging.exceptions import BuildToolingLeakError
from core.staging.services import BuildToolingInspector


def _touch(root, rel):
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


@pytest.fixture
def inspector():
    """Tooling inspector."""
    return BuildToolingInspector()


class TestFindTooling:
    """Test cases for find_tooling."""

    def test_clean_site_packages(self, inspector, tmp_path):
        """Test that ordinary distributions are not flagged."""
        _touch(tmp_path, "flask/__init__.py")
        _touch(tmp_path, "flask-3.0.3.dist-info/METADATA")
        _touch(tmp_path, "bin/flask")
        _touch(tmp_path, "markupsafe/_speedups.cpython-311-x86_64-linux-gnu.so")
        assert inspector.find_tooling(tmp_path) == []

    def test_missing_root_is_clean(self, inspector, tmp_path):
        """Test that a missing directory reports nothing."""
        assert inspector.find_tooling(tmp_path / "missing") == []

    @pytest.mark.parametrize(
        "rel",
        ["bin/gcc", "usr/bin/cc", "usr/local/bin/make", "usr/bin/ld", "usr/libexec/as"],
    )
    def test_flags_compilers_and_linkers(self, inspector, tmp_path, rel):
        """Test that tooling executables in bin directories are flagged."""
        _touch(tmp_path, rel)
        assert inspector.find_tooling(tmp_path) == [rel]

    def test_tool_names_outside_bin_are_allowed(self, inspector, tmp_path):
        """Test that a module named like a tool is not flagged."""
        _touch(tmp_path, "setuptools/make")
        _touch(tmp_path, "docs/gcc")
        assert inspector.find_tooling(tmp_path) == []

    def test_flags_object_files(self, inspector, tmp_path):
        """Test that object files are flagged."""
        _touch(tmp_path, "build/temp/module.o")
        _touch(tmp_path, "native/module.obj")
        assert inspector.find_tooling(tmp_path) == ["build/temp/module.o", "native/module.obj"]

    def test_flags_cache_directory_once(self, inspector, tmp_path):
        """Test that a cache directory is reported without its contents."""
        _touch(tmp_path, ".cache/pip/http/abc")
        _touch(tmp_path, ".cache/pip/wheels/def")
        assert inspector.find_tooling(tmp_path) == [".cache"]

    def test_flags_os_package_caches(self, inspector, tmp_path):
        """Test that apt caches in a rootfs are reported by prefix."""
        _touch(tmp_path, "var/lib/apt/lists/deb.debian.org_Release")
        _touch(tmp_path, "var/cache/apt/pkgcache.bin")
        _touch(tmp_path, "root/.cache/pip/selfcheck.json")
        assert inspector.find_tooling(tmp_path) == [
            "root/.cache",
            "var/cache/apt",
            "var/lib/apt/lists",
        ]


class TestEnsureClean:
    """Test cases for ensure_clean."""

    def test_clean_tree_passes(self, inspector, tmp_path):
        """Test that a clean tree does not raise."""
        _touch(tmp_path, "fastapi/__init__.py")
        inspector.ensure_clean(tmp_path, "build-1")

    def test_leak_raises(self, inspector, tmp_path):
        """Test that tooling raises BuildToolingLeakError with the paths."""
        _touch(tmp_path, "bin/gcc")
        with pytest.raises(BuildToolingLeakError, match="bin/gcc") as exc_info:
            inspector.ensure_clean(tmp_path, "build-1")
        assert exc_info.value.paths == ["bin/gcc"]
        assert exc_info.value.correlation_id == "build-1"

    def test_long_leak_list_is_truncated(self, inspector, tmp_path):
        """Test that the message previews at most five paths."""
        for index in range(7):
            _touch(tmp_path, f"obj/m{index}.o")
        with pytest.raises(BuildToolingLeakError, match=r"\(\+2 more\)") as exc_info:
            inspector.ensure_clean(tmp_path)
        assert len(exc_info.value.paths) == 7
