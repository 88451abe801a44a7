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

"""Unit tests for Dependency Manifest value objects."""

import pytest

from core.manifest.value_objects import (
    DependencyManifest,
    PackageRequirement,
    normalize_package_name,
)


class TestNormalizePackageName:
    """Test cases for PEP 503 name normalization."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Flask", "flask"),
            ("zope.interface", "zope-interface"),
            ("typing_extensions", "typing-extensions"),
            ("My__Weird-.Name", "my-weird-name"),
        ],
    )
    def test_normalizes(self, name, expected):
        """Test that runs of separators collapse to a single dash."""
        assert normalize_package_name(name) == expected


class TestPackageRequirement:
    """Test cases for PackageRequirement value object."""

    def test_pinned_requirement(self):
        """Test creating a pinned requirement."""
        req = PackageRequirement("flask", "==3.0.3")
        assert req.specifiers == ["==3.0.3"]
        assert req.is_pinned
        assert str(req) == "flask==3.0.3"

    def test_unconstrained_requirement(self):
        """Test that an empty constraint is allowed but not pinned."""
        req = PackageRequirement("requests")
        assert req.specifiers == []
        assert not req.is_pinned
        assert str(req) == "requests"

    def test_range_constraint_strips_whitespace(self):
        """Test that specifiers are split on commas and spacing removed."""
        req = PackageRequirement("uvicorn", ">= 0.27, <1")
        assert req.specifiers == [">=0.27", "<1"]
        assert not req.is_pinned
        assert str(req) == "uvicorn>=0.27,<1"

    def test_wildcard_is_not_pinned(self):
        """Test that a wildcard equality does not select one version."""
        assert not PackageRequirement("django", "==4.2.*").is_pinned

    def test_extras_in_canonical_form(self):
        """Test that extras are rendered in brackets."""
        req = PackageRequirement("uvicorn", "==0.34.0", extras=("standard",))
        assert str(req) == "uvicorn[standard]==0.34.0"

    def test_invalid_empty_name(self):
        """Test that an empty name raises ValueError."""
        with pytest.raises(ValueError, match="Package name cannot be empty"):
            PackageRequirement("")

    def test_invalid_name_characters(self):
        """Test that a name ending in a separator raises ValueError."""
        with pytest.raises(ValueError, match="Invalid package name"):
            PackageRequirement("flask-")

    def test_invalid_name_too_long(self):
        """Test that an overlong name raises ValueError."""
        with pytest.raises(ValueError, match="cannot exceed 214"):
            PackageRequirement("a" * 215)

    def test_invalid_operator(self):
        """Test that an unknown operator raises ValueError."""
        with pytest.raises(ValueError, match="Invalid version constraint"):
            PackageRequirement("flask", "=>3.0")

    def test_invalid_extra(self):
        """Test that a malformed extra raises ValueError."""
        with pytest.raises(ValueError, match="Invalid extra"):
            PackageRequirement("uvicorn", "", extras=("bad extra",))

    def test_normalized_name(self):
        """Test normalized name property."""
        assert PackageRequirement("Typing_Extensions").normalized_name == "typing-extensions"


class TestDependencyManifest:
    """Test cases for DependencyManifest value object."""

    def test_empty_manifest(self):
        """Test that an empty manifest is valid."""
        manifest = DependencyManifest()
        assert manifest.is_empty
        assert len(manifest) == 0
        assert manifest.canonical_text() == ""

    def test_preserves_order(self):
        """Test that requirements keep their authored order."""
        manifest = DependencyManifest((
            PackageRequirement("uvicorn", "==0.34.0"),
            PackageRequirement("fastapi", "==0.115.6"),
        ))
        assert manifest.names() == ["uvicorn", "fastapi"]
        assert [str(r) for r in manifest] == ["uvicorn==0.34.0", "fastapi==0.115.6"]

    def test_rejects_duplicates_after_normalization(self):
        """Test that names equal after normalization are duplicates."""
        with pytest.raises(ValueError, match="Duplicate requirement: Typing_Extensions"):
            DependencyManifest((
                PackageRequirement("typing-extensions", "==4.12.2"),
                PackageRequirement("Typing_Extensions", "==4.12.2"),
            ))

    def test_canonical_text(self):
        """Test one canonical requirement per line."""
        manifest = DependencyManifest((
            PackageRequirement("flask", "== 3.0.3"),
            PackageRequirement("gunicorn"),
        ))
        assert manifest.canonical_text() == "flask==3.0.3\ngunicorn\n"

    def test_digest_is_deterministic(self):
        """Test that equal manifests share a digest."""
        first = DependencyManifest((PackageRequirement("flask", "==3.0.3"),))
        second = DependencyManifest((PackageRequirement("flask", "==3.0.3"),))
        assert first.digest() == second.digest()

    def test_digest_changes_with_version(self):
        """Test that a version bump changes the digest."""
        first = DependencyManifest((PackageRequirement("flask", "==3.0.3"),))
        second = DependencyManifest((PackageRequirement("flask", "==3.1.0"),))
        assert first.digest() != second.digest()
