"""Unit tests for status patches."""

import json

import pytest
from pydantic import ValidationError

from patch import ReleaseStatusFields, StatusPatch, build_status_patch


class TestBuildStatusPatch:
    """Tests for build_status_patch."""

    def test_merge_patch_document(self):
        """Test that only the two status leaves are present."""
        patch = build_status_patch("foo", "DEPLOYED")
        assert patch.to_merge_patch() == {
            "status": {"releaseName": "foo", "releaseStatus": "DEPLOYED"}
        }

    def test_json_serialization(self):
        """Test json serialization."""
        patch = build_status_patch("foo", "FAILED")
        assert json.loads(patch.to_json()) == {
            "status": {"releaseName": "foo", "releaseStatus": "FAILED"}
        }

    def test_patch_is_frozen(self):
        """Test patch is frozen."""
        patch = build_status_patch("foo", "DEPLOYED")
        with pytest.raises(ValidationError):
            patch.status = ReleaseStatusFields(release_name="bar")


class TestStatusPatch:
    """Tests for the StatusPatch model."""

    def test_unset_fields_are_omitted(self):
        """Test unset fields are omitted."""
        patch = StatusPatch(status=ReleaseStatusFields(release_status="DEPLOYED"))
        assert patch.to_merge_patch() == {"status": {"releaseStatus": "DEPLOYED"}}

    def test_accepts_aliases(self):
        """Test accepts aliases."""
        fields = ReleaseStatusFields(releaseName="foo", releaseStatus="DELETED")
        assert fields.release_name == "foo"
        assert fields.release_status == "DELETED"

    def test_rejects_non_string_status(self):
        """Test rejects non string status."""
        with pytest.raises(ValidationError):
            ReleaseStatusFields(release_status=["DEPLOYED"])
