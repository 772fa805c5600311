"""
Status patches for release intents.

A patch carries only ``status.releaseName`` and ``status.releaseStatus``, so
applying it as a JSON merge patch replaces those two leaves and leaves the
rest of the object untouched.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReleaseStatusFields(BaseModel):
    """The two status leaves an update may set."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    release_name: Optional[str] = Field(default=None, alias="releaseName")
    release_status: Optional[str] = Field(default=None, alias="releaseStatus")


class StatusPatch(BaseModel):
    """Partial update document for one release intent."""

    model_config = ConfigDict(frozen=True)

    status: ReleaseStatusFields

    def to_merge_patch(self) -> Dict[str, Any]:
        """Serialize to a merge-patch body with camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


def build_status_patch(release_name: str, release_status: str) -> StatusPatch:
    """Build the status patch recording an observed release status."""
    return StatusPatch(
        status=ReleaseStatusFields(
            release_name=release_name,
            release_status=release_status,
        )
    )
