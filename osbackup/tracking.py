# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Action tracks - the result shape returned to the DBaaS aggregator.

Every backup, restore and tracking operation funnels its outcome through
the constructors below, so the aggregator always receives the same
structure whatever the status.
"""

from enum import Enum
from typing import Dict, Iterable

from pydantic import BaseModel, ConfigDict, Field


class TrackStatus(str, Enum):
    """Aggregator-facing status of a backup or restore job."""

    PROCEEDING = "PROCEEDING"
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"


class ActionKind(str, Enum):
    """Kind of job being tracked."""

    BACKUP = "BACKUP"
    RESTORE = "RESTORE"


class TrackDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    local_id: str = Field(alias="localId")


class ActionTrack(BaseModel):
    """
    Tracking result of a backup or restore.

    changed_name_db is only set when names were regenerated on restore;
    track_path points at the per-index tracking route in that case.
    """

    model_config = ConfigDict(populate_by_name=True)

    action: ActionKind
    details: TrackDetails
    status: TrackStatus
    track_id: str = Field(alias="trackId")
    changed_name_db: Dict[str, str] | None = Field(default=None, alias="changedNameDb")
    track_path: str | None = Field(default=None, alias="trackPath")

    def to_response(self) -> dict:
        """Serialize with the aggregator's field names."""
        return self.model_dump(mode="json", by_alias=True)


def backup_track(backup_id: str, status: TrackStatus) -> ActionTrack:
    return ActionTrack(
        action=ActionKind.BACKUP,
        details=TrackDetails(local_id=backup_id),
        status=status,
        track_id=backup_id,
    )


def restore_track(
    backup_id: str,
    status: TrackStatus,
    changed_name_db: Dict[str, str] | None = None,
) -> ActionTrack:
    return ActionTrack(
        action=ActionKind.RESTORE,
        details=TrackDetails(local_id=backup_id),
        status=status,
        track_id=backup_id,
        changed_name_db=changed_name_db,
    )


def build_track_path(base_path: str, backup_id: str, indices: Iterable[str]) -> str:
    """Follow-up URL for tracking a name-regenerating restore index by index."""
    return (
        f"{base_path}/backups/track/restoring/backups/{backup_id}"
        f"/indices/{','.join(indices)}"
    )
