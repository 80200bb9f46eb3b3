# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Search engine response models for snapshot status and index recovery.

Only the fields the adapter reads are declared; everything else in the
OpenSearch responses is ignored.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class SnapshotStatus(BaseModel):
    """One entry of GET /_snapshot/{repository}/{snapshot}/_status."""

    model_config = ConfigDict(extra="ignore")

    snapshot: str
    repository: str = ""
    state: str = ""
    indices: Dict[str, Any] = Field(default_factory=dict)


class SnapshotStatusResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    snapshots: List[SnapshotStatus] = Field(default_factory=list)


class RecoverySource(BaseModel):
    """Where a shard is being recovered from; empty for non-snapshot recoveries."""

    model_config = ConfigDict(extra="ignore")

    snapshot: str = ""
    repository: str = ""
    index: str = ""


class ShardRecovery(BaseModel):
    """Recovery descriptor of a single shard."""

    model_config = ConfigDict(extra="ignore")

    type: str = ""
    stage: str = ""
    source: RecoverySource = Field(default_factory=RecoverySource)


class IndexRecovery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    shards: List[ShardRecovery] = Field(default_factory=list)


# GET /{indices}/_recovery answers with {index_name: {"shards": [...]}}
RecoveryInfo = Dict[str, IndexRecovery]

recovery_info_adapter: TypeAdapter[RecoveryInfo] = TypeAdapter(RecoveryInfo)
