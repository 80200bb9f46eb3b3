# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Recovery Tracker tests.

These tests verify:
- Shard stages are aggregated into one status per restore
- Only shards recovered from the tracked snapshot and repository count
- Missing evidence and query failures go through the fallback policy
"""

import pytest

from conftest import BACKUP_ID, REPOSITORY, StubSearchClient, shard
from osbackup.backup.recovery import (
    RecoveryFallbackPolicy,
    RecoveryTracker,
    aggregate_recovery_status,
)
from osbackup.exceptions import SearchEngineError
from osbackup.search.models import recovery_info_adapter
from osbackup.tracking import ActionKind, TrackStatus


def _info(raw: dict):
    return recovery_info_adapter.validate_python(raw)


# ============================================================================
# Aggregation
# ============================================================================

def test_all_shards_done_is_success():
    info = _info({
        "idx1": {"shards": [shard(BACKUP_ID, REPOSITORY, "DONE"), shard(BACKUP_ID, REPOSITORY, "DONE")]},
        "idx2": {"shards": [shard(BACKUP_ID, REPOSITORY, "DONE")]},
    })

    assert aggregate_recovery_status(info, BACKUP_ID, REPOSITORY) == TrackStatus.SUCCESS


def test_any_shard_in_progress_is_proceeding():
    info = _info({
        "idx1": {"shards": [shard(BACKUP_ID, REPOSITORY, "DONE")]},
        "idx2": {"shards": [shard(BACKUP_ID, REPOSITORY, "INDEX")]},
    })

    assert aggregate_recovery_status(info, BACKUP_ID, REPOSITORY) == TrackStatus.PROCEEDING


def test_done_stage_is_case_insensitive():
    info = _info({"idx1": {"shards": [shard(BACKUP_ID, REPOSITORY, "done")]}})

    assert aggregate_recovery_status(info, BACKUP_ID, REPOSITORY) == TrackStatus.SUCCESS


def test_shards_from_other_snapshots_are_ignored():
    """An unfinished recovery of another snapshot does not affect the result."""
    info = _info({
        "idx1": {
            "shards": [
                shard("other-snapshot", REPOSITORY, "INDEX"),
                shard(BACKUP_ID, "other-repository", "TRANSLOG"),
                shard(BACKUP_ID, REPOSITORY, "DONE"),
            ]
        },
    })

    assert aggregate_recovery_status(info, BACKUP_ID, REPOSITORY) == TrackStatus.SUCCESS


def test_no_matching_shards_gives_no_verdict():
    info = _info({"idx1": {"shards": [shard("other-snapshot", REPOSITORY, "DONE")]}})

    assert aggregate_recovery_status(info, BACKUP_ID, REPOSITORY) is None
    assert aggregate_recovery_status({}, BACKUP_ID, REPOSITORY) is None


def test_peer_recovery_without_source_is_ignored():
    info = _info({"idx1": {"shards": [{"type": "PEER", "stage": "INDEX"}]}})

    assert aggregate_recovery_status(info, BACKUP_ID, REPOSITORY) is None


# ============================================================================
# Tracker
# ============================================================================

@pytest.mark.asyncio
async def test_tracker_reports_restore_track(ctx):
    search = StubSearchClient(recovery={"new_idx": {"shards": [shard(BACKUP_ID, REPOSITORY, "DONE")]}})
    tracker = RecoveryTracker(search)

    track = await tracker.track_indices(
        BACKUP_ID, ["new_idx"], REPOSITORY, ctx, changed_name_db={"idx": "new_idx"}
    )

    assert track.action == ActionKind.RESTORE
    assert track.status == TrackStatus.SUCCESS
    assert track.track_id == BACKUP_ID
    assert track.details.local_id == BACKUP_ID
    assert track.changed_name_db == {"idx": "new_idx"}
    assert search.recovery_queries == [["new_idx"]]


@pytest.mark.asyncio
async def test_tracker_empty_repository_defaults_to_backup_id(ctx):
    search = StubSearchClient(recovery={"idx": {"shards": [shard(BACKUP_ID, BACKUP_ID, "DONE")]}})
    tracker = RecoveryTracker(search)

    track = await tracker.track_indices(BACKUP_ID, ["idx"], "", ctx)

    assert track.status == TrackStatus.SUCCESS


@pytest.mark.asyncio
async def test_tracker_missing_evidence_falls_back_to_proceeding(ctx):
    policy = RecoveryFallbackPolicy()
    tracker = RecoveryTracker(StubSearchClient(recovery={}), policy)

    track = await tracker.track_indices(BACKUP_ID, ["idx"], REPOSITORY, ctx)

    assert track.status == TrackStatus.PROCEEDING
    assert policy.missing_evidence == 1
    assert policy.query_failures == 0


@pytest.mark.asyncio
async def test_tracker_query_failure_falls_back_to_proceeding(ctx):
    policy = RecoveryFallbackPolicy()
    search = StubSearchClient(error=SearchEngineError("cluster unavailable"))
    tracker = RecoveryTracker(search, policy)

    first = await tracker.track_indices(BACKUP_ID, ["idx"], REPOSITORY, ctx)
    second = await tracker.track_indices(BACKUP_ID, ["idx"], REPOSITORY, ctx)

    assert first.status == TrackStatus.PROCEEDING
    assert second.status == TrackStatus.PROCEEDING
    assert policy.query_failures == 2
    assert policy.missing_evidence == 0


@pytest.mark.asyncio
async def test_tracker_over_http_uses_cluster_recovery(provider, opensearch, ctx):
    opensearch.recoveries["idx1"] = [shard(BACKUP_ID, REPOSITORY, "DONE")]
    opensearch.recoveries["idx2"] = [shard(BACKUP_ID, REPOSITORY, "VERIFY_INDEX")]

    track = await provider.track_restore_indices(BACKUP_ID, ["idx1", "idx2"], REPOSITORY, ctx)

    assert track.status == TrackStatus.PROCEEDING
    assert opensearch.requests[-1].path == "/idx1,idx2/_recovery"


@pytest.mark.asyncio
async def test_tracker_over_http_error_status_is_fallback(provider, opensearch, ctx):
    opensearch.recovery_status = 404

    track = await provider.track_restore_indices(BACKUP_ID, ["gone"], REPOSITORY, ctx)

    assert track.status == TrackStatus.PROCEEDING
    assert provider.tracker.fallback_policy.query_failures == 1
