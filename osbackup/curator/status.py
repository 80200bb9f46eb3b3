# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Job status translation from Curator states to aggregator statuses.
"""

from enum import Enum

from osbackup.context import RequestContext
from osbackup.curator.gateway import CuratorGateway
from osbackup.exceptions import CuratorError
from osbackup.tracking import TrackStatus


class CuratorJobState(str, Enum):
    """Job states reported by Curator."""

    FAILED = "Failed"
    SUCCESSFUL = "Successful"
    QUEUED = "Queued"
    PROCESSING = "Processing"


_TRANSLATION = {
    CuratorJobState.FAILED: TrackStatus.FAIL,
    CuratorJobState.SUCCESSFUL: TrackStatus.SUCCESS,
    CuratorJobState.QUEUED: TrackStatus.PROCEEDING,
    CuratorJobState.PROCESSING: TrackStatus.PROCEEDING,
}


def translate_job_state(raw_state: str | None) -> TrackStatus:
    """
    Map a raw Curator state onto PROCEEDING / SUCCESS / FAIL.

    Unknown states are failures, so the result is always decidable.
    """
    try:
        state = CuratorJobState(raw_state)
    except ValueError:
        return TrackStatus.FAIL
    return _TRANSLATION[state]


async def fetch_job_status(
    gateway: CuratorGateway,
    backup_id: str,
    ctx: RequestContext,
) -> TrackStatus:
    """
    Query Curator and translate the job state.

    Curator errors (unreachable, non-2xx, undecodable body) are reported
    as FAIL rather than raised.
    """
    try:
        job = await gateway.job_status(backup_id, ctx)
    except CuratorError as e:
        ctx.logger.error("job_status_unavailable", backup_id=backup_id, error=str(e))
        return TrackStatus.FAIL

    status = translate_job_state(job.state)
    ctx.logger.debug(
        "job_status_translated",
        backup_id=backup_id,
        raw_state=job.state,
        status=status.value,
    )
    return status
