# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Curator Layer - HTTP gateway to the Curator backup service and job status translation.
"""

from osbackup.curator.gateway import CuratorGateway

from osbackup.curator.models import (
    CollectRequest,
    RestoreRequest,
    JobStatus,
    EvictResult,
)

from osbackup.curator.status import (
    CuratorJobState,
    translate_job_state,
    fetch_job_status,
)

__all__ = [
    # Gateway
    "CuratorGateway",
    # Wire models
    "CollectRequest",
    "RestoreRequest",
    "JobStatus",
    "EvictResult",
    # Status translation
    "CuratorJobState",
    "translate_job_state",
    "fetch_job_status",
]
