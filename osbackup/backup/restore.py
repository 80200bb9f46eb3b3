# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Restore Planner - restores backups, optionally under regenerated names.

Without name regeneration a restore is a single Curator call with the
requested names. With regeneration every restored index gets a fresh
name, using one of two strategies:

- Bulk: one Curator call whose rename rule prepends the same freshly
  generated prefix to every index. Only possible while the prefixed
  longest name stays under the OpenSearch index name limit.
- Sequential: one Curator call per index, each renamed to its own
  generated name, waiting for each index to finish recovering before the
  next one starts.
"""

import re
from enum import Enum
from typing import Dict, List

from osbackup.backup.recovery import RecoveryTracker
from osbackup.backup.snapshots import SnapshotResolver
from osbackup.config import OPENSEARCH_MAX_INDEX_NAME_LENGTH
from osbackup.context import RequestContext
from osbackup.curator.gateway import CuratorGateway
from osbackup.exceptions import RestoreError, ValidationError
from osbackup.naming import IndexNameGenerator
from osbackup.retry import RetryPolicy, poll_until
from osbackup.tracking import ActionTrack, TrackStatus

# Bulk rename: match any index name, replace with prefix + whole match
BULK_RENAME_PATTERN = ".+"
WHOLE_MATCH = "$0"


class RestoreStrategy(str, Enum):
    """How indices are restored when names are regenerated."""

    BULK = "bulk"
    SEQUENTIAL = "sequential"


def name_length(name: str) -> int:
    """Length of an index name as OpenSearch counts it (UTF-8 bytes)."""
    return len(name.encode("utf-8"))


def choose_strategy(
    prefix_length: int,
    max_name_length: int,
    limit: int = OPENSEARCH_MAX_INDEX_NAME_LENGTH,
) -> RestoreStrategy:
    """Bulk iff the prefixed longest name stays strictly under the limit."""
    if prefix_length + max_name_length < limit:
        return RestoreStrategy.BULK
    return RestoreStrategy.SEQUENTIAL


class RestorePlanner:
    """Chooses and drives the restore strategy for a backup."""

    def __init__(
        self,
        gateway: CuratorGateway,
        resolver: SnapshotResolver,
        tracker: RecoveryTracker,
        name_generator: IndexNameGenerator,
        poll_policy: RetryPolicy,
        max_index_name_length: int = OPENSEARCH_MAX_INDEX_NAME_LENGTH,
    ):
        self._gateway = gateway
        self._resolver = resolver
        self._tracker = tracker
        self._names = name_generator
        self._poll_policy = poll_policy
        self._max_index_name_length = max_index_name_length

    async def restore(
        self,
        backup_id: str,
        databases: List[str],
        repository: str,
        regenerate_names: bool,
        ctx: RequestContext,
    ) -> Dict[str, str] | None:
        """
        Restore databases from a backup.

        Args:
            backup_id: Backup to restore from
            databases: Database prefixes requested by the aggregator
            repository: Snapshot repository of the backup
            regenerate_names: Restore under freshly generated index names
            ctx: Request context

        Returns:
            Mapping of original to regenerated index names, or None when
            names were not regenerated

        Raises:
            ValidationError: If databases is empty
            RestoreError: If a sequential restore did not finish for an index
            CuratorError: If Curator rejects a restore call
            SnapshotNotFoundError: If the backup's snapshot is missing
        """
        if not databases:
            ctx.logger.error("restore_databases_missing", backup_id=backup_id)
            raise ValidationError(
                "Database prefixes to restore are not specified",
                details={"backup_id": backup_id},
            )

        if not regenerate_names:
            await self._gateway.restore(list(databases), backup_id, ctx)
            return None

        indices = await self._resolver.actual_indices(backup_id, repository, {}, ctx)
        ctx.logger.info(
            "restore_indices_resolved",
            backup_id=backup_id,
            repository=repository,
            count=len(indices),
            indices=indices,
        )

        max_len = max((name_length(index) for index in indices), default=0)
        prefix = self._names.name_index() + "_"
        strategy = choose_strategy(name_length(prefix), max_len, self._max_index_name_length)
        ctx.logger.debug(
            "restore_strategy_chosen",
            backup_id=backup_id,
            strategy=strategy.value,
            max_index_name_length=max_len,
            prefix=prefix,
        )

        if strategy == RestoreStrategy.BULK:
            return await self._restore_bulk(backup_id, indices, prefix, ctx)
        return await self._restore_sequential(backup_id, indices, repository, ctx)

    async def _restore_bulk(
        self,
        backup_id: str,
        indices: List[str],
        prefix: str,
        ctx: RequestContext,
    ) -> Dict[str, str]:
        await self._gateway.restore(
            indices,
            backup_id,
            ctx,
            rename_pattern=BULK_RENAME_PATTERN,
            rename_replacement=prefix + WHOLE_MATCH,
        )
        # Mapping follows from the rename rule; completion is not awaited
        return {index: prefix + index for index in indices}

    async def _restore_sequential(
        self,
        backup_id: str,
        indices: List[str],
        repository: str,
        ctx: RequestContext,
    ) -> Dict[str, str]:
        ctx.logger.warning(
            "restore_sequential_mode",
            backup_id=backup_id,
            indices=len(indices),
            message="Index names are too long for bulk restoration; "
            "indices are restored one at a time and the request may take long",
        )

        changed_name_db: Dict[str, str] = {}
        for index in indices:
            new_name = self._names.name_index()
            await self._gateway.restore(
                [index],
                backup_id,
                ctx,
                rename_pattern=re.escape(index),
                rename_replacement=new_name,
            )
            changed_name_db[index] = new_name

            async def track() -> ActionTrack:
                return await self._tracker.track_indices(backup_id, [new_name], repository, ctx)

            def finished(track_result: ActionTrack) -> bool:
                ctx.logger.debug(
                    "restore_index_polled",
                    index=index,
                    new_name=new_name,
                    status=track_result.status.value,
                )
                return track_result.status != TrackStatus.PROCEEDING

            outcome = await poll_until(track, finished, self._poll_policy, ctx)
            status = outcome.value.status

            if status != TrackStatus.SUCCESS:
                raise RestoreError(
                    f"Failed to restore {index}->{new_name}, status is "
                    f"'{status.value}' after {outcome.attempts} retries",
                    details={
                        "backup_id": backup_id,
                        "index": index,
                        "new_name": new_name,
                        "attempts": outcome.attempts,
                        "status": status.value,
                    },
                )

            ctx.logger.info("restore_index_completed", index=index, new_name=new_name)

        return changed_name_db
