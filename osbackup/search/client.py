# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Search engine client - the two cluster queries backup tracking relies on.

The orchestration code depends only on the SearchEngineClient protocol;
OpenSearchClient implements it over the OpenSearch REST API.
"""

from typing import List, Protocol
from urllib.parse import quote

import httpx
import pydantic

from osbackup.config import AdapterConfig
from osbackup.context import REQUEST_ID_HEADER, RequestContext
from osbackup.errors import explain_malformed_request_url
from osbackup.exceptions import (
    OSBackupError,
    RequestConstructionError,
    SearchEngineError,
    SnapshotNotFoundError,
)
from osbackup.search.models import (
    RecoveryInfo,
    SnapshotStatus,
    SnapshotStatusResponse,
    recovery_info_adapter,
)


class SearchEngineClient(Protocol):
    """Cluster queries needed by the backup orchestration."""

    async def snapshot_status(
        self,
        repository: str,
        snapshot: str,
        ctx: RequestContext,
    ) -> List[SnapshotStatus]:
        """
        Return the status entries for a snapshot in a repository.

        Raises:
            SnapshotNotFoundError: If the repository has no such snapshot
            SearchEngineError: If the query fails
        """
        ...

    async def indices_recovery(
        self,
        indices: List[str],
        ctx: RequestContext,
    ) -> RecoveryInfo:
        """
        Return per-index shard recovery descriptors.

        Raises:
            SearchEngineError: If the query fails
        """
        ...


class OpenSearchClient:
    """SearchEngineClient backed by the OpenSearch REST API."""

    def __init__(self, config: AdapterConfig, client: httpx.AsyncClient):
        self._base_url = config.opensearch_url.rstrip("/")
        self._auth = None
        if config.opensearch_username:
            self._auth = httpx.BasicAuth(config.opensearch_username, config.opensearch_password)
        self._timeout = config.request_timeout
        self._client = client

    def _url(self, path: str) -> httpx.URL:
        raw = f"{self._base_url}/{path}"
        try:
            return httpx.URL(raw)
        except (httpx.InvalidURL, TypeError) as e:
            raise RequestConstructionError(explain_malformed_request_url(raw, str(e))) from e

    async def _get(
        self,
        path: str,
        ctx: RequestContext,
        not_found: OSBackupError | None = None,
    ) -> httpx.Response:
        url = self._url(path)
        ctx.ensure_active()
        timeout = self._timeout
        remaining = ctx.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)

        try:
            response = await self._client.get(
                url,
                headers={REQUEST_ID_HEADER: ctx.request_id},
                auth=self._auth if self._auth is not None else httpx.USE_CLIENT_DEFAULT,
                timeout=timeout,
            )
        except httpx.HTTPError as e:
            raise SearchEngineError(
                f"Search engine request failed: {e}",
                details={"url": str(url)},
            ) from e

        ctx.logger.debug("search_engine_answered", url=str(url), status_code=response.status_code)
        if response.status_code == 404 and not_found is not None:
            raise not_found
        if not response.is_success:
            raise SearchEngineError(
                f"Search engine answered with status {response.status_code}",
                details={"url": str(url), "body": response.text},
            )
        return response

    async def snapshot_status(
        self,
        repository: str,
        snapshot: str,
        ctx: RequestContext,
    ) -> List[SnapshotStatus]:
        path = f"_snapshot/{quote(repository, safe='')}/{quote(snapshot, safe='')}/_status"
        missing = SnapshotNotFoundError(
            f"Failed to find '{snapshot}' snapshot in {repository}",
            details={"backup_id": snapshot, "repository": repository},
        )
        response = await self._get(path, ctx, not_found=missing)
        try:
            parsed = SnapshotStatusResponse.model_validate_json(response.content)
        except pydantic.ValidationError as e:
            raise SearchEngineError(
                "Failed to decode snapshot status",
                details={"repository": repository, "snapshot": snapshot},
            ) from e
        return parsed.snapshots

    async def indices_recovery(
        self,
        indices: List[str],
        ctx: RequestContext,
    ) -> RecoveryInfo:
        target = ",".join(quote(index, safe="") for index in indices)
        response = await self._get(f"{target}/_recovery", ctx)
        if not response.content:
            return {}
        try:
            return recovery_info_adapter.validate_json(response.content)
        except pydantic.ValidationError as e:
            raise SearchEngineError(
                "Failed to decode recovery info",
                details={"indices": indices},
            ) from e
