# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Curator Gateway - Thin HTTP client for the Curator backup service.

Curator physically performs snapshots, restores and evictions. The
gateway only translates calls into HTTP requests: every request carries
Basic-Auth from the configuration and the caller's correlation id.
"""

from typing import List
from urllib.parse import quote

import httpx
import pydantic
from pydantic import BaseModel

from osbackup.config import AdapterConfig
from osbackup.context import REQUEST_ID_HEADER, RequestContext
from osbackup.curator.models import CollectRequest, EvictResult, JobStatus, RestoreRequest
from osbackup.errors import explain_malformed_request_url
from osbackup.exceptions import CuratorError, RequestConstructionError


class CuratorGateway:
    """Issues backup, restore, evict and jobstatus calls to Curator."""

    def __init__(self, config: AdapterConfig, client: httpx.AsyncClient):
        self._base_url = config.curator_address.rstrip("/")
        self._auth = httpx.BasicAuth(config.curator_username, config.curator_password)
        self._timeout = config.request_timeout
        self._client = client

    def _url(self, *segments: str) -> httpx.URL:
        """
        Build an absolute Curator URL.

        Raises:
            RequestConstructionError: If the result is not a usable http(s) URL
        """
        raw = "/".join([self._base_url, *segments])
        try:
            url = httpx.URL(raw)
        except (httpx.InvalidURL, TypeError) as e:
            raise RequestConstructionError(explain_malformed_request_url(raw, str(e))) from e

        if url.scheme not in ("http", "https") or not url.host:
            raise RequestConstructionError(
                explain_malformed_request_url(raw, "not an absolute http(s) URL")
            )
        return url

    async def _send(
        self,
        method: str,
        url: httpx.URL,
        ctx: RequestContext,
        body: BaseModel | None = None,
    ) -> httpx.Response:
        headers = {REQUEST_ID_HEADER: ctx.request_id}
        content = None
        if body is not None:
            content = body.model_dump_json(exclude_none=True)
            headers["Content-Type"] = "application/json"

        ctx.ensure_active()
        timeout = self._timeout
        remaining = ctx.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)

        ctx.logger.debug("curator_request", method=method, url=str(url), body=content)
        try:
            return await self._client.request(
                method,
                url,
                content=content,
                headers=headers,
                auth=self._auth,
                timeout=timeout,
            )
        except httpx.HTTPError as e:
            ctx.logger.error(
                "curator_request_failed",
                method=method,
                url=str(url),
                error=str(e),
            )
            raise CuratorError(
                f"Curator request failed: {e}",
                details={"method": method, "url": str(url)},
            ) from e

    @staticmethod
    def _check_status(response: httpx.Response, operation: str) -> None:
        if not response.is_success:
            raise CuratorError(
                f"Curator rejected {operation} request with status {response.status_code}",
                details={"operation": operation, "body": response.text},
                status_code=response.status_code,
            )

    async def collect(self, dbs: List[str], ctx: RequestContext) -> str:
        """
        Ask Curator to back up the given databases.

        An empty list sends no body, leaving the scope to Curator.

        Returns:
            The backup id assigned by Curator
        """
        body = CollectRequest(dbs=dbs) if dbs else None
        response = await self._send("POST", self._url("backup"), ctx, body)
        self._check_status(response, "backup")

        backup_id = response.text.strip()
        if not backup_id:
            raise CuratorError("Curator returned an empty backup id", details={"dbs": dbs})

        ctx.logger.debug("curator_backup_started", backup_id=backup_id)
        return backup_id

    async def restore(
        self,
        dbs: List[str],
        backup_id: str,
        ctx: RequestContext,
        rename_pattern: str | None = None,
        rename_replacement: str | None = None,
    ) -> None:
        """Ask Curator to restore dbs from backup_id, optionally renaming them."""
        body = RestoreRequest(vault=backup_id, dbs=dbs)
        if rename_pattern:
            body.rename_pattern = rename_pattern
            body.rename_replacement = rename_replacement

        response = await self._send("POST", self._url("restore"), ctx, body)
        self._check_status(response, "restore")

        ctx.logger.info(
            "curator_restore_started",
            backup_id=backup_id,
            dbs=dbs,
            response=response.text,
        )

    async def evict(self, backup_id: str, ctx: RequestContext) -> EvictResult:
        """
        Ask Curator to delete a backup.

        The HTTP status is the result here, so non-2xx answers are returned
        rather than raised.
        """
        url = self._url("evict", quote(backup_id, safe=""))
        response = await self._send("POST", url, ctx)

        ctx.logger.info(
            "curator_evict_answered",
            backup_id=backup_id,
            status_code=response.status_code,
        )
        return EvictResult(status_code=response.status_code, body=response.content)

    async def job_status(self, backup_id: str, ctx: RequestContext) -> JobStatus:
        """Fetch Curator's raw job status for a backup or restore."""
        url = self._url("jobstatus", quote(backup_id, safe=""))
        response = await self._send("GET", url, ctx)
        self._check_status(response, "jobstatus")

        try:
            return JobStatus.model_validate_json(response.content)
        except pydantic.ValidationError as e:
            ctx.logger.error("curator_jobstatus_malformed", backup_id=backup_id, error=str(e))
            raise CuratorError(
                "Failed to decode Curator job status",
                details={"backup_id": backup_id, "body": response.text},
            ) from e
