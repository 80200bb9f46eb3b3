# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
FastAPI Integration - Backup routes of the DBaaS aggregator API.

This module provides:
- Lifespan management (startup/shutdown of HTTP clients)
- Basic-auth protected backup, restore and tracking endpoints
- Per-request correlation ids taken from X-Request-Id
"""

import secrets
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import List

import structlog
from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse, Response
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from osbackup.backup import BackupProvider
from osbackup.config import AdapterConfig
from osbackup.context import REQUEST_ID_HEADER, RequestContext, new_request_context
from osbackup.core import (
    AdapterState,
    get_metrics,
    initialize_adapter_state,
    shutdown_adapter_state,
)
from osbackup.exceptions import OSBackupError, RequestConstructionError, ValidationError

logger = structlog.get_logger()

# Security
security = HTTPBasic(auto_error=False)


def create_credentials_verifier(config: AdapterConfig):
    """
    Build a dependency checking Basic-Auth credentials of the aggregator.

    Raises:
        HTTPException: If credentials are missing or invalid
    """

    async def verify_credentials(
        credentials: HTTPBasicCredentials | None = Depends(security),
    ) -> bool:
        if not credentials:
            raise HTTPException(
                status_code=401,
                detail="Authorization header required",
                headers={"WWW-Authenticate": "Basic"},
            )

        username_ok = secrets.compare_digest(
            credentials.username.encode(), config.adapter_username.encode()
        )
        password_ok = secrets.compare_digest(
            credentials.password.encode(), config.adapter_password.encode()
        )
        if not (username_ok and password_ok):
            raise HTTPException(
                status_code=403,
                detail="Invalid credentials",
            )

        return True

    return verify_credentials


async def get_request_context(request: Request) -> RequestContext:
    """Create the request context from the incoming correlation id."""
    return new_request_context(request.headers.get(REQUEST_ID_HEADER))


async def _error_response(request: Request, exc: OSBackupError) -> PlainTextResponse:
    status_code = 400 if isinstance(exc, ValidationError) else 500
    event = "request_construction_failed" if isinstance(exc, RequestConstructionError) else "request_failed"
    logger.error(
        event,
        path=request.url.path,
        request_id=request.headers.get(REQUEST_ID_HEADER),
        error=str(exc),
    )
    return PlainTextResponse(exc.message, status_code=status_code)


def get_adapter_state(app: FastAPI) -> AdapterState:
    """
    Get adapter state from a FastAPI app.

    Raises:
        RuntimeError: If the adapter is not initialized
    """
    state = getattr(app.state, "backup_state", None)
    if not state:
        raise RuntimeError("Adapter not initialized. Call setup_backup_plugin first.")
    return state


async def get_provider(request: Request) -> BackupProvider:
    """Resolve the backup provider of the running adapter."""
    return get_adapter_state(request.app)["provider"]


def register_backup_routes(
    app: FastAPI,
    config: AdapterConfig,
    prefix: str | None = None,
) -> None:
    """
    Register backup endpoints on a FastAPI app.

    Must be called before the app starts serving. The runtime state is
    looked up per request, so it may be initialized later on startup.
    All endpoints require Basic authentication with the adapter credentials.

    Args:
        app: FastAPI application
        config: Adapter configuration
        prefix: URL prefix for endpoints (default: config.base_path)
    """
    prefix = prefix if prefix is not None else config.base_path
    auth = [Depends(create_credentials_verifier(config))]

    app.add_exception_handler(OSBackupError, _error_response)

    @app.post(f"{prefix}/backups/collect", status_code=202, dependencies=auth)
    async def collect_backup(
        databases: List[str] = Body(...),
        allow_eviction: str | None = Query(default=None, alias="allowEviction"),
        ctx: RequestContext = Depends(get_request_context),
        provider: BackupProvider = Depends(get_provider),
    ) -> dict:
        """
        Start a backup of the given databases.

        Returns the BACKUP track of the new backup.
        """
        if allow_eviction is not None:
            ctx.logger.info("allow_eviction_ignored", value=allow_eviction)

        backup_id = await provider.collect_backup(databases, ctx)
        track = await provider.track_backup(backup_id, ctx)
        return track.to_response()

    @app.get(f"{prefix}/backups/track/backup/{{backup_id}}", dependencies=auth)
    async def track_backup(
        backup_id: str,
        ctx: RequestContext = Depends(get_request_context),
        provider: BackupProvider = Depends(get_provider),
    ) -> dict:
        """Get the status of a backup."""
        track = await provider.track_backup(backup_id, ctx)
        return track.to_response()

    @app.delete(f"{prefix}/backups/{{backup_id}}", dependencies=auth)
    async def delete_backup(
        backup_id: str,
        ctx: RequestContext = Depends(get_request_context),
        provider: BackupProvider = Depends(get_provider),
    ) -> Response:
        """
        Delete a backup.

        Curator errors below 500 are not reported back to the aggregator.
        """
        result = await provider.delete_backup(backup_id, ctx)
        if result.status_code < 500:
            return Response(status_code=200)
        return Response(content=result.body, status_code=500)

    @app.post(f"{prefix}/backups/{{backup_id}}/restore", dependencies=auth)
    async def restore_backup(
        backup_id: str,
        databases: List[str] = Body(...),
        regenerate_names: str | None = Query(default=None, alias="regenerateNames"),
        ctx: RequestContext = Depends(get_request_context),
        provider: BackupProvider = Depends(get_provider),
    ) -> dict:
        """
        Restore databases from a backup.

        Args:
            backup_id: Backup to restore
            databases: Database prefixes to restore
            regenerate_names: Only the exact value "true" regenerates index names
        """
        track = await provider.restore_and_track(
            backup_id, databases, regenerate_names == "true", ctx
        )
        return track.to_response()

    @app.get(f"{prefix}/backups/track/restore/{{backup_id}}", dependencies=auth)
    async def track_restore(
        backup_id: str,
        ctx: RequestContext = Depends(get_request_context),
        provider: BackupProvider = Depends(get_provider),
    ) -> dict:
        """Get the status of a restore from Curator."""
        track = await provider.track_restore(backup_id, ctx)
        return track.to_response()

    @app.get(
        f"{prefix}/backups/track/restoring/backups/{{backup_id}}/indices/{{indices}}",
        dependencies=auth,
    )
    async def track_restore_indices(
        backup_id: str,
        indices: str,
        ctx: RequestContext = Depends(get_request_context),
        provider: BackupProvider = Depends(get_provider),
    ) -> dict:
        """Get the status of a restore from the recovery info of its indices."""
        track = await provider.track_restore_indices(
            backup_id, indices.split(","), config.repository, ctx
        )
        return track.to_response()

    @app.get(f"{prefix}/backups/metrics", dependencies=auth)
    async def get_backup_metrics(request: Request) -> dict:
        """Get adapter metrics, including recovery fallback counters."""
        metrics = asdict(get_metrics(get_adapter_state(request.app)))
        metrics["started_at"] = metrics["started_at"].isoformat()
        return metrics


def setup_backup_plugin(app: FastAPI, config: AdapterConfig) -> None:
    """
    Set up the backup routes with startup/shutdown management.

    Args:
        app: FastAPI application
        config: Adapter configuration
    """
    app.state.backup_config = config
    app.state.backup_state = None
    register_backup_routes(app, config)

    @app.on_event("startup")
    async def startup():
        """Initialize the adapter on app startup."""
        logger.info("backup_plugin_starting", base_path=config.base_path)

        app.state.backup_state = await initialize_adapter_state(config)

        logger.info("backup_plugin_started")

    @app.on_event("shutdown")
    async def shutdown():
        """Cleanup on app shutdown."""
        logger.info("backup_plugin_stopping")

        state = app.state.backup_state
        if state:
            await shutdown_adapter_state(state)

        logger.info("backup_plugin_stopped")


@asynccontextmanager
async def adapter_lifespan(app: FastAPI, config: AdapterConfig):
    """
    Alternative lifespan context manager for FastAPI.

    Use this instead of setup_backup_plugin if you prefer the
    lifespan pattern. Routes are registered separately:

        app = FastAPI(lifespan=lambda app: adapter_lifespan(app, config))
        register_backup_routes(app, config)

    Args:
        app: FastAPI application
        config: Adapter configuration
    """
    logger.info("adapter_lifespan_starting")

    state = await initialize_adapter_state(config)
    app.state.backup_state = state
    app.state.backup_config = config

    logger.info("adapter_lifespan_started")

    try:
        yield
    finally:
        logger.info("adapter_lifespan_stopping")
        await shutdown_adapter_state(state)
        app.state.backup_state = None
        logger.info("adapter_lifespan_stopped")
