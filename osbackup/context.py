# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Request Context - Per-request correlation id, logger and deadline.

Every orchestration call receives a RequestContext instead of reading
process-wide state. The context carries the correlation id forwarded to
Curator, a structlog logger already bound to that id, and an optional
deadline after which long-running loops must stop.
"""

import asyncio
from dataclasses import dataclass
from typing import Any

import structlog
from ulid import ULID

from osbackup.exceptions import RequestCancelledError

# Header used to propagate the correlation id in and out of the adapter
REQUEST_ID_HEADER = "X-Request-Id"


@dataclass(frozen=True)
class RequestContext:
    """Correlation and cancellation scope of one inbound request."""

    request_id: str
    logger: Any  # structlog bound logger
    deadline: float | None = None  # event loop time, None means no deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - asyncio.get_running_loop().time())

    def ensure_active(self) -> None:
        """
        Raise if the deadline has passed.

        Raises:
            RequestCancelledError: If the deadline expired
        """
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise RequestCancelledError(
                "Request deadline exceeded",
                details={"request_id": self.request_id},
            )


def generate_request_id() -> str:
    """Generate a new correlation id."""
    return str(ULID())


def new_request_context(
    request_id: str | None = None,
    timeout: float | None = None,
    logger: Any = None,
) -> RequestContext:
    """
    Create a context for a new request.

    Must be called from a running event loop when timeout is given.

    Args:
        request_id: Incoming correlation id; a ULID is generated when empty
        timeout: Seconds until the request is considered cancelled
        logger: Base logger to bind (default: structlog.get_logger())

    Returns:
        RequestContext bound to the correlation id
    """
    request_id = request_id or generate_request_id()
    base_logger = logger if logger is not None else structlog.get_logger()

    deadline = None
    if timeout is not None:
        deadline = asyncio.get_running_loop().time() + timeout

    return RequestContext(
        request_id=request_id,
        logger=base_logger.bind(request_id=request_id),
        deadline=deadline,
    )
