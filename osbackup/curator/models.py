# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Curator wire models.

Request bodies are serialized from these models rather than templated by
hand, so database and index names are always JSON-escaped.
"""

from dataclasses import dataclass
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class CollectRequest(BaseModel):
    """Body of POST /backup."""

    dbs: List[str]


class RestoreRequest(BaseModel):
    """
    Body of POST /restore.

    rename_pattern is a regular expression applied to each restored index
    name; rename_replacement may reference groups ($0 is the whole match).
    Both are omitted from the wire when no renaming is requested.
    """

    vault: str
    dbs: List[str]
    rename_pattern: str | None = None
    rename_replacement: str | None = None


class JobStatus(BaseModel):
    """Response of GET /jobstatus/{backup_id}."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    state: str = Field(default="", alias="status")
    message: str | None = Field(default=None, alias="details")
    vault: str | None = None
    type: str | None = None
    error: str | None = Field(default=None, alias="err")
    task_id: str | None = Field(default=None, alias="trackPath")


@dataclass
class EvictResult:
    """Outcome of POST /evict/{backup_id}."""

    status_code: int
    body: bytes
