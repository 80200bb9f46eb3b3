# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Test fixtures for osbackup tests.

Provides in-memory Curator and OpenSearch servers (served through
httpx.MockTransport), test configuration and request context helpers.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, List

import httpx
import pytest
import pytest_asyncio

BACKUP_ID = "20240322T091826"
REPOSITORY = "snapshots"


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: httpx.Headers
    body: bytes

    def json(self):
        return json.loads(self.body)


class FakeCurator:
    """
    In-memory Curator service.

    Every request is recorded; answers are driven by the public attributes.
    """

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self.backup_id = BACKUP_ID
        self.backup_status = 200
        self.restore_status = 200
        self.evict_status = 200
        self.evict_body = b"evicted"
        self.job_states: Dict[str, str] = {}
        self.default_job_state = "Successful"
        self.jobstatus_body: bytes | None = None

    def requests_to(self, method: str, path: str) -> List[RecordedRequest]:
        return [r for r in self.requests if r.method == method and r.path == path]

    @property
    def restore_requests(self) -> List[RecordedRequest]:
        return self.requests_to("POST", "/restore")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.url.path,
                headers=request.headers,
                body=request.content,
            )
        )
        path = request.url.path

        if request.method == "POST" and path == "/backup":
            return httpx.Response(self.backup_status, text=self.backup_id)

        if request.method == "POST" and path == "/restore":
            return httpx.Response(self.restore_status, text="restore accepted")

        if request.method == "POST" and path.startswith("/evict/"):
            return httpx.Response(self.evict_status, content=self.evict_body)

        if request.method == "GET" and path.startswith("/jobstatus/"):
            if self.jobstatus_body is not None:
                return httpx.Response(200, content=self.jobstatus_body)
            backup_id = path.removeprefix("/jobstatus/")
            state = self.job_states.get(backup_id, self.default_job_state)
            return httpx.Response(
                200,
                json={
                    "status": state,
                    "vault": backup_id,
                    "type": "backup",
                    "details": "",
                },
            )

        return httpx.Response(404, text="not found")


class FakeOpenSearch:
    """
    In-memory OpenSearch cluster answering snapshot status and recovery.

    snapshots maps snapshot name to the indices it holds. Recovery answers
    come from recoveries (per index) or, for any other index, from
    default_recovery when set.
    """

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self.snapshots: Dict[str, List[str]] = {}
        self.recoveries: Dict[str, List[dict]] = {}
        self.default_recovery: dict | None = None
        self.staged_recoveries: List[dict] = []
        self.recovery_status = 200
        self.recovery_calls = 0

    def add_snapshot(self, snapshot: str, indices: List[str]) -> None:
        self.snapshots[snapshot] = list(indices)

    def recover_all(self, snapshot: str, stage: str, repository: str = REPOSITORY) -> None:
        """Report every queried index as one shard recovering from snapshot."""
        self.default_recovery = shard(snapshot, repository, stage)

    def recover_in_stages(self, snapshot: str, stages: List[str], repository: str = REPOSITORY) -> None:
        """Report one stage per recovery query, repeating the last one."""
        self.staged_recoveries = [shard(snapshot, repository, stage) for stage in stages]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.url.path,
                headers=request.headers,
                body=request.content,
            )
        )
        segments = request.url.path.strip("/").split("/")

        if len(segments) == 4 and segments[0] == "_snapshot" and segments[3] == "_status":
            repository, snapshot = segments[1], segments[2]
            if snapshot not in self.snapshots:
                return httpx.Response(404, json=snapshot_missing(repository, snapshot))
            return httpx.Response(
                200,
                json={
                    "snapshots": [
                        {
                            "snapshot": snapshot,
                            "repository": repository,
                            "state": "SUCCESS",
                            "shards_stats": {"total": 1},
                            "indices": {
                                index: {"shards_stats": {"total": 1}}
                                for index in self.snapshots[snapshot]
                            },
                        }
                    ]
                },
            )

        if len(segments) == 2 and segments[1] == "_recovery":
            self.recovery_calls += 1
            if self.staged_recoveries:
                self.default_recovery = self.staged_recoveries.pop(0)
            if self.recovery_status != 200:
                return httpx.Response(self.recovery_status, text="recovery unavailable")

            body = {}
            for index in segments[0].split(","):
                if index in self.recoveries:
                    body[index] = {"shards": self.recoveries[index]}
                elif self.default_recovery is not None:
                    body[index] = {"shards": [self.default_recovery]}
            return httpx.Response(200, json=body)

        return httpx.Response(404, text="not found")


def snapshot_missing(repository: str, snapshot: str) -> dict:
    """Error body OpenSearch answers for an unknown snapshot."""
    reason = f"[{repository}:{snapshot}] is missing"
    error = {"type": "snapshot_missing_exception", "reason": reason}
    return {"error": {"root_cause": [error], **error}, "status": 404}


def shard(snapshot: str, repository: str, stage: str, index: str = "source") -> dict:
    """Recovery descriptor of one shard restored from a snapshot."""
    return {
        "id": 0,
        "type": "SNAPSHOT",
        "stage": stage,
        "primary": True,
        "source": {
            "repository": repository,
            "snapshot": snapshot,
            "version": "2.11.0",
            "index": index,
        },
    }


@pytest.fixture
def curator() -> FakeCurator:
    return FakeCurator()


@pytest.fixture
def opensearch() -> FakeOpenSearch:
    return FakeOpenSearch()


@pytest.fixture
def test_config():
    """Create a test configuration with instant polling."""
    from osbackup.builder import create_config

    return create_config(
        "http://curator:8080",
        curator_username="curator",
        curator_password="secret",
        opensearch_url="http://opensearch:9200",
        repository=REPOSITORY,
        restore_poll_attempts=120,
        restore_poll_interval=0,
    )


@pytest_asyncio.fixture
async def curator_client(curator: FakeCurator):
    async with httpx.AsyncClient(transport=httpx.MockTransport(curator.handler)) as client:
        yield client


@pytest_asyncio.fixture
async def search_client(opensearch: FakeOpenSearch):
    async with httpx.AsyncClient(transport=httpx.MockTransport(opensearch.handler)) as client:
        yield client


@pytest.fixture
def gateway(test_config, curator_client):
    from osbackup.curator.gateway import CuratorGateway

    return CuratorGateway(test_config, curator_client)


@pytest.fixture
def search(test_config, search_client):
    from osbackup.search.client import OpenSearchClient

    return OpenSearchClient(test_config, search_client)


@pytest.fixture
def provider(test_config, gateway, search):
    """Create a backup provider wired to the fake services."""
    from osbackup.backup.provider import BackupProvider

    return BackupProvider(test_config, gateway, search)


@pytest.fixture
def ctx():
    """Create a request context without deadline."""
    from osbackup.context import new_request_context

    return new_request_context("test-request-id")


@dataclass
class StubSearchClient:
    """SearchEngineClient returning canned answers, for unit tests."""

    recovery: dict = field(default_factory=dict)
    error: Exception | None = None
    recovery_queries: List[List[str]] = field(default_factory=list)

    async def snapshot_status(self, repository, snapshot, ctx):
        return []

    async def indices_recovery(self, indices, ctx):
        from osbackup.search.models import recovery_info_adapter

        self.recovery_queries.append(list(indices))
        if self.error is not None:
            raise self.error
        return recovery_info_adapter.validate_python(self.recovery)
