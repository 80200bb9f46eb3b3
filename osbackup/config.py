# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Adapter Configuration - Immutable configuration data structures.

All configuration is frozen (immutable) after creation so it can be shared
read-only between concurrently running requests.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List
from urllib.parse import urlparse
import re

from osbackup.errors import explain_invalid_curator_address


# OpenSearch rejects index names of 255 bytes or longer
OPENSEARCH_MAX_INDEX_NAME_LENGTH = 255


class ApiVersion(str, Enum):
    """DBaaS aggregator API version served by the adapter."""

    V1 = "v1"
    V2 = "v2"


def _validate_http_url(url: str) -> bool:
    """Check that url is an absolute http(s) URL with a host."""
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _validate_index_prefix(prefix: str) -> bool:
    """
    Validate a prefix used for regenerated index names.

    Rules:
    - Lowercase letters, digits, '-' and '_' only
    - Must not start with '-', '_' or '+'
    """
    if not prefix:
        return False
    return bool(re.match(r"^[a-z0-9][a-z0-9_-]*$", prefix))


def _validate_name_delimiter(delimiter: str) -> bool:
    """Delimiters may be empty or use the characters allowed in index names."""
    return bool(re.fullmatch(r"[a-z0-9_-]*", delimiter))


@dataclass(frozen=True)
class AdapterConfig:
    """
    Immutable configuration for the backup/restore adapter.

    Credentials are only passed through to Curator and OpenSearch; the
    adapter never inspects them.
    """

    # Required: base address of the Curator service
    curator_address: str

    # Basic-auth credentials forwarded to Curator
    curator_username: str = ""
    curator_password: str = ""

    # OpenSearch REST endpoint and credentials
    opensearch_url: str = "http://localhost:9200"
    opensearch_username: str = ""
    opensearch_password: str = ""

    # Snapshot repository restores are tracked against
    repository: str = "snapshots"

    # Aggregator API version, part of every route
    api_version: ApiVersion = ApiVersion.V2

    # Regenerated index names look like <index_prefix><name_delimiter><uuid>
    index_prefix: str = "dbaas"
    name_delimiter: str = "_"

    max_index_name_length: int = OPENSEARCH_MAX_INDEX_NAME_LENGTH

    # Sequential restore polling: attempts per index and seconds between them
    restore_poll_attempts: int = 120
    restore_poll_interval: float = 1.0

    # Timeout in seconds for every outbound call
    request_timeout: float = 30.0

    # Credentials the aggregator uses to call the adapter
    adapter_username: str = "dbaas-aggregator"
    adapter_password: str = "dbaas-aggregator"

    def __post_init__(self) -> None:
        """Validate configuration after creation."""
        errors: List[str] = []

        if not _validate_http_url(self.curator_address):
            errors.append(explain_invalid_curator_address(self.curator_address))

        if not _validate_http_url(self.opensearch_url):
            errors.append(f"Invalid opensearch_url: {self.opensearch_url!r}")

        if not self.repository:
            errors.append("repository must not be empty")

        if not _validate_index_prefix(self.index_prefix):
            errors.append(f"Invalid index_prefix: {self.index_prefix!r}")

        if not _validate_name_delimiter(self.name_delimiter):
            errors.append(f"Invalid name_delimiter: {self.name_delimiter!r}")

        if self.max_index_name_length < 1:
            errors.append(
                f"max_index_name_length must be >= 1, got {self.max_index_name_length}"
            )

        if self.restore_poll_attempts < 1:
            errors.append(
                f"restore_poll_attempts must be >= 1, got {self.restore_poll_attempts}"
            )

        if self.restore_poll_interval < 0:
            errors.append(
                f"restore_poll_interval must be >= 0, got {self.restore_poll_interval}"
            )

        if self.request_timeout <= 0:
            errors.append(f"request_timeout must be > 0, got {self.request_timeout}")

        # Raise all errors at once
        if errors:
            from osbackup.exceptions import ConfigurationError

            raise ConfigurationError(
                "Configuration validation failed",
                details={"errors": errors},
            )

    @property
    def base_path(self) -> str:
        """Route prefix of the adapter, e.g. /api/v2/dbaas/adapter/opensearch."""
        return f"/api/{self.api_version.value}/dbaas/adapter/opensearch"

    def with_updates(self, **kwargs) -> "AdapterConfig":
        """
        Create a new config with updated values.

        Since the config is frozen, this creates a new instance.
        """
        from dataclasses import asdict

        current = asdict(self)
        current.update(kwargs)
        return AdapterConfig(**current)
