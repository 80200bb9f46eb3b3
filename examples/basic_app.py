# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Example FastAPI Application serving the backup adapter.

Run with:
    uvicorn examples.basic_app:app

Environment variables:
    CURATOR_ADDRESS: Curator base URL (required)
    CURATOR_USERNAME / CURATOR_PASSWORD: Curator credentials
    OPENSEARCH_URL: OpenSearch REST URL
    DBAAS_ADAPTER_USERNAME / DBAAS_ADAPTER_PASSWORD: Aggregator credentials
"""

import os

from fastapi import FastAPI

from osbackup.builder import (
    build_config,
    create_empty_config,
    with_adapter_credentials,
    with_curator,
    with_curator_credentials,
    with_opensearch,
    with_repository,
    with_restore_polling,
)
from osbackup.integrations.fastapi import adapter_lifespan, register_backup_routes


def create_adapter_config():
    """
    Create adapter configuration from environment variables.

    This uses the functional builder pattern for clean, composable configuration.
    """
    config = create_empty_config()

    config = with_curator(config, os.getenv("CURATOR_ADDRESS", "http://curator:8080"))
    config = with_curator_credentials(
        config,
        os.getenv("CURATOR_USERNAME", ""),
        os.getenv("CURATOR_PASSWORD", ""),
    )
    config = with_opensearch(
        config,
        os.getenv("OPENSEARCH_URL", "http://opensearch:9200"),
        os.getenv("OPENSEARCH_USERNAME", ""),
        os.getenv("OPENSEARCH_PASSWORD", ""),
    )
    config = with_repository(config, os.getenv("OPENSEARCH_REPOSITORY", "snapshots"))

    # Sequential restores wait up to 2 minutes per index
    config = with_restore_polling(config, attempts=120, interval=1.0)

    config = with_adapter_credentials(
        config,
        os.getenv("DBAAS_ADAPTER_USERNAME", "dbaas-aggregator"),
        os.getenv("DBAAS_ADAPTER_PASSWORD", "dbaas-aggregator"),
    )

    return build_config(config)


adapter_config = create_adapter_config()

app = FastAPI(
    title="OpenSearch DBaaS Adapter",
    description="Backup and restore of OpenSearch databases through Curator",
    version="1.0.0",
    lifespan=lambda app: adapter_lifespan(app, adapter_config),
)
register_backup_routes(app, adapter_config)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8080")))
