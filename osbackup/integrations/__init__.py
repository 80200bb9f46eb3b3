# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Framework Integrations - FastAPI routes for the DBaaS aggregator.
"""

from osbackup.integrations.fastapi import (
    adapter_lifespan,
    get_adapter_state,
    register_backup_routes,
    setup_backup_plugin,
)

__all__ = [
    "adapter_lifespan",
    "get_adapter_state",
    "register_backup_routes",
    "setup_backup_plugin",
]
