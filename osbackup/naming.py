# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Index name generation for restores with regenerated names.
"""

import uuid


class IndexNameGenerator:
    """Generates unique, lowercase index names like dbaas_<uuid4>."""

    def __init__(self, prefix: str = "dbaas", delimiter: str = "_"):
        self.default_prefix = prefix
        self.delimiter = delimiter

    def name_index(self) -> str:
        return self.name_index_prefixed(self.default_prefix)

    def name_index_prefixed(self, prefix: str) -> str:
        if not prefix:
            prefix = self.default_prefix
        return f"{prefix}{self.delimiter}{uuid.uuid4()}"
