# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Human-friendly error message helpers for the OpenSearch backup adapter.

These helpers centralize wording for common configuration errors so that
all modules present consistent, actionable messages.
"""


def explain_missing_curator_address_env() -> str:
    """
    Explain that the Curator address environment variable is missing.
    """

    return (
        "Curator address is not configured. "
        "Set the CURATOR_ADDRESS environment variable or pass curator_address=... to create_config()."
    )


def explain_invalid_curator_address(value: str | None) -> str:
    """
    Explain that the Curator address cannot be used as a base URL.
    """

    return (
        f"Invalid Curator address: {value!r}. "
        "Expected an absolute http:// or https:// URL, e.g. 'http://curator:8080'."
    )


def explain_invalid_api_version_env(value: str | None) -> str:
    """
    Explain that API_VERSION is invalid.
    """

    return (
        f"Invalid API_VERSION value: {value!r}. "
        "Expected one of: 'v1' or 'v2'."
    )


def explain_invalid_poll_attempts_env(value: str | None) -> str:
    """
    Explain that RESTORE_POLL_ATTEMPTS is invalid.
    """

    return (
        f"Invalid RESTORE_POLL_ATTEMPTS value: {value!r}. "
        "It must be a positive integer number of attempts."
    )


def explain_invalid_poll_interval_env(value: str | None) -> str:
    """
    Explain that RESTORE_POLL_INTERVAL is invalid.
    """

    return (
        f"Invalid RESTORE_POLL_INTERVAL value: {value!r}. "
        "It must be a non-negative number of seconds."
    )


def explain_malformed_request_url(url: str, reason: str) -> str:
    """
    Explain that an outbound request URL could not be built.
    """

    return (
        f"Failed to build request URL {url!r}: {reason}. "
        "This indicates a configuration or code defect, check the configured base addresses."
    )
