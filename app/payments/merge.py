"""
Merging of provider resource snapshots into the stored account blob.

PaymentAccount.account holds the last known Stripe resource plus fields
that only exist locally (e.g. the cardholder display name). A provider
refresh must never drop those local fields, so the blob is merged rather
than replaced.

Priority, highest first:
    local_overrides > provider_update > existing

Usage:
    from payments.merge import merge_external_resource

    account.account = merge_external_resource(
        account.account,
        {"card": source.raw_response},
        {"card_holder_name": "Jane Doe"},
    )
"""

from __future__ import annotations

import copy
from typing import Any


def _deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_external_resource(
    existing: dict[str, Any] | None,
    provider_update: dict[str, Any] | None = None,
    local_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Return a new blob combining the three inputs. Inputs are not mutated.

    Nested dicts are merged key by key. None values in local_overrides
    are ignored so an omitted override never erases a stored field.
    """
    merged = _deep_merge(existing or {}, provider_update or {})
    overrides = {
        key: value for key, value in (local_overrides or {}).items() if value is not None
    }
    return _deep_merge(merged, overrides)
