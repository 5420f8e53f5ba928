"""
Test collection hooks for the Django apps.

Fixtures live in the repository-root conftest.py and next to each app's
tests. This module only classifies tests so they can be selected with
-m unit / -m integration.
"""

import pytest


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_views.py, test_tasks.py, test_processor.py, etc. → integration
    - test_models.py, test_merge.py, test_stripe_adapter.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_processor.py",
        "test_account_linker.py",
        "test_account_store.py",
        "test_transactions.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_managers.py",
        "test_merge.py",
        "test_stripe_adapter.py",
        "test_exception_handler.py",
    ]

    for item in items:
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration"}:
            continue

        filename = item.path.name

        if filename in integration_patterns:
            item.add_marker(pytest.mark.integration)
        elif filename in unit_patterns:
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)
