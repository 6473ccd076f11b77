"""
Unit tests for log event processors.
"""

from __future__ import annotations

import pytest

from homestay.logging_config import SERVICE_NAME, add_service, mask_sensitive


@pytest.mark.unit
def test_mask_sensitive_keeps_last_four_characters() -> None:
    event = mask_sensitive(None, "info", {"event": "w9_uploaded", "tax_id": "123-45-6789"})

    assert event["tax_id"] == "***6789"
    assert event["event"] == "w9_uploaded"


@pytest.mark.unit
def test_mask_sensitive_hides_short_values_entirely() -> None:
    event = mask_sensitive(None, "info", {"password": "hunter2"})

    assert event["password"] == "***"


@pytest.mark.unit
def test_add_service_does_not_override_existing_value() -> None:
    assert add_service(None, "info", {})["service"] == SERVICE_NAME
    assert add_service(None, "info", {"service": "worker"})["service"] == "worker"
