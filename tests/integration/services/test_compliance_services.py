"""
Integration tests for identity verification and host tax records.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy.engine import Engine

from conftest import NOW
from homestay.errors import NotFoundError, ValidationError
from homestay.schemas.bookings import BookingCreatePayload
from homestay.schemas.kyc import KycDocumentPayload, KycStartPayload, KycStatusPayload
from homestay.schemas.tax import TaxInfoPayload, TaxStatusPayload
from homestay.services.bookings import create_booking, transition_booking
from homestay.services.kyc import (
    get_kyc_status,
    get_submissions,
    remove_kyc,
    set_kyc_status,
    start_kyc,
    upload_document,
)
from homestay.services.tax_forms import (
    fetch_tax_info,
    set_tax_status,
    submit_tax_info,
    tax_summary,
    upload_w9,
)
from homestay.services.users import get_profile

PASSPORT = KycDocumentPayload(
    document_type="passport",
    document_url="https://files.example.com/passport.jpg",
    file_name="passport.jpg",
    file_size=2048,
    mime_type="image/jpeg",
)


@pytest.mark.integration
def test_kyc_status_before_start(engine: Engine, guest_id: str) -> None:
    status = get_kyc_status(engine, guest_id)

    assert status["status"] == "not_started"
    assert status["status_details"]["step"] == 0
    assert status["kyc"] is None


@pytest.mark.integration
def test_documents_require_started_verification(engine: Engine, guest_id: str) -> None:
    with pytest.raises(ValidationError, match="not started"):
        upload_document(engine, guest_id, PASSPORT)


@pytest.mark.integration
def test_kyc_flow_to_approval(engine: Engine, guest_id: str) -> None:
    started = start_kyc(engine, guest_id, KycStartPayload(full_name="Omar Test"))
    assert started["status"] == "pending"

    upload_document(engine, guest_id, PASSPORT)
    status = get_kyc_status(engine, guest_id)
    assert status["status"] == "document_uploaded"
    assert [d["document_type"] for d in status["kyc"]["documents"]] == ["passport"]

    queue = get_submissions(engine, status="document_uploaded")
    assert queue["data"][0]["user"]["id"] == guest_id

    set_kyc_status(engine, guest_id, KycStatusPayload(status="approved"))
    profile = get_profile(engine, guest_id)
    assert profile["is_verified"] is True
    assert profile["verified_at"] is not None


@pytest.mark.integration
def test_rejection_keeps_user_unverified(engine: Engine, guest_id: str) -> None:
    start_kyc(engine, guest_id, KycStartPayload(full_name="Omar Test"))

    set_kyc_status(
        engine, guest_id, KycStatusPayload(status="rejected", rejection_reason="Blurry photo")
    )

    assert get_kyc_status(engine, guest_id)["kyc"]["rejection_reason"] == "Blurry photo"
    assert get_profile(engine, guest_id)["is_verified"] is False


@pytest.mark.integration
def test_remove_kyc(engine: Engine, guest_id: str) -> None:
    start_kyc(engine, guest_id, KycStartPayload(full_name="Omar Test"))
    upload_document(engine, guest_id, PASSPORT)

    remove_kyc(engine, guest_id)

    assert get_kyc_status(engine, guest_id)["status"] == "not_started"
    with pytest.raises(NotFoundError):
        remove_kyc(engine, guest_id)


@pytest.mark.integration
def test_only_hosts_submit_tax_info(engine: Engine, guest_id: str) -> None:
    with pytest.raises(ValidationError, match="Only hosts"):
        submit_tax_info(engine, guest_id, TaxInfoPayload(tax_id_number="123-45-6789"))


@pytest.mark.integration
def test_tax_info_upsert_and_review(engine: Engine, host_id: str) -> None:
    assert fetch_tax_info(engine, host_id) is None

    submit_tax_info(engine, host_id, TaxInfoPayload(tax_id_number="123-45-6789"))
    upload_w9(engine, host_id, "https://files.example.com/w9.pdf")
    set_tax_status(engine, host_id, TaxStatusPayload(status="approved"))

    tax_info = fetch_tax_info(engine, host_id)
    assert tax_info["tax_id_number"] == "123-45-6789"
    assert tax_info["w9_form_url"] == "https://files.example.com/w9.pdf"
    assert tax_info["status"] == "approved"


@pytest.mark.integration
def test_tax_summary_counts_completed_stays_in_year(
    engine: Engine, listing_id: str, host_id: str, guest_id: str
) -> None:
    completed = create_booking(
        engine,
        guest_id,
        BookingCreatePayload(listing_id=listing_id, check_in="2025-03-01", check_out="2025-03-06"),
        now=NOW,
    )
    for status in ("CONFIRMED", "IN_PROGRESS", "COMPLETED"):
        transition_booking(engine, completed["id"], host_id, status, now=NOW)
    create_booking(
        engine,
        guest_id,
        BookingCreatePayload(listing_id=listing_id, check_in="2025-04-01", check_out="2025-04-03"),
        now=NOW,
    )

    summary = tax_summary(engine, host_id, year=2025)

    assert summary["total_bookings"] == 1
    assert summary["total_gross_income"] == pytest.approx(645)
    assert summary["total_service_fees"] == pytest.approx(70)
    assert summary["total_taxes"] == pytest.approx(25)
    assert summary["net_income"] == pytest.approx(550)
    assert summary["bookings"][0]["check_out"] == datetime(2025, 3, 6, tzinfo=timezone.utc)

    assert tax_summary(engine, host_id, year=2024)["total_bookings"] == 0
