"""
Integration tests for listings, search and the become-host flow.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import pytest
from sqlalchemy.engine import Engine

from conftest import NOW
from homestay.errors import ForbiddenError, NotFoundError, ValidationError
from homestay.schemas.bookings import BookingCreatePayload
from homestay.schemas.listings import ListingCreatePayload, ListingUpdatePayload
from homestay.schemas.users import BecomeHostPayload
from homestay.services.bookings import create_booking
from homestay.services.listings import (
    create_listing,
    delete_listing,
    get_listing_details,
    list_host_listings,
    list_listings,
    modify_listing,
)
from homestay.services.search import search_properties
from homestay.services.users import become_host


def new_listing(**overrides: object) -> ListingCreatePayload:
    values: dict[str, object] = {
        "title": "Garden studio",
        "property_type": "studio",
        "city": "Giza",
        "monthly_price": 80,
        "max_guests": 2,
        **overrides,
    }
    return ListingCreatePayload(**values)


@pytest.mark.integration
def test_new_listing_starts_as_inactive_draft(engine: Engine, host_id: str) -> None:
    listing = create_listing(engine, host_id, new_listing())

    assert listing["status"] == "draft"
    assert listing["is_active"] is False
    assert listing["host"]["id"] == host_id


@pytest.mark.integration
def test_only_hosts_create_listings(engine: Engine, guest_id: str) -> None:
    with pytest.raises(ForbiddenError, match="Only hosts"):
        create_listing(engine, guest_id, new_listing())


@pytest.mark.integration
def test_publishing_makes_listing_bookable(engine: Engine, host_id: str) -> None:
    listing = create_listing(engine, host_id, new_listing())

    published = modify_listing(
        engine, listing["id"], host_id, ListingUpdatePayload(status="active")
    )

    assert published["status"] == "active"
    assert published["is_active"] is True
    assert list_listings(engine)["pagination"]["total"] == 1


@pytest.mark.integration
def test_update_rejects_inverted_night_bounds(
    engine: Engine, host_id: str, listing_id: str
) -> None:
    with pytest.raises(ValidationError):
        modify_listing(engine, listing_id, host_id, ListingUpdatePayload(min_nights=60))


@pytest.mark.integration
def test_other_hosts_cannot_modify(
    engine: Engine, make_user: Callable[..., str], listing_id: str
) -> None:
    intruder = make_user(is_host=True, role="host")

    with pytest.raises(ForbiddenError, match="only update your own"):
        modify_listing(engine, listing_id, intruder, ListingUpdatePayload(title="Mine now"))
    with pytest.raises(ForbiddenError, match="only delete your own"):
        delete_listing(engine, listing_id, intruder)


@pytest.mark.integration
def test_views_are_counted_for_visitors_only(
    engine: Engine, host_id: str, guest_id: str, listing_id: str
) -> None:
    assert get_listing_details(engine, listing_id, viewer_id=guest_id)["view_count"] == 1
    assert get_listing_details(engine, listing_id)["view_count"] == 2
    assert get_listing_details(engine, listing_id, viewer_id=host_id)["view_count"] == 2


@pytest.mark.integration
def test_drafts_are_hidden_from_visitors(
    engine: Engine, make_listing: Callable[..., str], host_id: str, guest_id: str
) -> None:
    draft = make_listing(host_id, active=False)

    assert get_listing_details(engine, draft, viewer_id=host_id)["status"] == "draft"
    with pytest.raises(NotFoundError):
        get_listing_details(engine, draft, viewer_id=guest_id)


@pytest.mark.integration
def test_soft_deleted_listing_disappears(
    engine: Engine, host_id: str, guest_id: str, listing_id: str
) -> None:
    delete_listing(engine, listing_id, host_id)

    assert list_listings(engine)["pagination"]["total"] == 0
    assert list_host_listings(engine, host_id)["pagination"]["total"] == 0
    assert list_host_listings(engine, host_id, status="deleted")["pagination"]["total"] == 1
    with pytest.raises(NotFoundError):
        get_listing_details(engine, listing_id, viewer_id=guest_id)


@pytest.mark.integration
def test_list_listings_filters_and_sorts(
    engine: Engine, make_listing: Callable[..., str], host_id: str
) -> None:
    cheap = make_listing(host_id, title="Budget room", monthly_price=40, property_type="room")
    pricey = make_listing(host_id, title="Sea villa", monthly_price=900, property_type="villa")

    by_price = list_listings(engine, sort_by="price", sort_order="asc")
    assert [row["id"] for row in by_price["data"]] == [cheap, pricey]

    villas = list_listings(engine, property_type="villa")
    assert [row["id"] for row in villas["data"]] == [pricey]

    assert list_listings(engine, search="budget")["pagination"]["total"] == 1
    assert list_listings(engine, max_price=100)["pagination"]["total"] == 1


@pytest.mark.integration
def test_search_excludes_listings_booked_over_requested_range(
    engine: Engine, make_listing: Callable[..., str], host_id: str, guest_id: str
) -> None:
    booked = make_listing(host_id, title="Booked flat")
    free = make_listing(host_id, title="Free flat")
    create_booking(
        engine,
        guest_id,
        BookingCreatePayload(listing_id=booked, check_in="2025-03-10", check_out="2025-03-15"),
        now=NOW,
    )

    overlapping = search_properties(
        engine,
        check_in=datetime(2025, 3, 12, tzinfo=timezone.utc),
        check_out=datetime(2025, 3, 20, tzinfo=timezone.utc),
    )
    after = search_properties(
        engine,
        check_in=datetime(2025, 3, 15, tzinfo=timezone.utc),
        check_out=datetime(2025, 3, 20, tzinfo=timezone.utc),
    )

    assert [row["id"] for row in overlapping["data"]] == [free]
    assert after["pagination"]["total"] == 2


@pytest.mark.integration
def test_search_location_and_capacity_filters(
    engine: Engine, make_listing: Callable[..., str], host_id: str
) -> None:
    make_listing(host_id, city="Alexandria", district="Stanley", max_guests=6, bedrooms=3)
    make_listing(host_id, city="Cairo", max_guests=2)

    assert search_properties(engine, city="alex")["pagination"]["total"] == 1
    assert search_properties(engine, district="stan")["pagination"]["total"] == 1
    assert search_properties(engine, min_guests=5)["pagination"]["total"] == 1
    assert search_properties(engine, bedrooms=2)["pagination"]["total"] == 1
    assert search_properties(engine, q="x")["pagination"]["total"] == 2


@pytest.mark.integration
def test_search_rejects_inverted_dates(engine: Engine) -> None:
    with pytest.raises(ValidationError):
        search_properties(
            engine,
            check_in=datetime(2025, 3, 20, tzinfo=timezone.utc),
            check_out=datetime(2025, 3, 10, tzinfo=timezone.utc),
        )


@pytest.mark.integration
def test_guest_becomes_host(engine: Engine, guest_id: str) -> None:
    user = become_host(engine, guest_id, BecomeHostPayload(bio="Superhost in the making"))

    assert user["is_host"] is True
    assert user["role"] == "host"
    assert user["host_since"] is not None
    assert user["bio"] == "Superhost in the making"

    with pytest.raises(ValidationError, match="already a host"):
        become_host(engine, guest_id, BecomeHostPayload())


@pytest.mark.integration
def test_become_host_requires_terms(engine: Engine, guest_id: str) -> None:
    with pytest.raises(ValidationError, match="terms"):
        become_host(engine, guest_id, BecomeHostPayload(agree_to_terms=False))
