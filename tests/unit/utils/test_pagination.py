"""
Unit tests for page/limit handling.
"""

from __future__ import annotations

import pytest

from homestay.errors import ValidationError
from homestay.utils.pagination import MAX_LIMIT, page_offset, paginated


@pytest.mark.unit
def test_page_offset() -> None:
    assert page_offset(1, 20) == 0
    assert page_offset(3, 10) == 20


@pytest.mark.unit
@pytest.mark.parametrize(("page", "limit"), [(0, 20), (-1, 20), (1, 0), (1, MAX_LIMIT + 1)])
def test_invalid_paging_is_rejected(page: int, limit: int) -> None:
    with pytest.raises(ValidationError):
        page_offset(page, limit)


@pytest.mark.unit
def test_max_limit_is_accepted() -> None:
    assert page_offset(2, MAX_LIMIT) == MAX_LIMIT


@pytest.mark.unit
def test_paginated_envelope() -> None:
    result = paginated(["a", "b"], page=1, limit=2, total=5)

    assert result == {
        "data": ["a", "b"],
        "pagination": {"page": 1, "limit": 2, "total": 5, "pages": 3},
    }


@pytest.mark.unit
def test_paginated_empty() -> None:
    assert paginated([], page=1, limit=20, total=0)["pagination"]["pages"] == 0
