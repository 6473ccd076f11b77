"""Page/limit handling shared by every paginated read."""

import math
from typing import Any

from homestay.errors import ValidationError

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def page_offset(page: int, limit: int) -> int:
    """
    Validate paging arguments and turn them into a row offset.

    Args:
        page: 1-based page number
        limit: Page size, 1..MAX_LIMIT

    Returns:
        int: Rows to skip

    Raises:
        ValidationError: If page < 1 or limit is outside [1, MAX_LIMIT]
    """
    if page < 1:
        raise ValidationError("page must be at least 1")
    if limit < 1 or limit > MAX_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_LIMIT}")
    return (page - 1) * limit


def paginated(data: list[Any], page: int, limit: int, total: int) -> dict[str, Any]:
    """
    Wrap a page of rows in the standard response envelope.

    Example:
        >>> paginated([], page=3, limit=20, total=41)["pagination"]["pages"]
        3
    """
    return {
        "data": data,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }
