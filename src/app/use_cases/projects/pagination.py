import math
from typing import Optional

from libs.result import Error

MAX_PAGE_SIZE = 100


def validate_page(page: int, limit: int) -> Optional[Error]:
    if page < 1 or limit < 1 or limit > MAX_PAGE_SIZE:
        return Error(
            "INVALID_PAGINATION",
            f"page must be at least 1 and limit between 1 and {MAX_PAGE_SIZE}",
        )
    return None


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit)
