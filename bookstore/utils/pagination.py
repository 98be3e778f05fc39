from bookstore.core.config import settings


def page_to_limit_offset(page: int, limit: int, max_limit: int | None = None) -> tuple[int, int]:
    """Clamp 1-based `page` and `limit` into a LIMIT/OFFSET pair."""
    max_limit = max_limit or settings.MAX_PAGE_SIZE
    limit = max(1, min(limit, max_limit))
    page = max(1, page)
    return limit, (page - 1) * limit
