"""
Shared route dependencies
"""

from fastapi import Query

from app.core.config import settings
from app.schemas.common import PageParams


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> PageParams:
    """Translate page/limit query parameters; offset = (page - 1) * limit"""
    return PageParams(page=page, limit=limit)
