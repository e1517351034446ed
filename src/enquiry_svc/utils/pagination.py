from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

_logger = logging.getLogger(__name__)


@dataclass
class Page:
    """One page of query results plus the totals needed by list responses."""

    items: List[Any] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)

    def as_pagination(self) -> dict:
        return {"current": self.page, "pages": self.pages, "total": self.total}


def paginate(db: Session, stmt: Select, page: int, limit: int) -> Page:
    """Run ``stmt`` for a single page and count all rows it would match.

    ``stmt`` must already carry its filters and ordering. Raises ValueError for
    non-positive page or limit.
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    if limit < 1:
        raise ValueError("limit must be >= 1")

    try:
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = db.execute(count_stmt).scalar_one()
        items = db.execute(stmt.offset((page - 1) * limit).limit(limit)).scalars().all()
    except Exception as e:
        _logger.error(e, exc_info=True)
        raise

    return Page(items=list(items), total=int(total), page=page, limit=limit)
