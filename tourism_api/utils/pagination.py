import math


def paginate(query, page: int, limit: int):
    """Apply offset/limit to ``query`` and return ``(items, pagination)``."""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    pages = math.ceil(total / limit) if limit else 0

    return items, {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": pages,
        "has_next_page": page < pages,
        "has_previous_page": page > 1,
    }
