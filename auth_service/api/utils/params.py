from auth_service.services.errors import BadRequestError


def parse_id(raw: str) -> int:
    """Numeric path ids only; anything else is a 400, not a 404."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise BadRequestError("Invalid url param")
    if value < 1:
        raise BadRequestError("Invalid url param")
    return value


def page_meta(total: int, query: dict) -> dict:
    return {
        "total": total,
        "perPage": query["per_page"],
        "currentPage": query["current_page"],
    }
