from marshmallow import EXCLUDE, Schema, fields, pre_load

DEFAULT_PER_PAGE = 6
MAX_PER_PAGE = 100


def strip_strings(data):
    """Trim surrounding whitespace from every top-level string value."""
    if not isinstance(data, dict):
        return data
    return {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}


def _to_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class PaginationQuerySchema(Schema):
    """
    currentPage / perPage query parameters.
    Non-numeric values fall back to the defaults instead of failing.
    """

    class Meta:
        unknown = EXCLUDE

    current_page = fields.Integer(data_key="currentPage", load_default=1)
    per_page = fields.Integer(data_key="perPage", load_default=DEFAULT_PER_PAGE)
    q = fields.String(load_default=None)

    @pre_load
    def sanitize(self, data, **kwargs):
        data = dict(data)
        if "currentPage" in data:
            data["currentPage"] = max(_to_int(data["currentPage"], 1), 1)
        if "perPage" in data:
            per_page = _to_int(data["perPage"], DEFAULT_PER_PAGE)
            data["perPage"] = max(1, min(per_page, MAX_PER_PAGE))
        if "q" in data:
            data["q"] = (data["q"] or "").strip() or None
        return data
