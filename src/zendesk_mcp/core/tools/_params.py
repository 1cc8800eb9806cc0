from typing import Any, Dict, Optional


def page_params(
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Pagination/sorting query params; None values are dropped by the client."""
    return {
        "page": page,
        "per_page": per_page,
        "sort_by": sort_by,
        "sort_order": sort_order,
        **extra,
    }
