from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.models import SortOrder
from zendesk_mcp.core.search import execute_search
from zendesk_mcp.core.tools._params import page_params


def _items(payload: Any, key: str) -> List[Dict[str, Any]]:
    items = payload.get(key) if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return []
    return [i for i in items if isinstance(i, dict)]


# --- Articles --- #


async def list_articles(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[SortOrder] = None,
) -> Any:
    """List Help Center articles."""
    return await client.list_articles(
        page_params(page, per_page, sort_by, sort_order)
    )


async def get_article(client: ZendeskClient, id: int) -> Any:
    """Get a specific Help Center article by ID."""
    return await client.get_article(id)


async def search_articles(
    client: ZendeskClient,
    query: str,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Dict[str, Any]:
    """Search knowledge base articles and help content."""
    return await execute_search(
        lambda: client.search_articles(page_params(page, per_page, query=query)),
        "article",
    )


async def list_articles_by_section(
    client: ZendeskClient,
    section_id: int,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[SortOrder] = None,
) -> Any:
    """List articles within a specific Help Center section."""
    return await client.list_articles_by_section(
        section_id, page_params(page, per_page, sort_by, sort_order)
    )


# --- Categories --- #


async def list_categories(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[SortOrder] = None,
) -> Any:
    """List Help Center categories."""
    return await client.list_categories(
        page_params(page, per_page, sort_by, sort_order)
    )


async def get_category(client: ZendeskClient, id: int) -> Any:
    """Get a specific Help Center category by ID."""
    return await client.get_category(id)


async def search_categories(
    client: ZendeskClient,
    query: str,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Dict[str, Any]:
    """Search Help Center categories by name or description."""
    return await execute_search(
        lambda: client.search(f"type:topic {query}", page_params(page, per_page)),
        "category",
    )


# --- Sections --- #


async def list_sections(
    client: ZendeskClient,
    category_id: Optional[int] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[SortOrder] = None,
) -> Any:
    """List Help Center sections, optionally limited to one category."""
    params = page_params(page, per_page, sort_by, sort_order)
    if category_id is not None:
        return await client.list_sections_by_category(category_id, params)
    return await client.list_sections(params)


async def get_section(client: ZendeskClient, id: int) -> Any:
    """Get a specific Help Center section by ID."""
    return await client.get_section(id)


async def search_sections(
    client: ZendeskClient,
    query: str,
    category_id: Optional[int] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Dict[str, Any]:
    """Search Help Center sections to find specific content areas."""
    search_query = f"type:topic {query}"
    if category_id:
        search_query += f" category:{category_id}"
    return await execute_search(
        lambda: client.search(search_query, page_params(page, per_page)),
        "section",
    )


# --- Hierarchy --- #


async def _section_with_articles(
    client: ZendeskClient, section: Dict[str, Any]
) -> Dict[str, Any]:
    articles = await client.list_articles_by_section(section.get("id"))
    return {**section, "articles": _items(articles, "articles")}


async def _category_tree(
    client: ZendeskClient, category: Dict[str, Any], include_articles: bool
) -> Dict[str, Any]:
    sections = _items(
        await client.list_sections_by_category(category.get("id")), "sections"
    )
    if include_articles:
        sections = list(
            await asyncio.gather(
                *(_section_with_articles(client, s) for s in sections)
            )
        )
    return {**category, "sections": sections}


async def get_help_center_hierarchy(
    client: ZendeskClient,
    include_articles: bool = False,
    category_id: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Get the complete Help Center content hierarchy
    (categories > sections > articles).

    Sections are fetched concurrently per category; articles only when
    ``include_articles`` is set, since that costs one request per section.
    """
    if category_id is not None:
        payload = await client.get_category(category_id)
        category = payload.get("category") if isinstance(payload, dict) else None
        categories = [category] if isinstance(category, dict) else []
    else:
        categories = _items(await client.list_categories(), "categories")

    hierarchy = list(
        await asyncio.gather(
            *(_category_tree(client, c, include_articles) for c in categories)
        )
    )

    result: Dict[str, Any] = {
        "hierarchy": hierarchy,
        "total_categories": len(hierarchy),
        "total_sections": sum(len(c["sections"]) for c in hierarchy),
    }
    if include_articles:
        result["total_articles"] = sum(
            len(s.get("articles", [])) for c in hierarchy for s in c["sections"]
        )
    return result
