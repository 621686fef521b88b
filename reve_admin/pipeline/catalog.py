# pipeline/catalog.py

from __future__ import annotations

from typing import List, Dict, Any, Optional, Iterable

from reve_admin.core.errors import ApiError
from reve_admin.core.notifier import Notifier
from reve_admin.core.product_normalizer import optional_int
from reve_admin.core.product_schema import ProductDraft
from reve_admin.platforms.api_client import ApiClient


def list_products(client: ApiClient, notifier: Notifier) -> List[Dict[str, Any]]:
    try:
        data = client.get("/products/")
    except ApiError as e:
        print(f"  [调试] 加载商品列表失败: {e}")
        notifier.error("Failed to load products")
        return []
    return data if isinstance(data, list) else []


def delete_product(client: ApiClient, product_id: int, notifier: Notifier) -> bool:
    try:
        client.delete(f"/products/{product_id}/")
    except ApiError as e:
        print(f"  [调试] 删除商品 {product_id} 失败: {e}")
        notifier.error("Delete failed")
        return False
    notifier.success("Product deleted")
    return True


def filter_products_by_category(
    products: List[Dict[str, Any]],
    categories: List[Dict[str, Any]],
    category_id: Optional[int],
) -> List[Dict[str, Any]]:
    """
    按分类筛选商品。category_id 为 None 表示全部。
    商品的 category 可能是 id，也可能只有 category_name，两种都匹配。
    """
    if category_id is None:
        return list(products)

    selected = next((c for c in categories if optional_int(c.get("id")) == category_id), None)
    selected_name = ((selected or {}).get("name") or "").strip().lower()

    result = []
    for product in products:
        if optional_int(product.get("category")) == category_id:
            result.append(product)
        elif selected_name and (product.get("category_name") or "").strip().lower() == selected_name:
            result.append(product)
    return result


def subcategories_for(subcategories: List[Dict[str, Any]], category_id: Optional[int]) -> List[Dict[str, Any]]:
    if category_id is None:
        return list(subcategories)
    return [s for s in subcategories if optional_int(s.get("category")) == category_id]


# --- 筛选项 ---

def filter_types_for_category(
    filter_types: List[Dict[str, Any]],
    category_filters: List[Dict[str, Any]],
    category_id: Optional[int],
    subcategory_id: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    返回分配给该分类（或子分类）的启用中的筛选类型，按 display_order 排序。
    """
    assignments = []
    for cf in category_filters:
        if not cf.get("is_active", True):
            continue
        matches_category = category_id is not None and optional_int(cf.get("category")) == category_id
        matches_sub = subcategory_id is not None and optional_int(cf.get("subcategory")) == subcategory_id
        if matches_category or matches_sub:
            assignments.append(cf)
    assignments.sort(key=lambda cf: cf.get("display_order", 0))

    by_id = {optional_int(ft.get("id")): ft for ft in filter_types if ft.get("is_active", True)}
    result = []
    seen = set()
    for cf in assignments:
        type_id = optional_int(cf.get("filter_type"))
        if type_id in by_id and type_id not in seen:
            seen.add(type_id)
            result.append(by_id[type_id])
    return result


def _option_ids(filter_types: Iterable[Dict[str, Any]]) -> set[int]:
    ids = set()
    for ft in filter_types:
        for option in ft.get("options") or []:
            if option.get("is_active", True):
                option_id = optional_int(option.get("id"))
                if option_id is not None:
                    ids.add(option_id)
    return ids


def scope_filter_options(draft: ProductDraft, filter_types: List[Dict[str, Any]]) -> set[int]:
    """
    去掉不属于当前分类筛选范围的筛选项（比如换了分类之后）。
    返回被去掉的 id。
    """
    allowed = _option_ids(filter_types)
    removed = draft.filter_option_ids - allowed
    draft.filter_option_ids = draft.filter_option_ids & allowed
    return removed
