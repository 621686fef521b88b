# pipeline/filters.py

from __future__ import annotations

from typing import Dict, Any

from reve_admin.core.notifier import Notifier, attempt
from reve_admin.core.product_normalizer import clean_text, optional_int
from reve_admin.platforms.api_client import ApiClient

DISPLAY_TYPES = ("checkbox", "radio", "color", "range")


def slugify(name: str) -> str:
    """"Bed Size" -> "bed-size" """
    return "-".join(clean_text(name).lower().split())


# --- 筛选类型 ---

def save_filter_type(
    client: ApiClient,
    notifier: Notifier,
    name: str,
    slug: str = "",
    display_type: str = "checkbox",
    is_expanded_by_default: bool = True,
    type_id: int | None = None,
) -> bool:
    """type_id 为空时新建（POST），否则更新（PUT）"""
    name = clean_text(name)
    slug = clean_text(slug) or slugify(name)
    if not name or not slug:
        notifier.error("Name and slug are required")
        return False
    if display_type not in DISPLAY_TYPES:
        raise ValueError(f"Unknown display type: {display_type}")

    payload = {
        "name": name,
        "slug": slug,
        "display_type": display_type,
        "is_expanded_by_default": bool(is_expanded_by_default),
    }
    if type_id is None:
        return attempt(lambda: client.post("/filter-types/", payload), notifier,
                       "Filter type created successfully", "Failed to save filter type")
    return attempt(lambda: client.put(f"/filter-types/{type_id}/", payload), notifier,
                   "Filter type updated successfully", "Failed to save filter type")


def delete_filter_type(client: ApiClient, notifier: Notifier, type_id: int) -> bool:
    return attempt(lambda: client.delete(f"/filter-types/{type_id}/"), notifier,
                   "Filter type deleted successfully", "Failed to delete filter type")


# --- 筛选项 ---

def add_filter_option(
    client: ApiClient,
    notifier: Notifier,
    type_id: int,
    name: str,
    slug: str = "",
    color_code: str = "",
) -> bool:
    name = clean_text(name)
    slug = clean_text(slug) or slugify(name)
    if not name or not slug:
        notifier.error("Option name and slug are required")
        return False

    payload = {"name": name, "slug": slug, "color_code": clean_text(color_code) or None}
    return attempt(lambda: client.post(f"/filter-types/{type_id}/options/", payload), notifier,
                   "Filter option added successfully", "Failed to add filter option")


def delete_filter_option(client: ApiClient, notifier: Notifier, type_id: int, option_id: int) -> bool:
    return attempt(lambda: client.delete(f"/filter-types/{type_id}/options/{option_id}/"), notifier,
                   "Filter option deleted successfully", "Failed to delete filter option")


# --- 分类 <-> 筛选类型 ---

def assign_category_filter(
    client: ApiClient,
    notifier: Notifier,
    filter_type: int | None,
    category: int | None = None,
    subcategory: int | None = None,
    display_order: Any = 0,
    is_active: bool = True,
) -> bool:
    """
    分配到分类或子分类。两个都给时只用子分类（category 传 null），避免歧义。
    """
    if filter_type is None:
        notifier.error("Select a filter type to assign")
        return False
    if category is None and subcategory is None:
        notifier.error("Pick a category or subcategory")
        return False

    payload = {
        "category": None if subcategory is not None else category,
        "subcategory": subcategory,
        "filter_type": filter_type,
        "display_order": optional_int(display_order) or 0,
        "is_active": bool(is_active),
    }
    return attempt(lambda: client.post("/category-filters/", payload), notifier,
                   "Filter assigned successfully", "Failed to assign filter")


def delete_category_filter(client: ApiClient, notifier: Notifier, assignment_id: int) -> bool:
    return attempt(lambda: client.delete(f"/category-filters/{assignment_id}/"), notifier,
                   "Assignment removed", "Failed to remove assignment")


def update_category_filter(client: ApiClient, notifier: Notifier, assignment_id: int, updates: Dict[str, Any]) -> bool:
    """局部更新（display_order / is_active），成功不提示"""
    return attempt(lambda: client.patch(f"/category-filters/{assignment_id}/", updates), notifier,
                   None, "Update failed")


def toggle_category_filter(client: ApiClient, notifier: Notifier, assignment: Dict[str, Any]) -> bool:
    return update_category_filter(
        client, notifier, assignment["id"], {"is_active": not assignment.get("is_active", True)}
    )
