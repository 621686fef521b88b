# pipeline/storefront.py

from __future__ import annotations

from typing import List, Dict, Any, Optional

from reve_admin.core.errors import ApiError
from reve_admin.core.notifier import Notifier, attempt
from reve_admin.core.product_normalizer import clean_text, optional_int
from reve_admin.platforms.api_client import ApiClient

DEFAULT_CTA_TEXT = "Shop Now"


def _fetch_list(client: ApiClient, notifier: Notifier, path: str, failure: str) -> List[Dict[str, Any]]:
    try:
        data = client.get(path)
    except ApiError as e:
        print(f"  [调试] {failure}: {e}")
        notifier.error(failure)
        return []
    return data if isinstance(data, list) else []


def _save(
    client: ApiClient,
    notifier: Notifier,
    base_path: str,
    item_id: Optional[int],
    payload: Dict[str, Any],
    created: str,
    updated: str,
    failure: str,
) -> bool:
    if item_id is None:
        return attempt(lambda: client.post(base_path, payload), notifier, created, failure)
    return attempt(lambda: client.put(f"{base_path}{item_id}/", payload), notifier, updated, failure)


# --- 首页轮播 ---

def list_hero_slides(client: ApiClient, notifier: Notifier) -> List[Dict[str, Any]]:
    """按 sort_order 升序，同序的最近更新的排前面"""
    slides = _fetch_list(client, notifier, "/hero-slides/", "Failed to load hero slides")
    slides.sort(key=lambda s: s.get("updated_at") or "", reverse=True)
    slides.sort(key=lambda s: optional_int(s.get("sort_order")) or 0)
    return slides


def save_hero_slide(client: ApiClient, notifier: Notifier, slide: Dict[str, Any], slide_id: int | None = None) -> bool:
    title = clean_text(slide.get("title"))
    image = clean_text(slide.get("image"))
    if not title:
        notifier.error("Title is required")
        return False
    if not image:
        notifier.error("Hero image is required")
        return False

    payload = {
        "title": title,
        "subtitle": clean_text(slide.get("subtitle")),
        "category": slide.get("category"),
        "subcategory": slide.get("subcategory"),
        "cta_text": clean_text(slide.get("cta_text")) or DEFAULT_CTA_TEXT,
        "cta_link": clean_text(slide.get("cta_link")),
        "image": image,
        "is_active": slide.get("is_active") is not False,
        "sort_order": optional_int(slide.get("sort_order")) or 0,
    }
    return _save(client, notifier, "/hero-slides/", slide_id, payload,
                 "Hero slide created", "Hero slide updated", "Failed to save hero slide")


def delete_hero_slide(client: ApiClient, notifier: Notifier, slide_id: int) -> bool:
    return attempt(lambda: client.delete(f"/hero-slides/{slide_id}/"), notifier,
                   "Hero slide removed", "Failed to delete hero slide")


def toggle_hero_slide(client: ApiClient, notifier: Notifier, slide: Dict[str, Any]) -> bool:
    active = bool(slide.get("is_active"))
    return attempt(lambda: client.patch(f"/hero-slides/{slide['id']}/", {"is_active": not active}), notifier,
                   "Slide deactivated" if active else "Slide activated", "Unable to change status right now")


# --- 商品合集 ---

def list_collections(client: ApiClient, notifier: Notifier) -> List[Dict[str, Any]]:
    return _fetch_list(client, notifier, "/collections/", "Failed to load collections")


def save_collection(
    client: ApiClient,
    notifier: Notifier,
    collection: Dict[str, Any],
    collection_id: int | None = None,
) -> bool:
    name = clean_text(collection.get("name"))
    image = clean_text(collection.get("image"))
    if not name:
        notifier.error("Collection name is required")
        return False
    if not image:
        notifier.error("Collection image is required")
        return False

    products = [pid for pid in (optional_int(p) for p in collection.get("products") or []) if pid is not None]
    payload = {
        "name": name,
        "description": clean_text(collection.get("description")),
        "image": image,
        "sort_order": optional_int(collection.get("sort_order")) or 0,
        "products": products,
    }
    return _save(client, notifier, "/collections/", collection_id, payload,
                 "Collection created", "Collection updated", "Failed to save collection")


def delete_collection(client: ApiClient, notifier: Notifier, collection_id: int) -> bool:
    return attempt(lambda: client.delete(f"/collections/{collection_id}/"), notifier,
                   "Collection deleted", "Failed to delete collection")


# --- 评价 ---

def set_review_visibility(client: ApiClient, notifier: Notifier, review_id: int, visible: bool) -> bool:
    return attempt(
        lambda: client.post(f"/reviews/{review_id}/set_visibility/", {"is_visible": bool(visible)}),
        notifier,
        "Review unhidden" if visible else "Review hidden",
        "Failed to update visibility",
    )


def delete_review(client: ApiClient, notifier: Notifier, review_id: int) -> bool:
    return attempt(lambda: client.delete(f"/reviews/{review_id}/"), notifier,
                   "Review deleted", "Failed to delete review")
