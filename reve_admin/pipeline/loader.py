# pipeline/loader.py

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

from reve_admin.config.settings import MAX_WORKERS
from reve_admin.core.errors import ApiError
from reve_admin.core.notifier import Notifier
from reve_admin.core.product_normalizer import draft_from_product
from reve_admin.core.product_schema import ProductDraft
from reve_admin.platforms.api_client import ApiClient


@dataclass
class FormContext:
    """商品编辑页需要的所有下拉数据 + 当前商品"""

    categories: List[Dict[str, Any]] = field(default_factory=list)
    subcategories: List[Dict[str, Any]] = field(default_factory=list)
    filter_types: List[Dict[str, Any]] = field(default_factory=list)
    category_filters: List[Dict[str, Any]] = field(default_factory=list)
    style_library: List[Dict[str, Any]] = field(default_factory=list)
    product: Optional[Dict[str, Any]] = None
    draft: Optional[ProductDraft] = None
    failed: List[str] = field(default_factory=list)


# 字段名 -> (接口路径, 失败提示)
FORM_RESOURCES = {
    "categories": ("/categories/", "Failed to load categories"),
    "subcategories": ("/subcategories/", "Failed to load subcategories"),
    "filter_types": ("/filter-types/", "Failed to load filters"),
    "category_filters": ("/category-filters/", "Failed to load category filters"),
    "style_library": ("/style-library/", "Failed to load style library"),
}


def load_form_context(
    client: ApiClient,
    notifier: Notifier,
    product_id: int | None = None,
) -> FormContext:
    """
    同时发出所有请求，全部返回后再组装。
    某一个失败只提示那一个，其他数据照常使用。
    """
    ctx = FormContext()
    jobs = {name: path for name, (path, _) in FORM_RESOURCES.items()}
    if product_id is not None:
        jobs["product"] = f"/products/{product_id}/"

    with ThreadPoolExecutor(max_workers=MAX_WORKERS) as pool:
        futures = {name: pool.submit(client.get, path) for name, path in jobs.items()}

        for name, future in futures.items():
            try:
                data = future.result()
            except ApiError as e:
                print(f"  [调试] 加载 {name} 失败: {e}")
                ctx.failed.append(name)
                if name == "product":
                    notifier.error("Failed to load product")
                else:
                    notifier.error(FORM_RESOURCES[name][1])
                continue

            if name == "product":
                if not isinstance(data, dict):
                    print(f"  [调试] 商品数据格式不对: {type(data).__name__}")
                    ctx.failed.append(name)
                    notifier.error("Failed to load product")
                    continue
                ctx.product = data
                ctx.draft = draft_from_product(data)
            else:
                setattr(ctx, name, data if isinstance(data, list) else [])

    return ctx
