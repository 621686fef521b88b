# pipeline/processor.py

from __future__ import annotations

from typing import Dict, Any, Optional

from reve_admin.core.dimensions import adjust_dimensions_for_style
from reve_admin.core.draft_editor import merge_from_product
from reve_admin.core.errors import ApiError, ValidationError
from reve_admin.core.notifier import Notifier
from reve_admin.core.product_normalizer import draft_from_product, normalize_draft
from reve_admin.core.product_schema import ProductDraft, DimensionTable
from reve_admin.core.validation import validate_draft, check_payload_size
from reve_admin.platforms.api_client import ApiClient, encode_json


class ProductComposer:
    """
    商品编辑流程：
    - load: 拉取商品并转换为草稿
    - import_from_product: 从另一个商品导入某一项
    - submit: 校验 -> 规范化 -> 检查大小 -> 创建 / 更新
    所有失败都通过 notifier 提示，草稿保持原样。
    """

    def __init__(self, client: ApiClient, notifier: Notifier):
        self.client = client
        self.notifier = notifier

    def load(self, product_id: int) -> Optional[ProductDraft]:
        try:
            product = self.client.get(f"/products/{product_id}/")
        except ApiError as e:
            print(f"  [调试] 加载商品 {product_id} 失败: {e}")
            self.notifier.error("Failed to load product")
            return None
        if not isinstance(product, dict):
            print(f"  [调试] 商品 {product_id} 返回的数据格式不对: {type(product).__name__}")
            self.notifier.error("Failed to load product")
            return None
        return draft_from_product(product)

    def import_from_product(self, draft: ProductDraft, source_product_id: int, axis: str) -> ProductDraft:
        """
        返回合并后的新草稿；请求失败时提示错误并返回原草稿。
        """
        try:
            source = self.client.get(f"/products/{source_product_id}/")
        except ApiError as e:
            print(f"  [调试] 导入商品 {source_product_id} 失败: {e}")
            self.notifier.error("Failed to import from product")
            return draft
        if not isinstance(source, dict):
            print(f"  [调试] 商品 {source_product_id} 返回的数据格式不对: {type(source).__name__}")
            self.notifier.error("Failed to import from product")
            return draft

        merged = merge_from_product(draft, source, axis)
        self.notifier.success(f"Imported {axis} from product {source_product_id}")
        return merged

    def build_payload(self, draft: ProductDraft) -> tuple[Dict[str, Any], bytes]:
        """校验并生成 (payload, 请求体字节)。不合法时抛 ValidationError。"""
        validate_draft(draft)
        payload = normalize_draft(draft)
        body = encode_json(payload)
        check_payload_size(body)
        return payload, body

    def submit(self, draft: ProductDraft) -> Optional[Dict[str, Any]]:
        """
        新商品 POST /products/，已有商品 PUT /products/{id}/。
        成功返回后端的商品数据，失败返回 None。
        """
        try:
            _, body = self.build_payload(draft)
        except ValidationError as e:
            self.notifier.error(e.message)
            return None

        try:
            if draft.is_new_product:
                saved = self.client.post("/products/", body=body)
            else:
                saved = self.client.put(f"/products/{draft.id}/", body=body)
        except ApiError as e:
            print(f"  [调试] 保存失败: {e} {e.body[:200]}")
            self.notifier.error("Failed to save product")
            return None

        self.notifier.success("Product created successfully" if draft.is_new_product else "Product updated successfully")
        return saved

    def display_dimensions(self, draft: ProductDraft) -> DimensionTable:
        """前台展示用的尺寸表（wingback 款宽度已调整）"""
        return adjust_dimensions_for_style(draft.dimensions, draft.styles)
