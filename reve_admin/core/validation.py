# core/validation.py

from __future__ import annotations

import math

from reve_admin.config.settings import MAX_PAYLOAD_BYTES
from reve_admin.core.errors import ValidationError, PayloadTooLargeError
from reve_admin.core.product_normalizer import clean_text, clean_list, compute_original_price
from reve_admin.core.product_schema import ProductDraft


def _is_number(value) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def validate_draft(draft: ProductDraft) -> None:
    """
    提交前检查，按顺序遇到第一个错误就抛 ValidationError。
    """
    if not clean_text(draft.name):
        raise ValidationError("name", "Title is required")
    if not clean_text(draft.description):
        raise ValidationError("description", "Description is required")
    if draft.category is None:
        raise ValidationError("category", "Category is required")

    if not _is_number(draft.price) or float(draft.price) < 0:
        raise ValidationError("price", "Price must be a number of at least 0")
    if not _is_number(draft.discount_percentage):
        raise ValidationError("discount_percentage", "Discount must be a number")
    # 折扣 >= 100 时这里会抛错
    compute_original_price(draft.price, draft.discount_percentage, draft.original_price)

    # 新商品至少一张图；编辑时服务端已有图片就可以不传
    if not clean_list(draft.images):
        if draft.is_new_product or draft.existing_image_count == 0:
            raise ValidationError("images", "At least one picture is required")

    if not _is_number(draft.delivery_charges) or float(draft.delivery_charges) < 0:
        raise ValidationError("delivery_charges", "Delivery charges must be a number of at least 0")


def check_payload_size(body: bytes, limit: int = MAX_PAYLOAD_BYTES) -> None:
    """序列化后的请求体超过上限就拒绝（通常是粘贴了很大的内联 SVG）"""
    if len(body) > limit:
        raise PayloadTooLargeError(len(body), limit)
