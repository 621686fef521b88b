# core/draft_editor.py

from __future__ import annotations

import copy
from typing import Any, Callable, Dict

from reve_admin.core.product_normalizer import (
    clean_text,
    draft_from_product,
    normalize_size,
    normalize_color,
    normalize_fabric,
    normalize_style_groups,
    normalize_mattress,
    normalize_faq,
    normalize_custom_info,
    normalize_dimensions,
)
from reve_admin.core.product_schema import (
    ProductDraft,
    SizeEntry,
    ColorEntry,
    FabricEntry,
    StyleGroup,
    MattressOption,
    DimensionRow,
    FaqEntry,
    CustomInfoSection,
)


def _style_entry(value: Any) -> StyleGroup:
    groups = normalize_style_groups([value])
    return groups[0] if groups else StyleGroup()


def _dimension_row(value: Any) -> DimensionRow:
    if isinstance(value, DimensionRow):
        return copy.deepcopy(value)
    table = normalize_dimensions([value])
    return table.rows[0] if table.rows else DimensionRow()


# 每个可编辑列表：(草稿上的属性名, 空条目工厂, 把传入值转成条目的函数)
AXES: Dict[str, tuple[str, Callable[[], Any], Callable[[Any], Any]]] = {
    "sizes": ("sizes", SizeEntry, normalize_size),
    "colors": ("colors", ColorEntry, normalize_color),
    "fabrics": ("fabrics", FabricEntry, normalize_fabric),
    "styles": ("styles", StyleGroup, _style_entry),
    "mattresses": ("mattresses", MattressOption, normalize_mattress),
    "faqs": ("faqs", FaqEntry, normalize_faq),
    "dimension_rows": ("dimensions.rows", DimensionRow, _dimension_row),
    "custom_info": ("custom_info", CustomInfoSection, normalize_custom_info),
    "images": ("images", str, clean_text),
    "videos": ("videos", str, clean_text),
}

IMPORT_AXES = (
    "styles", "sizes", "colors", "fabrics", "mattresses", "faqs",
    "descriptions", "delivery", "returns", "dimensions",
)


def _collection(draft: ProductDraft, axis: str) -> list:
    if axis not in AXES:
        raise ValueError(f"Unknown variant axis: {axis}")
    target = draft
    *parents, attr = AXES[axis][0].split(".")
    for name in parents:
        target = getattr(target, name)
    return getattr(target, attr)


def add_variant_entry(draft: ProductDraft, axis: str, value: Any = None) -> Any:
    """
    往某个列表末尾追加一条（value 为 None 时追加空条目，表单上就是多一行）。
    不做去重。返回新追加的条目。
    """
    items = _collection(draft, axis)
    _, empty, convert = AXES[axis]
    entry = empty() if value is None else convert(value)
    items.append(entry)
    return entry


def remove_variant_entry(draft: ProductDraft, axis: str, index: int) -> Any:
    """按位置删除，只改草稿。位置不存在时抛 IndexError。"""
    items = _collection(draft, axis)
    if index < 0 or index >= len(items):
        raise IndexError(f"{axis} has no entry at position {index}")
    return items.pop(index)


def add_dimension_column(draft: ProductDraft, name: str) -> None:
    name = clean_text(name)
    if name and name not in draft.dimensions.columns:
        draft.dimensions.columns.append(name)


def _faq_key(faq: FaqEntry) -> tuple[str, str]:
    return clean_text(faq.question).lower(), clean_text(faq.answer).lower()


def merge_faqs(existing: list[FaqEntry], incoming: list[FaqEntry]) -> list[FaqEntry]:
    """问题+答案（不区分大小写）都相同的视为重复，只追加新的"""
    seen = {_faq_key(f) for f in existing}
    merged = list(existing)
    for faq in incoming:
        key = _faq_key(faq)
        if key in seen:
            continue
        seen.add(key)
        merged.append(faq)
    return merged


def merge_from_product(draft: ProductDraft, source: Dict[str, Any], axis: str) -> ProductDraft:
    """
    把另一个商品某一项的数据合并进当前草稿，返回新的草稿（不修改传入的草稿）。
    - 列表类：追加到末尾（FAQ 会去重）
    - 床垫：记下来源商品 id
    - 文字类（描述 / 配送 / 退换）：来源不为空就覆盖
    - 尺寸表：整张表复制
    """
    if axis not in IMPORT_AXES:
        raise ValueError(f"Cannot import axis: {axis}")

    src = draft_from_product(source)
    merged = copy.deepcopy(draft)

    if axis in ("styles", "sizes", "colors", "fabrics"):
        getattr(merged, axis).extend(getattr(src, axis))
    elif axis == "mattresses":
        for mattress in src.mattresses:
            if mattress.source_product is None:
                mattress.source_product = src.id
            merged.mattresses.append(mattress)
    elif axis == "faqs":
        merged.faqs = merge_faqs(merged.faqs, src.faqs)
    elif axis == "descriptions":
        if src.description:
            merged.description = src.description
        if src.short_description:
            merged.short_description = src.short_description
        if src.features:
            merged.features = list(src.features)
    elif axis == "delivery":
        if src.delivery_info:
            merged.delivery_info = src.delivery_info
            merged.delivery_title = src.delivery_title
    elif axis == "returns":
        if src.returns_guarantee:
            merged.returns_guarantee = src.returns_guarantee
            merged.returns_title = src.returns_title
    elif axis == "dimensions":
        if src.dimensions.rows:
            merged.dimensions = src.dimensions

    return merged
