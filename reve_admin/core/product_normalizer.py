# core/product_normalizer.py

from __future__ import annotations

import math
import re
from typing import Dict, Any, List, Optional

from reve_admin.core.errors import ValidationError
from reve_admin.core.product_schema import (
    ProductDraft,
    SizeEntry,
    ColorEntry,
    FabricColour,
    FabricEntry,
    StyleOption,
    StyleGroup,
    MattressOption,
    DimensionRow,
    DimensionTable,
    FaqEntry,
    CustomInfoSection,
)


HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

# 旧版尺寸表里一行除了这些键，其余都当作尺寸列
ROW_LABEL_KEYS = ("measurement", "label", "name")
ROW_IGNORED_KEYS = ROW_LABEL_KEYS + ("id", "values", "order", "sort_order")


# --- 基础清洗 ---

def clean_text(value: Any) -> str:
    """None -> ""，其他转成字符串并去掉首尾空白"""
    if value is None:
        return ""
    return str(value).strip()


def clean_list(values: Any) -> List[str]:
    """字符串列表：去空白、去掉空项（保留顺序）"""
    if not values:
        return []
    if isinstance(values, str):
        values = values.split(",")
    return [clean_text(v) for v in values if clean_text(v)]


def as_list(raw: Any) -> list:
    """
    需要遍历的字段统一成列表。
    旧数据里单个值（字符串 / dict）直接放在字段上，不能按字符遍历。
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return [raw]


def to_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str) and not value.strip():
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def optional_float(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, dict):
        value = value.get("id")
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_features(raw: Any) -> List[str]:
    """
    卖点列表：
    - 新格式是字符串数组
    - 旧格式是一整段文字，每行一个，前面可能带 "•" 或 "-"
    """
    if not raw:
        return []
    if isinstance(raw, str):
        lines = raw.splitlines()
    else:
        lines = [clean_text(x) for x in raw]
    result = []
    for line in lines:
        line = line.strip().lstrip("•-*").strip()
        if line:
            result.append(line)
    return result


# --- 兼容各种历史数据格式 ---

def _normalize_sizes_list(raw: Any) -> List[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [clean_text(s) for s in raw if clean_text(s)]


def normalize_style_option(raw: Any) -> StyleOption:
    if isinstance(raw, StyleOption):
        return StyleOption(
            label=clean_text(raw.label),
            description=clean_text(raw.description),
            icon=clean_text(raw.icon),
            price_delta=to_float(raw.price_delta),
            sizes=_normalize_sizes_list(raw.sizes),
        )
    if isinstance(raw, dict):
        label = raw.get("label") or raw.get("name") or raw.get("value")
        return StyleOption(
            label=clean_text(label),
            description=clean_text(raw.get("description")),
            icon=clean_text(raw.get("icon") or raw.get("icon_url")),
            price_delta=to_float(raw.get("price_delta", raw.get("price"))),
            sizes=_normalize_sizes_list(raw.get("sizes")),
        )
    # 旧数据：直接是字符串
    return StyleOption(label=clean_text(raw))


def normalize_style_options(raw: Any) -> List[StyleOption]:
    """
    款式选项在后端有好几种历史格式：
      - ["Plain", "Wingback"]
      - [{"label": "Plain", "description": "..."}]
      - [{"name": "Plain"}]
      - "Plain, Wingback"
    全部统一成 StyleOption 列表。重复调用结果不变。
    """
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, (list, tuple)):
        raw = [raw]
    return [normalize_style_option(item) for item in raw]


def normalize_style_groups(raw: Any) -> List[StyleGroup]:
    groups = []
    for item in as_list(raw):
        if isinstance(item, StyleGroup):
            groups.append(StyleGroup(name=clean_text(item.name), options=normalize_style_options(item.options)))
        elif isinstance(item, dict):
            groups.append(StyleGroup(
                name=clean_text(item.get("name")),
                options=normalize_style_options(item.get("options")),
            ))
        elif isinstance(item, str):
            groups.append(StyleGroup(name=clean_text(item)))
    return groups


def _colour_fields(raw: Any) -> tuple[str, str, str]:
    """
    返回 (name, hex_code, image)。
    旧数据把颜色值放在 image 字段里（比如 "#1f2937"），这里挪到 hex_code。
    """
    if isinstance(raw, (ColorEntry, FabricColour)):
        name, hex_code, image = clean_text(raw.name), clean_text(raw.hex_code), clean_text(raw.image)
    elif isinstance(raw, dict):
        name = clean_text(raw.get("name"))
        hex_code = clean_text(raw.get("hex_code") or raw.get("hex"))
        image = clean_text(raw.get("image") or raw.get("image_url"))
    elif isinstance(raw, str):
        return clean_text(raw), "", ""
    else:
        return "", "", ""

    if not hex_code and HEX_COLOR_RE.match(image):
        hex_code, image = image, ""
    return name, hex_code, image


def normalize_color(raw: Any) -> ColorEntry:
    name, hex_code, image = _colour_fields(raw)
    return ColorEntry(name=name, hex_code=hex_code, image=image)


def normalize_fabric_colour(raw: Any) -> FabricColour:
    name, hex_code, image = _colour_fields(raw)
    return FabricColour(name=name, hex_code=hex_code, image=image)


def normalize_size(raw: Any) -> SizeEntry:
    if isinstance(raw, SizeEntry):
        return SizeEntry(name=clean_text(raw.name), price_delta=to_float(raw.price_delta))
    if isinstance(raw, dict):
        return SizeEntry(
            name=clean_text(raw.get("name")),
            price_delta=to_float(raw.get("price_delta", raw.get("price_difference"))),
        )
    return SizeEntry(name=clean_text(raw))


def normalize_fabric(raw: Any) -> FabricEntry:
    if isinstance(raw, FabricEntry):
        return FabricEntry(
            name=clean_text(raw.name),
            is_shared=bool(raw.is_shared),
            image_url=clean_text(raw.image_url),
            colours=[normalize_fabric_colour(c) for c in raw.colours],
        )
    if isinstance(raw, dict):
        colours = as_list(raw.get("colors") or raw.get("colours"))
        return FabricEntry(
            name=clean_text(raw.get("name")),
            is_shared=bool(raw.get("is_shared", False)),
            image_url=clean_text(raw.get("image_url") or raw.get("image")),
            colours=[normalize_fabric_colour(c) for c in colours],
        )
    return FabricEntry(name=clean_text(raw))


def normalize_mattress(raw: Any) -> MattressOption:
    if isinstance(raw, MattressOption):
        raw = vars(raw)
    if not isinstance(raw, dict):
        return MattressOption(name=clean_text(raw))
    return MattressOption(
        name=clean_text(raw.get("name")),
        description=clean_text(raw.get("description")),
        image=clean_text(raw.get("image") or raw.get("image_url")),
        price=to_float(raw.get("price")),
        source_product=optional_int(raw.get("source_product")),
    )


def normalize_faq(raw: Any) -> FaqEntry:
    if isinstance(raw, FaqEntry):
        return FaqEntry(question=clean_text(raw.question), answer=clean_text(raw.answer))
    if isinstance(raw, dict):
        return FaqEntry(question=clean_text(raw.get("question")), answer=clean_text(raw.get("answer")))
    return FaqEntry(question=clean_text(raw))


def normalize_custom_info(raw: Any) -> CustomInfoSection:
    if isinstance(raw, CustomInfoSection):
        return CustomInfoSection(title=clean_text(raw.title), content=clean_text(raw.content))
    if isinstance(raw, dict):
        return CustomInfoSection(
            title=clean_text(raw.get("title")),
            content=clean_text(raw.get("content") or raw.get("body")),
        )
    return CustomInfoSection(title=clean_text(raw))


def _normalize_dimension_row(raw: Any) -> DimensionRow:
    if isinstance(raw, DimensionRow):
        return DimensionRow(
            measurement=clean_text(raw.measurement),
            values={clean_text(k): clean_text(v) for k, v in raw.values.items()},
        )
    if not isinstance(raw, dict):
        return DimensionRow(measurement=clean_text(raw))

    label = next((raw[k] for k in ROW_LABEL_KEYS if raw.get(k)), "")
    values = raw.get("values")
    if not isinstance(values, dict):
        # 旧格式：{"measurement": "Width", "Single": "90 cm", "Double": "135 cm"}
        values = {k: v for k, v in raw.items() if k not in ROW_IGNORED_KEYS}
    return DimensionRow(
        measurement=clean_text(label),
        values={clean_text(k): clean_text(v) for k, v in values.items()},
    )


def normalize_dimensions(raw: Any) -> DimensionTable:
    """
    尺寸表支持:
      - {"columns": [...], "rows": [{"measurement": ..., "values": {...}}]}
      - [{"measurement": ..., "values": {...}}, ...]   （列名从 values 里收集）
    """
    if isinstance(raw, DimensionTable):
        raw = {"columns": raw.columns, "rows": raw.rows}
    if isinstance(raw, dict):
        columns = clean_list(raw.get("columns"))
        rows = [_normalize_dimension_row(r) for r in as_list(raw.get("rows"))]
    elif isinstance(raw, list):
        columns = []
        rows = [_normalize_dimension_row(r) for r in raw]
    else:
        return DimensionTable()

    for row in rows:
        for col in row.values:
            if col and col not in columns:
                columns.append(col)
    return DimensionTable(columns=columns, rows=rows)


def _media_urls(raw: Any) -> List[str]:
    """[{"url": "..."}] 或 ["..."] -> URL 列表"""
    urls = []
    for item in as_list(raw):
        url = item.get("url") if isinstance(item, dict) else item
        url = clean_text(url)
        if url:
            urls.append(url)
    return urls


def _filter_option_ids(raw: Any) -> set[int]:
    ids = set()
    for item in as_list(raw):
        if isinstance(item, dict):
            item = item.get("filter_option", item.get("id"))
        value = optional_int(item)
        if value is not None:
            ids.add(value)
    return ids


# --- 服务端数据 -> 草稿 ---

def draft_from_product(product: Any) -> ProductDraft:
    """
    把后端返回的商品（或本地 JSON 草稿文件）转换为 ProductDraft。
    字段缺失或格式不对时用默认值，不抛异常。
    """
    if not isinstance(product, dict):
        return ProductDraft()

    product_id = optional_int(product.get("id"))
    images = _media_urls(product.get("images"))

    return ProductDraft(
        id=product_id,
        name=clean_text(product.get("name")),
        description=clean_text(product.get("description")),
        short_description=clean_text(product.get("short_description")),
        category=optional_int(product.get("category")),
        subcategory=optional_int(product.get("subcategory")),
        price=to_float(product.get("price")),
        original_price=optional_float(product.get("original_price")),
        discount_percentage=to_float(product.get("discount_percentage")),
        delivery_charges=to_float(product.get("delivery_charges")),
        in_stock=bool(product.get("in_stock", True)),
        is_bestseller=bool(product.get("is_bestseller", False)),
        is_new=bool(product.get("is_new", False)),
        show_size_icons=bool(product.get("show_size_icons", False)),
        images=images,
        videos=_media_urls(product.get("videos")),
        existing_image_count=len(images) if product_id is not None else 0,
        features=parse_features(product.get("features")),
        sizes=[normalize_size(s) for s in as_list(product.get("sizes"))],
        colors=[normalize_color(c) for c in as_list(product.get("colors"))],
        fabrics=[normalize_fabric(f) for f in as_list(product.get("fabrics"))],
        styles=normalize_style_groups(product.get("styles")),
        mattresses=[normalize_mattress(m) for m in as_list(product.get("mattresses"))],
        dimensions=normalize_dimensions(product.get("dimensions")),
        faqs=[normalize_faq(f) for f in as_list(product.get("faqs"))],
        delivery_title=clean_text(product.get("delivery_title")),
        delivery_info=clean_text(product.get("delivery_info")),
        returns_title=clean_text(product.get("returns_title")),
        returns_guarantee=clean_text(product.get("returns_guarantee")),
        custom_info=[normalize_custom_info(c) for c in as_list(product.get("custom_info"))],
        filter_option_ids=_filter_option_ids(product.get("filter_options")),
    )


# --- 派生字段 ---

def _is_non_finite(value: Any) -> bool:
    """NaN / inf（json.dumps 会输出非法的 NaN）"""
    if value is None or isinstance(value, bool):
        return False
    try:
        return not math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def compute_original_price(
    price: Any,
    discount_percentage: Any,
    explicit_original: Any = None,
) -> Optional[float]:
    """
    有折扣时由售价反推原价：price / (1 - discount / 100)，保留两位小数。
    没有折扣时保留手动填写的原价（没有就是 None）。
    折扣 >= 100 会让除数 <= 0，直接拒绝。
    """
    if _is_non_finite(price):
        raise ValidationError("price", "Price must be a finite number")
    if _is_non_finite(discount_percentage):
        raise ValidationError("discount_percentage", "Discount must be a finite number")
    discount = to_float(discount_percentage)
    if discount < 0 or discount >= 100:
        raise ValidationError("discount_percentage", "Discount must be at least 0% and below 100%")
    if discount > 0:
        return round(to_float(price) / (1 - discount / 100), 2)
    return optional_float(explicit_original)


# --- 草稿 -> 提交数据 ---

def _colour_payload(colour: ColorEntry | FabricColour) -> Dict[str, str]:
    name, hex_code, image = _colour_fields(colour)
    return {"name": name, "hex_code": hex_code, "image": image}


def _style_option_payload(option: StyleOption) -> Dict[str, Any]:
    option = normalize_style_option(option)
    return {
        "label": option.label,
        "description": option.description,
        "icon": option.icon,
        "price_delta": option.price_delta,
        "sizes": option.sizes,
    }


def _dimensions_payload(table: DimensionTable) -> Dict[str, Any] | None:
    columns: List[str] = []
    for col in table.columns:
        col = clean_text(col)
        if col and col not in columns:
            columns.append(col)

    rows = []
    for row in table.rows:
        measurement = clean_text(row.measurement)
        if not measurement:
            continue
        rows.append({
            "measurement": measurement,
            "values": {col: clean_text(row.values.get(col, "")) for col in columns},
        })
    if not rows:
        return None
    return {"columns": columns, "rows": rows}


def normalize_draft(draft: ProductDraft) -> Dict[str, Any]:
    """
    生成提交给后端的数据：
    - 所有字符串去首尾空白
    - 丢掉必填子字段为空的条目（没有 label 的款式选项、没有名字的面料/颜色等）
    - 数值字段转成 float
    - 空的可选列表整个不传，避免编辑时把服务端已有数据覆盖成空
    """
    payload: Dict[str, Any] = {
        "name": clean_text(draft.name),
        "description": clean_text(draft.description),
        "short_description": clean_text(draft.short_description),
        "category": draft.category,
        "subcategory": draft.subcategory,
        "price": round(to_float(draft.price), 2),
        "discount_percentage": to_float(draft.discount_percentage),
        "original_price": compute_original_price(
            draft.price, draft.discount_percentage, draft.original_price
        ),
        "delivery_charges": round(to_float(draft.delivery_charges), 2),
        "in_stock": bool(draft.in_stock),
        "is_bestseller": bool(draft.is_bestseller),
        "is_new": bool(draft.is_new),
        "show_size_icons": bool(draft.show_size_icons),
        "delivery_title": clean_text(draft.delivery_title),
        "delivery_info": clean_text(draft.delivery_info),
        "returns_title": clean_text(draft.returns_title),
        "returns_guarantee": clean_text(draft.returns_guarantee),
    }

    fabrics = []
    for fabric in draft.fabrics:
        name = clean_text(fabric.name)
        colours = [_colour_payload(c) for c in fabric.colours if clean_text(c.name)]
        # 没有名称或没有任何颜色的面料不提交
        if not name or not colours:
            continue
        fabrics.append({
            "name": name,
            "is_shared": bool(fabric.is_shared),
            "image_url": clean_text(fabric.image_url),
            "colors": colours,
        })

    styles = []
    for group in draft.styles:
        name = clean_text(group.name)
        if not name:
            continue
        styles.append({
            "name": name,
            "options": [_style_option_payload(o) for o in normalize_style_options(group.options) if o.label],
        })

    collections: Dict[str, Any] = {
        "images": [{"url": url} for url in clean_list(draft.images)],
        "videos": [{"url": url} for url in clean_list(draft.videos)],
        "features": clean_list(draft.features),
        "sizes": [
            {"name": clean_text(s.name), "price_delta": to_float(s.price_delta)}
            for s in draft.sizes if clean_text(s.name)
        ],
        "colors": [_colour_payload(c) for c in draft.colors if clean_text(c.name)],
        "fabrics": fabrics,
        "styles": styles,
        "mattresses": [
            {
                "name": clean_text(m.name),
                "description": clean_text(m.description),
                "image": clean_text(m.image),
                "price": round(to_float(m.price), 2),
                "source_product": m.source_product,
            }
            for m in draft.mattresses if clean_text(m.name)
        ],
        "dimensions": _dimensions_payload(draft.dimensions),
        "faqs": [
            {"question": clean_text(f.question), "answer": clean_text(f.answer)}
            for f in draft.faqs if clean_text(f.question) and clean_text(f.answer)
        ],
        "custom_info": [
            {"title": clean_text(c.title), "content": clean_text(c.content)}
            for c in draft.custom_info if clean_text(c.title)
        ],
        "filter_options": sorted(draft.filter_option_ids),
    }
    for key, value in collections.items():
        if value:
            payload[key] = value

    return payload
