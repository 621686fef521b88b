# core/dimensions.py

from __future__ import annotations

import copy
import re
from typing import List

from reve_admin.config.settings import WINGBACK_KEYWORD, WINGBACK_WIDTH_OFFSET_CM
from reve_admin.core.product_schema import DimensionTable, StyleGroup

CM_PER_INCH = 2.54

# 例: 90 cm (35.4")
CM_INCH_RE = re.compile(
    r'^\s*(\d+(?:\.\d+)?)\s*cm\s*\(\s*(\d+(?:\.\d+)?)\s*(?:"|”|in(?:ch(?:es)?)?)?\s*\)\s*$',
    re.IGNORECASE,
)


def styles_mention(styles: List[StyleGroup], keyword: str) -> bool:
    """款式组名或任意选项 label 中包含关键词（不区分大小写）"""
    keyword = keyword.lower()
    for group in styles:
        if keyword in (group.name or "").lower():
            return True
        for option in group.options:
            label = option.label if hasattr(option, "label") else str(option)
            if keyword in (label or "").lower():
                return True
    return False


def _format_cm(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return f"{value:g}"


def widen_value(value: str, offset_cm: float) -> str:
    """
    "90 cm (35.4")" + 4 -> "94 cm (37.0")"
    英寸按新的厘米值重新计算。不符合格式的值原样返回。
    """
    match = CM_INCH_RE.match(value or "")
    if not match:
        return value
    cm = float(match.group(1)) + offset_cm
    return f'{_format_cm(cm)} cm ({cm / CM_PER_INCH:.1f}")'


def adjust_dimensions_for_style(
    table: DimensionTable,
    styles: List[StyleGroup],
    keyword: str = WINGBACK_KEYWORD,
    offset_cm: float = WINGBACK_WIDTH_OFFSET_CM,
) -> DimensionTable:
    """
    wingback 床头比普通款宽，展示尺寸时把所有 "width" 行加上固定厘米数。
    只改宽度行，其余行不动。返回新表，原表不修改。
    """
    adjusted = copy.deepcopy(table)
    if not styles_mention(styles, keyword):
        return adjusted

    for row in adjusted.rows:
        if "width" not in (row.measurement or "").lower():
            continue
        row.values = {col: widen_value(val, offset_cm) for col, val in row.values.items()}
    return adjusted
