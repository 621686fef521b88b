# core/svg_utils.py

from __future__ import annotations

import re
from pathlib import Path

from reve_admin.config.settings import SVG_INLINE_MAX_CHARS


def is_svg(path: Path) -> bool:
    return path.suffix.lower() == ".svg"


def minify_svg(markup: str) -> str:
    """
    简单压缩 SVG：
    - 去掉 XML 声明、DOCTYPE 和注释
    - 标签之间的空白删掉
    - 连续空白合并成一个空格
    """
    markup = re.sub(r"<\?xml.*?\?>", "", markup, flags=re.DOTALL)
    markup = re.sub(r"<!DOCTYPE.*?>", "", markup, flags=re.DOTALL | re.IGNORECASE)
    markup = re.sub(r"<!--.*?-->", "", markup, flags=re.DOTALL)
    markup = re.sub(r">\s+<", "><", markup)
    markup = re.sub(r"\s+", " ", markup)
    return markup.strip()


def can_inline_svg(markup: str, max_chars: int = SVG_INLINE_MAX_CHARS) -> bool:
    """压缩后不超过上限，且没有嵌入 data: 图片，才可以直接放进商品数据里"""
    if len(markup) > max_chars:
        return False
    if re.search(r"data:image/", markup, flags=re.IGNORECASE):
        return False
    return markup.lstrip().lower().startswith("<svg")
