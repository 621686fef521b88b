# pipeline/uploads.py

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from reve_admin.config.settings import MAX_WORKERS
from reve_admin.core.errors import ApiError
from reve_admin.core.notifier import Notifier
from reve_admin.core.svg_utils import is_svg, minify_svg, can_inline_svg
from reve_admin.platforms.api_client import ApiClient

UPLOAD_PATH = "/uploads/"


def upload_images(client: ApiClient, paths: List[Path], notifier: Notifier) -> List[Optional[str]]:
    """
    批量上传图片，并行发请求。
    返回和 paths 顺序一致的 URL 列表，失败的位置是 None。
    已经上传成功的不会因为其他图片失败而回滚。
    """
    if not paths:
        return []

    with ThreadPoolExecutor(max_workers=MAX_WORKERS) as pool:
        futures = [pool.submit(client.upload, UPLOAD_PATH, p) for p in paths]

        urls: List[Optional[str]] = []
        for path, future in zip(paths, futures):
            try:
                urls.append(future.result())
            except (ApiError, OSError) as e:
                print(f"  ⚠️ 上传失败 {path.name}: {e}")
                notifier.error(f"Image upload failed: {path.name}")
                urls.append(None)

    if all(urls):
        notifier.success(f"{len(urls)} image(s) uploaded")
    return urls


def prepare_icon(client: ApiClient, path: Path) -> str:
    """
    款式选项图标：
    - SVG 压缩后足够小、且没有内嵌 data: 图片 -> 直接返回 SVG 代码
    - 否则上传文件，返回 URL
    """
    if is_svg(path):
        markup = minify_svg(path.read_text(encoding="utf-8"))
        if can_inline_svg(markup):
            return markup
        print(f"  [调试] {path.name} 不适合内联，改为上传文件")
    return client.upload(UPLOAD_PATH, path)
