# reve_admin/run_once.py

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Dict, Any

from reve_admin.config.settings import SESSION_FILE, ORDER_ACTIONS
from reve_admin.core.errors import ApiError
from reve_admin.core.notifier import Notifier
from reve_admin.core.product_normalizer import draft_from_product, optional_int
from reve_admin.core.product_schema import ProductDraft, DimensionTable
from reve_admin.core.session import Session
from reve_admin.pipeline.auth import login, logout
from reve_admin.pipeline.catalog import (
    list_products,
    delete_product,
    filter_products_by_category,
    filter_types_for_category,
    scope_filter_options,
)
from reve_admin.pipeline.filters import assign_category_filter, toggle_category_filter
from reve_admin.pipeline.loader import load_form_context
from reve_admin.pipeline.orders import update_order_status
from reve_admin.pipeline.processor import ProductComposer
from reve_admin.pipeline.storefront import list_hero_slides, toggle_hero_slide, set_review_visibility, delete_review
from reve_admin.pipeline.uploads import upload_images, prepare_icon
from reve_admin.platforms.api_client import ApiClient


def print_draft(draft: ProductDraft, dimensions: DimensionTable) -> None:
    print("=" * 60)
    print(f"  ID: {draft.id}")
    print(f"  名称: {draft.name}")
    print(f"  价格: £{draft.price}  折扣: {draft.discount_percentage}%  原价: {draft.original_price}")
    print(f"  图片: {len(draft.images)}  视频: {len(draft.videos)}")
    print(f"  尺寸: {', '.join(s.name for s in draft.sizes) or 'N/A'}")
    print(f"  颜色: {', '.join(c.name for c in draft.colors) or 'N/A'}")
    print(f"  面料: {', '.join(f.name for f in draft.fabrics) or 'N/A'}")
    for group in draft.styles:
        print(f"  款式 {group.name}: {', '.join(o.label for o in group.options)}")
    print(f"  FAQ: {len(draft.faqs)}  筛选项: {sorted(draft.filter_option_ids)}")
    if dimensions.rows:
        print("  尺寸表:")
        print("    " + " | ".join(["", *dimensions.columns]))
        for row in dimensions.rows:
            print("    " + " | ".join([row.measurement, *(row.values.get(c, "") for c in dimensions.columns)]))
    print("=" * 60)


def _find_by_id(items: List[Dict[str, Any]], item_id: int) -> Dict[str, Any] | None:
    return next((item for item in items if optional_int(item.get("id")) == item_id), None)


def show_product(client: ApiClient, notifier: Notifier, product_id: int) -> int:
    """加载编辑页数据 + 商品，去掉不在当前分类筛选范围内的筛选项后打印"""
    ctx = load_form_context(client, notifier, product_id)
    if ctx.draft is None:
        return 1

    draft = ctx.draft
    if "filter_types" not in ctx.failed and "category_filters" not in ctx.failed:
        in_scope = filter_types_for_category(ctx.filter_types, ctx.category_filters, draft.category, draft.subcategory)
        removed = scope_filter_options(draft, in_scope)
        print(f"  分类筛选: {', '.join(ft.get('name', '') for ft in in_scope) or 'N/A'}")
        if removed:
            notifier.info(f"Dropped {len(removed)} filter option(s) outside this category")

    print_draft(draft, ProductComposer(client, notifier).display_dimensions(draft))
    return 0


def show_products(client: ApiClient, notifier: Notifier, category_id: int | None) -> int:
    products = list_products(client, notifier)
    categories = []
    if category_id is not None:
        try:
            data = client.get("/categories/")
        except ApiError as e:
            print(f"  [调试] 加载分类失败: {e}")
            notifier.error("Failed to load categories")
            return 1
        categories = data if isinstance(data, list) else []

    for product in filter_products_by_category(products, categories, category_id):
        print(f"  {product.get('id')}\t{product.get('name', '')}\t£{product.get('price', '')}")
    return 0


def toggle_assignment(client: ApiClient, notifier: Notifier, assignment_id: int) -> bool:
    try:
        assignments = client.get("/category-filters/")
    except ApiError as e:
        print(f"  [调试] 加载分类筛选失败: {e}")
        notifier.error("Failed to load category filters")
        return False
    assignment = _find_by_id(assignments if isinstance(assignments, list) else [], assignment_id)
    if assignment is None:
        notifier.error(f"Assignment {assignment_id} not found")
        return False
    return toggle_category_filter(client, notifier, assignment)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="REVE store admin: products, storefront, orders and login.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Sign in and store the access token")
    p.add_argument("username")
    p.add_argument("password")

    sub.add_parser("logout", help="Remove the stored token")

    p = sub.add_parser("show", help="Load a product and print it as a draft")
    p.add_argument("product_id", type=int)

    p = sub.add_parser("save", help="Create or update a product from a JSON draft file")
    p.add_argument("draft_file", type=Path)

    p = sub.add_parser("products", help="List products, optionally for one category")
    p.add_argument("--category", type=int, default=None)

    p = sub.add_parser("delete", help="Delete a product")
    p.add_argument("product_id", type=int)

    p = sub.add_parser("upload", help="Upload images and print their URLs")
    p.add_argument("files", nargs="+", type=Path)

    p = sub.add_parser("icon", help="Inline a small SVG icon or upload the file")
    p.add_argument("file", type=Path)

    p = sub.add_parser("order", help="Change an order's status")
    p.add_argument("order_id", type=int)
    p.add_argument("action", choices=list(ORDER_ACTIONS))

    p = sub.add_parser("assign-filter", help="Assign a filter type to a category or subcategory")
    p.add_argument("filter_type", type=int)
    p.add_argument("--category", type=int, default=None)
    p.add_argument("--subcategory", type=int, default=None)
    p.add_argument("--order", type=int, default=0)

    p = sub.add_parser("toggle-filter", help="Activate or deactivate a category filter assignment")
    p.add_argument("assignment_id", type=int)

    sub.add_parser("slides", help="List hero slides in display order")

    p = sub.add_parser("toggle-slide", help="Activate or deactivate a hero slide")
    p.add_argument("slide_id", type=int)

    p = sub.add_parser("review", help="Hide, unhide or delete a review")
    p.add_argument("review_id", type=int)
    p.add_argument("action", choices=["show", "hide", "delete"])

    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    session = Session(SESSION_FILE)
    client = ApiClient(session)
    notifier = Notifier()

    if args.command == "login":
        return 0 if login(client, session, args.username, args.password, notifier) else 1

    if args.command == "logout":
        logout(session, notifier)
        return 0

    if args.command == "order":
        return 0 if update_order_status(client, args.order_id, args.action, notifier) else 1

    if args.command == "show":
        return show_product(client, notifier, args.product_id)

    if args.command == "products":
        return show_products(client, notifier, args.category)

    if args.command == "delete":
        return 0 if delete_product(client, args.product_id, notifier) else 1

    if args.command == "upload":
        urls = upload_images(client, args.files, notifier)
        for path, url in zip(args.files, urls):
            print(f"  {path.name}: {url or '上传失败'}")
        return 0 if all(urls) else 1

    if args.command == "icon":
        try:
            print(prepare_icon(client, args.file))
        except (ApiError, OSError) as e:
            print(f"  [调试] 图标处理失败: {e}")
            notifier.error(f"Icon upload failed: {args.file.name}")
            return 1
        return 0

    if args.command == "assign-filter":
        ok = assign_category_filter(
            client, notifier, args.filter_type,
            category=args.category, subcategory=args.subcategory, display_order=args.order,
        )
        return 0 if ok else 1

    if args.command == "toggle-filter":
        return 0 if toggle_assignment(client, notifier, args.assignment_id) else 1

    if args.command == "slides":
        for slide in list_hero_slides(client, notifier):
            state = "on" if slide.get("is_active") else "off"
            print(f"  {slide.get('id')}\t[{state}]\t{slide.get('sort_order', 0)}\t{slide.get('title', '')}")
        return 0

    if args.command == "toggle-slide":
        slide = _find_by_id(list_hero_slides(client, notifier), args.slide_id)
        if slide is None:
            notifier.error(f"Hero slide {args.slide_id} not found")
            return 1
        return 0 if toggle_hero_slide(client, notifier, slide) else 1

    if args.command == "review":
        if args.action == "delete":
            ok = delete_review(client, notifier, args.review_id)
        else:
            ok = set_review_visibility(client, notifier, args.review_id, args.action == "show")
        return 0 if ok else 1

    # save
    try:
        raw = json.loads(args.draft_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        notifier.error(f"Cannot read draft file {args.draft_file}: {e}")
        return 1
    saved = ProductComposer(client, notifier).submit(draft_from_product(raw))
    if saved is None:
        return 1
    print(f"  保存成功，商品 ID: {saved.get('id') if isinstance(saved, dict) else 'N/A'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
