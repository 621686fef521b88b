import pytest

from reve_admin.core.errors import ApiError
from reve_admin.core.product_schema import ProductDraft
from reve_admin.pipeline.catalog import (
    list_products,
    delete_product,
    filter_products_by_category,
    subcategories_for,
    filter_types_for_category,
    scope_filter_options,
)
from reve_admin.pipeline.orders import update_order_status

from conftest import FakeClient

CATEGORIES = [{"id": 1, "name": "Beds"}, {"id": 2, "name": "Mattresses"}]
PRODUCTS = [
    {"id": 10, "name": "Divan", "category": 1},
    {"id": 11, "name": "Ottoman", "category": None, "category_name": "beds"},
    {"id": 12, "name": "Hybrid", "category": 2},
]


def test_filter_products_by_category():
    assert [p["id"] for p in filter_products_by_category(PRODUCTS, CATEGORIES, 1)] == [10, 11]
    assert [p["id"] for p in filter_products_by_category(PRODUCTS, CATEGORIES, 2)] == [12]
    assert len(filter_products_by_category(PRODUCTS, CATEGORIES, None)) == 3


def test_subcategories_for():
    subs = [{"id": 5, "category": 1}, {"id": 6, "category": 2}]
    assert subcategories_for(subs, 2) == [{"id": 6, "category": 2}]


def test_list_and_delete(notifier):
    client = FakeClient({("GET", "/products/"): PRODUCTS, ("DELETE", "/products/10/"): None})
    assert list_products(client, notifier) == PRODUCTS
    assert delete_product(client, 10, notifier)
    assert not delete_product(client, 99, notifier)
    assert notifier.errors() == ["Delete failed"]


FILTER_TYPES = [
    {"id": 1, "name": "Bed Size", "is_active": True, "options": [
        {"id": 100, "name": "King", "is_active": True},
        {"id": 101, "name": "Single", "is_active": False},
    ]},
    {"id": 2, "name": "Colour", "is_active": True, "options": [{"id": 200, "name": "Grey"}]},
    {"id": 3, "name": "Firmness", "is_active": False, "options": [{"id": 300, "name": "Firm"}]},
]
CATEGORY_FILTERS = [
    {"id": 1, "category": 1, "filter_type": 2, "display_order": 2, "is_active": True},
    {"id": 2, "category": 1, "filter_type": 1, "display_order": 1, "is_active": True},
    {"id": 3, "category": 1, "filter_type": 3, "display_order": 0, "is_active": True},
    {"id": 4, "subcategory": 9, "filter_type": 3, "display_order": 0, "is_active": True},
    {"id": 5, "category": 2, "filter_type": 2, "display_order": 0, "is_active": False},
]


def test_filter_types_for_category_ordered_and_active():
    result = filter_types_for_category(FILTER_TYPES, CATEGORY_FILTERS, 1)
    assert [ft["name"] for ft in result] == ["Bed Size", "Colour"]
    assert filter_types_for_category(FILTER_TYPES, CATEGORY_FILTERS, 2) == []


def test_scope_filter_options():
    draft = ProductDraft(filter_option_ids={100, 101, 200, 999})
    in_scope = filter_types_for_category(FILTER_TYPES, CATEGORY_FILTERS, 1)
    removed = scope_filter_options(draft, in_scope)
    assert draft.filter_option_ids == {100, 200}
    assert removed == {101, 999}


def test_update_order_status(notifier):
    client = FakeClient({("POST", "/orders/7/mark_shipped/"): {}})
    assert update_order_status(client, 7, "mark_shipped", notifier)
    assert notifier.last == ("success", "Order updated")


def test_update_order_status_failure(notifier):
    client = FakeClient({("POST", "/orders/7/mark_paid/"): ApiError("nope", status_code=400)})
    assert not update_order_status(client, 7, "mark_paid", notifier)
    assert notifier.errors() == ["Update failed"]


def test_update_order_status_rejects_unknown_action(notifier):
    client = FakeClient()
    with pytest.raises(ValueError):
        update_order_status(client, 7, "refund", notifier)
    assert client.calls == []
