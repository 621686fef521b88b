from typing import Any, Dict, List, Tuple

import pytest

from reve_admin.core.errors import ApiError
from reve_admin.core.notifier import Notifier


class FakeClient:
    """
    代替 ApiClient：
    responses 里放 (method, path) -> 返回值；返回值是 ApiError 时就抛出。
    """

    def __init__(self, responses: Dict[Tuple[str, str], Any] | None = None):
        self.responses = dict(responses or {})
        self.calls: List[Tuple[str, str, Any]] = []

    def _reply(self, method: str, path: str, data: Any = None) -> Any:
        self.calls.append((method, path, data))
        result = self.responses.get((method, path))
        if isinstance(result, Exception):
            raise result
        if (method, path) not in self.responses:
            raise ApiError(f"{method} {path} returned 404", status_code=404)
        return result

    def get(self, path):
        return self._reply("GET", path)

    def post(self, path, payload=None, body=None):
        return self._reply("POST", path, body if body is not None else payload)

    def put(self, path, payload=None, body=None):
        return self._reply("PUT", path, body if body is not None else payload)

    def patch(self, path, payload=None):
        return self._reply("PATCH", path, payload)

    def delete(self, path):
        return self._reply("DELETE", path)

    def upload(self, path, file_path):
        return self._reply("UPLOAD", file_path.name)


@pytest.fixture
def notifier():
    return Notifier(quiet=True)


@pytest.fixture
def sample_product():
    return {
        "id": 12,
        "name": "Cambridge Divan Bed",
        "description": "UK handcrafted divan.",
        "short_description": "Divan with drawers",
        "category": 3,
        "subcategory": 7,
        "price": 499.0,
        "original_price": None,
        "discount_percentage": 0,
        "delivery_charges": 25,
        "in_stock": True,
        "is_bestseller": True,
        "features": ["UK Handcrafted", "10-Year Guarantee"],
        "images": [{"id": 1, "url": "https://cdn.example.com/bed-1.jpg"}],
        "videos": [],
        "sizes": [{"name": "Double", "price_delta": 0}, {"name": "King", "price_delta": 80}],
        "colors": [
            {"name": "Grey", "hex_code": "#808080"},
            {"name": "Navy", "image": "#1f2a44"},
            {"name": "Oak", "image": "https://cdn.example.com/oak.jpg"},
        ],
        "fabrics": [
            {
                "name": "Plush Velvet",
                "is_shared": True,
                "image_url": "https://cdn.example.com/velvet.jpg",
                "colors": [{"name": "Silver", "hex_code": "#c0c0c0"}, {"name": "", "hex_code": "#000"}],
            }
        ],
        "styles": [
            {"name": "Headboard Style", "options": ["Plain", "Wingback Headboard"]},
            {"name": "Storage", "options": [{"label": "2 Drawers", "price_delta": 50}, {"label": ""}]},
        ],
        "mattresses": [{"name": "Memory Foam", "price": 199}],
        "dimensions": {
            "columns": ["Double", "King"],
            "rows": [
                {"measurement": "Width", "values": {"Double": "90 cm (35.4\")", "King": "150 cm (59.1\")"}},
                {"measurement": "Length", "values": {"Double": "190 cm (74.8\")", "King": "200 cm (78.7\")"}},
            ],
        },
        "faqs": [{"question": "Is assembly included?", "answer": "Yes, on premium delivery."}],
        "delivery_info": "Free delivery over £500",
        "returns_guarantee": "14-day returns",
        "filter_options": [4, {"filter_option": 9}],
    }
