# pipeline/orders.py

from __future__ import annotations

from reve_admin.config.settings import ORDER_ACTIONS
from reve_admin.core.errors import ApiError
from reve_admin.core.notifier import Notifier
from reve_admin.platforms.api_client import ApiClient


def update_order_status(client: ApiClient, order_id: int, action: str, notifier: Notifier) -> bool:
    """action: mark_paid / mark_shipped / mark_delivered"""
    if action not in ORDER_ACTIONS:
        raise ValueError(f"Unknown order action: {action} (expected one of {', '.join(ORDER_ACTIONS)})")

    try:
        client.post(f"/orders/{order_id}/{action}/", {})
    except ApiError as e:
        print(f"  [调试] 更新订单 {order_id} 失败: {e}")
        notifier.error("Update failed")
        return False
    notifier.success("Order updated")
    return True
