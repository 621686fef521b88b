# pipeline/auth.py

from __future__ import annotations

from reve_admin.core.errors import ApiError
from reve_admin.core.notifier import Notifier
from reve_admin.core.session import Session
from reve_admin.platforms.api_client import ApiClient


def login(client: ApiClient, session: Session, username: str, password: str, notifier: Notifier) -> bool:
    """登录成功后把 access / refresh 令牌写进 session"""
    if not username or not password:
        notifier.error("Please enter both username and password")
        return False

    try:
        res = client.post("/login/", {"username": username, "password": password})
    except ApiError as e:
        print(f"  [调试] 登录失败: {e}")
        notifier.error("Login failed")
        return False

    access = (res or {}).get("access")
    if not access:
        notifier.error("Login failed")
        return False

    session.set_tokens(access, res.get("refresh"))
    notifier.success("Login successful!")
    return True


def logout(session: Session, notifier: Notifier) -> None:
    session.clear()
    notifier.info("Logged out")
