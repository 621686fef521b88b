# core/notifier.py

from __future__ import annotations

from typing import Any, Callable, List, Tuple

from reve_admin.core.errors import ApiError

ICONS = {
    "success": "✅",
    "error": "❌",
    "info": "ℹ️",
}


class Notifier:
    """
    提示消息（相当于后台页面右上角的 toast）。
    打印到控制台，同时记在 messages 里，方便调用方检查。
    """

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.messages: List[Tuple[str, str]] = []

    def _emit(self, level: str, message: str) -> None:
        self.messages.append((level, message))
        if not self.quiet:
            print(f"{ICONS[level]} {message}")

    def success(self, message: str) -> None:
        self._emit("success", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def info(self, message: str) -> None:
        self._emit("info", message)

    def errors(self) -> List[str]:
        return [m for level, m in self.messages if level == "error"]

    @property
    def last(self) -> Tuple[str, str] | None:
        return self.messages[-1] if self.messages else None


def attempt(call: Callable[[], Any], notifier: Notifier, success: str | None, failure: str) -> bool:
    """发一个请求；ApiError 只提示 failure，不往上抛。success 为 None 时成功不提示"""
    try:
        call()
    except ApiError as e:
        print(f"  [调试] {failure}: {e}")
        notifier.error(failure)
        return False
    if success:
        notifier.success(success)
    return True
