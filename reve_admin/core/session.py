# core/session.py

import json
from pathlib import Path
from typing import Dict, Any, Optional


class Session:
    """
    用本地 JSON 文件保存登录令牌：
    {
        "access": "...",
        "refresh": "..."
    }
    登录时写入，每次请求读取 access，登出时删除文件。
    """

    def __init__(self, filepath: Path):
        self.filepath = filepath
        self._state: Dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if self.filepath.exists():
            try:
                with self.filepath.open("r", encoding="utf-8") as f:
                    self._state = json.load(f)
                if not isinstance(self._state, dict):
                    self._state = {}
            except (OSError, ValueError) as e:
                # 文件损坏就当作未登录
                print(f"[警告] 加载登录状态失败: {e}")
                self._state = {}
        else:
            self._state = {}

    def _save(self) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        with self.filepath.open("w", encoding="utf-8") as f:
            json.dump(self._state, f, ensure_ascii=False, indent=2)

    # --- 对外方法 ---

    @property
    def access_token(self) -> Optional[str]:
        return self._state.get("access") or None

    @property
    def refresh_token(self) -> Optional[str]:
        return self._state.get("refresh") or None

    @property
    def is_logged_in(self) -> bool:
        return self.access_token is not None

    def set_tokens(self, access: str, refresh: str | None = None) -> None:
        self._state = {"access": access, "refresh": refresh or ""}
        self._save()

    def clear(self) -> None:
        self._state = {}
        if self.filepath.exists():
            self.filepath.unlink()
