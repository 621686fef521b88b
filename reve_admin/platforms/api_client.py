# platforms/api_client.py

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import requests

from reve_admin.config.settings import API_BASE_URL, REQUEST_TIMEOUT
from reve_admin.core.errors import ApiError
from reve_admin.core.session import Session


def encode_json(payload: Any) -> bytes:
    """请求体序列化（大小检查和真正发送用同一份字节）"""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def extract_upload_url(payload: Any) -> str:
    """
    上传接口返回的 URL 字段名不统一：
    url / publicUrl / publicURL，可能在顶层，也可能在 data 里。
    """
    candidates = []
    if isinstance(payload, dict):
        candidates.append(payload)
        if isinstance(payload.get("data"), dict):
            candidates.append(payload["data"])
    for obj in candidates:
        for key in ("url", "publicUrl", "publicURL"):
            value = obj.get(key)
            if isinstance(value, str) and value:
                return value
    raise ApiError("Upload succeeded but no valid URL was returned")


class ApiClient:
    def __init__(
        self,
        session: Session,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = requests.Session()

    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers = {}
        if has_body:
            headers["Content-Type"] = "application/json"
        token = self.session.access_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, body: bytes | None = None, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        headers = kwargs.pop("headers", None) or self._headers(body is not None)
        try:
            r = self.http.request(method, url, data=body, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        if not r.ok:
            raise ApiError(f"{method} {path} returned {r.status_code}", status_code=r.status_code, body=r.text)
        if r.status_code == 204 or not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise ApiError(f"{method} {path} returned invalid JSON", status_code=r.status_code, body=r.text) from e

    # --- 对外方法 ---

    def get(self, path: str) -> Any:
        return self._request("GET", path)

    def post(self, path: str, payload: Any = None, body: bytes | None = None) -> Any:
        return self._request("POST", path, body if body is not None else encode_json(payload or {}))

    def put(self, path: str, payload: Any = None, body: bytes | None = None) -> Any:
        return self._request("PUT", path, body if body is not None else encode_json(payload or {}))

    def patch(self, path: str, payload: Any = None) -> Any:
        return self._request("PATCH", path, encode_json(payload or {}))

    def delete(self, path: str) -> None:
        self._request("DELETE", path)

    def upload(self, path: str, file_path: Path) -> str:
        """multipart 上传单个文件，返回文件 URL（不带 Content-Type，让 requests 自己生成 boundary）"""
        headers = self._headers(has_body=False)
        with file_path.open("rb") as f:
            files = {"file": (file_path.name, f)}
            result = self._request("POST", path, files=files, headers=headers)
        return extract_upload_url(result)
