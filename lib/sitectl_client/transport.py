from __future__ import annotations

import json
from typing import Any

import httpx

from .config_types import ClientConfig
from .errors import ApiError, AuthError, NetworkError


class Transport:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        headers = {"User-Agent": cfg.user_agent}
        if cfg.token:
            headers["Authorization"] = f"Bearer {cfg.token}"

        self._client = httpx.Client(
            base_url=cfg.base_url.rstrip("/"),
            timeout=cfg.timeout_s,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def request(self, method: str, path: str, *, json_body: Any | None = None) -> Any:
        try:
            r = self._client.request(method, path, json=json_body)
        except httpx.RequestError as e:
            raise NetworkError(str(e)) from e

        # Try parse body as json for better errors / output
        data: Any = None
        text = None
        try:
            data = r.json()
        except ValueError:
            text = r.text

        if r.status_code >= 400:
            msg = f"{method} {path} failed with {r.status_code}"
            details = None

            if isinstance(data, dict) and ("detail" in data or "error" in data):
                details = json.dumps(data, ensure_ascii=False)
                msg = str(data.get("detail") or data.get("error") or msg)
            elif text:
                details = text[:1000]

            if r.status_code in (401, 403):
                raise AuthError(r.status_code, msg, details)
            raise ApiError(r.status_code, msg, details)

        return data if data is not None else r.text
