from __future__ import annotations

from typing import Any

import httpx

from .config_types import ClientConfig
from .transport import Transport

DEFAULT_DOMAINS_PATH = "/v2/domains"


class RegistrarClient:
    def __init__(
            self,
            cfg: ClientConfig,
            *,
            domains_path: str = DEFAULT_DOMAINS_PATH,
            transport: httpx.BaseTransport | None = None,
    ):
        self._t = Transport(cfg, transport=transport)
        self._domains_path = "/" + domains_path.lstrip("/")

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> RegistrarClient:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def register_domain(self, domain: str, ip: str) -> Any:
        """Point ``domain`` at ``ip``. Repeating the call for the same pair is expected to be harmless."""
        return self._t.request("POST", self._domains_path, json_body={"domain": domain, "ip": ip})
