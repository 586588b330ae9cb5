from __future__ import annotations

from sitectl_client import ClientConfig, RegistrarClient

from . import __version__
from .config import Settings, normalize_base_url


def make_registrar(settings: Settings, api_key: str) -> RegistrarClient:
    return RegistrarClient(
        ClientConfig(
            base_url=normalize_base_url(settings.registrar_url),
            token=api_key,
            timeout_s=settings.http_timeout_s,
            user_agent=f"sitectl/{__version__}",
        ),
        domains_path=settings.registrar_domains_path,
    )
