from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from typing import Any

from platformdirs import user_config_dir

from .errors import ConfigError

APP_NAME = "sitectl"
CONFIG_FILENAME = "config.toml"
REGISTRAR_URL_DEFAULT = "https://api.vultr.com"
ENV_REGISTRAR_URL = "SITECTL_REGISTRAR_URL"
ENV_RESOLVER = "SITECTL_RESOLVER"
ENV_CONFIG = "SITECTL_CONFIG"


@dataclass
class Settings:
    registrar_url: str = REGISTRAR_URL_DEFAULT
    registrar_domains_path: str = "/v2/domains"
    http_timeout_s: float = 15.0

    whoami_name: str = "o-o.myaddr.l.google.com"
    whoami_server: str = "ns1.google.com"
    resolver: str = "8.8.8.8"
    dns_attempts: int = 30
    dns_interval_s: float = 1.0
    dns_timeout_s: int = 3
    dns_retries: int = 1

    cert_delay_s: float = 5.0
    letsencrypt_live_dir: str = "/etc/letsencrypt/live"

    sites_available_dir: str = "/etc/nginx/sites-available"
    sites_enabled_dir: str = "/etc/nginx/sites-enabled"
    web_root_dir: str = "/var/www"
    log_dir: str = "/var/log/nginx"
    php_fpm_socket: str = "/run/php/php-fpm.sock"
    web_service: str = "nginx"


def config_path() -> str:
    override = os.getenv(ENV_CONFIG, "").strip()
    if override:
        return override
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_settings() -> Settings:
    return Settings()


def normalize_base_url(raw: str | None) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"
    return f"{scheme}{value}"


def from_toml(data: dict[str, Any]) -> Settings:
    base = default_settings()
    values: dict[str, Any] = {}
    for f in fields(Settings):
        if f.name not in data:
            continue
        raw = data[f.name]
        default = getattr(base, f.name)
        try:
            if isinstance(default, bool):
                value: Any = bool(raw)
            elif isinstance(default, int):
                value = int(raw)
            elif isinstance(default, float):
                value = float(raw)
            else:
                value = str(raw).strip()
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value for '{f.name}' in config: {raw!r}") from exc
        values[f.name] = value
    settings = replace(base, **values)
    settings.registrar_url = normalize_base_url(settings.registrar_url) or REGISTRAR_URL_DEFAULT
    return settings


def apply_env(settings: Settings) -> Settings:
    registrar_url = normalize_base_url(os.getenv(ENV_REGISTRAR_URL, ""))
    resolver = os.getenv(ENV_RESOLVER, "").strip()
    if registrar_url:
        settings = replace(settings, registrar_url=registrar_url)
    if resolver:
        settings = replace(settings, resolver=resolver)
    return settings


def load_settings() -> Settings:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return apply_env(default_settings())
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    return apply_env(from_toml(data))
