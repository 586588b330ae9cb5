from __future__ import annotations

import posixpath

from .config import Settings
from .errors import ActivationLinkError, ConfigWriteError, DirectoryWriteError, ServiceRestartError
from .request import ProvisionRequest
from .system import HostOps

SECURITY_HEADERS = [
    ("X-XSS-Protection", "1; mode=block"),
    (
        "Content-Security-Policy",
        "default-src 'self'; script-src 'self'; object-src 'none'; base-uri 'self'; frame-ancestors 'self'",
    ),
    ("Referrer-Policy", "strict-origin-when-cross-origin"),
    ("X-Frame-Options", "SAMEORIGIN"),
]


def site_path(settings: Settings, domain: str) -> str:
    return posixpath.join(settings.sites_available_dir, domain)


def enabled_path(settings: Settings, domain: str) -> str:
    return posixpath.join(settings.sites_enabled_dir, domain)


def web_root(settings: Settings, domain: str) -> str:
    return posixpath.join(settings.web_root_dir, domain)


def cert_paths(settings: Settings, domain: str) -> tuple[str, str]:
    live = posixpath.join(settings.letsencrypt_live_dir, domain)
    return posixpath.join(live, "fullchain.pem"), posixpath.join(live, "privkey.pem")


def _server_names(req: ProvisionRequest) -> list[str]:
    lines = [f"    server_name {req.domain};"]
    if req.www_server_name:
        lines.append(f"    {req.www_server_name}")
    return lines


def render_default_site(req: ProvisionRequest, settings: Settings) -> str:
    return "\n".join(
        [
            "server {",
            "    listen 80;",
            "    listen [::]:80;",
            "",
            *_server_names(req),
            "",
            f"    root {web_root(settings, req.domain)};",
            "    index index.html index.htm index.php;",
            "",
            "    location / {",
            "        try_files $uri $uri/ =404;",
            "    }",
            "}",
            "",
        ]
    )


def render_https_site(req: ProvisionRequest, settings: Settings) -> str:
    fullchain, privkey = cert_paths(settings, req.domain)
    headers = [f'    add_header {name} "{value}" always;' for name, value in SECURITY_HEADERS]
    return "\n".join(
        [
            "server {",
            "    listen 80;",
            "    listen [::]:80;",
            "",
            *_server_names(req),
            "",
            f"    return 301 https://{req.domain}$request_uri;",
            "}",
            "",
            "server {",
            "    listen 443 ssl;",
            "    listen [::]:443 ssl;",
            "",
            *_server_names(req),
            "",
            f"    root {web_root(settings, req.domain)};",
            "    index index.php index.html index.htm;",
            "",
            f"    ssl_certificate {fullchain};",
            f"    ssl_certificate_key {privkey};",
            "",
            *headers,
            "",
            "    location / {",
            "        try_files $uri $uri/ =404;",
            "    }",
            "",
            "    location ~ \\.php$ {",
            "        include snippets/fastcgi-php.conf;",
            f"        fastcgi_pass unix:{settings.php_fpm_socket};",
            "    }",
            "",
            f"    access_log {posixpath.join(settings.log_dir, req.domain)}.access.log;",
            f"    error_log {posixpath.join(settings.log_dir, req.domain)}.error.log;",
            "}",
            "",
        ]
    )


def ensure_web_root(ops: HostOps, settings: Settings, domain: str) -> str:
    path = web_root(settings, domain)
    try:
        ops.make_dirs(path)
    except OSError as exc:
        raise DirectoryWriteError(f"Failed to create {path}: {exc}") from exc
    if not ops.is_writable(path):
        raise DirectoryWriteError(f"{path} is not writable.")
    return path


def write_site(ops: HostOps, settings: Settings, req: ProvisionRequest, content: str) -> str:
    ensure_web_root(ops, settings, req.domain)
    path = site_path(settings, req.domain)
    try:
        ops.write_text(path, content)
    except OSError as exc:
        raise ConfigWriteError(f"Failed to write nginx config {path}: {exc}") from exc
    return path


def enable_site(ops: HostOps, settings: Settings, domain: str) -> str:
    source = site_path(settings, domain)
    link = enabled_path(settings, domain)
    try:
        ops.symlink(source, link)
    except FileExistsError as exc:
        raise ActivationLinkError(
            f"{link} already exists; this site looks provisioned already. Remove the link to re-run."
        ) from exc
    except OSError as exc:
        raise ActivationLinkError(f"Failed to link {source} -> {link}: {exc}") from exc
    return link


def restart_web_server(ops: HostOps, settings: Settings) -> None:
    res = ops.test_web_config()
    if res.returncode != 0:
        raise ServiceRestartError("nginx config test failed.", stdout=res.stdout, stderr=res.stderr)
    res = ops.restart_web_server()
    if res.returncode != 0:
        raise ServiceRestartError(
            f"Failed to restart {settings.web_service}.", stdout=res.stdout, stderr=res.stderr
        )
