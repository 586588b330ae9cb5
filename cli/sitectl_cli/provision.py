from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from sitectl_client import ApiError, AuthError, NetworkError, RegistrarClient

from . import console
from .certs import obtain_certificate
from .config import Settings
from .dns_check import resolve_public_ip, wait_for_dns
from .errors import MissingDependencyError, RegistrationError
from .nginx import enable_site, render_default_site, render_https_site, restart_web_server, web_root, write_site
from .request import ProvisionRequest
from .system import HostOps

REQUIRED_TOOLS = ("dig", "certbot", "nginx", "systemctl")


@dataclass(frozen=True)
class ProvisionResult:
    request: ProvisionRequest
    config_path: str
    enabled_path: str
    web_root: str


def preflight(ops: HostOps) -> None:
    missing = [tool for tool in REQUIRED_TOOLS if not ops.has_command(tool)]
    if missing:
        raise MissingDependencyError(f"Required tools not found: {', '.join(missing)}.")
    if not ops.is_root():
        raise MissingDependencyError("Must be run as root (nginx and certbot write under /etc).")


def register_domain(registrar: RegistrarClient, req: ProvisionRequest) -> None:
    hint = "Check the API key and that this host's IP is allow-listed for the API."
    try:
        registrar.register_domain(req.domain, req.ip or "")
    except AuthError as exc:
        raise RegistrationError(f"Registrar rejected the API key ({exc.status_code}). {hint}",
                                stderr=exc.details) from exc
    except ApiError as exc:
        raise RegistrationError(f"Domain registration failed: {exc} ({exc.status_code}). {hint}",
                                stderr=exc.details) from exc
    except NetworkError as exc:
        raise RegistrationError(f"Could not reach the registrar API: {exc}. {hint}") from exc
    finally:
        registrar.close()


def provision(
        req: ProvisionRequest,
        *,
        ops: HostOps,
        settings: Settings,
        registrar_factory: Callable[[Settings, str], RegistrarClient],
        sleep: Callable[[float], None] = time.sleep,
) -> ProvisionResult:
    preflight(ops)

    if req.ip:
        console.info(f"Using IP {req.ip}.")
    else:
        console.info("Resolving public IP...")
        req = req.with_ip(resolve_public_ip(ops, settings))
        console.ok(f"Public IP is {req.ip}.")

    if req.registrar_enabled:
        console.info(f"Registering {req.domain} -> {req.ip}...")
        register_domain(registrar_factory(settings, req.api_key or ""), req)
        console.ok(f"Registered {req.domain}.")

    if req.skip_dns_verify:
        console.warn("Skipping DNS verification (-f).")
    else:
        console.info(f"Waiting for {req.domain} to resolve to {req.ip}...")
        attempt = wait_for_dns(ops, settings, req.domain, req.ip or "", sleep=sleep)
        console.ok(f"DNS matches after {attempt} attempt(s).")

    console.info("Writing default nginx config...")
    write_site(ops, settings, req, render_default_site(req, settings))
    restart_web_server(ops, settings)

    obtain_certificate(ops, settings, req, sleep=sleep)

    console.info("Writing HTTPS nginx config...")
    config_path = write_site(ops, settings, req, render_https_site(req, settings))
    link = enable_site(ops, settings, req.domain)
    restart_web_server(ops, settings)

    return ProvisionResult(
        request=req,
        config_path=config_path,
        enabled_path=link,
        web_root=web_root(settings, req.domain),
    )
