from __future__ import annotations

import logging
import re
import time
from typing import Callable

from sitectl_client import poll_until

from .config import Settings
from .errors import DNSMismatchError, NoIPAddressError
from .request import require_ipv4
from .system import HostOps

log = logging.getLogger(__name__)

_IP_RE = re.compile(r"\b\d{1,3}(?:\.\d{1,3}){3}\b")


def extract_ips(text: str) -> list[str]:
    return _IP_RE.findall(text or "")


def resolve_public_ip(ops: HostOps, settings: Settings) -> str:
    """Ask the whoami TXT record which address our queries come from."""
    res = ops.dns_query(settings.whoami_name, "TXT", settings.whoami_server)
    if res.returncode != 0:
        raise NoIPAddressError(
            "No IP address: public IP lookup failed. Pass it with -ip <addr>.",
            stdout=res.stdout,
            stderr=res.stderr,
        )
    lines = [line.strip().strip('"') for line in (res.stdout or "").splitlines() if line.strip()]
    value = lines[0] if lines else ""
    log.debug("whoami answer: %r", value)
    return require_ipv4(value)


def lookup_a(ops: HostOps, settings: Settings, domain: str) -> list[str]:
    res = ops.dns_query(domain, "A", settings.resolver)
    if res.returncode != 0:
        log.debug("A lookup for %s failed: %s", domain, (res.stderr or "").strip())
        return []
    return extract_ips(res.stdout or "")


def wait_for_dns(
        ops: HostOps,
        settings: Settings,
        domain: str,
        ip: str,
        *,
        sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll public DNS until ``domain`` resolves to ``ip``. Returns the attempt that matched."""
    seen: list[str] = []

    def _check(attempt: int) -> int | None:
        ips = lookup_a(ops, settings, domain)
        log.debug("DNS attempt %d/%d for %s: %s", attempt, settings.dns_attempts, domain, ips or "-")
        if ips:
            seen[:] = ips
        return attempt if ip in ips else None

    matched = poll_until(
        _check,
        attempts=settings.dns_attempts,
        interval_s=settings.dns_interval_s,
        sleep=sleep,
    )
    if matched is None:
        current = ", ".join(seen) or "nothing"
        raise DNSMismatchError(
            f"DNS for {domain} resolves to {current}, expected {ip} after "
            f"{settings.dns_attempts} attempts. Fix the A record or rerun with -f to skip this check."
        )
    return matched
