from __future__ import annotations

import re
import urllib.parse
from dataclasses import dataclass, replace

from .errors import NoIPAddressError, UsageError

_IPV4_RE = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")
_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


@dataclass(frozen=True)
class ProvisionRequest:
    domain: str
    api_key: str | None = None
    ip: str | None = None
    use_registrar_api: bool = True
    is_subdomain: bool = False
    skip_dns_verify: bool = False
    email: str | None = None

    @property
    def www_alias(self) -> str | None:
        if self.is_subdomain:
            return None
        return f"www.{self.domain}"

    @property
    def www_server_name(self) -> str:
        alias = self.www_alias
        return f"server_name {alias};" if alias else ""

    @property
    def cert_domains(self) -> list[str]:
        alias = self.www_alias
        return [self.domain, alias] if alias else [self.domain]

    @property
    def registrar_enabled(self) -> bool:
        return self.use_registrar_api and not self.is_subdomain

    def with_ip(self, ip: str) -> ProvisionRequest:
        return replace(self, ip=require_ipv4(ip))


def is_ipv4(value: str | None) -> bool:
    text = (value or "").strip()
    if not _IPV4_RE.match(text):
        return False
    return all(int(octet) <= 255 for octet in text.split("."))


def require_ipv4(value: str | None) -> str:
    text = (value or "").strip()
    if not is_ipv4(text):
        raise NoIPAddressError(f"No IP address: {text!r} is not a dotted-decimal IPv4 address.")
    return text


def normalize_domain(raw: str | None) -> str:
    value = (raw or "").strip()
    if not value:
        raise UsageError("No domain given. Pass it with -d <domain>.")
    if "://" not in value:
        value = f"http://{value}"
    try:
        host = (urllib.parse.urlparse(value).hostname or "").rstrip(".")
    except ValueError:
        host = ""
    if host.startswith("www."):
        host = host[len("www."):]
    if "." not in host or len(host) > 253 or not all(_LABEL_RE.fullmatch(label) for label in host.split(".")):
        raise UsageError(f"Invalid domain: {raw!r}.")
    return host


def build_request(
        *,
        domain: str | None,
        api_key: str | None,
        ip: str | None = None,
        skip_registrar: bool = False,
        subdomain: bool = False,
        force: bool = False,
        email: str | None = None,
) -> ProvisionRequest:
    clean_domain = normalize_domain(domain)
    key = (api_key or "").strip() or None
    if not subdomain and not key:
        raise UsageError("No API key given. Pass it with -a <apikey> (or use -sub for a subdomain).")
    if email is not None and "@" not in email:
        raise UsageError("Email must include '@'.")
    return ProvisionRequest(
        domain=clean_domain,
        api_key=key,
        ip=require_ipv4(ip) if ip is not None else None,
        use_registrar_api=not skip_registrar,
        is_subdomain=subdomain,
        skip_dns_verify=force,
        email=email,
    )
