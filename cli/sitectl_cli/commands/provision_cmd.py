from __future__ import annotations

import time

import typer

from .. import console
from ..config import load_settings
from ..errors import ProvisionError, UsageError
from ..http import make_registrar
from ..logging_ import setup_logging
from ..provision import ProvisionResult, provision
from ..request import build_request
from ..system import HostOps

USAGE = "Usage: sitectl -d <domain> [-a <apikey>] [-ip <addr>] [-s] [-sub] [-f]"

make_ops = HostOps


def provision_site(
        domain: str | None = typer.Option(None, "-d", "--domain", help="Domain to provision (www. is stripped)."),
        api_key: str | None = typer.Option(
            None,
            "-a",
            "--api-key",
            help="Registrar API key. Required unless -sub.",
        ),
        ip: str | None = typer.Option(None, "-ip", "--ip", help="Public IPv4 to use instead of looking it up."),
        skip_registrar: bool = typer.Option(False, "-s", "--skip-registrar", help="Do not call the registrar API."),
        subdomain: bool = typer.Option(
            False,
            "-sub",
            "--subdomain",
            help="Domain is a subdomain: no www alias, no registrar call.",
        ),
        force: bool = typer.Option(False, "-f", "--force", help="Skip the DNS propagation check."),
        email: str | None = typer.Option(None, "--email", help="Let's Encrypt account email."),
        verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
):
    """Provision an nginx virtual host with a Let's Encrypt certificate.

    Examples:
      sitectl -d example.com -a KEY123
      sitectl -d blog.example.com -sub -ip 203.0.113.10 -f
    """
    setup_logging(verbose)
    try:
        req = build_request(
            domain=domain,
            api_key=api_key,
            ip=ip,
            skip_registrar=skip_registrar,
            subdomain=subdomain,
            force=force,
            email=email,
        )
    except UsageError as exc:
        console.err(str(exc))
        console.print_err(USAGE, markup=False)
        raise typer.Exit(code=1)
    except ProvisionError as exc:
        console.err(str(exc))
        raise typer.Exit(code=1)

    try:
        settings = load_settings()
    except ProvisionError as exc:
        console.err(str(exc))
        raise typer.Exit(code=1)

    try:
        result = provision(
            req,
            ops=make_ops(settings),
            settings=settings,
            registrar_factory=make_registrar,
            sleep=time.sleep,
        )
    except ProvisionError as exc:
        report_failure(exc, domain=req.domain)
        raise typer.Exit(code=1)

    _print_summary(result)


def _print_summary(result: ProvisionResult) -> None:
    console.ok(f"https://{result.request.domain} is live.")
    console.info(f"Config: {result.config_path} (enabled via {result.enabled_path})")
    console.warn(
        f"Set ownership and permissions on {result.web_root} yourself, "
        f"e.g. chown -R www-data:www-data {result.web_root}"
    )


def _tail(text: str, *, limit: int = 8) -> str:
    if not text:
        return ""
    lines = text.splitlines()
    if len(lines) <= limit:
        return text
    return "\n".join(lines[-limit:])


def report_failure(exc: ProvisionError, *, domain: str) -> None:
    console.err(str(exc))
    stdout = _tail(exc.stdout)
    stderr = _tail(exc.stderr)
    if stdout:
        console.print_err(f"Last stdout:\n{stdout}", markup=False)
    if stderr:
        console.print_err(f"Last stderr:\n{stderr}", markup=False)
    console.print_err("Useful checks:")
    console.print_err("- nginx -t", markup=False)
    console.print_err("- journalctl -u nginx --no-pager -n 100", markup=False)
    console.print_err("- certbot certificates", markup=False)
    console.print_err(f"- dig +short A {domain}", markup=False)
