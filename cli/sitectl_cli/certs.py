from __future__ import annotations

import logging
import time
from typing import Callable

from . import console
from .config import Settings
from .errors import CertDryRunError, CertIssuanceError
from .request import ProvisionRequest
from .system import HostOps

log = logging.getLogger(__name__)


def obtain_certificate(
        ops: HostOps,
        settings: Settings,
        req: ProvisionRequest,
        *,
        sleep: Callable[[float], None] = time.sleep,
) -> None:
    domains = req.cert_domains
    console.info(f"Certificate dry run for {', '.join(domains)}...")
    res = ops.certbot(domains, email=req.email, dry_run=True)
    if res.returncode != 0:
        raise CertDryRunError(res.returncode, stdout=res.stdout, stderr=res.stderr)
    console.ok("Dry run passed.")

    # Let's Encrypt rate limits back-to-back orders
    log.debug("sleeping %.1fs before the real request", settings.cert_delay_s)
    sleep(settings.cert_delay_s)

    console.info("Requesting certificate...")
    res = ops.certbot(domains, email=req.email, dry_run=False)
    if res.returncode != 0:
        raise CertIssuanceError(
            f"Dry run succeeded but certificate issuance failed (certbot exit status {res.returncode}).",
            stdout=res.stdout,
            stderr=res.stderr,
        )
    console.ok("Certificate issued.")
