from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from pathlib import Path

from .config import Settings

log = logging.getLogger(__name__)


class HostOps:
    """Every external action the provisioning pipeline performs on this host.

    Process-backed methods return the ``CompletedProcess`` untouched so callers
    decide what counts as failure. Filesystem methods raise ``OSError``.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess:
        log.debug("run: %s", shlex.join(cmd))
        try:
            return subprocess.run(cmd, text=True, capture_output=True)
        except OSError as exc:
            return subprocess.CompletedProcess(cmd, 127, "", str(exc))

    def has_command(self, name: str) -> bool:
        return shutil.which(name) is not None

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def dns_query(self, name: str, rtype: str, server: str) -> subprocess.CompletedProcess:
        s = self.settings
        return self._run(
            [
                "dig",
                "+short",
                rtype,
                name,
                f"@{server}",
                f"+retry={s.dns_retries}",
                f"+time={s.dns_timeout_s}",
            ]
        )

    def certbot(self, domains: list[str], *, email: str | None, dry_run: bool) -> subprocess.CompletedProcess:
        cmd = [
            "certbot",
            "certonly",
            "--nginx",
            "-d",
            ",".join(domains),
            "--non-interactive",
            "--agree-tos",
        ]
        cmd += ["-m", email] if email else ["--register-unsafely-without-email"]
        if dry_run:
            cmd.append("--dry-run")
        return self._run(cmd)

    def test_web_config(self) -> subprocess.CompletedProcess:
        return self._run(["nginx", "-t"])

    def restart_web_server(self) -> subprocess.CompletedProcess:
        return self._run(["systemctl", "restart", self.settings.web_service])

    def make_dirs(self, path: str) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def is_writable(self, path: str) -> bool:
        return os.path.isdir(path) and os.access(path, os.W_OK)

    def write_text(self, path: str, content: str) -> None:
        Path(path).write_text(content, encoding="utf-8")

    def symlink(self, source: str, link: str) -> None:
        os.symlink(source, link)
