from __future__ import annotations

import subprocess

import pytest

from sitectl_cli.config import Settings


class FakeHostOps:
    """In-memory stand-in for HostOps."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.calls: list[tuple] = []
        self.missing_tools: set[str] = set()
        self.root = True
        self.txt_answer = '"203.0.113.10"\n'
        self.a_answers: list[str] = ["203.0.113.10\n"]
        self.certbot_codes = {True: 0, False: 0}
        self.restart_code = 0
        self.config_test_code = 0
        self.dirs: set[str] = set()
        self.unwritable: set[str] = set()
        self.files: dict[str, str] = {}
        self.writes: list[tuple[str, str]] = []
        self.links: dict[str, str] = {}
        self.fail_write = False

    def has_command(self, name: str) -> bool:
        return name not in self.missing_tools

    def is_root(self) -> bool:
        return self.root

    def dns_query(self, name: str, rtype: str, server: str) -> subprocess.CompletedProcess:
        self.calls.append(("dns", rtype, name, server))
        if rtype == "TXT":
            return subprocess.CompletedProcess([], 0, self.txt_answer, "")
        idx = len([c for c in self.calls if c[:2] == ("dns", "A")]) - 1
        answer = self.a_answers[min(idx, len(self.a_answers) - 1)]
        return subprocess.CompletedProcess([], 0, answer, "")

    def certbot(self, domains, *, email, dry_run):
        self.calls.append(("certbot", ",".join(domains), dry_run))
        code = self.certbot_codes[dry_run]
        return subprocess.CompletedProcess([], code, "", "certbot said no" if code else "")

    def test_web_config(self):
        self.calls.append(("nginx -t",))
        return subprocess.CompletedProcess([], self.config_test_code, "", "")

    def restart_web_server(self):
        self.calls.append(("restart",))
        return subprocess.CompletedProcess([], self.restart_code, "", "")

    def make_dirs(self, path: str) -> None:
        self.dirs.add(path)

    def is_writable(self, path: str) -> bool:
        return path in self.dirs and path not in self.unwritable

    def write_text(self, path: str, content: str) -> None:
        if self.fail_write:
            raise PermissionError(13, "Permission denied", path)
        self.files[path] = content
        self.writes.append((path, content))

    def symlink(self, source: str, link: str) -> None:
        if link in self.links:
            raise FileExistsError(17, "File exists", link)
        self.links[link] = source

    def count(self, kind: str, *rest) -> int:
        return len([c for c in self.calls if c[0] == kind and c[1:1 + len(rest)] == rest])


class FakeRegistrar:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.registered: list[tuple[str, str]] = []
        self.closed = False

    def register_domain(self, domain: str, ip: str):
        if self.error:
            raise self.error
        self.registered.append((domain, ip))
        return {"ok": True}

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(dns_interval_s=0, cert_delay_s=0)


@pytest.fixture
def ops(settings: Settings) -> FakeHostOps:
    return FakeHostOps(settings)


@pytest.fixture
def registrar() -> FakeRegistrar:
    return FakeRegistrar()
