from __future__ import annotations

import os
import subprocess

import pytest

from sitectl_cli import system
from sitectl_cli.config import Settings
from sitectl_cli.system import HostOps


@pytest.fixture
def recorded(monkeypatch):
    calls: list[list[str]] = []

    def _fake_run(cmd, **kwargs):
        calls.append(cmd)
        assert kwargs == {"text": True, "capture_output": True}
        return subprocess.CompletedProcess(cmd, 0, "ok\n", "")

    monkeypatch.setattr(system.subprocess, "run", _fake_run)
    return calls


def test_dns_query_argv(recorded) -> None:
    ops = HostOps(Settings())

    res = ops.dns_query("example.com", "A", "8.8.8.8")

    assert res.returncode == 0
    assert recorded == [["dig", "+short", "A", "example.com", "@8.8.8.8", "+retry=1", "+time=3"]]


def test_dns_query_uses_configured_timeouts(recorded) -> None:
    HostOps(Settings(dns_retries=2, dns_timeout_s=5)).dns_query("o-o.myaddr.l.google.com", "TXT", "ns1.google.com")

    assert recorded[0][-2:] == ["+retry=2", "+time=5"]
    assert recorded[0][2:5] == ["TXT", "o-o.myaddr.l.google.com", "@ns1.google.com"]


def test_certbot_dry_run_argv(recorded) -> None:
    HostOps(Settings()).certbot(["example.com", "www.example.com"], email=None, dry_run=True)

    assert recorded == [
        [
            "certbot",
            "certonly",
            "--nginx",
            "-d",
            "example.com,www.example.com",
            "--non-interactive",
            "--agree-tos",
            "--register-unsafely-without-email",
            "--dry-run",
        ]
    ]


def test_certbot_real_run_with_email(recorded) -> None:
    HostOps(Settings()).certbot(["blog.example.com"], email="admin@example.com", dry_run=False)

    cmd = recorded[0]
    assert "--dry-run" not in cmd
    assert "--register-unsafely-without-email" not in cmd
    assert cmd[cmd.index("-m") + 1] == "admin@example.com"
    assert cmd[cmd.index("-d") + 1] == "blog.example.com"


def test_service_commands(recorded) -> None:
    ops = HostOps(Settings(web_service="nginx"))

    ops.test_web_config()
    ops.restart_web_server()

    assert recorded == [["nginx", "-t"], ["systemctl", "restart", "nginx"]]


def test_missing_binary_is_exit_127(monkeypatch) -> None:
    def _fake_run(cmd, **_kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(system.subprocess, "run", _fake_run)

    res = HostOps(Settings()).restart_web_server()

    assert res.returncode == 127
    assert "No such file or directory" in res.stderr


def test_has_command(monkeypatch) -> None:
    monkeypatch.setattr(system.shutil, "which", lambda name: "/usr/bin/dig" if name == "dig" else None)
    ops = HostOps(Settings())

    assert ops.has_command("dig")
    assert not ops.has_command("certbot")


def test_filesystem_ops(tmp_path) -> None:
    ops = HostOps(Settings())
    root = str(tmp_path / "www" / "example.com")
    site = str(tmp_path / "example.com")
    link = str(tmp_path / "enabled-example.com")

    assert not ops.is_writable(root)
    ops.make_dirs(root)
    ops.make_dirs(root)
    assert ops.is_writable(root)

    ops.write_text(site, "server {}\n")
    assert (tmp_path / "example.com").read_text(encoding="utf-8") == "server {}\n"

    ops.symlink(site, link)
    assert os.readlink(link) == site
    with pytest.raises(FileExistsError):
        ops.symlink(site, link)


def test_is_writable_rejects_files(tmp_path) -> None:
    path = tmp_path / "file"
    path.write_text("x", encoding="utf-8")

    assert not HostOps(Settings()).is_writable(str(path))
