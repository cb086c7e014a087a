from __future__ import annotations

import stat
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest
import requests

from vbox_guest_setup.context import Options, SetupContext
from vbox_guest_setup.lib import command as command_mod
from vbox_guest_setup.lib import iso as iso_mod
from vbox_guest_setup.settings import Settings

GDM_SAMPLE = """\
# GDM configuration storage
[daemon]
# Uncomment the line below to force the login screen to use Xorg
#WaylandEnable=false

[security]
"""


def _is_subsequence(needle: Sequence[str], haystack: Sequence[str]) -> bool:
    it = iter(haystack)
    return all(tok in it for tok in needle)


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"ISO") -> None:
        self.status_code = status_code
        self.content = content

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc) -> None:
        return None

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def iter_content(self, chunk_size: int = 1):
        yield self.content


class FakeSystem:
    """Stands in for the host: records every command, download and spawn."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.envs: List[Dict[str, str]] = []
        self.spawned: List[List[str]] = []
        self.downloads: List[str] = []
        self.available = {"systemctl", "VBoxClient", "VBoxControl"}
        self.rules: List[Tuple[Tuple[str, ...], int, str, str]] = []
        self.download_status = 200
        self.download_error: Optional[Exception] = None
        self.spawn_error: Optional[Exception] = None
        self.set(("uname", "-r"), stdout="6.8.0-45-generic\n")
        self.set(("VBoxControl", "--version"), stdout="7.0.16_Ubuntur162802\n")

    def set(self, match: Sequence[str], returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        # Later rules win.
        self.rules.insert(0, (tuple(match), returncode, stdout, stderr))

    def fail(self, match: Sequence[str], returncode: int = 1, stderr: str = "boom") -> None:
        self.set(match, returncode=returncode, stderr=stderr)

    def ran(self, *match: str) -> bool:
        return any(_is_subsequence(match, argv) for argv in self.calls)

    def env_of(self, *match: str) -> Dict[str, str]:
        for argv, env in zip(self.calls, self.envs):
            if _is_subsequence(match, argv):
                return env
        raise AssertionError(f"{match} was never run")

    def index(self, *match: str) -> int:
        for i, argv in enumerate(self.calls):
            if _is_subsequence(match, argv):
                return i
        return -1

    # subprocess.run
    def run(self, argv, **kwargs) -> subprocess.CompletedProcess:
        argv = list(argv)
        self.calls.append(argv)
        self.envs.append(dict(kwargs.get("env") or {}))
        for match, rc, out, err in self.rules:
            if _is_subsequence(match, argv):
                return subprocess.CompletedProcess(argv, rc, out, err)
        return subprocess.CompletedProcess(argv, 0, "", "")

    # subprocess.Popen
    def popen(self, argv, **kwargs):
        if self.spawn_error is not None:
            raise self.spawn_error
        self.spawned.append(list(argv))
        return object()

    # shutil.which
    def which(self, name: str):
        return f"/usr/bin/{name}" if name in self.available else None

    # requests.get
    def get(self, url: str, **kwargs) -> FakeResponse:
        self.downloads.append(url)
        if self.download_error is not None:
            raise self.download_error
        return FakeResponse(status_code=self.download_status)


@pytest.fixture
def fake_system(monkeypatch) -> FakeSystem:
    fs = FakeSystem()
    monkeypatch.setattr(command_mod.subprocess, "run", fs.run)
    monkeypatch.setattr(command_mod.subprocess, "Popen", fs.popen)
    monkeypatch.setattr(command_mod.shutil, "which", fs.which)
    monkeypatch.setattr(command_mod, "_is_root", lambda: True)
    monkeypatch.setattr(iso_mod.requests, "get", fs.get)
    return fs


class GuestFiles:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.dmi = root / "dmi_product_name"
        self.modules = root / "proc_modules"
        self.iso_dir = root / "tmp"
        self.mount_point = root / "mnt" / "vbox_ga"
        self.autostart_dir = root / "etc" / "xdg" / "autostart"
        self.gdm = root / "etc" / "gdm3" / "custom.conf"

        self.dmi.write_text("VirtualBox\n", encoding="utf-8")
        self.modules.write_text("", encoding="utf-8")
        self.iso_dir.mkdir(parents=True)
        self.gdm.parent.mkdir(parents=True)
        self.gdm.write_text(GDM_SAMPLE, encoding="utf-8")

    @property
    def autostart_file(self) -> Path:
        return self.autostart_dir / "vboxclient-clipboard.desktop"

    def load_module(self, name: str = "vboxguest") -> None:
        with self.modules.open("a", encoding="utf-8") as f:
            f.write(f"{name} 45056 2 vboxsf, Live 0x0000000000000000 (OE)\n")

    def put_installer(self, executable: bool = True) -> Path:
        self.mount_point.mkdir(parents=True, exist_ok=True)
        p = self.mount_point / "VBoxLinuxAdditions.run"
        p.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
        if executable:
            p.chmod(p.stat().st_mode | stat.S_IXUSR)
        return p

    def settings(self, **extra) -> Settings:
        raw: Dict = {
            "paths": {
                "log": str(self.root / "setup.log"),
                "dmi_product_name": str(self.dmi),
                "proc_modules": str(self.modules),
                "iso_dir": str(self.iso_dir),
                "mount_point": str(self.mount_point),
                "autostart_dir": str(self.autostart_dir),
                "gdm_config": str(self.gdm),
            },
            "reboot_delay": 0,
        }
        raw.update(extra)
        return Settings(raw=raw)


@pytest.fixture
def guest(tmp_path) -> GuestFiles:
    return GuestFiles(tmp_path)


@pytest.fixture
def make_ctx(guest):
    def _make(options: Optional[Options] = None, **extra) -> SetupContext:
        return SetupContext(options=options or Options(reboot=False), settings=guest.settings(**extra))

    return _make


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("VBOX_GUEST_SETUP_CONFIG", raising=False)
