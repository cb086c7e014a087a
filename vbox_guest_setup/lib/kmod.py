from __future__ import annotations

import logging
from pathlib import Path

from .command import CmdResult, command_exists, run_cmd

logger = logging.getLogger(__name__)

GUEST_MODULES = ("vboxguest", "vboxsf", "vboxvideo")
GUEST_SERVICE = "vboxservice.service"


def is_module_loaded(name: str, *, proc_modules: str = "/proc/modules") -> bool:
    """Check the running kernel's module list (what lsmod prints)."""

    try:
        lines = Path(proc_modules).read_text(encoding="utf-8", errors="ignore").splitlines()
    except OSError:
        r = run_cmd(["lsmod"], check=False)
        lines = r.stdout.splitlines()[1:] if r.ok else []
    return any(line.split(" ", 1)[0] == name for line in lines)


def modprobe(name: str, *, dry_run: bool = False) -> CmdResult:
    return run_cmd(["modprobe", name], check=False, dry_run=dry_run, privileged=True)


def has_systemd() -> bool:
    return command_exists("systemctl")


def systemctl(action: str, unit: str, *, dry_run: bool = False) -> CmdResult:
    return run_cmd(["systemctl", action, unit], check=False, dry_run=dry_run, privileged=True)
