from __future__ import annotations

import logging
from typing import Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(*, dry_run: bool = False) -> CmdResult:
    return run_cmd(["apt-get", "update", "-y"], check=False, env=APT_ENV, dry_run=dry_run, privileged=True)


def apt_install(packages: Sequence[str], *, dry_run: bool = False) -> CmdResult:
    if not packages:
        return CmdResult(argv=[], returncode=0, stdout="", stderr="")
    return run_cmd(
        ["apt-get", "install", "-y", *packages],
        check=False,
        env=APT_ENV,
        dry_run=dry_run,
        privileged=True,
    )


def running_kernel_release(*, dry_run: bool = False) -> str:
    r = run_cmd(["uname", "-r"], check=False, dry_run=dry_run)
    return (r.stdout or "").strip()
