from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def _is_root() -> bool:
    return os.geteuid() == 0


def _with_privilege(argv: list[str], privileged: bool, env: Mapping[str, str] | None = None) -> list[str]:
    if privileged and not _is_root():
        # sudo resets the environment, so extra variables ride along through env(1).
        passthrough = ["env", *(f"{k}={v}" for k, v in env.items())] if env else []
        return ["sudo", *passthrough, *argv]
    return argv


def command_exists(name: str) -> bool:
    return shutil.which(name) is not None


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    input_text: str | None = None,
    dry_run: bool = False,
    privileged: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - privileged commands go through sudo unless we already run as root.
    - dry_run logs but does not execute.
    """

    argv_list = _with_privilege(list(argv), privileged, env)
    logger.info("CMD %s", _fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=dict(os.environ, **(env or {})),
        )
    except FileNotFoundError as e:
        if check:
            raise RuntimeError(f"Command not found: {argv_list[0]}") from e
        return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise RuntimeError(f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{p.stderr}")

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def spawn_detached(argv: Sequence[str], *, dry_run: bool = False) -> bool:
    """Start a background process that outlives us. Returns False if it could not start."""

    argv_list = list(argv)
    logger.info("SPAWN %s", _fmt_argv(argv_list))
    if dry_run:
        return True
    try:
        subprocess.Popen(
            argv_list,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        logger.debug("Spawn failed: %s", e)
        return False
    return True


def _writable(path: Path) -> bool:
    if path.exists():
        return os.access(path, os.W_OK)
    return os.access(path.parent, os.W_OK)


def ensure_dir(path: str, *, dry_run: bool = False) -> None:
    p = Path(path)
    if p.is_dir():
        return
    if dry_run:
        logger.info("Would create %s", str(p))
        return
    parent = p
    while not parent.exists():
        parent = parent.parent
    if os.access(parent, os.W_OK):
        p.mkdir(parents=True, exist_ok=True)
    else:
        run_cmd(["mkdir", "-p", str(p)], privileged=True)


def write_file(path: str, contents: str, *, dry_run: bool = False) -> None:
    """Replace a file wholesale, escalating through sudo tee when needed."""

    p = Path(path)
    if dry_run:
        logger.info("Would write %s", str(p))
        return
    if _writable(p):
        p.write_text(contents, encoding="utf-8", errors="surrogateescape")
    else:
        run_cmd(["tee", str(p)], input_text=contents, privileged=True)
