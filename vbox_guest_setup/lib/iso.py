from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import requests

from ..errors import FatalError
from .command import CmdResult, ensure_dir, run_cmd

logger = logging.getLogger(__name__)

INSTALLER_NAME = "VBoxLinuxAdditions.run"


def download_iso(url: str, destination: str, *, timeout: float = 60, dry_run: bool = False) -> None:
    """Stream the image to disk. Any failure is fatal and leaves no partial file."""

    logger.info("Downloading GA ISO from: %s", url)
    if dry_run:
        logger.info("Would download %s -> %s", url, destination)
        return

    try:
        with requests.get(url, stream=True, timeout=timeout, allow_redirects=True) as r:
            r.raise_for_status()
            with open(destination, "wb") as f:
                for chunk in r.iter_content(chunk_size=1 << 16):
                    if chunk:
                        f.write(chunk)
    except (requests.exceptions.RequestException, OSError) as e:
        if os.path.exists(destination):
            os.remove(destination)
        raise FatalError(f"Failed to download {url}: {e}") from e

    logger.debug("Saved %s (%d bytes)", destination, os.path.getsize(destination))


def remove_iso(iso_path: str, *, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would remove %s", iso_path)
        return
    try:
        os.remove(iso_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove %s: %s", iso_path, e)


@contextmanager
def mounted_image(iso_path: str, mount_point: str, *, dry_run: bool = False) -> Iterator[str]:
    """Loop-mount the image read-only; always unmount on the way out."""

    try:
        ensure_dir(mount_point, dry_run=dry_run)
    except (OSError, RuntimeError) as e:
        raise FatalError(f"Failed to mount ISO: cannot create {mount_point}") from e
    r = run_cmd(
        ["mount", "-o", "loop,ro", iso_path, mount_point],
        check=False,
        dry_run=dry_run,
        privileged=True,
    )
    if not r.ok:
        raise FatalError(f"Failed to mount ISO {iso_path} at {mount_point}")
    try:
        yield mount_point
    finally:
        u = run_cmd(["umount", mount_point], check=False, dry_run=dry_run, privileged=True)
        if not u.ok:
            logger.warning("Could not unmount %s", mount_point)


def find_installer(mount_point: str, *, dry_run: bool = False) -> Optional[str]:
    p = Path(mount_point) / INSTALLER_NAME
    if dry_run:
        return str(p)
    if p.is_file() and os.access(p, os.X_OK):
        return str(p)
    return None


def run_installer(installer: str, *, dry_run: bool = False) -> CmdResult:
    logger.info("Running Guest Additions installer from: %s", installer)
    r = run_cmd(["sh", installer], check=False, dry_run=dry_run, privileged=True)
    if not r.ok:
        raise FatalError("ISO installer failed.")
    return r
