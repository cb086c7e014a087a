from __future__ import annotations

import logging
import re
from pathlib import Path

from .command import write_file

logger = logging.getLogger(__name__)

WAYLAND_OFF = "WaylandEnable=false"
_WAYLAND_LINE = re.compile(r"^#?WaylandEnable=.*$", re.MULTILINE)


def disable_wayland(text: str) -> str:
    """Return the config with every (possibly commented) WaylandEnable line forced off."""

    out = _WAYLAND_LINE.sub(WAYLAND_OFF, text)
    if not re.search(rf"^{WAYLAND_OFF}$", out, re.MULTILINE):
        if out and not out.endswith("\n"):
            out += "\n"
        out += WAYLAND_OFF + "\n"
    return out


def force_xorg(config_path: str, *, dry_run: bool = False) -> bool:
    """Rewrite the GDM config in place. Returns True if the file changed."""

    p = Path(config_path)
    # Non-UTF-8 bytes (e.g. Latin-1 comments) must round-trip untouched.
    current = p.read_text(encoding="utf-8", errors="surrogateescape")
    updated = disable_wayland(current)
    if updated == current:
        return False
    write_file(config_path, updated, dry_run=dry_run)
    return True
