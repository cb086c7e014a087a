"""Decide whether the Guest Additions ISO has to be installed, and which version."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_VERSION_RE = re.compile(r"^(\d+(?:\.\d+)*)")


@dataclass(frozen=True)
class IsoPlan:
    should_download: bool
    version: str


def parse_reported_version(text: Optional[str]) -> Optional[str]:
    """Normalize `VBoxControl --version` output.

    Ubuntu builds report e.g. ``7.0.16_Ubuntur162802``; vendor builds report
    ``7.1.8r168469``. Both map to the bare release number.
    """

    if not text:
        return None
    head = text.split("_", 1)[0].replace("\r", "").replace("\n", "").strip()
    if not head:
        return None
    m = _VERSION_RE.match(head)
    return m.group(1) if m else head


def decide_iso_fallback(
    pinned_version: Optional[str],
    module_loaded: bool,
    reported_version: Optional[str],
    fallback_version: str,
) -> IsoPlan:
    # An explicit pin wins even when the native module already works.
    if pinned_version:
        return IsoPlan(should_download=True, version=pinned_version)
    if module_loaded:
        return IsoPlan(should_download=False, version="")
    return IsoPlan(should_download=True, version=reported_version or fallback_version)


def iso_name(version: str) -> str:
    return f"VBoxGuestAdditions_{version}.iso"


def iso_url(base_url: str, version: str) -> str:
    return f"{base_url.rstrip('/')}/{version}/{iso_name(version)}"
