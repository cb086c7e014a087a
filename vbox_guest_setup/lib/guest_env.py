from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def _read_text(path: Path) -> Optional[str]:
    try:
        txt = path.read_text(encoding="utf-8", errors="ignore").strip()
        return txt or None
    except OSError:
        return None


def read_product_name(path: str) -> Optional[str]:
    return _read_text(Path(path))


def is_virtualbox(product_name: Optional[str]) -> Optional[bool]:
    """True/False when DMI says so, None when there is nothing to go on."""

    if product_name is None:
        return None
    return "virtualbox" in product_name.lower()
