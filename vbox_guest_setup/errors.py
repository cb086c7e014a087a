from __future__ import annotations


class SetupError(Exception):
    """Base error for guest additions setup."""


class FatalError(SetupError):
    """Aborts the whole run with a non-zero exit code."""

    exit_code = 1
