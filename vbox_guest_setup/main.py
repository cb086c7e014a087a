from __future__ import annotations

import argparse
import logging
from typing import NoReturn, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .context import Options, SetupContext
from .errors import FatalError
from .logging_utils import configure_logging, prefix_for
from .pipeline import PipelineResult, run_pipeline
from .settings import Settings, load_settings
from .steps import (
    ActivateModulesStep,
    ClipboardClientStep,
    DisplayServerStep,
    InstallPackagesStep,
    IsoFallbackStep,
    ProbeEnvironmentStep,
    RebootStep,
    VerifyStep,
)

logger = logging.getLogger(__name__)

USAGE = "%(prog)s [--download <ver>] [--keep-wayland] [--no-reboot]"


class UsageError(FatalError):
    pass


class _Parser(argparse.ArgumentParser):
    """argparse exits 2 on bad input; this tool reports usage errors with exit 1."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(
        prog="vbox-guest-setup",
        usage=USAGE,
        description="Make VirtualBox Guest Additions (including bidirectional clipboard) work on an Ubuntu guest.",
        epilog="The host VM setting 'Shared Clipboard: Bidirectional' must be enabled in VirtualBox Manager.",
        allow_abbrev=False,
    )
    p.add_argument("--no-reboot", dest="reboot", action="store_false", help="Do not reboot at the end")
    p.add_argument("--download", metavar="VER", default=None, help="Pin a Guest Additions ISO version (e.g. 7.1.8)")
    p.add_argument("--keep-wayland", dest="force_xorg", action="store_false", help="Do not force Xorg in GDM")
    return p


def parse_options(argv: Optional[Sequence[str]] = None) -> Options:
    args = build_parser().parse_args(argv)
    if args.download is not None and not args.download.strip():
        raise UsageError("--download requires a version (e.g. 7.1.8)")
    if args.download and "/" in args.download:
        raise UsageError(f"--download expects a version like 7.1.8, got {args.download!r}")
    return Options(
        reboot=bool(args.reboot),
        pinned_version=args.download.strip() if args.download else None,
        force_xorg=bool(args.force_xorg),
    )


def build_steps():
    return [
        ProbeEnvironmentStep(),
        InstallPackagesStep(),
        ActivateModulesStep(),
        IsoFallbackStep(),
        ClipboardClientStep(),
        DisplayServerStep(),
        VerifyStep(),
        RebootStep(),
    ]


def run(options: Options, settings: Optional[Settings] = None) -> PipelineResult:
    """Run the whole setup sequence once."""

    ctx = SetupContext(options=options, settings=settings or Settings())
    logger.debug("Options: %s", options)
    try:
        return run_pipeline(ctx, build_steps())
    except FatalError:
        raise
    except Exception:
        logger.exception("Setup failed")
        raise


def main(argv: Optional[list[str]] = None) -> int:
    try:
        options = parse_options(argv)
    except UsageError as e:
        console = Console(stderr=True, highlight=False, soft_wrap=True)
        console.print(f"{prefix_for(logging.ERROR)} {escape(str(e))}")
        console.print(escape(build_parser().format_usage().rstrip()))
        return e.exit_code

    settings = load_settings()
    configure_logging(log_path=settings.log_path)

    try:
        run(options, settings)
    except FatalError as e:
        logger.error("%s", e)
        return e.exit_code
    return 0
