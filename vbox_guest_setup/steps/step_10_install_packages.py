from __future__ import annotations

import logging

from ..context import SetupContext
from ..lib.pkg import apt_install, apt_update, running_kernel_release
from ..outcome import ActionResult, StepResult

logger = logging.getLogger(__name__)

BUILD_PACKAGES = ["build-essential", "dkms", "curl", "ca-certificates"]
GUEST_PACKAGES = ["virtualbox-guest-utils", "virtualbox-guest-dkms", "virtualbox-guest-x11"]


def _headers_package(release: str) -> str:
    return f"linux-headers-{release}" if release else "linux-headers-generic"


class InstallPackagesStep:
    """Build prerequisites plus Ubuntu's packaged Guest Additions. Nothing here is fatal."""

    step_id = "10_install_packages"

    def run(self, ctx: SetupContext) -> StepResult:
        result = StepResult(self.step_id)
        dry_run = ctx.dry_run

        logger.info("Updating apt and installing build prerequisites...")
        result.add(ActionResult.from_cmd("apt_update", apt_update(dry_run=dry_run)))

        headers = _headers_package(running_kernel_release(dry_run=dry_run))
        prereq = result.add(
            ActionResult.from_cmd("install_prerequisites", apt_install([*BUILD_PACKAGES, headers], dry_run=dry_run))
        )
        if not prereq.ok and headers != "linux-headers-generic":
            logger.warning("Could not install headers for running kernel; attempting generic headers...")
            result.add(
                ActionResult.from_cmd(
                    "install_generic_headers",
                    apt_install([*BUILD_PACKAGES, "linux-headers-generic"], dry_run=dry_run),
                )
            )

        logger.info("Installing Ubuntu's VirtualBox guest packages...")
        guest = result.add(ActionResult.from_cmd("install_guest_packages", apt_install(GUEST_PACKAGES, dry_run=dry_run)))
        if not guest.ok:
            logger.warning("Package install had issues; will attempt ISO method.")

        return result
