from __future__ import annotations

import logging
from pathlib import Path

from ..context import SetupContext
from ..lib.gdm import force_xorg
from ..outcome import ActionResult, Outcome, StepResult

logger = logging.getLogger(__name__)


class DisplayServerStep:
    step_id = "50_display_server"

    def run(self, ctx: SetupContext) -> StepResult:
        result = StepResult(self.step_id)
        conf = ctx.settings.gdm_config

        if not ctx.options.force_xorg:
            logger.warning(
                "Keeping Wayland as requested (--keep-wayland). Clipboard might be less reliable under Wayland."
            )
            result.add(ActionResult("force_xorg", Outcome.SKIPPED, "--keep-wayland"))
            return result

        if not Path(conf).is_file():
            logger.debug("%s not present; not a GDM system", conf)
            result.add(ActionResult("force_xorg", Outcome.SKIPPED, f"{conf} missing"))
            return result

        logger.info("Forcing Xorg (disabling Wayland) in %s", conf)
        try:
            changed = force_xorg(conf, dry_run=ctx.dry_run)
        except (OSError, RuntimeError, UnicodeError) as e:
            logger.warning("Could not update %s: %s", conf, e)
            result.add(ActionResult("force_xorg", Outcome.FAILED, str(e)))
        else:
            result.add(ActionResult("force_xorg", Outcome.OK, "updated" if changed else "already set"))
        return result
