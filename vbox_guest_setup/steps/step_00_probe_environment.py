from __future__ import annotations

import logging

from ..context import SetupContext
from ..lib.guest_env import is_virtualbox, read_product_name
from ..outcome import ActionResult, StepResult

logger = logging.getLogger(__name__)


class ProbeEnvironmentStep:
    step_id = "00_probe_environment"

    def run(self, ctx: SetupContext) -> StepResult:
        result = StepResult(self.step_id)

        product = read_product_name(ctx.settings.dmi_product_name)
        vbox = is_virtualbox(product)
        if vbox is False:
            logger.warning(
                "This doesn't look like a VirtualBox guest (product: %s). Continuing anyway.", product
            )
        result.add(ActionResult.from_flag("virtualbox_guest", vbox))
        return result
