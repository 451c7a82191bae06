"""Confirmation of destructive UPiS commands.

Factory reset, processor reset and bootloader entry reset the Raspberry Pi
without a file safe shutdown. Each request passes its own ConfirmationGuard
before the command is written.
"""

import enum
import logging
from collections.abc import Callable

from .registers import Property

logger = logging.getLogger("upis.confirm")

WARNINGS = {
    Property.FACTORY_RESET: (
        "WARNING: The UPiS will be returned to factory default and reset.\n"
        "This probably isn't a good idea as the Raspberry Pi will also be reset\n"
        "without a file safe shutdown, resulting in possible file system corruption.\n"
    ),
    Property.PROCESSOR_RESET: (
        "WARNING: The UPiS processor and RTC will be reset.\n"
        "This probably isn't a good idea as the Raspberry Pi will also be reset\n"
        "without a file safe shutdown, resulting in possible file system corruption.\n"
    ),
    Property.BOOTLOADER: (
        "WARNING: The UPiS will be placed in bootloader mode.\n"
        "1. The Red LED on the UPiS will light.\n"
        "2. Recovery from this state is only possible by pressing the RST button\n"
        "   or uploading new firmware.\n"
        "3. Bootloader mode should be used with the RPi firmware upload script.\n"
        "4. All interrupts are disabled during this procedure and the normal\n"
        "   operation of the UPiS is suspended.\n"
        "5. Both the UPiS and RPi must be powered via RPi micro USB during the\n"
        "   boot loading process because the UPiS resets after the firmware is\n"
        "   uploaded.\n"
    ),
}

PROMPT = "Type Y/y to proceed: "


class ConfirmationState(enum.Enum):
    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting"
    CONFIRMED = "confirmed"
    ABORTED = "aborted"


class ConfirmationGuard:
    """State machine gating a single destructive command.

    The guard starts IDLE and ends either CONFIRMED or ABORTED. With the
    override set it confirms without asking, otherwise the ask callable is
    invoked exactly once with the warning text and the answer must be "y"
    (any case) to confirm.

    Args:
        prop: Destructive property to be confirmed
        ask: Callable presenting a prompt and returning the user's answer
        override: Confirm unconditionally (the -y flag)
    """

    def __init__(self, prop: Property, ask: Callable[[str], str] | None, override: bool = False):
        self.prop = prop
        self._ask = ask
        self._override = override
        self.state = ConfirmationState.IDLE

    @property
    def prompt(self) -> str:
        return WARNINGS.get(self.prop, "") + PROMPT

    def run(self) -> ConfirmationState:
        if self.state != ConfirmationState.IDLE:
            return self.state

        if self._override:
            logger.info("%s confirmed by override", self.prop.name)
            self.state = ConfirmationState.CONFIRMED
            return self.state

        self.state = ConfirmationState.AWAITING_CONFIRMATION
        answer = self._ask(self.prompt) if self._ask else None
        if answer is not None and answer.strip().lower() == "y":
            self.state = ConfirmationState.CONFIRMED
        else:
            logger.info("%s declined (answer: %r)", self.prop.name, answer)
            self.state = ConfirmationState.ABORTED
        return self.state

    @property
    def confirmed(self) -> bool:
        return self.state == ConfirmationState.CONFIRMED
