"""Confirmation guard for destructive commands."""

import pytest

from upis import ConfirmationGuard, ConfirmationState, Property

DESTRUCTIVE = [Property.FACTORY_RESET, Property.PROCESSOR_RESET, Property.BOOTLOADER]


class TestConfirmationGuard:

    @pytest.mark.parametrize("prop", DESTRUCTIVE)
    def test_override_skips_asking(self, prop, answers):
        ask = answers("n")
        guard = ConfirmationGuard(prop, ask, override=True)
        assert guard.state == ConfirmationState.IDLE
        assert guard.run() == ConfirmationState.CONFIRMED
        assert guard.confirmed
        assert ask.prompts == []

    @pytest.mark.parametrize("answer", ["y", "Y", " y\n"])
    def test_confirmed(self, answer, answers):
        ask = answers(answer)
        guard = ConfirmationGuard(Property.FACTORY_RESET, ask)
        assert guard.run() == ConfirmationState.CONFIRMED
        assert len(ask.prompts) == 1

    @pytest.mark.parametrize("answer", ["n", "", "yes", "N", "yy"])
    def test_aborted(self, answer, answers):
        guard = ConfirmationGuard(Property.PROCESSOR_RESET, answers(answer))
        assert guard.run() == ConfirmationState.ABORTED
        assert not guard.confirmed

    def test_no_ask_capability_aborts(self):
        guard = ConfirmationGuard(Property.BOOTLOADER, None)
        assert guard.run() == ConfirmationState.ABORTED

    def test_asks_only_once(self, answers):
        ask = answers("n", "y")
        guard = ConfirmationGuard(Property.FACTORY_RESET, ask)
        guard.run()
        assert guard.run() == ConfirmationState.ABORTED
        assert len(ask.prompts) == 1

    def test_prompt_contains_warning(self, answers):
        ask = answers("n")
        ConfirmationGuard(Property.BOOTLOADER, ask).run()
        assert ask.prompts[0].startswith("WARNING: The UPiS will be placed in bootloader mode.")
        assert ask.prompts[0].endswith("Type Y/y to proceed: ")

    def test_state_while_asking(self):
        seen = []

        def ask(prompt):
            seen.append(guard.state)
            return "y"

        guard = ConfirmationGuard(Property.FACTORY_RESET, ask)
        guard.run()
        assert seen == [ConfirmationState.AWAITING_CONFIRMATION]
