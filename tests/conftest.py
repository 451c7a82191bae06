"""Shared fixtures for UPiS tests."""

import pytest

from upis import TransportIOError


class FakeTransport:
    """In-memory register bank implementing the Transport protocol.

    Registers are keyed by (address, register). Every transaction is recorded
    in calls as (operation, address, register[, value]).
    """

    def __init__(self, registers=None):
        self.registers = dict(registers or {})
        self.calls = []
        self.fail_on = set()

    def _check(self, address, register):
        if (address, register) in self.fail_on:
            raise TransportIOError(f"Unable to read register 0x{address:02x}:0x{register:02x}")

    def read_byte(self, bus, address, register):
        self.calls.append(("read_byte", address, register))
        self._check(address, register)
        return self.registers.get((address, register), 0) & 0xFF

    def read_word(self, bus, address, register):
        self.calls.append(("read_word", address, register))
        self._check(address, register)
        return self.registers.get((address, register), 0) & 0xFFFF

    def write_byte(self, bus, address, register, value):
        self.calls.append(("write_byte", address, register, value))
        self._check(address, register)
        self.registers[(address, register)] = value

    def reads(self, address, register):
        return [c for c in self.calls if c[0].startswith("read") and c[1:3] == (address, register)]

    def writes(self):
        return [c for c in self.calls if c[0] == "write_byte"]


@pytest.fixture
def transport():
    """A UPiS with plausible register contents."""
    return FakeTransport(
        {
            # RTC: 24-12-2014 13:05:09, Wednesday
            (0x69, 0x00): 0x09,
            (0x69, 0x01): 0x05,
            (0x69, 0x02): 0x13,
            (0x69, 0x03): 0x04,
            (0x69, 0x04): 0x24,
            (0x69, 0x05): 0x12,
            (0x69, 0x06): 0x14,
            (0x69, 0x07): 0x80,
            # status
            (0x6A, 0x00): 0x01,
            (0x6A, 0x01): 0x0985,
            (0x6A, 0x03): 0x0512,
            (0x6A, 0x05): 0x0000,
            (0x6A, 0x07): 0x1210,
            (0x6A, 0x09): 0x0375,
            (0x6A, 0x0B): 0x27,
            (0x6A, 0x0C): 0x0081,
            # control
            (0x6B, 0x00): 0x0042,
            (0x6B, 0x01): 0x00,
            (0x6B, 0x02): 0xFF,
            (0x6B, 0x03): 0x78,
            (0x6B, 0x04): 0x00,
            (0x6B, 0x05): 0xFF,
            (0x6B, 0x0A): 0x3C,
            (0x6B, 0x0B): 0x00,
            (0x6B, 0x10): 0x00,
            (0x6B, 0x11): 0x0123,
        }
    )


class Answers:
    """Scripted ask capability recording the prompts it was shown."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else ""


@pytest.fixture
def answers():
    return Answers
