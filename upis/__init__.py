"""UPiS Python Library.

This module provides a Python interface for controlling and monitoring the
pimodules UPiS power supply for Raspberry Pi via its PiCo (I2C) interface.
It supports:

- Real-time clock (RTC) read out and clock correction factor
- Voltage, current and temperature monitoring
- Watchdog, file safe shutdown (FSSD) and LPR timer configuration
- Relay and 1-wire IO pin control
- Guarded maintenance actions (factory reset, processor reset, bootloader)

Main Classes:
    Dispatcher: Executes property requests against the UPiS registers
    PropertyRequest: A single read or write request for a property
    Property: Closed enumeration of all supported UPiS properties
    SMBusTransport: smbus2 backed register access
    ConfirmationGuard: Confirmation state machine for destructive actions

Example:
    Reading the battery voltage and setting the watchdog timer:

    >>> from upis import Dispatcher, Property, PropertyRequest, SMBusTransport
    >>> dispatcher = Dispatcher(SMBusTransport(force=True))
    >>> for result in dispatcher.run([
    ...     PropertyRequest(Property.BATTERY_VOLTAGE),
    ...     PropertyRequest(Property.WATCHDOG, "30"),
    ... ]):
    ...     print(result.prop.name, result.value.value)
"""

import enum
import importlib.metadata
import logging

__version__ = importlib.metadata.version(__name__)

logger = logging.getLogger("upis")

# I2C bus of the Raspberry Pi GPIO header
I2C_BUS = 1

# PiCo sub-device addresses
I2C_RTC_ADDRESS = 0x69
I2C_STATUS_ADDRESS = 0x6A
I2C_CONTROL_ADDRESS = 0x6B


def bcd_byte2dec(value: int) -> int:
    """Convert a Binary-Coded Decimal (BCD) byte to an integer.

    Nibbles are not checked for the 0-9 range, a nibble of 10-15 is combined
    arithmetically all the same (0x1F decodes to 25).

    Args:
        value: BCD encoded byte (e.g., 0x23 represents decimal 23)

    Returns:
        Integer representation of the BCD value
    """
    high = (value >> 4) & 0x0F
    low = value & 0x0F
    return high * 10 + low


def bcd_word2dec(value: int) -> int:
    """Convert a Binary-Coded Decimal (BCD) word to an integer.

    Like bcd_byte2dec, nibbles of 10-15 are not rejected.

    Args:
        value: BCD encoded 16 bit word (e.g., 0x1234 represents decimal 1234)

    Returns:
        Integer representation of the BCD value
    """
    thousands = (value >> 12) & 0x0F
    hundreds = (value >> 8) & 0x0F
    tens = (value >> 4) & 0x0F
    units = value & 0x0F
    return thousands * 1000 + hundreds * 100 + tens * 10 + units


class PowerSource(enum.Enum):
    """Power source currently feeding the UPiS, as reported by register 0x6A:0x00."""

    EPR = 1
    USB = 2
    RPI = 3
    BAT = 4
    LPR = 5
    CPR = 6
    BPR = 7

    @property
    def description(self) -> str:
        return {
            PowerSource.EPR: "External Power [EPR]",
            PowerSource.USB: "UPiS USB Power [USB]",
            PowerSource.RPI: "Raspberry Pi USB Power [RPI]",
            PowerSource.BAT: "Battery Power [BAT]",
            PowerSource.LPR: "Low Power [LPR]",
            PowerSource.CPR: "[CPR]",
            PowerSource.BPR: "[BPR]",
        }[self]


class Weekday(enum.Enum):
    """Day of week as counted by the UPiS RTC."""

    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7


class UPiSException(Exception):
    """Base class of all errors raised by the UPiS library."""

    pass


class TransportError(UPiSException):
    """Raised when a bus transaction cannot be completed.

    Transport errors are fatal: the bus or the device is unusable and the
    whole invocation is aborted.
    """

    exit_code = 2


class TransportOpenError(TransportError):
    """The I2C bus device could not be opened."""

    exit_code = 1


class TransportAccessError(TransportError):
    """The PiCo interface address could not be selected on the bus."""

    pass


class TransportIOError(TransportError):
    """A read or write transaction failed."""

    pass


class PropertyError(UPiSException):
    """Recoverable error local to a single property request."""

    pass


class MalformedInteger(PropertyError):
    """The supplied value is not a plain decimal integer."""

    pass


class OutOfRange(PropertyError):
    """The supplied integer is outside of the property's accepted range."""

    pass


class InvalidEnumToken(PropertyError):
    """The supplied token is not one of the accepted names."""

    pass


class EnumerationOutOfRange(PropertyError):
    """A register returned a value outside of its documented enumeration."""

    pass


from .registers import REGISTER_MAP, Access, Encoding, Property, RegisterDescriptor, Width, descriptor  # noqa: E402
from .validation import validate  # noqa: E402
from .confirm import ConfirmationGuard, ConfirmationState  # noqa: E402
from .transport import SMBusTransport, Transport  # noqa: E402
from .dispatcher import CommandResult, DisplayValue, Dispatcher, Outcome, PropertyRequest  # noqa: E402

__all__ = [
    "Access",
    "CommandResult",
    "ConfirmationGuard",
    "ConfirmationState",
    "Dispatcher",
    "DisplayValue",
    "Encoding",
    "EnumerationOutOfRange",
    "InvalidEnumToken",
    "MalformedInteger",
    "Outcome",
    "OutOfRange",
    "PowerSource",
    "Property",
    "PropertyError",
    "PropertyRequest",
    "REGISTER_MAP",
    "RegisterDescriptor",
    "SMBusTransport",
    "Transport",
    "TransportAccessError",
    "TransportError",
    "TransportIOError",
    "TransportOpenError",
    "UPiSException",
    "Weekday",
    "Width",
    "bcd_byte2dec",
    "bcd_word2dec",
    "descriptor",
    "validate",
]
