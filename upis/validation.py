"""Validation of user supplied register values.

All checks are pure and run before any bus transaction is issued for the
property being written.
"""

import logging

from . import InvalidEnumToken, MalformedInteger, OutOfRange
from .registers import Property, RegisterDescriptor, descriptor

logger = logging.getLogger("upis.validation")

RELAY_TOKENS = {
    "1": 1,
    "on": 1,
    "closed": 1,
    "0": 0,
    "off": 0,
    "open": 0,
}

# names used in error messages
PROPERTY_NAMES = {
    Property.RTC_FACTOR: "RTC clock factor",
    Property.WATCHDOG: "watchdog timer",
    Property.FSSD_TIMEOUT: "file safe shutdown timer",
    Property.FSSD_TYPE: "file safe shutdown type",
    Property.FSSD_BATTERY_TIMER: "file safe shutdown BAT timer",
    Property.LPR_TIMER: "LPR Wakeup Polling timer",
    Property.RELAY: "relay state",
    Property.IO_PIN_MODE: "io pin mode",
}


def is_intstr(value: str) -> bool:
    """Check that a string is a plain decimal integer.

    Only ASCII digits are allowed and a leading zero is only accepted for
    the string "0" itself.
    """
    if not value:
        return False
    if value[0] == "0" and len(value) > 1:
        return False
    return all("0" <= char <= "9" for char in value)


def parse_integer(value: str, valid_range: tuple[int, int], name: str = "value") -> int:
    """Parse a decimal string and check it against an inclusive range.

    Raises:
        MalformedInteger: if the string is not a plain decimal integer
        OutOfRange: if the integer is outside of valid_range
    """
    low, high = valid_range
    if not is_intstr(value):
        raise MalformedInteger(
            f"Invalid argument '{value}' for {name} - use an integer between {low} and {high}"
        )

    number = int(value)
    if not (low <= number <= high):
        raise OutOfRange(f"Invalid argument '{value}' for {name} - use an integer between {low} and {high}")

    return number


def parse_relay(value: str) -> int:
    """Map a relay state token to the register value.

    Accepts 1, on, closed for the closed relay and 0, off, open for the open
    relay, ignoring case.

    Raises:
        InvalidEnumToken: for any other token
    """
    try:
        return RELAY_TOKENS[value.lower()]
    except KeyError:
        raise InvalidEnumToken(
            f"Invalid argument '{value}' for relay state - use 0,1,open,closed,off or on"
        ) from None


def validate(prop: Property, value: str, desc: RegisterDescriptor | None = None) -> int:
    """Turn the value supplied for a writable property into its register value.

    Args:
        prop: Property to be written
        value: Value as given by the user
        desc: Descriptor of the property, looked up if omitted

    Returns:
        Integer to be written to the register

    Raises:
        PropertyError: if the value is rejected
    """
    desc = desc or descriptor(prop)
    if not desc.writable or desc.valid_range is None:
        raise ValueError(f"{prop.name} is not a writable property")

    try:
        if prop == Property.RELAY:
            return parse_relay(value)
        return parse_integer(value, desc.valid_range, PROPERTY_NAMES.get(prop, prop.value))
    except (MalformedInteger, OutOfRange, InvalidEnumToken) as ex:
        logger.info("Rejected %s for %s: %s", value, prop.name, type(ex).__name__)
        raise
