"""I2C transport for the UPiS PiCo interface.

Every transaction opens the bus, selects the device address, transfers a
single byte or word and closes the bus again. No handle is kept between
transactions.
"""

import logging
from typing import Protocol

import smbus2

from . import TransportAccessError, TransportIOError, TransportOpenError

logger = logging.getLogger("upis.transport")


class Transport(Protocol):
    """Register access as required by the Dispatcher.

    Implementations raise a TransportError subclass when a transaction fails.
    """

    def read_byte(self, bus: int, address: int, register: int) -> int: ...

    def read_word(self, bus: int, address: int, register: int) -> int: ...

    def write_byte(self, bus: int, address: int, register: int, value: int) -> None: ...


class SMBusTransport:
    """Transport backed by smbus2.

    Args:
        force: force I2C bus access, required when the address is claimed by
            a kernel driver
        bus: override the bus number of the register descriptors
    """

    def __init__(self, force: bool = True, bus: int | None = None):
        self._force = force
        self._bus_override = bus

    def _open(self, bus: int, address: int) -> smbus2.SMBus:
        bus = bus if self._bus_override is None else self._bus_override
        try:
            smbus = smbus2.SMBus(bus, force=self._force)
        except OSError as ex:
            raise TransportOpenError(f"Unable to open i2c bus {bus}") from ex

        try:
            # ioctl I2C_SLAVE / I2C_SLAVE_FORCE, private smbus2 API (pinned in pyproject.toml)
            smbus._set_address(address, force=self._force)
        except OSError as ex:
            smbus.close()
            raise TransportAccessError(f"Unable to access the PiCO interface at address 0x{address:02x}") from ex

        return smbus

    def read_byte(self, bus: int, address: int, register: int) -> int:
        with self._open(bus, address) as smbus:
            try:
                value = smbus.read_byte_data(address, register, force=self._force)
            except OSError as ex:
                raise TransportIOError(f"Unable to read register 0x{address:02x}:0x{register:02x}") from ex

        logger.debug("read byte 0x%02x:0x%02x -> 0x%02x", address, register, value)
        return value

    def read_word(self, bus: int, address: int, register: int) -> int:
        with self._open(bus, address) as smbus:
            try:
                value = smbus.read_word_data(address, register, force=self._force)
            except OSError as ex:
                raise TransportIOError(f"Unable to read register 0x{address:02x}:0x{register:02x}") from ex

        logger.debug("read word 0x%02x:0x%02x -> 0x%04x", address, register, value)
        return value

    def write_byte(self, bus: int, address: int, register: int, value: int) -> None:
        with self._open(bus, address) as smbus:
            try:
                smbus.write_byte_data(address, register, value, force=self._force)
            except OSError as ex:
                raise TransportIOError(
                    f"Unable to write 0x{value:02x} to register 0x{address:02x}:0x{register:02x}"
                ) from ex

        logger.debug("wrote byte 0x%02x:0x%02x <- 0x%02x", address, register, value)
