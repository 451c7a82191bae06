"""Command dispatcher.

Executes property requests one after the other in catalog order. Each
request yields exactly one CommandResult. Validation, enumeration and
confirmation problems stay local to their request, a TransportError aborts
the whole run.
"""

import dataclasses
import enum
import logging
from collections.abc import Callable, Iterable, Iterator

from . import EnumerationOutOfRange, PropertyError, bcd_byte2dec, bcd_word2dec
from .confirm import ConfirmationGuard
from .registers import IO_PIN_VALUE_WIDTH, Encoding, Property, RegisterDescriptor, Width, descriptor
from .transport import Transport
from .validation import validate

logger = logging.getLogger("upis.dispatcher")


@dataclasses.dataclass(frozen=True)
class PropertyRequest:
    """Read (value is None) or write request for a single property.

    Write-only commands carry no value, their register value is fixed.
    """

    prop: Property
    value: str | None = None

    def __post_init__(self):
        if self.value is not None and not descriptor(self.prop).writable:
            raise ValueError(f"{self.prop.name} can't be set")

    @property
    def is_write(self) -> bool:
        return self.value is not None


@dataclasses.dataclass(frozen=True)
class DisplayValue:
    """Decoded register value.

    Attributes:
        raw: Register content as read from the bus
        value: Decoded (and scaled) value
        label: Name of an enumerated value, if known
        unit: Unit of value
    """

    raw: int
    value: int | float
    label: str | None = None
    unit: str = ""


class Outcome(enum.Enum):
    READ = "read"
    WRITTEN = "written"
    EXECUTED = "executed"
    ABORTED = "aborted"
    NOT_CONFIGURED = "not configured"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True)
class CommandResult:
    prop: Property
    outcome: Outcome
    value: DisplayValue | None = None
    error: PropertyError | None = None

    @property
    def ok(self) -> bool:
        return self.outcome != Outcome.FAILED


def decode(desc: RegisterDescriptor, raw: int) -> DisplayValue:
    """Decode a raw register value according to its descriptor.

    Raises:
        EnumerationOutOfRange: if a read-only enumeration returned an
            undocumented value
    """
    if desc.encoding == Encoding.BCD:
        value = bcd_word2dec(raw) if desc.width == Width.WORD else bcd_byte2dec(raw)
    else:
        value = raw

    if desc.valid_range is not None and not desc.writable:
        low, high = desc.valid_range
        if not (low <= value <= high):
            raise EnumerationOutOfRange(f"Unexpected value {value}, expected {low} to {high}")

    label = desc.labels.get(value) if desc.labels else None

    if desc.scale:
        value = value / desc.scale

    return DisplayValue(raw=raw, value=value, label=label, unit=desc.unit)


class Dispatcher:
    """Runs property requests against the UPiS.

    Args:
        transport: Register access, e.g. SMBusTransport
        ask: Callable asking the user to confirm a destructive command,
            receives the prompt and returns the answer
        assume_yes: Confirm destructive commands without asking
    """

    def __init__(
        self,
        transport: Transport,
        ask: Callable[[str], str] | None = None,
        assume_yes: bool = False,
    ):
        self._transport = transport
        self._ask = ask
        self._assume_yes = assume_yes

    def run(self, requests: Iterable[PropertyRequest]) -> Iterator[CommandResult]:
        """Execute requests in catalog order, regardless of the given order.

        Results are yielded as they are produced, so output of completed
        requests is available even if a later request raises a TransportError.
        """
        for request in sorted(requests, key=lambda r: r.prop.order):
            yield self.execute(request)

    def execute(self, request: PropertyRequest) -> CommandResult:
        desc = descriptor(request.prop)

        try:
            if desc.destructive:
                return self._execute_destructive(request.prop, desc)
            if desc.fixed_value is not None:
                self._write(desc, desc.fixed_value)
                return CommandResult(request.prop, Outcome.EXECUTED)
            if request.prop == Property.IO_PIN_VALUE:
                return self._read_io_pin_value(request.prop, desc)
            if request.is_write:
                value = validate(request.prop, request.value, desc)
                self._write(desc, value)
                return CommandResult(request.prop, Outcome.WRITTEN, self._read(desc))

            return CommandResult(request.prop, Outcome.READ, self._read(desc))
        except PropertyError as ex:
            return CommandResult(request.prop, Outcome.FAILED, error=ex)

    def _execute_destructive(self, prop: Property, desc: RegisterDescriptor) -> CommandResult:
        guard = ConfirmationGuard(prop, self._ask, override=self._assume_yes)
        guard.run()
        if not guard.confirmed:
            return CommandResult(prop, Outcome.ABORTED)

        logger.warning("Executing %s", prop.name)
        self._write(desc, desc.fixed_value)
        return CommandResult(prop, Outcome.EXECUTED)

    def _read_io_pin_value(self, prop: Property, desc: RegisterDescriptor) -> CommandResult:
        mode_desc = descriptor(Property.IO_PIN_MODE)
        mode = self._transport.read_byte(mode_desc.bus_id, mode_desc.device_address, mode_desc.register_offset)
        if mode == 0:
            return CommandResult(prop, Outcome.NOT_CONFIGURED)
        if mode not in IO_PIN_VALUE_WIDTH:
            raise EnumerationOutOfRange(f"Unexpected io pin mode: {mode}")

        value_desc = dataclasses.replace(desc, width=IO_PIN_VALUE_WIDTH[mode])
        return CommandResult(prop, Outcome.READ, self._read(value_desc))

    def _read(self, desc: RegisterDescriptor) -> DisplayValue:
        if desc.width == Width.WORD:
            raw = self._transport.read_word(desc.bus_id, desc.device_address, desc.register_offset)
        else:
            raw = self._transport.read_byte(desc.bus_id, desc.device_address, desc.register_offset)
        return decode(desc, raw)

    def _write(self, desc: RegisterDescriptor, value: int):
        logger.info("Writing 0x%02x to 0x%02x:0x%02x", value, desc.device_address, desc.register_offset)
        self._transport.write_byte(desc.bus_id, desc.device_address, desc.register_offset, value)
