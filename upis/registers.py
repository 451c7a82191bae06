"""UPiS register map.

Binds every supported property to its physical location on the PiCo
interface. The map is built once at import and never changes.
"""

import dataclasses
import enum

from . import I2C_BUS, I2C_CONTROL_ADDRESS, I2C_RTC_ADDRESS, I2C_STATUS_ADDRESS, PowerSource, Weekday

# RTC registers (0x69)
I2C_RTC_SECONDS = 0x00
I2C_RTC_MINUTES = 0x01
I2C_RTC_HOURS = 0x02
I2C_RTC_WEEKDAY = 0x03
I2C_RTC_DAY = 0x04
I2C_RTC_MONTH = 0x05
I2C_RTC_YEAR = 0x06
I2C_RTC_FACTOR = 0x07

# Status registers (0x6A)
I2C_POWER_SOURCE = 0x00
I2C_BAT_VOLTAGE = 0x01
I2C_RPI_VOLTAGE = 0x03
I2C_USB_VOLTAGE = 0x05
I2C_EPR_VOLTAGE = 0x07
I2C_CURRENT = 0x09
I2C_TEMPERATURE_C = 0x0B
I2C_TEMPERATURE_F = 0x0C

# Control registers (0x6B)
I2C_FW_VERSION = 0x00
I2C_ERROR_CODE = 0x01
I2C_WATCHDOG = 0x02
I2C_FSSD_TIMEOUT = 0x03
I2C_FSSD_TYPE = 0x04
I2C_FSSD_BAT_TIMER = 0x05
I2C_LPR_TIMER = 0x0A
I2C_RELAY = 0x0B
I2C_IO_MODE = 0x10
I2C_IO_VALUE = 0x11

# Values written to I2C_RTC_FACTOR / I2C_WATCHDOG for maintenance commands
FACTORY_RESET = 0xDD
PROCESSOR_RESET = 0xEE
BOOTLOADER = 0xFF
FSSD_TRIGGER = 0x00

# 0 is shown as off/open on read, the same state the write tokens 0, off and open select
RELAY_LABELS = {0: "off/open", 1: "on/closed"}


class Width(enum.Enum):
    BYTE = 1
    WORD = 2


class Encoding(enum.Enum):
    RAW = "raw"
    BCD = "bcd"


class Access(enum.Enum):
    READ_ONLY = "ro"
    READ_WRITE = "rw"
    WRITE_ONLY = "wo"


@dataclasses.dataclass(frozen=True)
class RegisterDescriptor:
    """Location and interpretation of a single UPiS register.

    Attributes:
        bus_id: I2C bus number
        device_address: PiCo sub-device address (0x69, 0x6A or 0x6B)
        register_offset: Register within the sub-device
        width: Byte or word transaction
        encoding: BCD telemetry or raw integer
        access: Read-only, read-write or write-only
        valid_range: Inclusive (min, max) accepted for writes. For read-only
            registers the range is the documented enumeration of read values.
        scale: Divisor applied to the decoded value for display (voltages)
        unit: Unit suffix for verbose display
        labels: Names of enumerated register values
        fixed_value: Sentinel written by write-only commands
        destructive: Requires confirmation before being written
    """

    bus_id: int
    device_address: int
    register_offset: int
    width: Width = Width.BYTE
    encoding: Encoding = Encoding.RAW
    access: Access = Access.READ_ONLY
    valid_range: tuple[int, int] | None = None
    scale: int | None = None
    unit: str = ""
    labels: dict[int, str] | None = None
    fixed_value: int | None = None
    destructive: bool = False

    @property
    def writable(self) -> bool:
        return self.access == Access.READ_WRITE


class Property(enum.Enum):
    """All UPiS properties, declared in processing order."""

    RTC_DAY = "rtc_day"
    RTC_MONTH = "rtc_month"
    RTC_YEAR = "rtc_year"
    RTC_HOURS = "rtc_hours"
    RTC_MINUTES = "rtc_minutes"
    RTC_SECONDS = "rtc_seconds"
    RTC_WEEKDAY = "rtc_weekday"
    RTC_FACTOR = "rtcfactor"
    POWER_SOURCE = "pwrsrc"
    BATTERY_VOLTAGE = "batvolt"
    RPI_VOLTAGE = "rpivolt"
    EPR_VOLTAGE = "eprvolt"
    USB_VOLTAGE = "usbvolt"
    CURRENT = "current"
    TEMPERATURE_C = "centigrade"
    TEMPERATURE_F = "fahrenheit"
    FIRMWARE_VERSION = "fwver"
    FACTORY_RESET = "factory"
    PROCESSOR_RESET = "reset"
    BOOTLOADER = "bootloader"
    LAST_ERROR = "errorno"
    WATCHDOG = "watchdog"
    FSSD = "fssd"
    FSSD_TIMEOUT = "fssdtimeout"
    FSSD_TYPE = "fssdtype"
    FSSD_BATTERY_TIMER = "fssdbatime"
    LPR_TIMER = "lprtimer"
    RELAY = "relay"
    IO_PIN_MODE = "iomode"
    IO_PIN_VALUE = "iovalue"

    @property
    def order(self) -> int:
        return _CATALOG_ORDER[self]


_CATALOG_ORDER = {prop: index for index, prop in enumerate(Property)}

RTC_PROPERTIES = (
    Property.RTC_DAY,
    Property.RTC_MONTH,
    Property.RTC_YEAR,
    Property.RTC_HOURS,
    Property.RTC_MINUTES,
    Property.RTC_SECONDS,
    Property.RTC_WEEKDAY,
)


def _rtc(register: int, **kwargs) -> RegisterDescriptor:
    return RegisterDescriptor(I2C_BUS, I2C_RTC_ADDRESS, register, **kwargs)


def _status(register: int, **kwargs) -> RegisterDescriptor:
    return RegisterDescriptor(I2C_BUS, I2C_STATUS_ADDRESS, register, **kwargs)


def _control(register: int, **kwargs) -> RegisterDescriptor:
    return RegisterDescriptor(I2C_BUS, I2C_CONTROL_ADDRESS, register, **kwargs)


REGISTER_MAP: dict[Property, RegisterDescriptor] = {
    # RTC
    Property.RTC_DAY: _rtc(I2C_RTC_DAY, encoding=Encoding.BCD),
    Property.RTC_MONTH: _rtc(I2C_RTC_MONTH, encoding=Encoding.BCD),
    Property.RTC_YEAR: _rtc(I2C_RTC_YEAR, encoding=Encoding.BCD),
    Property.RTC_HOURS: _rtc(I2C_RTC_HOURS, encoding=Encoding.BCD),
    Property.RTC_MINUTES: _rtc(I2C_RTC_MINUTES, encoding=Encoding.BCD),
    Property.RTC_SECONDS: _rtc(I2C_RTC_SECONDS, encoding=Encoding.BCD),
    Property.RTC_WEEKDAY: _rtc(
        I2C_RTC_WEEKDAY,
        encoding=Encoding.BCD,
        labels={day.value: day.name.capitalize() for day in Weekday},
    ),
    Property.RTC_FACTOR: _rtc(I2C_RTC_FACTOR, access=Access.READ_WRITE, valid_range=(0, 255)),
    # Status
    Property.POWER_SOURCE: _status(
        I2C_POWER_SOURCE,
        valid_range=(1, 7),
        labels={source.value: source.description for source in PowerSource},
    ),
    Property.BATTERY_VOLTAGE: _status(I2C_BAT_VOLTAGE, width=Width.WORD, encoding=Encoding.BCD, scale=100, unit="V"),
    Property.RPI_VOLTAGE: _status(I2C_RPI_VOLTAGE, width=Width.WORD, encoding=Encoding.BCD, scale=100, unit="V"),
    Property.EPR_VOLTAGE: _status(I2C_EPR_VOLTAGE, width=Width.WORD, encoding=Encoding.BCD, scale=100, unit="V"),
    Property.USB_VOLTAGE: _status(I2C_USB_VOLTAGE, width=Width.WORD, encoding=Encoding.BCD, scale=100, unit="V"),
    Property.CURRENT: _status(I2C_CURRENT, width=Width.WORD, encoding=Encoding.BCD, unit="mA"),
    Property.TEMPERATURE_C: _status(I2C_TEMPERATURE_C, encoding=Encoding.BCD, unit="C"),
    Property.TEMPERATURE_F: _status(I2C_TEMPERATURE_F, width=Width.WORD, encoding=Encoding.BCD, unit="F"),
    # Control
    Property.FIRMWARE_VERSION: _control(I2C_FW_VERSION, width=Width.WORD),
    Property.FACTORY_RESET: _rtc(
        I2C_RTC_FACTOR, access=Access.WRITE_ONLY, fixed_value=FACTORY_RESET, destructive=True
    ),
    Property.PROCESSOR_RESET: _rtc(
        I2C_RTC_FACTOR, access=Access.WRITE_ONLY, fixed_value=PROCESSOR_RESET, destructive=True
    ),
    Property.BOOTLOADER: _rtc(I2C_RTC_FACTOR, access=Access.WRITE_ONLY, fixed_value=BOOTLOADER, destructive=True),
    Property.LAST_ERROR: _control(I2C_ERROR_CODE),
    Property.WATCHDOG: _control(I2C_WATCHDOG, access=Access.READ_WRITE, valid_range=(0, 255)),
    Property.FSSD: _control(I2C_WATCHDOG, access=Access.WRITE_ONLY, fixed_value=FSSD_TRIGGER),
    Property.FSSD_TIMEOUT: _control(I2C_FSSD_TIMEOUT, access=Access.READ_WRITE, valid_range=(15, 255)),
    Property.FSSD_TYPE: _control(I2C_FSSD_TYPE, access=Access.READ_WRITE, valid_range=(0, 2)),
    Property.FSSD_BATTERY_TIMER: _control(I2C_FSSD_BAT_TIMER, access=Access.READ_WRITE, valid_range=(0, 255)),
    Property.LPR_TIMER: _control(I2C_LPR_TIMER, access=Access.READ_WRITE, valid_range=(0, 255)),
    Property.RELAY: _control(I2C_RELAY, access=Access.READ_WRITE, valid_range=(0, 1), labels=RELAY_LABELS),
    Property.IO_PIN_MODE: _control(I2C_IO_MODE, access=Access.READ_WRITE, valid_range=(0, 3)),
    # width is resolved at read time from the current IO pin mode
    Property.IO_PIN_VALUE: _control(I2C_IO_VALUE),
}

# IO pin mode -> width of the IO pin value register, mode 0 is unconfigured
IO_PIN_VALUE_WIDTH = {
    1: Width.WORD,  # 1 wire temperature
    2: Width.BYTE,  # 8 bit A/D converter
    3: Width.BYTE,  # forced on-change status
}


def descriptor(prop: Property) -> RegisterDescriptor:
    """Look up the register descriptor of a property.

    Raises:
        KeyError: if the property is missing from the map, which is a
            programming error as Property is a closed enumeration
    """
    return REGISTER_MAP[prop]
