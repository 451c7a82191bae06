"""Text output of command results.

Terse output prints bare values, prefixed by a caption when more than one
property was requested. Verbose output adds units, raw hex values of
configuration registers and names of enumerated values.
"""

from collections.abc import Iterable, Iterator

from . import TransportError
from .dispatcher import CommandResult, Outcome
from .registers import RTC_PROPERTIES, Property, descriptor

CAPTIONS = {
    Property.RTC_DAY: "RTC Date/Time",
    Property.RTC_FACTOR: "RTC Correction Factor",
    Property.POWER_SOURCE: "Power source",
    Property.BATTERY_VOLTAGE: "BAT voltage",
    Property.RPI_VOLTAGE: "RPI Voltage",
    Property.EPR_VOLTAGE: "EPR Voltage",
    Property.USB_VOLTAGE: "USB Voltage",
    Property.CURRENT: "Average Current Draw",
    Property.TEMPERATURE_C: "Centigrade Temperature",
    Property.TEMPERATURE_F: "Fahrenheit Temperature",
    Property.FIRMWARE_VERSION: "Firmware Version",
    Property.LAST_ERROR: "Last Error No",
    Property.WATCHDOG: "Watchdog Timer",
    Property.FSSD_TIMEOUT: "File Safe Shutdown Timer",
    Property.FSSD_TYPE: "File Safe Shutdown Type",
    Property.FSSD_BATTERY_TIMER: "File Safe Shutdown BAT Timer",
    Property.LPR_TIMER: "LPR Wakeup Polling Timer",
    Property.RELAY: "Relay Status",
    Property.IO_PIN_MODE: "IO Pin Mode",
    Property.IO_PIN_VALUE: "IO Pin Value",
}

EXECUTED = {
    Property.FACTORY_RESET: "Factory reset requested",
    Property.PROCESSOR_RESET: "Reset requested",
    Property.BOOTLOADER: "Bootloader mode requested",
    Property.FSSD: "File safe shutdown initiated",
}

ABORTED = {
    Property.FACTORY_RESET: "Factory reset aborted.",
    Property.PROCESSOR_RESET: "Reset aborted.",
    Property.BOOTLOADER: "Bootloader aborted.",
}


def format_number(value: int | float) -> str:
    """Format like printf's %g, 9.85 stays 9.85 and 5.0 becomes 5."""
    return "%g" % value


def format_rtc(results: dict[Property, CommandResult]) -> str:
    def part(prop):
        return results[prop].value.value

    line = "%02d-%02d-20%02d %02d:%02d:%02d" % tuple(part(prop) for prop in RTC_PROPERTIES[:6])
    weekday = results[Property.RTC_WEEKDAY].value.label
    if weekday:
        line += f" ({weekday})"
    return line


def format_value(result: CommandResult, verbose: bool) -> str:
    value = result.value
    if result.prop in (Property.RELAY, Property.POWER_SOURCE):
        return value.label if verbose and value.label else str(value.value)

    text = format_number(value.value)
    if verbose:
        if value.unit:
            text += value.unit
        elif descriptor(result.prop).writable:
            text += " (0x%02x)" % value.raw
    return text


def format_result(result: CommandResult, verbose: bool = False, captions: bool = False) -> str:
    """Render a single result as one line of text."""
    prop = result.prop
    caption = CAPTIONS.get(prop, prop.name)

    if result.outcome == Outcome.FAILED:
        return f"Error: {result.error}"
    if result.outcome == Outcome.ABORTED:
        return ABORTED[prop]
    if result.outcome == Outcome.EXECUTED:
        return EXECUTED[prop]
    if result.outcome == Outcome.NOT_CONFIGURED:
        return "IO Pin mode is not set"
    if result.outcome == Outcome.WRITTEN:
        if prop == Property.RELAY:
            return f"Relay set to: {result.value.label or result.value.value}"
        return "%s set to: %i (0x%02x)" % (caption, result.value.value, result.value.raw)

    text = format_value(result, verbose)
    if captions or (verbose and prop == Property.IO_PIN_VALUE):
        return f"{caption}: {text}"
    return text


def render(results: Iterable[CommandResult], verbose: bool = False, captions: bool = False) -> Iterator[str]:
    """Render results to output lines, one line per requested property.

    The individual RTC registers are combined into a single date/time line.
    """
    rtc: dict[Property, CommandResult] = {}

    def flush_rtc():
        if not rtc:
            return
        if len(rtc) == len(RTC_PROPERTIES) and all(r.ok for r in rtc.values()):
            line = format_rtc(rtc)
            yield f"{CAPTIONS[Property.RTC_DAY]}: {line}" if captions else line
        else:
            for prop in RTC_PROPERTIES:
                if prop in rtc:
                    yield format_result(rtc[prop], verbose, captions=True)
        rtc.clear()

    try:
        for result in results:
            if result.prop in RTC_PROPERTIES:
                rtc[result.prop] = result
                continue
            yield from flush_rtc()
            yield format_result(result, verbose, captions)
    except TransportError:
        # the date line read so far is printed before the run is aborted
        yield from flush_rtc()
        raise

    yield from flush_rtc()
