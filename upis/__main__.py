import argparse
import logging
import sys

from . import TransportError, __version__
from .config import ConfigError, load_config, resolve
from .dispatcher import Dispatcher, PropertyRequest
from .registers import RTC_PROPERTIES, Property
from .render import render
from .transport import SMBusTransport

logger = logging.getLogger("upis")

parser = argparse.ArgumentParser(
    "upis",
    description="Control the pimodules UPiS power supply via its PiCo (I2C) interface",
)
parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
parser.add_argument("-d", "--debug", help="increase logging verbosity", action="count", default=0)
parser.add_argument("-C", "--config", help="YAML configuration file", type=argparse.FileType("r"))
parser.add_argument(
    "--force",
    help="force I2C bus access, required when using with RTC kernel module (default: true)",
    default=None,
    action=argparse.BooleanOptionalAction,
)
parser.add_argument("--bus", help="I2C bus to be used (default: 1)", type=int)
parser.add_argument(
    "-y", "--yes", help="perform reset, factory default or bootloader without prompting", action="store_true"
)
parser.add_argument(
    "-v", "--verbose", help="suffix values by units and describe power modes by name", action="store_true"
)

# (short, long, metavar, properties, help); a metavar marks options that also set a value
OPTIONS = [
    ("-R", "--rtc", None, RTC_PROPERTIES, "display time from the UPiS RTC"),
    ("-F", "--rtcfactor", "RTCF", (Property.RTC_FACTOR,), "display or set the RTC correction factor (0-255)"),
    ("-s", "--pwrsrc", None, (Property.POWER_SOURCE,), "display the power source (1=EPR .. 7=BPR)"),
    ("-b", "--batvolt", None, (Property.BATTERY_VOLTAGE,), "display the battery voltage"),
    ("-p", "--rpivolt", None, (Property.RPI_VOLTAGE,), "display the Raspberry Pi GPIO voltage"),
    ("-e", "--eprvolt", None, (Property.EPR_VOLTAGE,), "display the EPR connector voltage"),
    ("-u", "--usbvolt", None, (Property.USB_VOLTAGE,), "display the USB connector voltage"),
    ("-a", "--current", None, (Property.CURRENT,), "display the mean current draw in mA"),
    ("-c", "--centigrade", None, (Property.TEMPERATURE_C,), "display the temperature in Centigrade"),
    ("-f", "--fahrenheit", None, (Property.TEMPERATURE_F,), "display the temperature in Fahrenheit"),
    ("-Q", "--fwver", None, (Property.FIRMWARE_VERSION,), "display the firmware version"),
    ("-Z", "--factory", None, (Property.FACTORY_RESET,), "factory reset the UPiS, requires confirmation"),
    ("-z", "--reset", None, (Property.PROCESSOR_RESET,), "reset the UPiS CPU and RTC, requires confirmation"),
    ("-l", "--bootloader", None, (Property.BOOTLOADER,), "enter bootloader mode, requires confirmation"),
    ("-E", "--errorno", None, (Property.LAST_ERROR,), "display the last error code"),
    ("-w", "--watchdog", "WDTIM", (Property.WATCHDOG,), "display or set the watchdog timer (0-255 s, 255 disables)"),
    ("-S", "--fssd", None, (Property.FSSD,), "trigger a file safe shutdown"),
    ("-t", "--fssdtimeout", "FSSDTIM", (Property.FSSD_TIMEOUT,), "display or set the FSSD power off timer (15-255)"),
    ("-T", "--fssdtype", "FSSDACT", (Property.FSSD_TYPE,), "display or set the FSSD action (0-2)"),
    ("-B", "--fssdbatime", "BATTIM", (Property.FSSD_BATTERY_TIMER,), "display or set the FSSD battery timer (0-255)"),
    ("-L", "--lprtimer", "LPRTIM", (Property.LPR_TIMER,), "display or set the LPR wakeup polling timer (0-255)"),
    ("-r", "--relay", "RLYSTAT", (Property.RELAY,), "display or set the relay state (1, 0, on, off, open, closed)"),
    ("-i", "--iomode", "IOMODE", (Property.IO_PIN_MODE,), "display or set the IO pin mode (0-3)"),
    ("-V", "--iovalue", None, (Property.IO_PIN_VALUE,), "display the IO pin value for the current IO pin mode"),
]

properties = parser.add_argument_group("properties")
for short, long, metavar, _, help_text in OPTIONS:
    if metavar:
        properties.add_argument(short, long, metavar=metavar, nargs="?", const=True, help=help_text)
    else:
        properties.add_argument(short, long, action="store_const", const=True, help=help_text)


def build_requests(args: argparse.Namespace) -> tuple[list[PropertyRequest], int]:
    """Create the property requests selected on the command line.

    Returns:
        List of requests and the number of options they originate from
    """
    requests = []
    selected = 0
    for _, long, _, props, _ in OPTIONS:
        arg = getattr(args, long.lstrip("-"))
        if arg is None:
            continue

        selected += 1
        value = None if arg is True else arg
        requests.extend(PropertyRequest(prop, value) for prop in props)

    return requests, selected


def ask(prompt: str) -> str:
    try:
        return input(prompt)
    except EOFError:
        return ""


def main(argv: list[str] | None = None) -> int:
    """Entry point for the upis command.

    Exit codes:
        0: All requests processed, including rejected values and aborted commands
        1: I2C bus could not be opened
        2: PiCo interface not accessible or bus transaction failed
    """
    args = parser.parse_args(argv)

    # configure logging
    logging_level = max(0, logging.WARN - (args.debug * 10))
    logging_stderr = logging.StreamHandler()
    logging_stderr.setLevel(logging_level)
    logging.basicConfig(level=logging.DEBUG, handlers=[logging_stderr], force=True)

    try:
        config = resolve(load_config(args.config), bus=args.bus, force=args.force)
    except ConfigError as ex:
        parser.error(str(ex))

    requests, selected = build_requests(args)
    if not requests:
        parser.print_usage()
        return 0

    logger.debug("Using bus %s (force: %s) for %s", config["bus"], config["force"], [r.prop.name for r in requests])
    transport = SMBusTransport(force=config["force"], bus=config["bus"])
    dispatcher = Dispatcher(transport, ask=ask, assume_yes=args.yes)

    try:
        for line in render(dispatcher.run(requests), verbose=args.verbose, captions=selected > 1):
            print(line, flush=True)
    except TransportError as ex:
        logger.error("%s, terminating.", ex)
        return ex.exit_code

    return 0


if __name__ == "__main__":
    sys.exit(main())
